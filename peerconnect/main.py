"""
PeerConnect - FastAPI Backend

Peer Q&A for a student community: doubts, structured answers, mentor
verification, daily posting quota.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from peerconnect.api import routers
from peerconnect.config import Settings, get_settings
from peerconnect.errors import PeerConnectError
from peerconnect.repositories import Store, MemoryStore, create_store
from peerconnect.services import build_services
from peerconnect.services.seed import seed_demo_data
from peerconnect.utils.datetime_utils import Clock

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    401: "unauthenticated",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}


def describe_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into one message: body.content: Field required; ..."""
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s [%(name)s] %(levelname)s: %(message)s'
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[Store] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Defaults to environment settings
        store: Pre-built store (tests); otherwise created on startup from
            STORAGE_BACKEND
        clock: Time source shared by all services
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = store is None
        active = store or await create_store(settings)

        if settings.seed_demo_data and isinstance(active, MemoryStore):
            await seed_demo_data(active, clock)

        app.state.store = active
        app.state.services = build_services(active, settings, clock)
        logger.info(f"PeerConnect started ({settings.environment}, {type(active).__name__})")
        try:
            yield
        finally:
            if owned:
                await active.close()

    app = FastAPI(
        title="PeerConnect",
        description="Peer doubt-solving with daily quotas and mentor verification",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PeerConnectError)
    async def handle_domain_error(request: Request, exc: PeerConnectError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": "validation_error", "detail": describe_validation_errors(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": HTTP_ERROR_CODES.get(exc.status_code, "http_error"), "detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    for router in routers:
        app.include_router(router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/api/health")
    async def api_health():
        return {"status": "ok", "service": "peerconnect"}

    return app


app = create_app()


def main():
    import uvicorn
    uvicorn.run("peerconnect.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
