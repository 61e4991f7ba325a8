"""
PeerConnect error taxonomy

Services raise these; the API layer maps them to HTTP responses in a single
exception handler (see main.py). A similarity conflict is NOT an error, it is
a PostOutcome with status "conflict".
"""
from typing import Optional


# =============================================================================
# Exceptions
# =============================================================================

class PeerConnectError(Exception):
    """Base class for all domain errors."""
    code = "error"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class ValidationError(PeerConnectError):
    """Required field missing or malformed."""
    code = "validation_error"
    status_code = 422


class QuotaExceededError(PeerConnectError):
    """Daily post limit reached."""
    code = "quota_exceeded"
    status_code = 429

    def __init__(self, posted_today: int, max_allowed: int):
        super().__init__(
            f"Daily post limit ({max_allowed}) reached. "
            f"Help peers to earn bonus capacity!"
        )
        self.posted_today = posted_today
        self.max_allowed = max_allowed

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["posted_today"] = self.posted_today
        data["max_allowed"] = self.max_allowed
        return data


class SelfAnswerError(PeerConnectError):
    """Authors cannot answer their own doubt."""
    code = "self_answer"
    status_code = 403


class AuthorizationError(PeerConnectError):
    """User lacks the role required for this action."""
    code = "forbidden"
    status_code = 403


class NotFoundError(PeerConnectError):
    """Referenced record does not exist."""
    code = "not_found"
    status_code = 404

    def __init__(self, kind: str, ref: Optional[str] = None):
        super().__init__(f"{kind} not found" + (f": {ref}" if ref else ""))
        self.kind = kind
        self.ref = ref


class StoreUnavailableError(PeerConnectError):
    """Backing store I/O failure or timeout. Safe for the caller to retry."""
    code = "store_unavailable"
    status_code = 503
