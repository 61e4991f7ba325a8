"""
Doubts API router

Endpoints:
- GET  /api/doubts - Feed (search, category, mine)
- GET  /api/doubts/categories - Category list for the posting form
- POST /api/doubts - Post a doubt (may return a similarity conflict)
- POST /api/doubts/check - Similarity pre-check, never posts
- GET  /api/doubts/{id} - Single doubt
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from peerconnect.middleware.auth import SessionUser, get_current_user_optional
from peerconnect.models.api import DoubtCreate, DoubtResponse, PostDoubtResponse
from peerconnect.models.domain import CATEGORIES
from peerconnect.services import Services
from .deps import get_services, get_session_user

router = APIRouter(prefix="/api/doubts", tags=["doubts"])


@router.get("", response_model=List[DoubtResponse])
async def list_doubts(
    search: Optional[str] = None,
    category: Optional[str] = None,
    mine: bool = False,
    limit: int = Query(100, ge=1, le=500),
    current_user: Optional[SessionUser] = Depends(get_current_user_optional),
    services: Services = Depends(get_services),
):
    """
    Doubt feed, newest first

    search matches title or category (case-insensitive). mine=true limits the
    feed to the logged-in user's doubts.
    """
    viewer_id = current_user.user_id if current_user else None
    user_id = viewer_id if mine else None
    if mine and not viewer_id:
        return []

    doubts = await services.doubts.list_doubts(
        search=search, category=category, user_id=user_id, limit=limit
    )
    return [DoubtResponse.from_domain(d, viewer_id) for d in doubts]


@router.get("/categories", response_model=List[str])
async def list_categories():
    """Categories offered by the posting form"""
    return CATEGORIES


@router.post("", response_model=PostDoubtResponse)
async def post_doubt(
    body: DoubtCreate,
    current_user: SessionUser = Depends(get_session_user),
    services: Services = Depends(get_services),
):
    """
    Post a doubt

    Returns status "posted" with the doubt, or status "conflict" with similar
    existing doubts (nothing saved, no quota used; resend with force=true to
    publish anyway). Exceeding the daily quota is a 429.
    """
    outcome = await services.doubts.post_doubt(
        current_user.user_id, body.to_draft(), body.to_options()
    )
    return PostDoubtResponse.from_outcome(outcome, current_user.user_id)


@router.post("/check", response_model=PostDoubtResponse)
async def check_doubt(
    body: DoubtCreate,
    current_user: SessionUser = Depends(get_session_user),
    services: Services = Depends(get_services),
):
    """Similarity pre-check: status "conflict" or "clear", nothing is saved"""
    outcome = await services.doubts.post_doubt(
        current_user.user_id, body.to_draft(), body.to_options(check_only=True)
    )
    return PostDoubtResponse.from_outcome(outcome, current_user.user_id)


@router.get("/{doubt_id}", response_model=DoubtResponse)
async def get_doubt(
    doubt_id: str,
    current_user: Optional[SessionUser] = Depends(get_current_user_optional),
    services: Services = Depends(get_services),
):
    doubt = await services.doubts.get_doubt(doubt_id)
    return DoubtResponse.from_domain(doubt, current_user.user_id if current_user else None)
