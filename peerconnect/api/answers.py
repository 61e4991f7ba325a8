"""
Answers API router

Endpoints:
- GET  /api/doubts/{doubt_id}/answers - Answers to a doubt
- POST /api/doubts/{doubt_id}/answers - Contribute an answer (+1 posting slot today)
- POST /api/answers/{answer_id}/verify - Mentor verification (+50 credibility to author)
"""

from typing import List

from fastapi import APIRouter, Depends

from peerconnect.middleware.auth import SessionUser
from peerconnect.models.api import AnswerCreate, AnswerResponse
from peerconnect.services import Services
from .deps import get_services, get_session_user

router = APIRouter(prefix="/api", tags=["answers"])


@router.get("/doubts/{doubt_id}/answers", response_model=List[AnswerResponse])
async def list_answers(doubt_id: str, services: Services = Depends(get_services)):
    answers = await services.answers.list_answers(doubt_id)
    return [AnswerResponse.from_domain(a) for a in answers]


@router.post("/doubts/{doubt_id}/answers", response_model=AnswerResponse)
async def post_answer(
    doubt_id: str,
    body: AnswerCreate,
    current_user: SessionUser = Depends(get_session_user),
    services: Services = Depends(get_services),
):
    """
    Contribute an answer

    step1 is required. Authors cannot answer their own doubt (403).
    """
    answer = await services.answers.post_answer(current_user.user_id, doubt_id, body.to_steps())
    return AnswerResponse.from_domain(answer)


@router.post("/answers/{answer_id}/verify", response_model=AnswerResponse)
async def verify_answer(
    answer_id: str,
    current_user: SessionUser = Depends(get_session_user),
    services: Services = Depends(get_services),
):
    """
    Verify an answer

    Mentors only (403 otherwise, admins included). Verifying an already
    verified answer returns it unchanged.
    """
    answer = await services.answers.verify_answer(answer_id, current_user.user_id)
    return AnswerResponse.from_domain(answer)
