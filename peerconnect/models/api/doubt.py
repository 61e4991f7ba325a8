"""
Pydantic models for doubts and the posting workflow
"""

from pydantic import BaseModel
from datetime import datetime
from typing import List, Literal, Optional

from peerconnect.models.domain import Doubt, DoubtDraft, PostOptions, PostOutcome


class DoubtCreate(BaseModel):
    """Request model for posting a doubt"""
    title: str
    content: str
    category: str
    is_anonymous: bool = False
    check_similarity: bool = True
    force: bool = False

    def to_draft(self) -> DoubtDraft:
        return DoubtDraft(
            title=self.title,
            content=self.content,
            category=self.category,
            is_anonymous=self.is_anonymous,
        )

    def to_options(self, check_only: bool = False) -> PostOptions:
        return PostOptions(
            check_similarity=self.check_similarity or check_only,
            force=self.force and not check_only,
            check_only=check_only,
        )


class DoubtResponse(BaseModel):
    """
    Response model for a doubt.

    user_id/username are withheld for anonymous doubts unless the viewer is
    the author.
    """
    id: str
    title: str
    content: str
    category: str
    is_anonymous: bool
    author_name: str
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, doubt: Doubt, viewer_id: Optional[str] = None) -> 'DoubtResponse':
        reveal = not doubt.is_anonymous or viewer_id == doubt.user_id
        return cls(
            id=doubt.id,
            title=doubt.title,
            content=doubt.content,
            category=doubt.category,
            is_anonymous=doubt.is_anonymous,
            author_name=doubt.display_name,
            user_id=doubt.user_id if reveal else None,
            created_at=doubt.created_at,
        )


class PostDoubtResponse(BaseModel):
    """Outcome of POST /api/doubts and /api/doubts/check"""
    status: Literal["posted", "conflict", "clear"]
    doubt: Optional[DoubtResponse] = None
    candidates: List[DoubtResponse] = []

    @classmethod
    def from_outcome(cls, outcome: PostOutcome, viewer_id: Optional[str] = None) -> 'PostDoubtResponse':
        return cls(
            status=outcome.status.value,
            doubt=DoubtResponse.from_domain(outcome.doubt, viewer_id) if outcome.doubt else None,
            candidates=[DoubtResponse.from_domain(d, viewer_id) for d in outcome.candidates],
        )
