"""
Pydantic models for answers
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from peerconnect.models.domain import Answer, AnswerSteps


class AnswerCreate(BaseModel):
    """Request model for contributing an answer"""
    step1: str
    step2: Optional[str] = None
    step3: Optional[str] = None

    def to_steps(self) -> AnswerSteps:
        return AnswerSteps(step1=self.step1, step2=self.step2, step3=self.step3)


class AnswerResponse(BaseModel):
    """Response model for an answer"""
    id: str
    doubt_id: str
    user_id: str
    username: str
    step1: str
    step2: str
    step3: str
    is_verified: bool
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }

    @classmethod
    def from_domain(cls, answer: Answer) -> 'AnswerResponse':
        return cls.model_validate(answer)
