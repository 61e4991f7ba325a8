"""
Request/response types for the posting and answering workflows

Drafts are validated at the workflow boundary (validate()) before any store
call is made.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from peerconnect.errors import ValidationError
from .doubt import Doubt

MAX_TITLE_LENGTH = 200
MAX_STEP_LENGTH = 2000


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


@dataclass
class DoubtDraft:
    """Fields a user supplies when posting a doubt"""
    title: str
    content: str
    category: str
    is_anonymous: bool = False

    def validate(self) -> 'DoubtDraft':
        """Return a whitespace-trimmed copy, or raise ValidationError"""
        title = _clean(self.title)
        content = _clean(self.content)
        category = _clean(self.category)

        missing = [name for name, value in
                   (("title", title), ("content", content), ("category", category))
                   if not value]
        if missing:
            raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
        if len(title) > MAX_TITLE_LENGTH:
            raise ValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters")

        return DoubtDraft(
            title=title,
            content=content,
            category=category,
            is_anonymous=bool(self.is_anonymous),
        )


@dataclass
class PostOptions:
    """
    check_similarity: run the duplicate check before publishing
    force: publish even if similar doubts exist
    check_only: run quota-free similarity check, never publish
    """
    check_similarity: bool = True
    force: bool = False
    check_only: bool = False


@dataclass
class AnswerSteps:
    """Up to three ordered solution steps; step1 is mandatory"""
    step1: str
    step2: Optional[str] = None
    step3: Optional[str] = None

    def validate(self) -> 'AnswerSteps':
        step1 = _clean(self.step1)
        if not step1:
            raise ValidationError("Missing required field(s): step1")

        steps = AnswerSteps(step1=step1, step2=_clean(self.step2), step3=_clean(self.step3))
        for name in ("step1", "step2", "step3"):
            if len(getattr(steps, name)) > MAX_STEP_LENGTH:
                raise ValidationError(f"{name} must be at most {MAX_STEP_LENGTH} characters")
        return steps


class PostStatus(str, Enum):
    """Outcome of post_doubt"""
    POSTED = "posted"
    CONFLICT = "conflict"
    CLEAR = "clear"  # check_only found nothing similar


@dataclass
class PostOutcome:
    """
    Result of post_doubt.

    A conflict is a normal outcome, not an error: nothing was persisted and no
    quota was consumed, and the caller may retry with force=True.
    """
    status: PostStatus
    doubt: Optional[Doubt] = None
    candidates: List[Doubt] = field(default_factory=list)

    @property
    def posted(self) -> bool:
        return self.status == PostStatus.POSTED

    @property
    def conflict(self) -> bool:
        return self.status == PostStatus.CONFLICT
