"""
Answer domain model
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from peerconnect.utils.id_generator import generate_answer_id, validate_id


@dataclass
class Answer:
    """
    Structured answer to a doubt: up to three ordered steps.

    Storage: PostgreSQL (answers table) or the in-memory store

    step1 is mandatory; step2/step3 are empty strings when not given.
    is_verified starts False and is flipped at most once, by a mentor.

    ID format: an_xxxxxxxx (11 chars)
    """
    id: str
    doubt_id: str
    user_id: str
    username: str
    step1: str
    step2: str = ""
    step3: str = ""
    is_verified: bool = False

    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.id or not validate_id(self.id, 'answer'):
            self.id = generate_answer_id()

    @property
    def steps(self) -> List[str]:
        """Non-empty steps in order"""
        return [s for s in (self.step1, self.step2, self.step3) if s]
