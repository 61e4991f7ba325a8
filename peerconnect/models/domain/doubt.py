"""
Doubt domain model
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from peerconnect.utils.id_generator import generate_doubt_id, validate_id

ANONYMOUS_NAME = "Anonymous"

# Categories offered by the posting form
CATEGORIES = [
    "Numerical Methods",
    "Design and Analysis of Algorithms",
    "Software Engineering",
    "Database Management Systems",
    "Embedded System Design",
    "Essence of Indian Traditional Knowledge",
]


@dataclass
class Doubt:
    """
    Doubt (question) domain model

    Storage: PostgreSQL (doubts table) or the in-memory store

    Immutable once created. The author is always recorded; is_anonymous only
    hides the name on display.

    ID format: dt_xxxxxxxx (11 chars)
    """
    id: str
    user_id: str
    username: str
    title: str
    content: str
    category: str
    is_anonymous: bool = False

    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.id or not validate_id(self.id, 'doubt'):
            self.id = generate_doubt_id()

    @property
    def display_name(self) -> str:
        """Name shown to other users"""
        return ANONYMOUS_NAME if self.is_anonymous else self.username
