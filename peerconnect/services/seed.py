"""
Demo data for development stores

Creates the lab demo accounts and two starter doubts, unless users already
exist.
"""
import logging
from typing import Optional

from peerconnect.models.domain import Doubt, User, UserRole
from peerconnect.repositories.base import Store
from peerconnect.utils.datetime_utils import Clock

logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("admin", UserRole.ADMIN, 999),
    ("mentor_john", UserRole.MENTOR, 250),
    ("student_alice", UserRole.STUDENT, 45),
    ("student_bob", UserRole.STUDENT, 10),
]

DEMO_DOUBTS = [
    (
        "mentor_john",
        "Newton-Raphson Convergence",
        "What is the rate of convergence for the Newton-Raphson method in Numerical Methods?",
        "Numerical Methods",
    ),
    (
        "student_alice",
        "Asymptotic Notation Query",
        "Can someone explain the tightest upper bound for Merge Sort in DAA?",
        "Design and Analysis of Algorithms",
    ),
]


async def seed_demo_data(store: Store, clock: Optional[Clock] = None) -> bool:
    """
    Insert demo users and doubts.

    Returns:
        True if data was inserted, False if demo users were already present
    """
    clock = clock or Clock()
    if await store.users.get_by_username(DEMO_USERS[0][0]) is not None:
        logger.info("Demo data already present")
        return False

    async with store.transaction() as tx:
        users = {}
        for username, role, score in DEMO_USERS:
            users[username] = await tx.users.create(
                User(user_id="", username=username, role=role,
                     credibility_score=score, created_at=clock.now())
            )

        for author, title, content, category in DEMO_DOUBTS:
            user = users[author]
            await tx.doubts.insert(Doubt(
                id="",
                user_id=user.user_id,
                username=user.username,
                title=title,
                content=content,
                category=category,
                created_at=clock.now(),
            ))

    logger.info(f"Seeded {len(DEMO_USERS)} users and {len(DEMO_DOUBTS)} doubts")
    return True
