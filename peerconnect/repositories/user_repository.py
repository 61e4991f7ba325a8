"""
User Repository - PostgreSQL storage for user accounts

Storage: PostgreSQL (users table)
"""
import logging
from typing import Optional, List

from peerconnect.models.domain.user import User, UserRole
from .base import UserStore
from .postgres_base import PostgresRepository

logger = logging.getLogger(__name__)


class UserRepository(PostgresRepository, UserStore):
    """
    Repository for User domain model

    Credibility is only changed through mutate_credibility (atomic increment).
    """

    @staticmethod
    def _row_to_user(row) -> User:
        return User(
            user_id=str(row['user_id']),
            username=row['username'],
            role=UserRole(row['role']),
            credibility_score=row['credibility_score'] or 0,
            created_at=row['created_at'],
        )

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Retrieve user by ID.

        Args:
            user_id: User UUID

        Returns:
            User model or None
        """
        async with self.connection() as conn:
            row = await conn.fetchrow("""
                SELECT user_id, username, role, credibility_score, created_at
                FROM users
                WHERE user_id = $1
            """, user_id)

            return self._row_to_user(row) if row else None

    async def get_by_username(self, username: str) -> Optional[User]:
        """
        Retrieve user by username.

        Args:
            username: Login name

        Returns:
            User model or None
        """
        async with self.connection() as conn:
            row = await conn.fetchrow("""
                SELECT user_id, username, role, credibility_score, created_at
                FROM users
                WHERE username = $1
            """, username)

            return self._row_to_user(row) if row else None

    async def list_top(self, limit: int = 10) -> List[User]:
        """
        Leaderboard: users ordered by credibility.

        Args:
            limit: Maximum number of users to return
        """
        async with self.connection() as conn:
            rows = await conn.fetch("""
                SELECT user_id, username, role, credibility_score, created_at
                FROM users
                ORDER BY credibility_score DESC, username ASC
                LIMIT $1
            """, limit)

            return [self._row_to_user(row) for row in rows]

    # =========================================================================
    # CREATE OPERATION
    # =========================================================================

    async def create(self, user: User) -> User:
        """
        Create a new user.

        Args:
            user: User model (id will be generated if not set)

        Returns:
            Created user with timestamp
        """
        async with self.connection() as conn:
            row = await conn.fetchrow("""
                INSERT INTO users (user_id, username, role, credibility_score, created_at)
                VALUES ($1, $2, $3, $4, COALESCE($5, NOW()))
                RETURNING created_at
            """,
                user.user_id,
                user.username,
                user.role.value,
                user.credibility_score,
                user.created_at
            )

            user.created_at = row['created_at']
            logger.info(f"Created user {user.user_id} ({user.username}, {user.role.value})")
            return user

    # =========================================================================
    # UPDATE OPERATIONS
    # =========================================================================

    async def mutate_credibility(self, user_id: str, delta: int) -> Optional[int]:
        """
        Atomically add delta to a user's credibility score.

        Args:
            user_id: User UUID
            delta: Points to add

        Returns:
            New score, or None if the user does not exist
        """
        async with self.connection() as conn:
            score = await conn.fetchval("""
                UPDATE users
                SET credibility_score = credibility_score + $2
                WHERE user_id = $1
                RETURNING credibility_score
            """, user_id, delta)

            if score is not None:
                logger.info(f"Credibility of {user_id} changed by {delta:+d} -> {score}")
            return score
