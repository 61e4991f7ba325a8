"""
Answer Repository - PostgreSQL storage for answers

Storage: PostgreSQL (answers table, joined with users for the author name)
"""
import logging
from typing import Optional, List

from peerconnect.models.domain.answer import Answer
from .base import AnswerRepository as AnswerRepositoryBase
from .postgres_base import PostgresRepository, rows_affected

logger = logging.getLogger(__name__)

_SELECT = """
    SELECT a.id, a.doubt_id, a.user_id, u.username, a.step1, a.step2, a.step3,
           a.is_verified, a.created_at
    FROM answers a
    JOIN users u ON u.user_id = a.user_id
"""


class AnswerRepository(PostgresRepository, AnswerRepositoryBase):
    """Repository for Answer domain model"""

    @staticmethod
    def _row_to_answer(row) -> Answer:
        return Answer(
            id=row['id'],
            doubt_id=row['doubt_id'],
            user_id=str(row['user_id']),
            username=row['username'],
            step1=row['step1'],
            step2=row['step2'] or "",
            step3=row['step3'] or "",
            is_verified=bool(row['is_verified']),
            created_at=row['created_at'],
        )

    async def get_by_id(self, answer_id: str) -> Optional[Answer]:
        async with self.connection() as conn:
            row = await conn.fetchrow(_SELECT + " WHERE a.id = $1", answer_id)
            return self._row_to_answer(row) if row else None

    async def list_for_doubt(self, doubt_id: str) -> List[Answer]:
        """
        Get all answers to a doubt.

        Returns:
            Answers sorted by creation time (oldest first)
        """
        async with self.connection() as conn:
            rows = await conn.fetch(
                _SELECT + " WHERE a.doubt_id = $1 ORDER BY a.created_at ASC, a.id ASC",
                doubt_id,
            )
            return [self._row_to_answer(row) for row in rows]

    async def insert(self, answer: Answer) -> Answer:
        async with self.connection() as conn:
            row = await conn.fetchrow("""
                INSERT INTO answers (
                    id, doubt_id, user_id, step1, step2, step3, is_verified, created_at
                )
                VALUES ($1, $2, $3, $4, $5, $6, $7, COALESCE($8, NOW()))
                RETURNING created_at
            """,
                answer.id,
                answer.doubt_id,
                answer.user_id,
                answer.step1,
                answer.step2,
                answer.step3,
                answer.is_verified,
                answer.created_at
            )

            answer.created_at = row['created_at']
            logger.info(f"Created answer {answer.id} on doubt {answer.doubt_id} by user {answer.user_id}")
            return answer

    async def mark_verified(self, answer_id: str) -> bool:
        """
        Atomically flip an unverified answer to verified.

        Args:
            answer_id: Answer ID

        Returns:
            True if this call verified it, False if missing or already verified
        """
        async with self.connection() as conn:
            result = await conn.execute("""
                UPDATE answers
                SET is_verified = TRUE
                WHERE id = $1 AND is_verified = FALSE
            """, answer_id)

            changed = rows_affected(result) > 0
            if changed:
                logger.info(f"Marked answer {answer_id} verified")
            return changed
