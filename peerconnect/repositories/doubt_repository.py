"""
Doubt Repository - PostgreSQL storage for doubts

Storage: PostgreSQL (doubts table, joined with users for the author name)
"""
import logging
from typing import Optional, List, Sequence, Tuple

from peerconnect.models.domain.doubt import Doubt
from .base import DoubtRepository as DoubtRepositoryBase
from .postgres_base import PostgresRepository

logger = logging.getLogger(__name__)

_SELECT = """
    SELECT d.id, d.user_id, u.username, d.title, d.content, d.category,
           d.is_anonymous, d.created_at
    FROM doubts d
    JOIN users u ON u.user_id = d.user_id
"""


class DoubtRepository(PostgresRepository, DoubtRepositoryBase):
    """Repository for Doubt domain model"""

    @staticmethod
    def _row_to_doubt(row) -> Doubt:
        return Doubt(
            id=row['id'],
            user_id=str(row['user_id']),
            username=row['username'],
            title=row['title'],
            content=row['content'],
            category=row['category'],
            is_anonymous=bool(row['is_anonymous']),
            created_at=row['created_at'],
        )

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def get_by_id(self, doubt_id: str) -> Optional[Doubt]:
        async with self.connection() as conn:
            row = await conn.fetchrow(_SELECT + " WHERE d.id = $1", doubt_id)
            return self._row_to_doubt(row) if row else None

    async def get_many(self, doubt_ids: Sequence[str]) -> List[Doubt]:
        if not doubt_ids:
            return []
        async with self.connection() as conn:
            rows = await conn.fetch(_SELECT + " WHERE d.id = ANY($1::text[])", list(doubt_ids))

        by_id = {row['id']: self._row_to_doubt(row) for row in rows}
        return [by_id[i] for i in doubt_ids if i in by_id]

    async def list_titles(self) -> List[Tuple[str, str]]:
        """
        Titles of all doubts for the similarity check.

        Returns:
            List of (id, title), oldest first
        """
        async with self.connection() as conn:
            rows = await conn.fetch("""
                SELECT id, title FROM doubts ORDER BY created_at ASC, id ASC
            """)
            return [(row['id'], row['title']) for row in rows]

    async def list_recent(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        user_id: Optional[str] = None,
        limit: int = 100,
    ) -> List[Doubt]:
        """
        Feed query.

        Args:
            search: Substring matched against title or category (case-insensitive)
            category: Exact category filter
            user_id: Only doubts by this author
            limit: Maximum number of doubts

        Returns:
            Doubts, newest first
        """
        clauses = []
        params = []
        if search:
            params.append(f"%{search}%")
            clauses.append(f"(d.title ILIKE ${len(params)} OR d.category ILIKE ${len(params)})")
        if category:
            params.append(category)
            clauses.append(f"d.category = ${len(params)}")
        if user_id:
            params.append(user_id)
            clauses.append(f"d.user_id = ${len(params)}")
        params.append(limit)

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        query = _SELECT + where + f" ORDER BY d.created_at DESC, d.id DESC LIMIT ${len(params)}"

        async with self.connection() as conn:
            rows = await conn.fetch(query, *params)
            return [self._row_to_doubt(row) for row in rows]

    # =========================================================================
    # CREATE OPERATION
    # =========================================================================

    async def insert(self, doubt: Doubt) -> Doubt:
        """
        Create a new doubt.

        Args:
            doubt: Doubt model (id generated in __post_init__)

        Returns:
            Created doubt with timestamp
        """
        async with self.connection() as conn:
            row = await conn.fetchrow("""
                INSERT INTO doubts (
                    id, user_id, title, content, category, is_anonymous, created_at
                )
                VALUES ($1, $2, $3, $4, $5, $6, COALESCE($7, NOW()))
                RETURNING created_at
            """,
                doubt.id,
                doubt.user_id,
                doubt.title,
                doubt.content,
                doubt.category,
                doubt.is_anonymous,
                doubt.created_at
            )

            doubt.created_at = row['created_at']
            logger.info(f"Created doubt {doubt.id} by user {doubt.user_id}")
            return doubt
