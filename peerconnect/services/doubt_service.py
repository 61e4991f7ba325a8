"""
Doubt Service - posting workflow and doubt queries

post_doubt() runs:

    Draft -> QuotaChecked -> SimilarityChecked -> Persisted
                 |                 |
                 v                 v
          QuotaExceededError   PostOutcome(conflict)

The insert and the quota increment share one store transaction: either both
apply or neither does, whether the failure is an error, a lost race for the
last slot, or the caller cancelling mid-flight.
"""
import logging
from typing import List, Optional

from peerconnect.errors import NotFoundError, QuotaExceededError
from peerconnect.models.domain import (
    Doubt,
    DoubtDraft,
    PostOptions,
    PostOutcome,
    PostStatus,
)
from peerconnect.repositories.base import Store
from .quota_tracker import QuotaTracker
from .similarity import SimilarityChecker

logger = logging.getLogger(__name__)


class DoubtService:
    """
    Args:
        store: Storage backend
        quota: Quota tracker (its clock is used for timestamps too)
        checker: Similarity checker
    """

    def __init__(
        self,
        store: Store,
        quota: Optional[QuotaTracker] = None,
        checker: Optional[SimilarityChecker] = None,
    ):
        self.store = store
        self.quota = quota or QuotaTracker(store.tracking)
        self.checker = checker or SimilarityChecker()
        self.clock = self.quota.clock

    # =========================================================================
    # POSTING WORKFLOW
    # =========================================================================

    async def post_doubt(
        self,
        user_id: str,
        draft: DoubtDraft,
        options: Optional[PostOptions] = None,
    ) -> PostOutcome:
        """
        Publish a doubt for a user.

        Args:
            user_id: Author
            draft: Title, content, category, anonymity flag
            options: check_similarity / force / check_only

        Returns:
            PostOutcome with status posted, conflict (similar doubts found,
            nothing written) or clear (check_only, nothing similar)

        Raises:
            ValidationError: blank title/content/category
            NotFoundError: unknown user
            QuotaExceededError: daily limit reached
            StoreUnavailableError: backing store failure
        """
        options = options or PostOptions()
        draft = draft.validate()

        user = await self.store.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        day = self.quota.today()

        # 1. Quota
        if not options.check_only:
            allowance = await self.quota.get_allowance(user.user_id, day)
            if allowance.exhausted:
                logger.info(f"Rejected doubt from {user.username}: quota "
                            f"{allowance.posted_today}/{allowance.max_allowed} used")
                raise QuotaExceededError(allowance.posted_today, allowance.max_allowed)

        # 2. Similarity (advisory, bypassed by force)
        if options.check_similarity and not options.force:
            candidates = await self.find_similar(draft.title)
            if candidates:
                logger.info(f"Similarity conflict for '{draft.title}' by {user.username}: "
                            f"{[d.id for d in candidates]}")
                return PostOutcome(status=PostStatus.CONFLICT, candidates=candidates)

        if options.check_only:
            return PostOutcome(status=PostStatus.CLEAR)

        # 3. Persist + consume quota atomically
        doubt = Doubt(
            id="",
            user_id=user.user_id,
            username=user.username,
            title=draft.title,
            content=draft.content,
            category=draft.category,
            is_anonymous=draft.is_anonymous,
            created_at=self.clock.now(),
        )
        async with self.store.transaction() as tx:
            doubt = await tx.doubts.insert(doubt)
            allowance = await self.quota.within(tx.tracking).record_post(user.user_id, day)

        logger.info(f"Posted doubt {doubt.id} by {user.username} "
                    f"({allowance.posted_today}/{allowance.max_allowed} today"
                    f"{', forced' if options.force else ''})")
        return PostOutcome(status=PostStatus.POSTED, doubt=doubt)

    async def find_similar(self, title: str) -> List[Doubt]:
        """Existing doubts whose titles overlap the given title"""
        corpus = await self.store.doubts.list_titles()
        matches = self.checker.find_similar(title, corpus)
        if not matches:
            return []
        return await self.store.doubts.get_many([m.doubt_id for m in matches])

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def get_doubt(self, doubt_id: str) -> Doubt:
        doubt = await self.store.doubts.get_by_id(doubt_id)
        if doubt is None:
            raise NotFoundError("Doubt", doubt_id)
        return doubt

    async def list_doubts(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        user_id: Optional[str] = None,
        limit: int = 100,
    ) -> List[Doubt]:
        """Feed, newest first"""
        search = (search or "").strip() or None
        return await self.store.doubts.list_recent(
            search=search, category=category, user_id=user_id, limit=limit
        )
