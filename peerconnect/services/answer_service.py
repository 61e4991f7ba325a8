"""
Answer Service - answer contribution and mentor verification

Contribution: every answer earns its author one extra posting slot for the
day, whether or not it is ever verified.

Verification: mentor-only, one-way (unverified -> verified). The flip is a
conditional update, so a second verification of the same answer, concurrent
or later, changes nothing and awards nothing.
"""
import logging
from typing import List, Optional

from peerconnect.errors import AuthorizationError, NotFoundError, SelfAnswerError
from peerconnect.models.domain import Answer, AnswerSteps
from peerconnect.repositories.base import Store
from .notifications import NotificationService
from .quota_tracker import QuotaTracker

logger = logging.getLogger(__name__)

VERIFICATION_REWARD = 50
BONUS_PER_ANSWER = 1


class AnswerService:
    """
    Args:
        store: Storage backend
        quota: Quota tracker (bonus grants, clock)
        notifications: Notification service
        verification_reward: Credibility points per verified answer
        bonus_per_answer: Extra posting slots per contributed answer
    """

    def __init__(
        self,
        store: Store,
        quota: Optional[QuotaTracker] = None,
        notifications: Optional[NotificationService] = None,
        verification_reward: int = VERIFICATION_REWARD,
        bonus_per_answer: int = BONUS_PER_ANSWER,
    ):
        self.store = store
        self.quota = quota or QuotaTracker(store.tracking)
        self.clock = self.quota.clock
        self.notifications = notifications or NotificationService(store.notifications, self.clock)
        self.verification_reward = verification_reward
        self.bonus_per_answer = bonus_per_answer

    # =========================================================================
    # CONTRIBUTION
    # =========================================================================

    async def post_answer(self, user_id: str, doubt_id: str, steps: AnswerSteps) -> Answer:
        """
        Add an answer to someone else's doubt.

        Raises:
            ValidationError: step1 blank
            NotFoundError: unknown doubt or user
            SelfAnswerError: user is the doubt's author
        """
        steps = steps.validate()

        doubt = await self.store.doubts.get_by_id(doubt_id)
        if doubt is None:
            raise NotFoundError("Doubt", doubt_id)

        user = await self.store.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        if user.user_id == doubt.user_id:
            raise SelfAnswerError("You cannot provide a solution for your own inquiry.")

        answer = Answer(
            id="",
            doubt_id=doubt.id,
            user_id=user.user_id,
            username=user.username,
            step1=steps.step1,
            step2=steps.step2,
            step3=steps.step3,
            is_verified=False,
            created_at=self.clock.now(),
        )
        day = self.quota.today()

        async with self.store.transaction() as tx:
            answer = await tx.answers.insert(answer)
            await self.notifications.within(tx.notifications).notify_new_answer(
                doubt.user_id, user.username, doubt.id
            )
            await self.quota.within(tx.tracking).grant_bonus(user.user_id, day, self.bonus_per_answer)

        logger.info(f"{user.username} answered doubt {doubt.id} ({answer.id})")
        return answer

    # =========================================================================
    # VERIFICATION
    # =========================================================================

    async def verify_answer(self, answer_id: str, verifier_id: str) -> Answer:
        """
        Mark an answer verified and reward its author.

        Re-verifying an already verified answer is a no-op that returns the
        answer unchanged.

        Raises:
            AuthorizationError: verifier unknown or not a MENTOR
            NotFoundError: unknown answer
        """
        verifier = await self.store.users.get_by_id(verifier_id)
        if verifier is None or not verifier.is_mentor:
            role = verifier.role.value if verifier else "unknown user"
            raise AuthorizationError(f"Only mentors can verify answers ({role})")

        answer = await self.store.answers.get_by_id(answer_id)
        if answer is None:
            raise NotFoundError("Answer", answer_id)

        async with self.store.transaction() as tx:
            if not await tx.answers.mark_verified(answer.id):
                logger.info(f"Answer {answer.id} already verified; nothing to do")
                return await tx.answers.get_by_id(answer.id)

            score = await tx.users.mutate_credibility(answer.user_id, self.verification_reward)
            if score is not None:
                doubt = await tx.doubts.get_by_id(answer.doubt_id)
                await self.notifications.within(tx.notifications).notify_verified(
                    answer.user_id, doubt.title if doubt else None, answer.doubt_id
                )
            else:
                logger.warning(f"Author {answer.user_id} of answer {answer.id} no longer exists")

            verified = await tx.answers.get_by_id(answer.id)

        logger.info(f"{verifier.username} verified answer {answer.id} "
                    f"(+{self.verification_reward} to {answer.username})")
        return verified

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def list_answers(self, doubt_id: str) -> List[Answer]:
        """Answers to a doubt, oldest first"""
        if await self.store.doubts.get_by_id(doubt_id) is None:
            raise NotFoundError("Doubt", doubt_id)
        return await self.store.answers.list_for_doubt(doubt_id)

    async def get_answer(self, answer_id: str) -> Answer:
        answer = await self.store.answers.get_by_id(answer_id)
        if answer is None:
            raise NotFoundError("Answer", answer_id)
        return answer
