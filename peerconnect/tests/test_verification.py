"""
Tests for mentor verification of answers.
"""

import asyncio

import pytest
import pytest_asyncio

from peerconnect.errors import AuthorizationError, NotFoundError
from peerconnect.models.domain import AnswerSteps, DoubtDraft, NotificationKind, PostOptions


@pytest_asyncio.fixture
async def answer(services, users):
    outcome = await services.doubts.post_doubt(
        users["alice"].user_id,
        DoubtDraft(title="Newton-Raphson Convergence", content="Rate?", category="Numerical Methods"),
        PostOptions(check_similarity=False),
    )
    return await services.answers.post_answer(
        users["bob"].user_id, outcome.doubt.id, AnswerSteps("Quadratic near a simple root")
    )


async def credibility(store, user_id):
    return (await store.users.get_by_id(user_id)).credibility_score


class TestVerifyAnswer:

    @pytest.mark.asyncio
    async def test_mentor_verifies_and_author_gains_credibility(self, services, users, answer, store):
        verified = await services.answers.verify_answer(answer.id, users["john"].user_id)

        assert verified.is_verified is True
        assert await credibility(store, users["bob"].user_id) == 50

        notes = await services.notifications.list_for_user(users["bob"].user_id)
        assert [n.kind for n in notes] == [NotificationKind.VERIFIED]
        assert '"Newton-Raphson Convergence"' in notes[0].message

    @pytest.mark.asyncio
    async def test_verification_does_not_touch_quota(self, services, users, answer):
        before = await services.quota.get_allowance(users["bob"].user_id)
        await services.answers.verify_answer(answer.id, users["john"].user_id)
        after = await services.quota.get_allowance(users["bob"].user_id)
        assert before == after

    @pytest.mark.asyncio
    async def test_reverify_is_a_noop(self, services, users, answer, store):
        await services.answers.verify_answer(answer.id, users["john"].user_id)
        again = await services.answers.verify_answer(answer.id, users["john"].user_id)

        assert again.is_verified is True
        assert await credibility(store, users["bob"].user_id) == 50
        notes = await services.notifications.list_for_user(users["bob"].user_id)
        assert len(notes) == 1

    @pytest.mark.asyncio
    async def test_concurrent_verifications_award_once(self, services, users, answer, store):
        store.set_latency(0.01)
        await asyncio.gather(
            services.answers.verify_answer(answer.id, users["john"].user_id),
            services.answers.verify_answer(answer.id, users["john"].user_id),
        )
        assert await credibility(store, users["bob"].user_id) == 50

    @pytest.mark.asyncio
    async def test_student_cannot_verify(self, services, users, answer, store):
        with pytest.raises(AuthorizationError):
            await services.answers.verify_answer(answer.id, users["alice"].user_id)

        assert (await store.answers.get_by_id(answer.id)).is_verified is False
        assert await credibility(store, users["bob"].user_id) == 0

    @pytest.mark.asyncio
    async def test_admin_cannot_verify(self, services, users, answer):
        with pytest.raises(AuthorizationError):
            await services.answers.verify_answer(answer.id, users["root"].user_id)

    @pytest.mark.asyncio
    async def test_unknown_verifier(self, services, answer):
        with pytest.raises(AuthorizationError):
            await services.answers.verify_answer(answer.id, "ghost")

    @pytest.mark.asyncio
    async def test_unknown_answer(self, services, users):
        with pytest.raises(NotFoundError):
            await services.answers.verify_answer("an_missing0", users["john"].user_id)
