"""
Pytest configuration for PeerConnect tests.

Everything runs against the in-memory store with a frozen clock, so tests are
deterministic and need no database.
"""
from datetime import datetime, timezone

import pytest
import pytest_asyncio

from peerconnect.config import Settings
from peerconnect.models.domain import User, UserRole
from peerconnect.repositories import MemoryStore
from peerconnect.services import build_services
from peerconnect.utils.datetime_utils import FrozenClock

FROZEN_AT = datetime(2024, 3, 14, 10, 30, tzinfo=timezone.utc)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test."
    )


@pytest.fixture
def settings():
    return Settings(storage_backend="memory", seed_demo_data=False, jwt_secret_key="test-secret")


@pytest.fixture
def clock():
    return FrozenClock(FROZEN_AT)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def services(store, settings, clock):
    return build_services(store, settings, clock)


@pytest_asyncio.fixture
async def users(store, clock):
    """alice and bob (students), john (mentor), root (admin)"""
    created = {}
    for key, username, role in (
        ("alice", "student_alice", UserRole.STUDENT),
        ("bob", "student_bob", UserRole.STUDENT),
        ("john", "mentor_john", UserRole.MENTOR),
        ("root", "admin", UserRole.ADMIN),
    ):
        created[key] = await store.users.create(
            User(user_id="", username=username, role=role, created_at=clock.now())
        )
    return created
