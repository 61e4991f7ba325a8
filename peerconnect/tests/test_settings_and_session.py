"""
Tests for configuration validation and the JWT session cookie.
"""

import pytest
from jose import JWTError
from pydantic import ValidationError as SettingsError

from peerconnect.config import Settings
from peerconnect.middleware.jwt_session import create_access_token, decode_access_token
from peerconnect.models.domain import User, UserRole


# =============================================================================
# Settings
# =============================================================================

def test_database_url_built_from_parts():
    settings = Settings(postgres_host="db", postgres_port=6543, postgres_db="qa")
    assert settings.database_url.endswith("@db:6543/qa")


def test_explicit_database_url_wins():
    settings = Settings(database_url="postgresql://x:y@h:1/d")
    assert settings.database_url == "postgresql://x:y@h:1/d"


def test_unknown_storage_backend_rejected():
    with pytest.raises(SettingsError):
        Settings(storage_backend="sqlite")


def test_base_limit_must_be_positive():
    with pytest.raises(SettingsError):
        Settings(base_daily_limit=0)


# =============================================================================
# Session tokens
# =============================================================================

def test_token_round_trip(settings):
    user = User(user_id="", username="mentor_john", role=UserRole.MENTOR)
    payload = decode_access_token(create_access_token(user, settings), settings)

    assert payload["sub"] == user.user_id
    assert payload["name"] == "mentor_john"
    assert payload["role"] == "MENTOR"


def test_token_signed_with_other_key_rejected(settings):
    user = User(user_id="", username="student_bob")
    token = create_access_token(user, Settings(jwt_secret_key="another-secret"))

    with pytest.raises(JWTError):
        decode_access_token(token, settings)
