"""
Record IDs for doubts, answers and notifications.

IDs are a two-letter kind prefix plus eight random base36 characters, e.g.
dt_4k9x02mz. Users keep UUIDs (see models.domain.user).
"""
import re
import secrets
import string
from typing import Optional

_ALPHABET = string.digits + string.ascii_lowercase
_RANDOM_LENGTH = 8

KIND_PREFIXES = {
    'doubt': 'dt',
    'answer': 'an',
    'notification': 'nt',
}

ID_PATTERN = re.compile(rf'^(dt|an|nt)_[0-9a-z]{{{_RANDOM_LENGTH}}}$')


def _new_id(kind: str) -> str:
    suffix = ''.join(secrets.choice(_ALPHABET) for _ in range(_RANDOM_LENGTH))
    return f"{KIND_PREFIXES[kind]}_{suffix}"


def generate_doubt_id() -> str:
    return _new_id('doubt')


def generate_answer_id() -> str:
    return _new_id('answer')


def generate_notification_id() -> str:
    return _new_id('notification')


def validate_id(value: Optional[str], kind: Optional[str] = None) -> bool:
    """
    True if value is a well-formed record ID, and of the given kind when one
    is named. Anything else (None, UUIDs, wrong prefix) is False.
    """
    if not isinstance(value, str) or not ID_PATTERN.match(value):
        return False
    return kind is None or value.startswith(KIND_PREFIXES[kind] + '_')
