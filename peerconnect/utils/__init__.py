"""
Utility functions
"""
from .datetime_utils import Clock, FrozenClock, utc_now
from .id_generator import (
    generate_doubt_id,
    generate_answer_id,
    generate_notification_id,
    validate_id,
)

__all__ = [
    'Clock',
    'FrozenClock',
    'utc_now',
    'generate_doubt_id',
    'generate_answer_id',
    'generate_notification_id',
    'validate_id',
]
