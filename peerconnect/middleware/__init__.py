from .auth import SessionUser, get_current_user, get_current_user_optional, COOKIE_NAME
from .jwt_session import create_access_token, decode_access_token

__all__ = [
    'SessionUser',
    'get_current_user',
    'get_current_user_optional',
    'COOKIE_NAME',
    'create_access_token',
    'decode_access_token',
]
