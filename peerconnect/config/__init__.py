"""
Configuration module for PeerConnect

Settings are loaded from environment variables and .env files.
"""

from .settings import Settings, get_settings
from .database import PostgresConfig, create_postgres_pool

__all__ = [
    'Settings',
    'get_settings',
    'PostgresConfig',
    'create_postgres_pool',
]
