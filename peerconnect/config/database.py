"""
Database Configuration
======================

PostgreSQL connection configuration for the API process.
Values come from Settings (which already reads the environment).
"""
import logging
from dataclasses import dataclass
from typing import Optional

from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""
    host: str
    port: int
    user: str
    password: str
    database: str
    min_size: int = 2
    max_size: int = 10
    command_timeout: float = 10.0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> 'PostgresConfig':
        """Create config from application settings."""
        settings = settings or get_settings()
        return cls(
            host=settings.postgres_host,
            port=settings.postgres_port,
            user=settings.postgres_user,
            password=settings.postgres_password,
            database=settings.postgres_db,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )

    def to_asyncpg_kwargs(self) -> dict:
        """Convert to asyncpg.create_pool kwargs."""
        return {
            'host': self.host,
            'port': self.port,
            'user': self.user,
            'password': self.password,
            'database': self.database,
            'min_size': self.min_size,
            'max_size': self.max_size,
            'command_timeout': self.command_timeout,
        }


async def create_postgres_pool(settings: Optional[Settings] = None):
    """Create PostgreSQL connection pool from settings."""
    import asyncpg
    config = PostgresConfig.from_settings(settings)
    logger.info(f"Connecting to PostgreSQL at {config.host}:{config.port}/{config.database}")
    return await asyncpg.create_pool(**config.to_asyncpg_kwargs())
