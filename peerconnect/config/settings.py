from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache
from typing import Optional
import os


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can come from:
    - docker-compose.yml environment section
    - .env file (for secrets like the JWT key)
    - System environment

    Variable names follow docker-compose conventions:
    - POSTGRES_HOST, POSTGRES_PORT, etc. (for database)
    - STORAGE_BACKEND=memory|postgres
    """

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    # Storage
    storage_backend: str = "memory"
    seed_demo_data: bool = True

    # JWT - uses SECRET_KEY from .env or generates default
    jwt_secret_key: str = Field(default="dev-secret-key-change-in-production", validate_default=True)
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # PostgreSQL (from docker-compose)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "peerconnect_user"
    postgres_password: str = "peerconnect_pass"
    postgres_db: str = "peerconnect"
    database_url: Optional[str] = Field(default=None, validate_default=True)
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_command_timeout: float = 10.0

    # Quota and credibility rules
    base_daily_limit: int = 5
    bonus_per_answer: int = 1
    verification_reward: int = 50
    similarity_threshold: int = 2

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra env vars

    @field_validator('jwt_secret_key', mode='before')
    @classmethod
    def get_jwt_secret(cls, v):
        """Use SECRET_KEY from env if JWT_SECRET_KEY not set"""
        if v and v != "dev-secret-key-change-in-production":
            return v
        return os.getenv('SECRET_KEY', v or 'dev-secret-key-change-in-production')

    @field_validator('storage_backend')
    @classmethod
    def check_storage_backend(cls, v):
        v = v.lower()
        if v not in ('memory', 'postgres'):
            raise ValueError("storage_backend must be 'memory' or 'postgres'")
        return v

    @field_validator('base_daily_limit', 'similarity_threshold')
    @classmethod
    def at_least_one(cls, v):
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator('database_url', mode='before')
    @classmethod
    def construct_database_url(cls, v, info):
        """Construct database URL from components if not explicitly set"""
        if v:
            return v

        data = info.data
        host = data.get('postgres_host', 'localhost')
        port = data.get('postgres_port', 5432)
        user = data.get('postgres_user', 'peerconnect_user')
        password = data.get('postgres_password', 'peerconnect_pass')
        db = data.get('postgres_db', 'peerconnect')

        return f"postgresql://{user}:{password}@{host}:{port}/{db}"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
