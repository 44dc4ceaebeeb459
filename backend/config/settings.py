from pydantic_settings import BaseSettings
from pydantic import field_validator
from functools import lru_cache
import os


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can come from:
    - docker-compose.yml environment section
    - .env file (for secrets)
    - System environment

    PostgreSQL connection variables (POSTGRES_*) are read by
    config.database.
    """

    # Logging
    log_level: str = "INFO"

    # JWT - uses SECRET_KEY from .env or generates default
    jwt_secret_key: str = "dev-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Vocabulary lists change rarely; 0 disables caching
    vocabulary_cache_ttl: int = 300

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


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
