"""
Database Configuration
======================

PostgreSQL connection configuration for the catalog service.
"""
import os
from dataclasses import dataclass


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

    @classmethod
    def from_env(cls, min_size: int = 2, max_size: int = 10) -> 'PostgresConfig':
        """Create config from environment variables."""
        return cls(
            host=os.getenv('POSTGRES_HOST', 'localhost'),
            port=int(os.getenv('POSTGRES_PORT', '5432')),
            user=os.getenv('POSTGRES_USER', 'bookbrainz'),
            password=os.getenv('POSTGRES_PASSWORD', 'bookbrainz'),
            database=os.getenv('POSTGRES_DB', 'bookbrainz'),
            min_size=min_size,
            max_size=max_size,
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
        }


def get_postgres_config(min_size: int = 2, max_size: int = 10) -> PostgresConfig:
    """Get PostgreSQL configuration from environment."""
    return PostgresConfig.from_env(min_size=min_size, max_size=max_size)


async def create_postgres_pool(min_size: int = 2, max_size: int = 10):
    """Create PostgreSQL connection pool from environment config."""
    import asyncpg
    config = get_postgres_config(min_size=min_size, max_size=max_size)
    return await asyncpg.create_pool(**config.to_asyncpg_kwargs())
