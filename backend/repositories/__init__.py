"""
Repository Pattern - Storage abstraction layer

Repositories hide storage details (PostgreSQL) from the request pipeline.
Consumers work with domain models, not asyncpg records.

- EntityRepository: entities, their aliases, identifiers and relationships
- PropertyRepository: reference vocabularies (languages, formats, ...)
- RevisionRepository: creating entities through revisions
"""
from config import create_postgres_pool

from .entity_repository import EntityRepository
from .property_repository import PropertyRepository
from .revision_repository import RevisionRepository

# Shared database connection pool (initialized on first use)
db_pool = None


async def get_db_pool():
    """Get or create shared database connection pool"""
    global db_pool
    if db_pool is None:
        db_pool = await create_postgres_pool()
    return db_pool


async def close_db_pool():
    """Close the shared pool (application shutdown)"""
    global db_pool
    if db_pool is not None:
        await db_pool.close()
        db_pool = None


__all__ = [
    'EntityRepository',
    'PropertyRepository',
    'RevisionRepository',
    'db_pool',
    'get_db_pool',
    'close_db_pool',
]
