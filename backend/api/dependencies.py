"""
Shared FastAPI dependencies and pipeline result handling
"""
from typing import Optional, Awaitable, Callable

from fastapi import HTTPException

from config import get_settings
from middleware.pipeline import RequestContext, StageResult, Outcome
from repositories import get_db_pool, EntityRepository, PropertyRepository, RevisionRepository
from services.cache import SimpleCache
from utils.id_generator import is_bbid

_vocabulary_cache: Optional[SimpleCache] = None


def get_vocabulary_cache() -> SimpleCache:
    """Process-wide vocabulary cache"""
    global _vocabulary_cache
    if _vocabulary_cache is None:
        _vocabulary_cache = SimpleCache(default_ttl=get_settings().vocabulary_cache_ttl)
    return _vocabulary_cache


async def get_request_context() -> RequestContext:
    """Fresh pipeline context wired to the PostgreSQL stores"""
    pool = await get_db_pool()
    return RequestContext(
        entity_store=EntityRepository(pool),
        property_store=PropertyRepository(pool),
        vocabulary_cache=get_vocabulary_cache(),
    )


async def get_revision_repository() -> RevisionRepository:
    pool = await get_db_pool()
    return RevisionRepository(pool)


def raise_for_result(result: StageResult):
    """
    Turn a stopped pipeline into an HTTP error.

    skip_route: no route handles this path -> plain 404
    fail: re-raise the stage error (CatalogError handler maps status)
    """
    if result.outcome == Outcome.SKIP_ROUTE:
        raise HTTPException(status_code=404, detail="Not Found")
    if result.outcome == Outcome.FAIL:
        raise result.error


def get_revision_provider() -> Callable[[], Awaitable[RevisionRepository]]:
    """
    Deferred RevisionRepository factory.

    Submit routes call it only after the editor check, so a logged-out
    submission never opens the pool.
    """
    return get_revision_repository


def check_bbid_route(bbid: str):
    """Malformed BBID: no route handles this path -> plain 404"""
    if not is_bbid(bbid):
        raise_for_result(StageResult.skip_route())
