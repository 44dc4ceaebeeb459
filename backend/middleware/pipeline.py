"""
Request pipeline

A route is served by running a list of stages over a per-request context.
Each stage loads something, attaches it to the context and reports how the
pipeline should go on:

    proceed     - run the next stage
    skip_route  - this route does not handle the request (malformed BBID)
    fail        - stop; the error goes to the route's error handling

run_pipeline() stops at the first result that is not `proceed`.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, List, Any, Awaitable, Callable, Sequence

from fastapi import Request

from models.entity import Entity
from models.properties import PropertyRecord, Gender, Language, IdentifierType

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    PROCEED = 'proceed'
    SKIP_ROUTE = 'skip_route'
    FAIL = 'fail'


@dataclass(frozen=True)
class StageResult:
    outcome: Outcome
    error: Optional[BaseException] = None

    @classmethod
    def proceed(cls) -> 'StageResult':
        return cls(Outcome.PROCEED)

    @classmethod
    def skip_route(cls) -> 'StageResult':
        return cls(Outcome.SKIP_ROUTE)

    @classmethod
    def fail(cls, error: BaseException) -> 'StageResult':
        return cls(Outcome.FAIL, error)

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.PROCEED


# Vocabulary fields of RequestContext
VOCABULARY_FIELDS = (
    'creator_types',
    'edition_formats',
    'edition_statuses',
    'genders',
    'identifier_types',
    'languages',
    'publication_types',
    'publisher_types',
    'work_types',
)


@dataclass
class RequestContext:
    """
    Per-request state shared by the stages of one pipeline.

    Stores are injected by the API layer; everything else is filled in by
    stages as the request goes through.
    """
    entity_store: Any
    property_store: Any = None
    vocabulary_cache: Any = None

    entity: Optional[Entity] = None

    creator_types: Optional[List[PropertyRecord]] = None
    edition_formats: Optional[List[PropertyRecord]] = None
    edition_statuses: Optional[List[PropertyRecord]] = None
    genders: Optional[List[Gender]] = None
    identifier_types: Optional[List[IdentifierType]] = None
    languages: Optional[List[Language]] = None
    publication_types: Optional[List[PropertyRecord]] = None
    publisher_types: Optional[List[PropertyRecord]] = None
    work_types: Optional[List[PropertyRecord]] = None

    def vocabularies(self) -> dict:
        """Loaded vocabularies, serialised for a response"""
        return {
            name: [record.to_dict() for record in getattr(self, name)]
            for name in VOCABULARY_FIELDS
            if getattr(self, name) is not None
        }


Stage = Callable[[Request, RequestContext, Optional[str]], Awaitable[StageResult]]


async def run_pipeline(
    stages: Sequence[Stage],
    request: Request,
    ctx: RequestContext,
    param: Optional[str] = None,
) -> StageResult:
    """
    Run stages in order, stopping at the first non-proceed result.

    A stage that raises instead of returning a failure is treated as
    having failed with that exception.
    """
    for stage in stages:
        try:
            result = await stage(request, ctx, param)
        except Exception as e:
            logger.error(f"Stage {getattr(stage, '__name__', stage)} raised: {e}")
            result = StageResult.fail(e)

        if not result.ok:
            return result

    return StageResult.proceed()
