"""
Pipeline stages that load resources into the request context

- Vocabulary loaders: fetch a reference list, optionally sort it, attach it
- Entity loader: validate the BBID route parameter and load the entity
- Relationship loader: resolve and render the loaded entity's relationships
"""
import logging
from typing import Optional, Callable, Any

from fastapi import Request

from models.entity import CREATOR, EDITION, PUBLICATION, PUBLISHER, WORK
from models.properties import VocabularyKind
from services.relationship_resolver import RelationshipResolver
from utils.errors import EntityNotFoundError, NotFoundError, PipelineOrderError
from utils.id_generator import is_bbid

from .pipeline import RequestContext, Stage, StageResult

logger = logging.getLogger(__name__)


# =============================================================================
# VOCABULARY LOADERS
# =============================================================================

def make_loader(
    kind: VocabularyKind,
    attr: str,
    sort_key: Optional[Callable[[Any], Any]] = None,
) -> Stage:
    """
    Build a stage attaching one vocabulary to ctx.<attr>.

    Args:
        kind: Vocabulary to fetch from the property store
        attr: RequestContext field to fill
        sort_key: Optional key ordering the records before attaching
    """
    async def load(request: Request, ctx: RequestContext, param: Optional[str] = None) -> StageResult:
        async def fetch():
            logger.info(f"Loading {kind.value} vocabulary")
            return await ctx.property_store.find(kind)

        if ctx.vocabulary_cache is not None:
            results = await ctx.vocabulary_cache.get_or_load(kind.value, fetch)
        else:
            results = await fetch()

        # Copy: cached lists are shared between requests
        results = sorted(results, key=sort_key) if sort_key else list(results)
        setattr(ctx, attr, results)
        return StageResult.proceed()

    load.__name__ = f"load_{attr}"
    return load


def gender_order(gender) -> Any:
    return gender.id


def language_order(language) -> Any:
    """Most used languages first, then alphabetical"""
    return (-language.frequency, language.name.casefold(), language.name)


load_creator_types = make_loader(VocabularyKind.CREATOR_TYPE, 'creator_types')
load_publication_types = make_loader(VocabularyKind.PUBLICATION_TYPE, 'publication_types')
load_edition_formats = make_loader(VocabularyKind.EDITION_FORMAT, 'edition_formats')
load_edition_statuses = make_loader(VocabularyKind.EDITION_STATUS, 'edition_statuses')
load_publisher_types = make_loader(VocabularyKind.PUBLISHER_TYPE, 'publisher_types')
load_work_types = make_loader(VocabularyKind.WORK_TYPE, 'work_types')
load_identifier_types = make_loader(VocabularyKind.IDENTIFIER_TYPE, 'identifier_types')
load_genders = make_loader(VocabularyKind.GENDER, 'genders', sort_key=gender_order)
load_languages = make_loader(VocabularyKind.LANGUAGE, 'languages', sort_key=language_order)


# =============================================================================
# ENTITY LOADER
# =============================================================================

# Populated for every entity kind
BASE_POPULATE = (
    'annotation',
    'disambiguation',
    'relationships',
    'aliases',
    'identifiers',
)

# Extra populate fields per entity kind
ENTITY_POPULATE = {
    CREATOR: (),
    EDITION: ('publication', 'publisher'),
    PUBLICATION: ('editions',),
    PUBLISHER: ('editions',),
    WORK: (),
}


def populate_fields(kind: str) -> list:
    return list(BASE_POPULATE) + list(ENTITY_POPULATE[kind])


def make_entity_loader(kind: str, error_message: str) -> Stage:
    """
    Build a stage loading the entity named by the BBID route parameter.

    A malformed BBID skips the route. A missing entity, or one of another
    kind, fails with NotFoundError(error_message).
    """
    if kind not in ENTITY_POPULATE:
        raise ValueError(f"Unknown entity kind: {kind}")

    async def load_entity(request: Request, ctx: RequestContext, bbid: Optional[str] = None) -> StageResult:
        if not is_bbid(bbid):
            return StageResult.skip_route()

        try:
            entity = await ctx.entity_store.find_one(bbid, populate=populate_fields(kind))
        except EntityNotFoundError:
            return StageResult.fail(NotFoundError(error_message))

        if entity.entity_type != kind:
            return StageResult.fail(NotFoundError(error_message))

        ctx.entity = entity
        return StageResult.proceed()

    load_entity.__name__ = f"load_{kind.lower()}"
    return load_entity


# =============================================================================
# RELATIONSHIP LOADER
# =============================================================================

async def load_entity_relationships(
    request: Request, ctx: RequestContext, param: Optional[str] = None
) -> StageResult:
    """Resolve and render ctx.entity's relationships"""
    if ctx.entity is None:
        logger.error("load_entity_relationships ran before an entity was loaded")
        return StageResult.fail(PipelineOrderError("Entity failed to load"))

    resolver = RelationshipResolver(ctx.entity_store)
    try:
        ctx.entity = await resolver.resolve(ctx.entity)
    except Exception as e:
        return StageResult.fail(e)

    return StageResult.proceed()
