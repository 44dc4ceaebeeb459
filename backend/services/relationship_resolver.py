"""
Relationship Resolver - loads and renders an entity's relationships

For every relationship on an entity:
1. Flatten the type template onto the relationship (relationship.template)
2. Order participants by position (stable: equal positions keep their
   stored order)
3. Load every participant from the entity store, all lookups in flight at once
4. Render the relationship from the loaded participants

Lookups complete in any order; results are matched back to participants by
their sorted index, never by completion order.

Failure is all-or-nothing: the first failed lookup (or render) cancels the
outstanding ones and propagates. Relationships are only modified once every
relationship of the entity has resolved.
"""
import asyncio
import logging
from typing import (
    Awaitable, Callable, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple
)

from models.entity import Entity
from models.relationships import Relationship, RelationshipParticipant
from services.relationship_renderer import render_relationship

logger = logging.getLogger(__name__)

Renderer = Callable[[Sequence[Entity], str, Optional[Mapping[str, str]]], str]


class EntityStore(Protocol):
    """Lookup of entities by BBID; raises EntityNotFoundError when absent"""

    async def find_by_bbid(self, bbid: str) -> Entity:
        ...


async def gather_fail_fast(aws: Iterable[Awaitable]) -> list:
    """
    Run awaitables concurrently, results in argument order.

    On the first failure the remaining awaitables are cancelled and the
    error is re-raised.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


class RelationshipResolver:
    """
    Resolves relationship participants against an entity store and renders
    each relationship.
    """

    def __init__(self, store: EntityStore, renderer: Renderer = render_relationship):
        self.store = store
        self.renderer = renderer

    async def resolve(self, entity: Entity) -> Entity:
        """
        Resolve and render all relationships of an entity.

        Args:
            entity: Entity with relationships populated (participants unresolved)

        Returns:
            The same entity, relationships resolved and rendered

        Raises:
            Whatever the store or renderer raised first
        """
        relationships = list(entity.relationships)

        resolved = await gather_fail_fast(
            self._resolve_one(relationship) for relationship in relationships
        )

        # Nothing is touched until every relationship succeeded
        for relationship, (template, participants, loaded, rendered) in zip(relationships, resolved):
            relationship.template = template
            for participant, loaded_entity in zip(participants, loaded):
                participant.entity = loaded_entity
            relationship.entities = participants
            relationship.rendered = rendered

        entity.relationships = relationships

        logger.debug(f"Resolved {len(relationships)} relationships for {entity.bbid}")
        return entity

    async def _resolve_one(
        self, relationship: Relationship
    ) -> Tuple[str, List[RelationshipParticipant], List[Entity], str]:
        template = relationship.relationship_type.template

        # sorted() is stable: ties keep stored order
        participants = sorted(relationship.entities, key=lambda p: p.position)

        loaded = await gather_fail_fast(
            self.store.find_by_bbid(participant.entity_bbid)
            for participant in participants
        )

        rendered = self.renderer(loaded, template, None)

        logger.debug(
            f"Rendered relationship {relationship.id} "
            f"({relationship.relationship_type.label}) with {len(loaded)} participants"
        )
        return template, participants, loaded, rendered


async def resolve_relationships(
    entity: Entity,
    store: EntityStore,
    renderer: Renderer = render_relationship,
) -> Entity:
    """Convenience wrapper around RelationshipResolver.resolve"""
    return await RelationshipResolver(store, renderer).resolve(entity)
