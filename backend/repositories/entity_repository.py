"""
Entity Repository - PostgreSQL storage

Tables (schema bookbrainz):
- entity: bbid, type, default_alias_id, annotation_id, disambiguation_id
- alias / entity_alias: names an entity is known by
- annotation, disambiguation: free text attached to an entity
- identifier / entity_identifier: external identifiers
- relationship, relationship_type, relationship_entity: typed relationships
  and their positioned participants
- creator_data, edition_data, publication_data, publisher_data, work_data:
  kind-specific columns keyed by bbid

Relationships are returned with unresolved participants (BBID references);
the relationship resolver loads and renders them.
"""
import logging
from typing import Optional, List, Iterable

import asyncpg

from models.entity import (
    Entity, Alias, Identifier,
    CREATOR, EDITION, PUBLICATION, PUBLISHER, WORK,
)
from models.relationships import Relationship, RelationshipType, RelationshipParticipant
from utils.errors import EntityNotFoundError

logger = logging.getLogger(__name__)


# Kind-specific data table and the columns copied into Entity.data
KIND_DATA = {
    CREATOR: ('creator_data', ('creator_type_id', 'gender_id', 'begin_date', 'end_date', 'ended')),
    EDITION: ('edition_data', (
        'publication_bbid', 'publisher_bbid', 'release_date', 'language_id',
        'edition_format_id', 'edition_status_id',
        'pages', 'width', 'height', 'depth', 'weight',
    )),
    PUBLICATION: ('publication_data', ('publication_type_id',)),
    PUBLISHER: ('publisher_data', ('publisher_type_id', 'begin_date', 'end_date', 'ended')),
    WORK: ('work_data', ('work_type_id',)),
}


class EntityRepository:
    """
    Repository for Entity domain model

    find_one() loads an entity plus the related fields named in `populate`:
    annotation, disambiguation, aliases, identifiers, relationships,
    publication, publisher, editions.
    """

    def __init__(self, db_pool: asyncpg.Pool):
        self.db_pool = db_pool
        self._populators = {
            'annotation': self._populate_annotation,
            'disambiguation': self._populate_disambiguation,
            'aliases': self._populate_aliases,
            'identifiers': self._populate_identifiers,
            'relationships': self._populate_relationships,
            'publication': self._populate_publication,
            'publisher': self._populate_publisher,
            'editions': self._populate_editions,
        }

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def find_by_bbid(self, bbid: str) -> Entity:
        """
        Retrieve entity by BBID with its default alias and kind data.

        Raises:
            EntityNotFoundError: no entity with this BBID
        """
        return await self.find_one(bbid)

    async def find_one(self, bbid: str, populate: Iterable[str] = ()) -> Entity:
        """
        Retrieve entity by BBID, populating the requested related fields.

        Args:
            bbid: Entity BBID
            populate: Names of related fields to load

        Returns:
            Entity model

        Raises:
            EntityNotFoundError: no entity with this BBID
            ValueError: unknown populate field
        """
        populate = list(populate)
        unknown = [name for name in populate if name not in self._populators]
        if unknown:
            raise ValueError(f"Cannot populate {unknown}; known fields: {sorted(self._populators)}")

        async with self.db_pool.acquire() as conn:
            entity = await self._fetch_entity(conn, bbid)
            if entity is None:
                raise EntityNotFoundError(bbid)

            for name in populate:
                await self._populators[name](conn, entity)

        return entity

    async def _fetch_entity(self, conn, bbid: str) -> Optional[Entity]:
        row = await conn.fetchrow("""
            SELECT e.bbid, e.type,
                   a.id AS alias_id, a.name, a.sort_name, a.language_id, a."primary"
            FROM bookbrainz.entity e
            LEFT JOIN bookbrainz.alias a ON a.id = e.default_alias_id
            WHERE e.bbid = $1
        """, bbid)

        if not row:
            return None

        default_alias = None
        if row['alias_id'] is not None:
            default_alias = Alias(
                id=row['alias_id'],
                name=row['name'],
                sort_name=row['sort_name'],
                language_id=row['language_id'],
                primary=bool(row['primary']),
            )

        entity = Entity(
            bbid=str(row['bbid']),
            entity_type=row['type'],
            default_alias=default_alias,
        )
        entity.data = await self._fetch_kind_data(conn, entity)
        return entity

    async def _fetch_kind_data(self, conn, entity: Entity) -> dict:
        table, columns = KIND_DATA[entity.entity_type]
        # table and columns come from KIND_DATA, never from input
        row = await conn.fetchrow(
            f"SELECT {', '.join(columns)} FROM bookbrainz.{table} WHERE bbid = $1",
            entity.bbid,
        )
        if not row:
            return {}
        return {
            column: str(row[column]) if column.endswith('_bbid') and row[column] else row[column]
            for column in columns
        }

    # =========================================================================
    # POPULATE HELPERS
    # =========================================================================

    async def _populate_annotation(self, conn, entity: Entity):
        entity.annotation = await conn.fetchval("""
            SELECT an.content
            FROM bookbrainz.entity e
            JOIN bookbrainz.annotation an ON an.id = e.annotation_id
            WHERE e.bbid = $1
        """, entity.bbid)

    async def _populate_disambiguation(self, conn, entity: Entity):
        entity.disambiguation = await conn.fetchval("""
            SELECT d.comment
            FROM bookbrainz.entity e
            JOIN bookbrainz.disambiguation d ON d.id = e.disambiguation_id
            WHERE e.bbid = $1
        """, entity.bbid)

    async def _populate_aliases(self, conn, entity: Entity):
        rows = await conn.fetch("""
            SELECT a.id, a.name, a.sort_name, a.language_id, a."primary"
            FROM bookbrainz.entity_alias ea
            JOIN bookbrainz.alias a ON a.id = ea.alias_id
            WHERE ea.bbid = $1
            ORDER BY a.id
        """, entity.bbid)

        entity.aliases = [
            Alias(
                id=row['id'],
                name=row['name'],
                sort_name=row['sort_name'],
                language_id=row['language_id'],
                primary=bool(row['primary']),
            )
            for row in rows
        ]

    async def _populate_identifiers(self, conn, entity: Entity):
        rows = await conn.fetch("""
            SELECT i.id, i.type_id, i.value
            FROM bookbrainz.entity_identifier ei
            JOIN bookbrainz.identifier i ON i.id = ei.identifier_id
            WHERE ei.bbid = $1
            ORDER BY i.id
        """, entity.bbid)

        entity.identifiers = [
            Identifier(id=row['id'], type_id=row['type_id'], value=row['value'])
            for row in rows
        ]

    async def _populate_relationships(self, conn, entity: Entity):
        """Relationships the entity takes part in, participants as BBID refs"""
        rows = await conn.fetch("""
            SELECT r.id AS relationship_id,
                   rt.id AS type_id, rt.label, rt.template, rt.description,
                   p.entity_bbid, p.position
            FROM bookbrainz.relationship r
            JOIN bookbrainz.relationship_type rt ON rt.id = r.type_id
            JOIN bookbrainz.relationship_entity p ON p.relationship_id = r.id
            WHERE r.id IN (
                SELECT relationship_id
                FROM bookbrainz.relationship_entity
                WHERE entity_bbid = $1
            )
            ORDER BY r.id, p.id
        """, entity.bbid)

        relationships = {}
        for row in rows:
            relationship = relationships.get(row['relationship_id'])
            if relationship is None:
                relationship = Relationship(
                    id=row['relationship_id'],
                    relationship_type=RelationshipType(
                        id=row['type_id'],
                        label=row['label'],
                        template=row['template'],
                        description=row['description'],
                    ),
                )
                relationships[row['relationship_id']] = relationship

            relationship.entities.append(RelationshipParticipant(
                position=row['position'],
                entity_bbid=str(row['entity_bbid']),
            ))

        entity.relationships = list(relationships.values())

    async def _populate_publication(self, conn, entity: Entity):
        bbid = entity.data.get('publication_bbid')
        entity.publication = await self._fetch_entity(conn, bbid) if bbid else None

    async def _populate_publisher(self, conn, entity: Entity):
        bbid = entity.data.get('publisher_bbid')
        entity.publisher = await self._fetch_entity(conn, bbid) if bbid else None

    async def _populate_editions(self, conn, entity: Entity):
        """Editions of a publication, or editions issued by a publisher"""
        column = 'publication_bbid' if entity.entity_type == PUBLICATION else 'publisher_bbid'
        rows = await conn.fetch(f"""
            SELECT bbid FROM bookbrainz.edition_data
            WHERE {column} = $1
            ORDER BY release_date NULLS LAST, bbid
        """, entity.bbid)

        editions: List[Entity] = []
        for row in rows:
            edition = await self._fetch_entity(conn, str(row['bbid']))
            if edition is not None:
                editions.append(edition)
        entity.editions = editions
