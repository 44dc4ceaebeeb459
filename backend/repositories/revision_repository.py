"""
Revision Repository - creating and editing entities

Every create or edit is recorded in a revision carrying the editor and the
revision note. Each one runs in a single transaction.
"""
import logging
from typing import List, Optional

import asyncpg

from models.api.submission import (
    AliasInput, IdentifierInput, EditionSubmission, PublicationSubmission,
)
from models.entity import Entity, Alias, EDITION, PUBLICATION
from utils.errors import EntityNotFoundError
from utils.id_generator import generate_bbid

logger = logging.getLogger(__name__)


class RevisionRepository:
    """Writes entities with their aliases, identifiers and kind data"""

    def __init__(self, db_pool: asyncpg.Pool):
        self.db_pool = db_pool

    # =========================================================================
    # CREATE OPERATIONS
    # =========================================================================

    async def create_edition(self, editor_id: str, submission: EditionSubmission) -> Entity:
        """
        Create an Edition from a form submission.

        Args:
            editor_id: ID of the logged-in editor
            submission: Validated form body

        Returns:
            The new Edition (bbid, type and default alias)
        """
        async with self.db_pool.acquire() as conn:
            async with conn.transaction():
                bbid = await self._insert_entity(conn, EDITION)
                entity = await self._write_revision(conn, EDITION, bbid, editor_id, submission)
                await self._write_edition_data(conn, bbid, submission)

        logger.info(f"Created edition {entity.bbid} ({entity.name}) by editor {editor_id}")
        return entity

    async def create_publication(self, editor_id: str, submission: PublicationSubmission) -> Entity:
        """Create a Publication from a form submission."""
        async with self.db_pool.acquire() as conn:
            async with conn.transaction():
                bbid = await self._insert_entity(conn, PUBLICATION)
                entity = await self._write_revision(conn, PUBLICATION, bbid, editor_id, submission)
                await self._write_publication_data(conn, bbid, submission)

        logger.info(f"Created publication {entity.bbid} ({entity.name}) by editor {editor_id}")
        return entity

    # =========================================================================
    # UPDATE OPERATIONS
    # =========================================================================

    async def update_edition(self, editor_id: str, bbid: str, submission: EditionSubmission) -> Entity:
        """
        Edit an existing Edition.

        Aliases and identifiers are replaced by the submitted ones; kind data,
        annotation and disambiguation are overwritten.

        Raises:
            EntityNotFoundError: no Edition with this BBID
        """
        async with self.db_pool.acquire() as conn:
            async with conn.transaction():
                await self._lock_entity(conn, EDITION, bbid)
                await self._clear_links(conn, bbid)
                entity = await self._write_revision(conn, EDITION, bbid, editor_id, submission)
                await self._write_edition_data(conn, bbid, submission)

        logger.info(f"Edited edition {bbid} ({entity.name}) by editor {editor_id}")
        return entity

    async def update_publication(self, editor_id: str, bbid: str, submission: PublicationSubmission) -> Entity:
        """Edit an existing Publication; see update_edition()."""
        async with self.db_pool.acquire() as conn:
            async with conn.transaction():
                await self._lock_entity(conn, PUBLICATION, bbid)
                await self._clear_links(conn, bbid)
                entity = await self._write_revision(conn, PUBLICATION, bbid, editor_id, submission)
                await self._write_publication_data(conn, bbid, submission)

        logger.info(f"Edited publication {bbid} ({entity.name}) by editor {editor_id}")
        return entity

    # =========================================================================
    # SHARED STEPS
    # =========================================================================

    async def _insert_entity(self, conn, entity_type: str) -> str:
        bbid = generate_bbid()
        await conn.execute("""
            INSERT INTO bookbrainz.entity (bbid, type) VALUES ($1, $2)
        """, bbid, entity_type)
        return bbid

    async def _lock_entity(self, conn, entity_type: str, bbid: str):
        row = await conn.fetchrow("""
            SELECT type FROM bookbrainz.entity WHERE bbid = $1 FOR UPDATE
        """, bbid)
        if row is None or row['type'] != entity_type:
            raise EntityNotFoundError(bbid)

    async def _clear_links(self, conn, bbid: str):
        """Detach current aliases and identifiers before writing new ones"""
        await conn.execute("DELETE FROM bookbrainz.entity_alias WHERE bbid = $1", bbid)
        await conn.execute("DELETE FROM bookbrainz.entity_identifier WHERE bbid = $1", bbid)

    async def _write_revision(self, conn, entity_type: str, bbid: str, editor_id: str, submission) -> Entity:
        """Revision row, aliases, identifiers, annotation, disambiguation"""
        revision_id = await conn.fetchval("""
            INSERT INTO bookbrainz.revision (editor_id, note, created_at)
            VALUES ($1, $2, NOW())
            RETURNING id
        """, editor_id, submission.note)

        await conn.execute("""
            INSERT INTO bookbrainz.entity_revision (revision_id, bbid) VALUES ($1, $2)
        """, revision_id, bbid)

        default_alias = await self._write_aliases(conn, bbid, submission.aliases)
        await self._write_identifiers(conn, bbid, submission.identifiers)
        await self._write_texts(conn, bbid, submission.annotation, submission.disambiguation)

        return Entity(
            bbid=bbid,
            entity_type=entity_type,
            default_alias=default_alias,
            annotation=submission.annotation,
            disambiguation=submission.disambiguation,
        )

    async def _write_aliases(self, conn, bbid: str, aliases: List[AliasInput]) -> Optional[Alias]:
        default_alias = None
        for alias_input in aliases:
            alias = Alias(
                name=alias_input.name,
                sort_name=alias_input.sort_name or alias_input.name,
                language_id=alias_input.language_id,
                primary=alias_input.primary,
            )
            alias.id = await conn.fetchval("""
                INSERT INTO bookbrainz.alias (name, sort_name, language_id, "primary")
                VALUES ($1, $2, $3, $4)
                RETURNING id
            """, alias.name, alias.sort_name, alias.language_id, alias.primary)

            await conn.execute("""
                INSERT INTO bookbrainz.entity_alias (bbid, alias_id) VALUES ($1, $2)
            """, bbid, alias.id)

            if alias_input.default or default_alias is None:
                default_alias = alias

        await conn.execute("""
            UPDATE bookbrainz.entity SET default_alias_id = $2 WHERE bbid = $1
        """, bbid, default_alias.id if default_alias else None)
        return default_alias

    async def _write_identifiers(self, conn, bbid: str, identifiers: List[IdentifierInput]):
        for identifier in identifiers:
            if identifier.type_id is None or not identifier.value.strip():
                continue
            identifier_id = await conn.fetchval("""
                INSERT INTO bookbrainz.identifier (type_id, value)
                VALUES ($1, $2)
                RETURNING id
            """, identifier.type_id, identifier.value.strip())

            await conn.execute("""
                INSERT INTO bookbrainz.entity_identifier (bbid, identifier_id) VALUES ($1, $2)
            """, bbid, identifier_id)

    async def _write_texts(self, conn, bbid: str, annotation: Optional[str], disambiguation: Optional[str]):
        if annotation:
            await conn.execute("""
                WITH inserted AS (
                    INSERT INTO bookbrainz.annotation (content) VALUES ($2) RETURNING id
                )
                UPDATE bookbrainz.entity SET annotation_id = (SELECT id FROM inserted)
                WHERE bbid = $1
            """, bbid, annotation)
        else:
            await conn.execute("""
                UPDATE bookbrainz.entity SET annotation_id = NULL WHERE bbid = $1
            """, bbid)

        if disambiguation:
            await conn.execute("""
                WITH inserted AS (
                    INSERT INTO bookbrainz.disambiguation (comment) VALUES ($2) RETURNING id
                )
                UPDATE bookbrainz.entity SET disambiguation_id = (SELECT id FROM inserted)
                WHERE bbid = $1
            """, bbid, disambiguation)
        else:
            await conn.execute("""
                UPDATE bookbrainz.entity SET disambiguation_id = NULL WHERE bbid = $1
            """, bbid)

    async def _write_edition_data(self, conn, bbid: str, submission: EditionSubmission):
        await conn.execute("""
            INSERT INTO bookbrainz.edition_data (
                bbid, publication_bbid, publisher_bbid, release_date,
                language_id, edition_format_id, edition_status_id,
                pages, width, height, depth, weight
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
            ON CONFLICT (bbid) DO UPDATE SET
                publication_bbid = EXCLUDED.publication_bbid,
                publisher_bbid = EXCLUDED.publisher_bbid,
                release_date = EXCLUDED.release_date,
                language_id = EXCLUDED.language_id,
                edition_format_id = EXCLUDED.edition_format_id,
                edition_status_id = EXCLUDED.edition_status_id,
                pages = EXCLUDED.pages,
                width = EXCLUDED.width,
                height = EXCLUDED.height,
                depth = EXCLUDED.depth,
                weight = EXCLUDED.weight
        """,
            bbid,
            submission.publication,
            submission.publisher,
            submission.release_date,
            submission.language_id,
            submission.edition_format_id,
            submission.edition_status_id,
            submission.pages,
            submission.width,
            submission.height,
            submission.depth,
            submission.weight,
        )

    async def _write_publication_data(self, conn, bbid: str, submission: PublicationSubmission):
        await conn.execute("""
            INSERT INTO bookbrainz.publication_data (bbid, publication_type_id)
            VALUES ($1, $2)
            ON CONFLICT (bbid) DO UPDATE SET publication_type_id = EXCLUDED.publication_type_id
        """, bbid, submission.publication_type_id)
