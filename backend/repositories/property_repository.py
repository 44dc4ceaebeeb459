"""
Property Repository - reference vocabularies

Storage: PostgreSQL. Languages and genders live in the musicbrainz schema,
the catalog's own vocabularies in bookbrainz.
"""
import logging
from typing import List, Any

import asyncpg

from models.properties import (
    VocabularyKind, PropertyRecord, Gender, Language, IdentifierType,
)

logger = logging.getLogger(__name__)


# Query and model per vocabulary
VOCABULARIES = {
    VocabularyKind.CREATOR_TYPE: (
        "SELECT id, label FROM bookbrainz.creator_type", PropertyRecord),
    VocabularyKind.EDITION_FORMAT: (
        "SELECT id, label FROM bookbrainz.edition_format", PropertyRecord),
    VocabularyKind.EDITION_STATUS: (
        "SELECT id, label FROM bookbrainz.edition_status", PropertyRecord),
    VocabularyKind.PUBLICATION_TYPE: (
        "SELECT id, label FROM bookbrainz.publication_type", PropertyRecord),
    VocabularyKind.PUBLISHER_TYPE: (
        "SELECT id, label FROM bookbrainz.publisher_type", PropertyRecord),
    VocabularyKind.WORK_TYPE: (
        "SELECT id, label FROM bookbrainz.work_type", PropertyRecord),
    VocabularyKind.IDENTIFIER_TYPE: (
        "SELECT id, label, entity_type, detection_regex, validation_regex "
        "FROM bookbrainz.identifier_type", IdentifierType),
    VocabularyKind.GENDER: (
        "SELECT id, name FROM musicbrainz.gender", Gender),
    VocabularyKind.LANGUAGE: (
        "SELECT id, name, frequency, iso_code_3 AS iso_code FROM musicbrainz.language", Language),
}


class PropertyRepository:
    """Repository for vocabulary records"""

    def __init__(self, db_pool: asyncpg.Pool):
        self.db_pool = db_pool

    async def find(self, kind: VocabularyKind) -> List[Any]:
        """
        All records of one vocabulary, in storage order.

        Args:
            kind: Vocabulary to load

        Returns:
            List of vocabulary models (PropertyRecord, Gender, Language, IdentifierType)
        """
        query, model = VOCABULARIES[VocabularyKind(kind)]

        async with self.db_pool.acquire() as conn:
            rows = await conn.fetch(query)

        return [model(**dict(row)) for row in rows]
