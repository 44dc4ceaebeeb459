"""
Domain Models - Storage-agnostic data structures

These models represent the catalog entities independent of storage layer.
Repositories build them from database rows; the request pipeline and the
relationship resolver operate on them.
"""

from .entity import Entity, Alias, Identifier, ENTITY_KINDS
from .relationships import (
    Relationship,
    RelationshipType,
    RelationshipParticipant,
)
from .properties import (
    VocabularyKind,
    PropertyRecord,
    Gender,
    Language,
    IdentifierType,
)

__all__ = [
    # Core entities
    'Entity',
    'Alias',
    'Identifier',
    'ENTITY_KINDS',

    # Relationships
    'Relationship',
    'RelationshipType',
    'RelationshipParticipant',

    # Vocabularies
    'VocabularyKind',
    'PropertyRecord',
    'Gender',
    'Language',
    'IdentifierType',
]
