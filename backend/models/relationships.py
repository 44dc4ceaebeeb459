"""
Relationship domain models

A relationship connects two or more entities. It is stored on its owning
entity with a type (carrying the display template) and an ordered list of
participants.
"""
from dataclasses import dataclass, field
from typing import Optional, List

from .entity import Entity


@dataclass
class RelationshipType:
    """Type of a relationship, e.g. authorship"""
    id: int
    label: str
    template: str  # positional placeholders: "{0} wrote {1}"
    description: Optional[str] = None


@dataclass
class RelationshipParticipant:
    """
    One entity taking part in a relationship.

    Starts as a bare BBID reference; `entity` is filled in once the
    participant has been resolved against the entity store.
    """
    position: int
    entity_bbid: str
    entity: Optional[Entity] = None

    @property
    def is_resolved(self) -> bool:
        return self.entity is not None

    def to_dict(self) -> dict:
        return {
            'position': self.position,
            'entity_bbid': self.entity_bbid,
            'entity': self.entity.summary() if self.entity else None,
        }


@dataclass
class Relationship:
    """
    Relationship between catalog entities

    `template` and `rendered` are transient: set per request by the
    relationship resolver, never persisted.
    """
    id: int
    relationship_type: RelationshipType
    entities: List[RelationshipParticipant] = field(default_factory=list)

    template: Optional[str] = None
    rendered: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        """All participants loaded and display string computed"""
        return self.rendered is not None and all(p.is_resolved for p in self.entities)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'type': {
                'id': self.relationship_type.id,
                'label': self.relationship_type.label,
            },
            'template': self.template,
            'rendered': self.rendered,
            'entities': [participant.to_dict() for participant in self.entities],
        }
