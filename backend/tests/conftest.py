"""
Pytest configuration and shared fakes for catalog tests.

FakeEntityStore stands in for EntityRepository: lookups can be delayed
per BBID to force out-of-order completion, or made to fail.
"""

import asyncio
import uuid

from models.entity import Entity, Alias, WORK
from models.relationships import Relationship, RelationshipType, RelationshipParticipant
from utils.errors import EntityNotFoundError


def make_entity(name: str, kind: str = WORK, bbid: str = None) -> Entity:
    return Entity(
        bbid=bbid or str(uuid.uuid4()),
        entity_type=kind,
        default_alias=Alias(name=name),
    )


def make_relationship(rel_id: int, template: str, participants, label: str = "related") -> Relationship:
    """participants: list of (position, entity) pairs"""
    return Relationship(
        id=rel_id,
        relationship_type=RelationshipType(id=rel_id * 10, label=label, template=template),
        entities=[
            RelationshipParticipant(position=position, entity_bbid=entity.bbid)
            for position, entity in participants
        ],
    )


class FakeEntityStore:
    """In-memory entity store with per-BBID latency and failures"""

    def __init__(self, entities=(), delays=None, failures=None):
        self.entities = {entity.bbid: entity for entity in entities}
        self.delays = delays or {}
        self.failures = failures or {}
        self.calls = []
        self.completed = []
        self.cancelled = []
        self.populate_requests = []

    def add(self, *entities):
        for entity in entities:
            self.entities[entity.bbid] = entity

    async def find_by_bbid(self, bbid: str) -> Entity:
        self.calls.append(bbid)
        try:
            await asyncio.sleep(self.delays.get(bbid, 0))
        except asyncio.CancelledError:
            self.cancelled.append(bbid)
            raise

        if bbid in self.failures:
            raise self.failures[bbid]
        if bbid not in self.entities:
            raise EntityNotFoundError(bbid)

        self.completed.append(bbid)
        return self.entities[bbid]

    async def find_one(self, bbid: str, populate=()) -> Entity:
        self.populate_requests.append((bbid, list(populate)))
        return await self.find_by_bbid(bbid)


class FakePropertyStore:
    """Vocabulary store returning fixed lists and counting fetches"""

    def __init__(self, vocabularies=None):
        self.vocabularies = vocabularies or {}
        self.fetches = []

    async def find(self, kind):
        self.fetches.append(kind)
        return list(self.vocabularies.get(kind, []))
