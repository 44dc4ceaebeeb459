"""
Entity domain model
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, TYPE_CHECKING

from utils.id_generator import is_bbid

if TYPE_CHECKING:
    from .relationships import Relationship


# Entity kinds served by the catalog
CREATOR = 'Creator'
EDITION = 'Edition'
PUBLICATION = 'Publication'
PUBLISHER = 'Publisher'
WORK = 'Work'

ENTITY_KINDS = (CREATOR, EDITION, PUBLICATION, PUBLISHER, WORK)


@dataclass
class Alias:
    """A name an entity is known by"""
    name: str
    sort_name: Optional[str] = None
    language_id: Optional[int] = None
    primary: bool = False
    id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'sort_name': self.sort_name,
            'language_id': self.language_id,
            'primary': self.primary,
        }


@dataclass
class Identifier:
    """External identifier (ISBN, Wikidata QID, ...) attached to an entity"""
    type_id: int
    value: str
    id: Optional[int] = None

    def to_dict(self) -> dict:
        return {'id': self.id, 'type_id': self.type_id, 'value': self.value}


@dataclass
class Entity:
    """
    Entity domain model - storage-agnostic representation

    Represents a cataloged bibliographic object (Creator, Edition,
    Publication, Publisher, Work).

    ID format: BBID (lowercase UUID string)

    Fields other than bbid/entity_type/default_alias are only filled when
    the loader asked the store to populate them.
    """
    bbid: str
    entity_type: str  # one of ENTITY_KINDS

    default_alias: Optional[Alias] = None
    annotation: Optional[str] = None
    disambiguation: Optional[str] = None

    aliases: List[Alias] = field(default_factory=list)
    identifiers: List[Identifier] = field(default_factory=list)
    relationships: List['Relationship'] = field(default_factory=list)

    # Kind-specific scalar data (release_date, pages, publication_type_id, ...)
    data: Dict[str, Any] = field(default_factory=dict)

    # Kind-specific links
    publication: Optional['Entity'] = None
    publisher: Optional['Entity'] = None
    editions: List['Entity'] = field(default_factory=list)

    def __post_init__(self):
        """Normalise BBID to lowercase and check the kind"""
        if self.bbid:
            self.bbid = self.bbid.lower()
            if not is_bbid(self.bbid):
                raise ValueError(f"Invalid BBID: {self.bbid}")
        if self.entity_type not in ENTITY_KINDS:
            raise ValueError(f"Invalid entity type: {self.entity_type}. "
                             f"Must be one of: {list(ENTITY_KINDS)}")

    @property
    def name(self) -> str:
        """Display name: default alias, falling back to the BBID"""
        if self.default_alias and self.default_alias.name:
            return self.default_alias.name
        return self.bbid

    @property
    def path(self) -> str:
        """Site path of this entity, e.g. /edition/<bbid>"""
        return f"/{self.entity_type.lower()}/{self.bbid}"

    def to_reference(self) -> dict:
        """Minimal reference returned after an edit"""
        return {'entity_gid': self.bbid, '_type': self.entity_type}

    def to_dict(self) -> dict:
        """Serialise for API responses"""
        result = {
            'bbid': self.bbid,
            'type': self.entity_type,
            'name': self.name,
            'default_alias': self.default_alias.to_dict() if self.default_alias else None,
            'annotation': self.annotation,
            'disambiguation': self.disambiguation,
            'aliases': [alias.to_dict() for alias in self.aliases],
            'identifiers': [identifier.to_dict() for identifier in self.identifiers],
            'relationships': [rel.to_dict() for rel in self.relationships],
            'data': dict(self.data),
        }
        if self.entity_type == EDITION:
            result['publication'] = self.publication.summary() if self.publication else None
            result['publisher'] = self.publisher.summary() if self.publisher else None
        if self.entity_type in (PUBLICATION, PUBLISHER):
            result['editions'] = [edition.summary() for edition in self.editions]
        return result

    def form_aliases(self) -> List[dict]:
        """Aliases as the edit form rows, the default alias flagged"""
        default_id = self.default_alias.id if self.default_alias else None
        return [
            {
                'name': alias.name,
                'sortName': alias.sort_name,
                'languageId': alias.language_id,
                'primary': alias.primary,
                'default': alias.id is not None and alias.id == default_id,
            }
            for alias in self.aliases
        ]

    def summary(self) -> dict:
        """Short form used when this entity appears inside another"""
        return {'bbid': self.bbid, 'type': self.entity_type, 'name': self.name}
