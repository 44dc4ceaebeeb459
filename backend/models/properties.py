"""
Reference vocabulary models

Vocabularies are the fixed value lists typed fields pick from
(languages, edition formats, identifier types, ...).
"""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional


class VocabularyKind(str, Enum):
    """Vocabularies known to the property store"""
    CREATOR_TYPE = 'creator_type'
    EDITION_FORMAT = 'edition_format'
    EDITION_STATUS = 'edition_status'
    GENDER = 'gender'
    IDENTIFIER_TYPE = 'identifier_type'
    LANGUAGE = 'language'
    PUBLICATION_TYPE = 'publication_type'
    PUBLISHER_TYPE = 'publisher_type'
    WORK_TYPE = 'work_type'


@dataclass
class PropertyRecord:
    """Generic labelled vocabulary entry (types, formats, statuses)"""
    id: int
    label: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Gender:
    id: int
    name: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Language:
    """
    Language vocabulary entry

    frequency: how often the language is used across the catalog; the
    edit forms list frequent languages first.
    """
    id: int
    name: str
    frequency: int = 0
    iso_code: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class IdentifierType:
    id: int
    label: str
    entity_type: Optional[str] = None
    detection_regex: Optional[str] = None
    validation_regex: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)
