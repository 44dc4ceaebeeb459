"""
Pydantic models for entity edit submissions

Bodies are posted by the Edition and Publication forms. Numeric fields
arrive as strings from form inputs; blank or non-numeric values mean
"not set".
"""

import re
from typing import Optional, List, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.id_generator import is_bbid

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def parse_int(value: Any) -> Optional[int]:
    """
    Lenient integer parsing for form values.

    "12" -> 12, " 7 pages" -> 7, 3.9 -> 3, "" / "abc" / None -> None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float('inf'), float('-inf')):
            return None
        return int(value)
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


class _FormModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AliasInput(_FormModel):
    """Alias row from the aliases tab"""
    name: str
    sort_name: Optional[str] = Field(None, alias="sortName")
    language_id: Optional[int] = Field(None, alias="languageId")
    primary: bool = False
    default: bool = False

    @field_validator('language_id', mode='before')
    @classmethod
    def coerce_language(cls, v):
        return parse_int(v)


class IdentifierInput(_FormModel):
    """Identifier row (ISBN, Wikidata QID, ...)"""
    type_id: Optional[int] = Field(None, alias="typeId")
    value: str

    @field_validator('type_id', mode='before')
    @classmethod
    def coerce_type(cls, v):
        return parse_int(v)


class EditionSubmission(_FormModel):
    """Request model for creating an Edition"""
    aliases: List[AliasInput] = []
    publication: Optional[str] = None  # BBID
    publisher: Optional[str] = None  # BBID
    release_date: Optional[str] = Field(None, alias="releaseDate")
    language_id: Optional[int] = Field(None, alias="languageId")
    edition_format_id: Optional[int] = Field(None, alias="editionFormatId")
    edition_status_id: Optional[int] = Field(None, alias="editionStatusId")
    disambiguation: Optional[str] = None
    annotation: Optional[str] = None
    identifiers: List[IdentifierInput] = []
    pages: Optional[int] = None
    weight: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    depth: Optional[int] = None
    note: str = ""

    @field_validator(
        'language_id', 'edition_format_id', 'edition_status_id',
        'pages', 'weight', 'width', 'height', 'depth',
        mode='before',
    )
    @classmethod
    def coerce_ints(cls, v):
        return parse_int(v)

    @field_validator('release_date', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('publication', 'publisher', mode='before')
    @classmethod
    def check_bbid(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if not is_bbid(str(v).strip().lower()):
            raise ValueError(f"{v!r} is not a valid BBID")
        return str(v).strip().lower()


class PublicationSubmission(_FormModel):
    """Request model for creating a Publication"""
    aliases: List[AliasInput] = []
    publication_type_id: Optional[int] = Field(None, alias="publicationTypeId")
    disambiguation: Optional[str] = None
    annotation: Optional[str] = None
    identifiers: List[IdentifierInput] = []
    note: str = ""

    @field_validator('publication_type_id', mode='before')
    @classmethod
    def coerce_type(cls, v):
        return parse_int(v)


class EntityReference(_FormModel):
    """Reference to the entity an edit created"""
    entity_gid: str
    entity_type: str = Field(alias="_type")


class SubmissionResponse(BaseModel):
    """
    Response to an edit submission.

    entity is null when nobody is logged in; the form then sends the
    browser to /login.
    """
    entity: Optional[EntityReference] = None
