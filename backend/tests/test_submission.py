"""
Tests for edit submission models.
"""

import pytest
from pydantic import ValidationError

from models.api.submission import (
    parse_int, EditionSubmission, PublicationSubmission, SubmissionResponse,
)


@pytest.mark.parametrize("value, expected", [
    ("12", 12),
    (" 7 pages", 7),
    ("-3", -3),
    (3.9, 3),
    (5, 5),
    ("", None),
    ("abc", None),
    (None, None),
    (float("nan"), None),
    (True, None),
])
def test_parse_int(value, expected):
    assert parse_int(value) == expected


def test_edition_form_body():
    submission = EditionSubmission.model_validate({
        "aliases": [{"name": "Dune", "sortName": "Dune", "languageId": "120", "primary": True, "default": True}],
        "publication": "11111111-1111-1111-1111-111111111111",
        "publisher": "",
        "releaseDate": "1965-08-01",
        "languageId": "120",
        "editionFormatId": "2",
        "editionStatusId": "",
        "identifiers": [{"typeId": "9", "value": "9780441013593"}],
        "pages": "412",
        "weight": "NaN",
        "note": "Added from the shelf",
    })

    assert submission.aliases[0].language_id == 120
    assert submission.aliases[0].default is True
    assert submission.publication == "11111111-1111-1111-1111-111111111111"
    assert submission.publisher is None
    assert submission.language_id == 120
    assert submission.edition_format_id == 2
    assert submission.edition_status_id is None
    assert submission.identifiers[0].type_id == 9
    assert submission.pages == 412
    assert submission.weight is None
    assert submission.note == "Added from the shelf"


def test_edition_rejects_malformed_publication_bbid():
    with pytest.raises(ValidationError):
        EditionSubmission.model_validate({"publication": "not-a-bbid"})


def test_publication_form_body():
    submission = PublicationSubmission.model_validate({
        "aliases": [{"name": "Dune"}],
        "publicationTypeId": "1",
        "disambiguation": "novel",
        "identifiers": [],
        "note": "",
    })

    assert submission.publication_type_id == 1
    assert submission.aliases[0].sort_name is None


def test_submission_response_serialises_type_alias():
    response = SubmissionResponse.model_validate(
        {"entity": {"entity_gid": "11111111-1111-1111-1111-111111111111", "_type": "Edition"}}
    )

    assert response.model_dump(by_alias=True) == {
        "entity": {"entity_gid": "11111111-1111-1111-1111-111111111111", "_type": "Edition"}
    }
    assert SubmissionResponse().model_dump(by_alias=True) == {"entity": None}
