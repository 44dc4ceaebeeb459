"""
API tests: routes run their pipelines against fake stores.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_request_context, get_revision_provider
from main import app
from middleware.jwt_session import create_access_token
from middleware.pipeline import RequestContext
from models.entity import CREATOR, EDITION, PUBLICATION, Entity, Alias
from models.properties import VocabularyKind, Language, PropertyRecord, IdentifierType
from utils.errors import EntityNotFoundError

from conftest import FakeEntityStore, FakePropertyStore, make_entity, make_relationship


class FakeRevisionRepository:
    def __init__(self, store=None):
        self.store = store
        self.created = []
        self.updated = []

    async def create_edition(self, editor_id, submission):
        self.created.append(("edition", editor_id, submission))
        return Entity(
            bbid="44444444-4444-4444-4444-444444444444",
            entity_type=EDITION,
            default_alias=Alias(name=submission.aliases[0].name),
        )

    async def create_publication(self, editor_id, submission):
        self.created.append(("publication", editor_id, submission))
        return Entity(bbid="55555555-5555-5555-5555-555555555555", entity_type=PUBLICATION)

    async def _update(self, kind, editor_id, bbid, submission):
        existing = self.store.entities.get(bbid) if self.store else None
        if existing is None or existing.entity_type != kind:
            raise EntityNotFoundError(bbid)
        self.updated.append((kind, editor_id, bbid, submission))
        return Entity(bbid=bbid, entity_type=kind)

    async def update_edition(self, editor_id, bbid, submission):
        return await self._update(EDITION, editor_id, bbid, submission)

    async def update_publication(self, editor_id, bbid, submission):
        return await self._update(PUBLICATION, editor_id, bbid, submission)


@pytest.fixture
def catalog():
    creator = make_entity("Frank Herbert", kind=CREATOR)
    edition = make_entity("Dune (1965)", kind=EDITION)
    edition.relationships = [
        make_relationship(1, "{0} wrote {1}", [(1, edition), (0, creator)], label="authored"),
    ]
    store = FakeEntityStore([creator, edition])
    properties = FakePropertyStore({
        VocabularyKind.LANGUAGE: [
            Language(id=1, name="French", frequency=3),
            Language(id=2, name="English", frequency=10),
        ],
        VocabularyKind.EDITION_FORMAT: [PropertyRecord(id=1, label="Paperback")],
        VocabularyKind.EDITION_STATUS: [PropertyRecord(id=1, label="Official")],
        VocabularyKind.PUBLICATION_TYPE: [PropertyRecord(id=1, label="Book")],
        VocabularyKind.IDENTIFIER_TYPE: [IdentifierType(id=9, label="ISBN-13")],
    })
    return {"creator": creator, "edition": edition, "store": store, "properties": properties}


@pytest.fixture
def revisions(catalog):
    return FakeRevisionRepository(catalog["store"])


@pytest.fixture
def client(catalog, revisions):
    async def context_override():
        return RequestContext(
            entity_store=catalog["store"],
            property_store=catalog["properties"],
        )

    async def open_revisions():
        return revisions

    app.dependency_overrides[get_request_context] = context_override
    app.dependency_overrides[get_revision_provider] = lambda: open_revisions
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_edition_page_renders_relationships(client, catalog):
    edition = catalog["edition"]

    response = client.get(f"/api/edition/{edition.bbid}")

    assert response.status_code == 200
    entity = response.json()["entity"]
    assert entity["bbid"] == edition.bbid
    relationship = entity["relationships"][0]
    assert relationship["template"] == "{0} wrote {1}"
    assert [p["position"] for p in relationship["entities"]] == [0, 1]
    assert [p["entity"]["name"] for p in relationship["entities"]] == ["Frank Herbert", "Dune (1965)"]
    assert relationship["rendered"].index("Frank Herbert") < relationship["rendered"].index("Dune (1965)")


def test_unknown_bbid_is_not_found_with_message(client):
    response = client.get("/api/edition/11111111-1111-1111-1111-111111111111")

    assert response.status_code == 404
    assert response.json() == {"detail": "Edition not found"}


def test_malformed_bbid_falls_through(client, catalog):
    response = client.get("/api/edition/not-a-bbid")

    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}
    assert catalog["store"].calls == []


def test_wrong_kind_is_not_found(client, catalog):
    response = client.get(f"/api/publication/{catalog['edition'].bbid}")

    assert response.status_code == 404
    assert response.json() == {"detail": "Publication not found"}


def test_missing_participant_fails_request(client, catalog):
    edition = catalog["edition"]
    ghost = make_entity("ghost")
    edition.relationships.append(
        make_relationship(2, "{0} {1}", [(0, edition), (1, ghost)])
    )

    response = client.get(f"/api/edition/{edition.bbid}")

    assert response.status_code == 404
    assert response.json() == {"detail": f"Entity {ghost.bbid} not found"}


def test_store_failure_is_server_error(client, catalog):
    edition = catalog["edition"]
    catalog["store"].failures[catalog["creator"].bbid] = ConnectionError("db down")

    response = client.get(f"/api/edition/{edition.bbid}")

    assert response.status_code == 500


def test_edition_form_vocabularies(client):
    response = client.get("/api/edition/create")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"identifier_types", "edition_statuses", "edition_formats", "languages"}
    assert [language["name"] for language in body["languages"]] == ["English", "French"]


def test_publication_form_vocabularies(client):
    body = client.get("/api/publication/create").json()

    assert set(body) == {"identifier_types", "publication_types", "languages"}


def test_submit_without_login_returns_no_entity(client, revisions):
    response = client.post("/api/edition/create", json={"aliases": [{"name": "Dune"}], "note": ""})

    assert response.status_code == 200
    assert response.json() == {"entity": None}
    assert revisions.created == []


def test_submit_edition_as_editor(client, revisions):
    client.cookies.set("access_token", create_access_token("7", "editor"))

    response = client.post("/api/edition/create", json={
        "aliases": [{"name": "Dune", "sortName": "Dune", "languageId": "2", "default": True}],
        "languageId": "2",
        "pages": "412",
        "identifiers": [{"typeId": "9", "value": "9780441013593"}],
        "note": "first edition",
    })

    assert response.status_code == 200
    assert response.json() == {
        "entity": {"entity_gid": "44444444-4444-4444-4444-444444444444", "_type": "Edition"}
    }
    kind, editor_id, submission = revisions.created[0]
    assert (kind, editor_id) == ("edition", "7")
    assert submission.pages == 412


def test_submit_publication_as_editor(client, revisions):
    client.cookies.set("access_token", create_access_token("7", "editor"))

    response = client.post("/api/publication/create", json={
        "aliases": [{"name": "Dune"}],
        "publicationTypeId": "1",
        "note": "",
    })

    assert response.json()["entity"]["_type"] == "Publication"
    assert revisions.created[0][0] == "publication"


def test_invalid_token_treated_as_logged_out(client, revisions):
    client.cookies.set("access_token", "garbage")

    response = client.post("/api/publication/create", json={"aliases": [{"name": "Dune"}]})

    assert response.json() == {"entity": None}
    assert revisions.created == []


def test_logged_out_submit_does_not_open_database(client):
    async def database_down():
        raise ConnectionError("db down")

    app.dependency_overrides[get_revision_provider] = lambda: database_down

    response = client.post("/api/edition/create", json={"aliases": [{"name": "Dune"}]})

    assert response.status_code == 200
    assert response.json() == {"entity": None}


def test_logged_in_submit_with_database_down_is_server_error(client):
    async def database_down():
        raise ConnectionError("db down")

    app.dependency_overrides[get_revision_provider] = lambda: database_down
    client.cookies.set("access_token", create_access_token("7", "editor"))

    response = client.post("/api/publication/create", json={"aliases": [{"name": "Dune"}]})

    assert response.status_code == 500


# =============================================================================
# Editing existing entities
# =============================================================================

def test_edition_edit_form_prefills_aliases(client, catalog):
    edition = catalog["edition"]
    edition.aliases = [Alias(name="Dune", id=1), Alias(name="Dune (1965)", sort_name="Dune", id=2)]
    edition.default_alias = edition.aliases[1]

    response = client.get(f"/api/edition/{edition.bbid}/edit")

    assert response.status_code == 200
    body = response.json()
    assert body["entity"]["bbid"] == edition.bbid
    assert [(row["name"], row["default"]) for row in body["aliases"]] == [
        ("Dune", False), ("Dune (1965)", True),
    ]
    assert body["aliases"][1]["sortName"] == "Dune"
    assert {"identifier_types", "edition_statuses", "edition_formats", "languages"} <= set(body)


def test_edit_form_does_not_resolve_relationships(client, catalog):
    edition = catalog["edition"]

    client.get(f"/api/edition/{edition.bbid}/edit")

    assert catalog["store"].calls == [edition.bbid]


def test_publication_edit_form_for_edition_is_not_found(client, catalog):
    response = client.get(f"/api/publication/{catalog['edition'].bbid}/edit")

    assert response.status_code == 404
    assert response.json() == {"detail": "Publication not found"}


def test_edit_form_malformed_bbid_falls_through(client, catalog):
    response = client.get("/api/edition/not-a-bbid/edit")

    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}
    assert catalog["store"].calls == []


def test_edit_edition_as_editor(client, catalog, revisions):
    edition = catalog["edition"]
    client.cookies.set("access_token", create_access_token("7", "editor"))

    response = client.post(f"/api/edition/{edition.bbid}/edit", json={
        "aliases": [{"name": "Dune", "default": True}],
        "pages": "500",
        "note": "fix page count",
    })

    assert response.status_code == 200
    assert response.json() == {"entity": {"entity_gid": edition.bbid, "_type": "Edition"}}
    kind, editor_id, bbid, submission = revisions.updated[0]
    assert (kind, editor_id, bbid) == (EDITION, "7", edition.bbid)
    assert submission.pages == 500
    assert revisions.created == []


def test_edit_without_login_returns_no_entity(client, catalog, revisions):
    response = client.post(
        f"/api/edition/{catalog['edition'].bbid}/edit", json={"aliases": [{"name": "Dune"}]}
    )

    assert response.json() == {"entity": None}
    assert revisions.updated == []


def test_edit_missing_publication_is_not_found(client, revisions):
    client.cookies.set("access_token", create_access_token("7", "editor"))

    response = client.post(
        "/api/publication/11111111-1111-1111-1111-111111111111/edit",
        json={"aliases": [{"name": "Dune"}]},
    )

    assert response.status_code == 404
    assert response.json() == {"detail": "Publication not found"}


def test_edit_malformed_bbid_is_plain_not_found(client, revisions):
    client.cookies.set("access_token", create_access_token("7", "editor"))

    response = client.post("/api/edition/NOT-A-BBID/edit", json={"aliases": [{"name": "Dune"}]})

    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}
    assert revisions.updated == []
