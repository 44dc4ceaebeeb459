"""
Publication editing API

Endpoints:
- GET /api/publication/create - vocabularies the Publication form needs
- POST /api/publication/create - create a Publication
- GET /api/publication/{bbid}/edit - the Publication to prefill the form, plus vocabularies
- POST /api/publication/{bbid}/edit - edit a Publication
"""

from fastapi import APIRouter, Depends, Request
from typing import Optional

from middleware.auth import EditorPublic, get_current_editor_optional
from middleware.loaders import (
    load_identifier_types, load_publication_types, load_languages, make_entity_loader,
)
from middleware.pipeline import RequestContext, run_pipeline
from models.api.submission import PublicationSubmission, SubmissionResponse
from models.entity import PUBLICATION
from utils.errors import EntityNotFoundError, NotFoundError

from .dependencies import (
    get_request_context, get_revision_provider, raise_for_result, check_bbid_route,
)


router = APIRouter(prefix="/api/publication", tags=["Publications"])

NOT_FOUND = "Publication not found"

FORM_STAGES = [
    load_identifier_types,
    load_publication_types,
    load_languages,
]

EDIT_STAGES = [make_entity_loader(PUBLICATION, NOT_FOUND)] + FORM_STAGES


@router.get("/create")
async def publication_form(request: Request, ctx: RequestContext = Depends(get_request_context)):
    """Vocabularies for the Publication form's drop-downs"""
    result = await run_pipeline(FORM_STAGES, request, ctx)
    raise_for_result(result)
    return ctx.vocabularies()


@router.post("/create", response_model=SubmissionResponse)
async def create_publication(
    submission: PublicationSubmission,
    editor: Optional[EditorPublic] = Depends(get_current_editor_optional),
    open_revisions=Depends(get_revision_provider),
):
    """Create a Publication; {"entity": null} when nobody is logged in."""
    if editor is None:
        return {"entity": None}

    revisions = await open_revisions()
    entity = await revisions.create_publication(editor.editor_id, submission)
    return {"entity": entity.to_reference()}


@router.get("/{bbid}/edit")
async def publication_edit_form(
    bbid: str,
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
):
    """The Publication with its form aliases, plus the form's vocabularies"""
    result = await run_pipeline(EDIT_STAGES, request, ctx, bbid)
    raise_for_result(result)
    return {
        "entity": ctx.entity.to_dict(),
        "aliases": ctx.entity.form_aliases(),
        **ctx.vocabularies(),
    }


@router.post("/{bbid}/edit", response_model=SubmissionResponse)
async def edit_publication(
    bbid: str,
    submission: PublicationSubmission,
    editor: Optional[EditorPublic] = Depends(get_current_editor_optional),
    open_revisions=Depends(get_revision_provider),
):
    """Edit a Publication; {"entity": null} when nobody is logged in."""
    check_bbid_route(bbid)
    if editor is None:
        return {"entity": None}

    revisions = await open_revisions()
    try:
        entity = await revisions.update_publication(editor.editor_id, bbid, submission)
    except EntityNotFoundError:
        raise NotFoundError(NOT_FOUND)
    return {"entity": entity.to_reference()}
