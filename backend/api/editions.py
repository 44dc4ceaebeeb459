"""
Edition editing API

Endpoints:
- GET /api/edition/create - vocabularies the Edition form needs
- POST /api/edition/create - create an Edition
- GET /api/edition/{bbid}/edit - the Edition to prefill the form, plus vocabularies
- POST /api/edition/{bbid}/edit - edit an Edition
"""

from fastapi import APIRouter, Depends, Request
from typing import Optional

from middleware.auth import EditorPublic, get_current_editor_optional
from middleware.loaders import (
    load_identifier_types, load_edition_statuses, load_edition_formats, load_languages,
    make_entity_loader,
)
from middleware.pipeline import RequestContext, run_pipeline
from models.api.submission import EditionSubmission, SubmissionResponse
from models.entity import EDITION
from utils.errors import EntityNotFoundError, NotFoundError

from .dependencies import (
    get_request_context, get_revision_provider, raise_for_result, check_bbid_route,
)


router = APIRouter(prefix="/api/edition", tags=["Editions"])

NOT_FOUND = "Edition not found"

FORM_STAGES = [
    load_identifier_types,
    load_edition_statuses,
    load_edition_formats,
    load_languages,
]

EDIT_STAGES = [make_entity_loader(EDITION, NOT_FOUND)] + FORM_STAGES


@router.get("/create")
async def edition_form(request: Request, ctx: RequestContext = Depends(get_request_context)):
    """Vocabularies for the Edition form's drop-downs"""
    result = await run_pipeline(FORM_STAGES, request, ctx)
    raise_for_result(result)
    return ctx.vocabularies()


@router.post("/create", response_model=SubmissionResponse)
async def create_edition(
    submission: EditionSubmission,
    editor: Optional[EditorPublic] = Depends(get_current_editor_optional),
    open_revisions=Depends(get_revision_provider),
):
    """
    Create an Edition.

    Returns {"entity": null} when no editor is logged in; the form sends
    the browser to /login.
    """
    if editor is None:
        return {"entity": None}

    revisions = await open_revisions()
    entity = await revisions.create_edition(editor.editor_id, submission)
    return {"entity": entity.to_reference()}


@router.get("/{bbid}/edit")
async def edition_edit_form(
    bbid: str,
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
):
    """The Edition with its form aliases, plus the form's vocabularies"""
    result = await run_pipeline(EDIT_STAGES, request, ctx, bbid)
    raise_for_result(result)
    return {
        "entity": ctx.entity.to_dict(),
        "aliases": ctx.entity.form_aliases(),
        **ctx.vocabularies(),
    }


@router.post("/{bbid}/edit", response_model=SubmissionResponse)
async def edit_edition(
    bbid: str,
    submission: EditionSubmission,
    editor: Optional[EditorPublic] = Depends(get_current_editor_optional),
    open_revisions=Depends(get_revision_provider),
):
    """Edit an Edition; {"entity": null} when nobody is logged in."""
    check_bbid_route(bbid)
    if editor is None:
        return {"entity": None}

    revisions = await open_revisions()
    try:
        entity = await revisions.update_edition(editor.editor_id, bbid, submission)
    except EntityNotFoundError:
        raise NotFoundError(NOT_FOUND)
    return {"entity": entity.to_reference()}
