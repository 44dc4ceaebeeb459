"""
Entity pages API
================

Endpoints:
- GET /api/creator/{bbid}
- GET /api/edition/{bbid}
- GET /api/publication/{bbid}
- GET /api/publisher/{bbid}
- GET /api/work/{bbid}

Each runs the entity loader for its kind followed by the relationship
loader, and returns the entity with rendered relationships.
"""

from fastapi import APIRouter, Depends, Request

from middleware.loaders import make_entity_loader, load_entity_relationships
from middleware.pipeline import RequestContext, run_pipeline
from models.entity import CREATOR, EDITION, PUBLICATION, PUBLISHER, WORK

from .dependencies import get_request_context, raise_for_result


router = APIRouter(prefix="/api", tags=["Entities"])

ENTITY_PAGES = {
    'creator': (CREATOR, "Creator not found"),
    'edition': (EDITION, "Edition not found"),
    'publication': (PUBLICATION, "Publication not found"),
    'publisher': (PUBLISHER, "Publisher not found"),
    'work': (WORK, "Work not found"),
}


def _add_entity_route(path_kind: str, kind: str, error_message: str):
    stages = [
        make_entity_loader(kind, error_message),
        load_entity_relationships,
    ]

    async def get_entity(
        bbid: str,
        request: Request,
        ctx: RequestContext = Depends(get_request_context),
    ):
        result = await run_pipeline(stages, request, ctx, bbid)
        raise_for_result(result)
        return {"entity": ctx.entity.to_dict()}

    get_entity.__name__ = f"get_{path_kind}"
    get_entity.__doc__ = f"Get a single {kind} with its rendered relationships"
    router.add_api_route(f"/{path_kind}/{{bbid}}", get_entity, methods=["GET"])


for _path_kind, (_kind, _message) in ENTITY_PAGES.items():
    _add_entity_route(_path_kind, _kind, _message)
