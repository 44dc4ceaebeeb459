"""
Utility functions
"""
from .id_generator import BBID_PATTERN, is_bbid, generate_bbid
from .errors import (
    CatalogError,
    NotFoundError,
    EntityNotFoundError,
    PipelineOrderError,
    RenderError,
)

__all__ = [
    'BBID_PATTERN',
    'is_bbid',
    'generate_bbid',
    'CatalogError',
    'NotFoundError',
    'EntityNotFoundError',
    'PipelineOrderError',
    'RenderError',
]
