"""
Catalog exceptions

Every error carries the HTTP status the API layer should answer with.
Storage I/O errors (asyncpg) are not wrapped and propagate unchanged.
"""


class CatalogError(Exception):
    """Base class for errors the API layer knows how to answer."""
    status_code = 500

    def __init__(self, message: str = "Internal error"):
        super().__init__(message)
        self.message = message


class NotFoundError(CatalogError):
    """A requested resource does not exist. Carries a caller-facing message."""
    status_code = 404

    def __init__(self, message: str = "Page not found"):
        super().__init__(message)


class EntityNotFoundError(CatalogError):
    """Raised by the entity store when a BBID has no record."""
    status_code = 404

    def __init__(self, bbid: str):
        super().__init__(f"Entity {bbid} not found")
        self.bbid = bbid


class PipelineOrderError(CatalogError):
    """A pipeline stage ran before the stage that satisfies its precondition."""
    pass


class RenderError(CatalogError):
    """A relationship template does not fit its participants."""
    pass
