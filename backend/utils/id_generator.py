"""
BBID helpers for catalog entities.

Every entity is addressed by a BBID: a lowercase UUID string
(8-4-4-4-12 hex groups, hyphen separated), e.g.
    df21cbf9-6ba2-460f-9c91-d28dbd4b2037
"""
import re
import uuid

# Canonical BBID format (lowercase hex only)
BBID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$'
)


def is_bbid(id_str: str) -> bool:
    """
    Check if a string is a well-formed BBID.

    Args:
        id_str: String to validate

    Returns:
        True if valid, False otherwise
    """
    if not id_str or not isinstance(id_str, str):
        return False
    return bool(BBID_PATTERN.match(id_str))


def generate_bbid() -> str:
    """Generate a new random BBID"""
    return str(uuid.uuid4())
