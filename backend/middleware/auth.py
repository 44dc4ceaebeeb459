"""
Editor authentication dependencies

Edits are attributed to the logged-in editor, identified by the JWT in
the access_token cookie.
"""

from fastapi import Request
from jose import JWTError
from typing import Optional

from .jwt_session import decode_access_token


class EditorPublic:
    """Minimal editor info from JWT token"""
    def __init__(self, editor_id: str, name: str):
        self.editor_id = editor_id
        self.name = name


async def get_current_editor_optional(request: Request) -> Optional[EditorPublic]:
    """
    Get current editor from JWT token (optional - doesn't raise if not authenticated)

    Returns:
        EditorPublic if authenticated, None otherwise
    """
    token = request.cookies.get("access_token")

    if not token:
        return None

    try:
        payload = decode_access_token(token)
    except JWTError:
        return None

    editor_id = payload.get("sub")
    if not editor_id:
        return None

    return EditorPublic(editor_id=str(editor_id), name=payload.get("name") or "")
