"""
JWT session management
"""
from datetime import datetime, timedelta, timezone
from jose import jwt
from config import get_settings


def create_access_token(editor_id: str, name: str) -> str:
    """
    Create JWT access token for an editor

    Returns:
        JWT token string
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)

    payload = {
        "sub": str(editor_id),
        "name": name,
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
        "iat": now,
    }

    return jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def decode_access_token(token: str) -> dict:
    """
    Decode and validate JWT token

    Returns:
        Decoded payload dict

    Raises:
        jose.JWTError if token invalid/expired
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm]
    )
