from __future__ import annotations

from typing import Any

from jose import JWTError, jwt

from core.config import settings
from core.errors import AuthenticationError

ALGO = "HS256"


def decode_token(tok: str) -> dict[str, Any]:
    return jwt.decode(
        tok,
        settings.SUPABASE_JWT_SECRET,
        algorithms=[ALGO],
        audience=settings.JWT_AUDIENCE,
    )


def user_id_from_token(tok: str) -> str:
    """Return the Supabase user id (``sub``) carried by an access token."""
    try:
        payload = decode_token(tok)
    except JWTError as e:
        raise AuthenticationError("invalid or expired token") from e
    sub = payload.get("sub")
    if not sub:
        raise AuthenticationError("token has no subject")
    return sub
