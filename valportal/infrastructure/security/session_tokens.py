"""Signed session tokens for the portal cookie.

Tokens are HS256 JWTs issued and verified with PyJWT. The payload only
asserts portal access; there are no user identities.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

SESSION_COOKIE_NAME = "portal_session"
SESSION_LIFETIME = timedelta(hours=8)
SESSION_ALGORITHM = "HS256"
ACCESS_CLAIM = "portal"


class InvalidSessionTokenError(Exception):
    """Raised when a session token is expired, tampered with or malformed."""


def issue_session_token(
    secret: str,
    *,
    now: datetime | None = None,
    lifetime: timedelta = SESSION_LIFETIME,
) -> str:
    """Create a signed session token valid for ``lifetime``."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "access": ACCESS_CLAIM,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(payload, secret, algorithm=SESSION_ALGORITHM)


def verify_session_token(token: str, secret: str) -> dict[str, Any]:
    """Verify signature and expiry of ``token`` and return its claims."""
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[SESSION_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.InvalidTokenError as exc:
        raise InvalidSessionTokenError(str(exc)) from exc


def is_valid_session_token(token: str | None, secret: str) -> bool:
    if not token:
        return False
    try:
        verify_session_token(token, secret)
    except InvalidSessionTokenError:
        return False
    return True
