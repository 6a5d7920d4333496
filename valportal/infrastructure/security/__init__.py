"""Session token signing and verification."""

from .session_tokens import (ACCESS_CLAIM, SESSION_COOKIE_NAME,
                             SESSION_LIFETIME, InvalidSessionTokenError,
                             is_valid_session_token, issue_session_token,
                             verify_session_token)

__all__ = [
    "ACCESS_CLAIM",
    "SESSION_COOKIE_NAME",
    "SESSION_LIFETIME",
    "InvalidSessionTokenError",
    "is_valid_session_token",
    "issue_session_token",
    "verify_session_token",
]
