"""Access-code login for the portal.

Route handlers only talk to ``AuthService``: it checks the shared access
code and hands out a signed session token. Token signing is delegated to
``valportal.infrastructure.security``.
"""

from __future__ import annotations

import hmac
from datetime import datetime

from valportal.infrastructure.observability import get_logger, record_login_attempt
from valportal.infrastructure.security import issue_session_token

_logger = get_logger(__name__)


class AuthError(Exception):
    """Base class for login failures."""


class AuthNotConfiguredError(AuthError):
    """Raised when the JWT secret or the access code is not configured."""


class InvalidAccessCodeError(AuthError):
    """Raised when the submitted access code does not match."""


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AuthService:
    def __init__(self, *, secret: str | None, access_code: str | None) -> None:
        self._secret = _clean(secret)
        self._access_code = _clean(access_code)

    @property
    def is_configured(self) -> bool:
        return self._secret is not None and self._access_code is not None

    def ensure_configured(self) -> None:
        if not self.is_configured:
            _logger.error("Login attempted but portal auth is not configured")
            record_login_attempt("not_configured")
            raise AuthNotConfiguredError("Auth not configured")

    def login(self, password: str | None, *, now: datetime | None = None) -> str:
        """Check ``password`` against the access code and return a session token."""
        self.ensure_configured()

        if not hmac.compare_digest(
            (password or "").encode("utf-8"), self._access_code.encode("utf-8")
        ):
            _logger.warning("Rejected login with invalid access code")
            record_login_attempt("invalid")
            raise InvalidAccessCodeError("Invalid access code")

        record_login_attempt("success")
        _logger.info("Issued portal session")
        return issue_session_token(self._secret, now=now)
