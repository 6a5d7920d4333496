"""Edge gateway for portal pages.

Every request passes through :func:`evaluate_request` before routing. Pages
embedded by a tenant's platform (``Sec-Fetch-Dest: iframe``) are served
without a session, scoped by a ``frame-ancestors`` policy; direct navigation
needs a valid ``portal_session`` cookie and is otherwise sent to ``/login``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from valportal.app.config import PortalSettings, get_settings
from valportal.domain.models.tenant import get_domain_info
from valportal.infrastructure.db import DEFAULT_FRAME_HOST_TEMPLATE
from valportal.infrastructure.observability import (get_logger,
                                                    record_gateway_decision)
from valportal.infrastructure.security import (SESSION_COOKIE_NAME,
                                               is_valid_session_token)

_logger = get_logger(__name__)

LOGIN_PATH = "/login"
CSP_HEADER = "Content-Security-Policy"

_PASSTHROUGH_PREFIXES = ("/api/", "/static/", "/favicon")
_DOMAIN_PATH_RE = re.compile(r"^/([a-z0-9]+)$")

# Decision reasons, also used as metric labels.
REASON_PASSTHROUGH = "passthrough"
REASON_AUTH_DISABLED = "auth-disabled"
REASON_IFRAME = "iframe"
REASON_SESSION = "session"
REASON_INVALID_SESSION = "invalid-session"
REASON_MISSING_SESSION = "missing-session"


@dataclass(frozen=True)
class GatewayDecision:
    allowed: bool
    reason: str
    domain: str | None = None
    content_security_policy: str | None = None
    redirect_to: str | None = None
    clear_session: bool = False


def is_passthrough_path(path: str) -> bool:
    return path == LOGIN_PATH or path.startswith(_PASSTHROUGH_PREFIXES)


def extract_domain(path: str) -> str | None:
    """Return the tenant domain for paths of the form ``/<domain>``."""
    match = _DOMAIN_PATH_RE.match(path)
    return match.group(1) if match else None


def frame_ancestors_policy(
    domain: str | None, host_template: str = DEFAULT_FRAME_HOST_TEMPLATE
) -> str:
    if domain is None:
        return "frame-ancestors 'none'"
    origin = get_domain_info(domain, host_template=host_template).base_url
    return f"frame-ancestors 'self' {origin}"


def login_redirect_target(path: str) -> str:
    return f"{LOGIN_PATH}?{urlencode({'redirect': path})}"


def safe_redirect_target(target: str | None) -> str:
    """Only same-site absolute paths are followed after login."""
    if not target or not target.startswith("/") or target.startswith(("//", "/\\")):
        return "/"
    return target


def evaluate_request(
    *,
    path: str,
    fetch_dest: str | None,
    session_token: str | None,
    secret: str | None,
    frame_host_template: str = DEFAULT_FRAME_HOST_TEMPLATE,
) -> GatewayDecision:
    """Decide whether a request may reach the app."""
    if is_passthrough_path(path):
        return GatewayDecision(allowed=True, reason=REASON_PASSTHROUGH)

    domain = extract_domain(path)
    csp = frame_ancestors_policy(domain, frame_host_template)

    def allow(reason: str) -> GatewayDecision:
        return GatewayDecision(
            allowed=True, reason=reason, domain=domain, content_security_policy=csp
        )

    if not secret:
        return allow(REASON_AUTH_DISABLED)
    if fetch_dest == "iframe":
        return allow(REASON_IFRAME)
    if session_token:
        if is_valid_session_token(session_token, secret):
            return allow(REASON_SESSION)
        return GatewayDecision(
            allowed=False,
            reason=REASON_INVALID_SESSION,
            domain=domain,
            redirect_to=login_redirect_target(path),
            clear_session=True,
        )
    return GatewayDecision(
        allowed=False,
        reason=REASON_MISSING_SESSION,
        domain=domain,
        redirect_to=login_redirect_target(path),
    )


class PortalGatewayMiddleware(BaseHTTPMiddleware):
    """Apply :func:`evaluate_request` to every incoming request."""

    def __init__(
        self,
        app: ASGIApp,
        settings_provider: Callable[[], PortalSettings] = get_settings,
    ) -> None:
        super().__init__(app)
        self._settings_provider = settings_provider

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        settings = self._settings_provider()
        decision = evaluate_request(
            path=request.url.path,
            fetch_dest=request.headers.get("sec-fetch-dest"),
            session_token=request.cookies.get(SESSION_COOKIE_NAME),
            secret=settings.jwt_secret,
            frame_host_template=settings.frame_host_template,
        )
        if decision.reason == REASON_PASSTHROUGH:
            return await call_next(request)

        record_gateway_decision(decision.reason, decision.allowed)
        if not decision.allowed:
            _logger.info(
                "Redirecting %s to login (%s)", request.url.path, decision.reason
            )
            response = RedirectResponse(decision.redirect_to or LOGIN_PATH, status_code=307)
            if decision.clear_session:
                response.delete_cookie(SESSION_COOKIE_NAME, path="/")
            return response

        response = await call_next(request)
        if decision.content_security_policy:
            response.headers[CSP_HEADER] = decision.content_security_policy
        return response


__all__ = [
    "CSP_HEADER",
    "GatewayDecision",
    "LOGIN_PATH",
    "PortalGatewayMiddleware",
    "evaluate_request",
    "extract_domain",
    "frame_ancestors_policy",
    "is_passthrough_path",
    "login_redirect_target",
    "safe_redirect_target",
]
