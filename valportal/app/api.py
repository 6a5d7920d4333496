"""FastAPI application serving the multi-tenant resource portal.

Run with ``uvicorn valportal.app.api:app``.
"""

from __future__ import annotations

import re
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Literal
from urllib.parse import urlencode

from fastapi import FastAPI, Form, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import (HTMLResponse, JSONResponse, PlainTextResponse,
                               RedirectResponse)
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ValidationError

from valportal import __version__
from valportal.app.dependencies import (AuthServiceDep, PortalServiceDep,
                                        SettingsDep)
from valportal.app.gateway import PortalGatewayMiddleware, safe_redirect_target
from valportal.infrastructure.observability import (Timer, configure_logging,
                                                    format_prometheus,
                                                    get_logger)
from valportal.infrastructure.observability.metrics import PAGE_RENDER_DURATION
from valportal.infrastructure.rendering import render_markdown
from valportal.infrastructure.security import (SESSION_COOKIE_NAME,
                                               SESSION_LIFETIME)
from valportal.services.auth import (AuthNotConfiguredError,
                                     InvalidAccessCodeError)
from valportal.services.dto import (PortalConfigDTO, ResourceDTO,
                                    SearchResultsDTO)

_logger = get_logger(__name__)

_APP_DIR = Path(__file__).resolve().parent
_DOMAIN_RE = re.compile(r"^[a-z0-9]+$")
_RESERVED_DOMAINS = {"api", "login", "static"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    _logger.info("VAL portal %s starting", __version__)
    yield


app = FastAPI(title="VAL Portal", version=__version__, lifespan=lifespan)
app.add_middleware(PortalGatewayMiddleware)
app.mount("/static", StaticFiles(directory=_APP_DIR / "static"), name="static")

templates = Jinja2Templates(directory=str(_APP_DIR / "templates"))
templates.env.filters["markdown"] = render_markdown


def _require_domain(domain: str) -> str:
    if not _DOMAIN_RE.match(domain) or domain in _RESERVED_DOMAINS:
        raise HTTPException(status_code=404, detail=f"Unknown portal '{domain}'")
    return domain


class LoginRequest(BaseModel):
    password: str = ""


async def _read_login_request(request: Request) -> LoginRequest:
    try:
        body = await request.json()
    except ValueError as exc:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
        ) from exc
    try:
        return LoginRequest.model_validate(body)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Landing page for visitors without an organization path."""
    return templates.TemplateResponse(request, "home.html", {})


@app.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, redirect: str | None = None):
    return templates.TemplateResponse(
        request, "login.html", {"redirect_target": safe_redirect_target(redirect)}
    )


# ---------------------------------------------------------------------------
# Auth API
# ---------------------------------------------------------------------------


@app.post("/api/auth/login")
async def login(request: Request, auth: AuthServiceDep, settings: SettingsDep):
    """Exchange the access code for a session cookie.

    The configuration check comes before the body is read, so an unconfigured
    portal answers 500 whatever was posted.
    """
    try:
        auth.ensure_configured()
        payload = await _read_login_request(request)
        token = auth.login(payload.password)
    except AuthNotConfiguredError as exc:
        return JSONResponse({"error": str(exc)}, status_code=500)
    except InvalidAccessCodeError as exc:
        return JSONResponse({"error": str(exc)}, status_code=401)

    response = JSONResponse({"ok": True})
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=int(SESSION_LIFETIME.total_seconds()),
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.production,
    )
    return response


@app.post("/api/auth/logout")
async def logout():
    response = JSONResponse({"ok": True})
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return response


# ---------------------------------------------------------------------------
# Portal API
# ---------------------------------------------------------------------------


@app.get("/api/metrics", response_class=PlainTextResponse)
async def metrics():
    return PlainTextResponse(
        format_prometheus(), media_type="text/plain; version=0.0.4"
    )


@app.get("/api/{domain}/portal-config")
def get_portal_config(domain: str, service: PortalServiceDep):
    _require_domain(domain)
    config = service.get_portal_config(domain)
    return PortalConfigDTO.from_domain(config).model_dump(by_alias=True)


@app.post("/api/{domain}/portal-config")
def save_portal_config(
    domain: str, payload: PortalConfigDTO, service: PortalServiceDep
):
    _require_domain(domain)
    if not service.save_portal_config(domain, payload.to_domain()):
        return JSONResponse({"error": "Failed to save"}, status_code=500)
    return {"ok": True}


@app.post("/api/{domain}/portal-config/move")
def move_portal_item(
    domain: str,
    service: PortalServiceDep,
    kind: Literal["tab", "section"] = Form(...),
    tab: str = Form(...),
    direction: int = Form(...),
    section: str | None = Form(None),
    solution: str | None = Form(None),
):
    """Arrow buttons of the arrange mode; persists and returns to the page."""
    _require_domain(domain)
    saved = service.move(
        domain, kind=kind, tab=tab, section=section, direction=direction
    )
    params = {"edit": "1", "tab": tab}
    if solution:
        params["solution"] = solution
    if saved is None:
        params["save_failed"] = "1"
    return RedirectResponse(
        f"/{domain}?{urlencode(params)}", status_code=status.HTTP_303_SEE_OTHER
    )


@app.get("/api/{domain}/search", response_model=SearchResultsDTO)
def search_resources(
    domain: str, service: PortalServiceDep, q: str = Query("", max_length=200)
):
    _require_domain(domain)
    results = service.search(domain, q)
    return SearchResultsDTO(
        query=q.strip(), results=[ResourceDTO.from_domain(r) for r in results]
    )


# ---------------------------------------------------------------------------
# Portal page
# ---------------------------------------------------------------------------


@app.get("/{domain}", response_class=HTMLResponse)
def portal_page(
    request: Request,
    domain: str,
    service: PortalServiceDep,
    view: str | None = None,
    tab: str | None = None,
    solution: str | None = None,
    q: str | None = None,
    content: str | None = None,
    doc: str | None = None,
    edit: bool = False,
    save_failed: bool = False,
):
    _require_domain(domain)
    with Timer(PAGE_RENDER_DURATION):
        page = service.build_page(
            domain,
            view=view,
            tab=tab,
            solution=solution,
            query=q,
            content_id=content,
            doc_id=doc,
            edit=edit,
        )
        return templates.TemplateResponse(
            request, "portal.html", {"page": page, "save_failed": save_failed}
        )
