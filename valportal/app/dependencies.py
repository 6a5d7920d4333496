"""Shared FastAPI dependencies for the portal application."""

from __future__ import annotations

import sqlite3
from typing import Annotated, Iterator

from fastapi import Depends

from valportal.app.config import PortalSettings, get_settings
from valportal.infrastructure.db import (DatabaseError, connect, ensure_schema,
                                         open_empty_catalog)
from valportal.infrastructure.db.repositories import (DocRepository,
                                                      PortalConfigRepository,
                                                      ResourceRepository)
from valportal.infrastructure.observability import get_logger, log_exception
from valportal.services.auth import AuthService
from valportal.services.portal import PortalService

__all__ = [
    "get_db_connection",
    "get_settings_dependency",
    "get_resource_repository",
    "get_portal_config_repository",
    "get_doc_repository",
    "get_portal_service",
    "get_auth_service",
    "SettingsDep",
    "ResourceRepositoryDep",
    "PortalConfigRepositoryDep",
    "DocRepositoryDep",
    "PortalServiceDep",
    "AuthServiceDep",
]

_logger = get_logger(__name__)


def get_settings_dependency() -> PortalSettings:
    return get_settings()


SettingsDep = Annotated[PortalSettings, Depends(get_settings_dependency)]


def get_db_connection(settings: SettingsDep) -> Iterator[sqlite3.Connection]:
    """Provide a SQLite connection with the required schema ensured.

    Uses check_same_thread=False because FastAPI may resolve the dependency
    and run the endpoint on different threads. While the database cannot be
    opened an empty read-only catalog is served instead, so pages fall back
    to empty results and saves report a failure.
    """

    conn: sqlite3.Connection | None = None
    try:
        conn = connect(settings.db_path, check_same_thread=False)
        ensure_schema(conn)
    except (DatabaseError, sqlite3.Error) as exc:
        if conn is not None:
            conn.close()
        log_exception(
            _logger, "Portal database unavailable", exc, db_path=settings.db_path
        )
        conn = open_empty_catalog(check_same_thread=False)
    try:
        yield conn
    finally:
        conn.close()


def get_resource_repository(
    conn: sqlite3.Connection = Depends(get_db_connection),
) -> ResourceRepository:
    return ResourceRepository(conn)


def get_portal_config_repository(
    conn: sqlite3.Connection = Depends(get_db_connection),
) -> PortalConfigRepository:
    return PortalConfigRepository(conn)


def get_doc_repository(
    conn: sqlite3.Connection = Depends(get_db_connection),
) -> DocRepository:
    return DocRepository(conn)


ResourceRepositoryDep = Annotated[ResourceRepository, Depends(get_resource_repository)]
PortalConfigRepositoryDep = Annotated[
    PortalConfigRepository, Depends(get_portal_config_repository)
]
DocRepositoryDep = Annotated[DocRepository, Depends(get_doc_repository)]


def get_portal_service(
    resources: ResourceRepositoryDep,
    configs: PortalConfigRepositoryDep,
    docs: DocRepositoryDep,
    settings: SettingsDep,
) -> PortalService:
    return PortalService(
        resources,
        configs,
        docs,
        host_template=settings.frame_host_template,
        domain_names=settings.domain_names,
    )


def get_auth_service(settings: SettingsDep) -> AuthService:
    return AuthService(secret=settings.jwt_secret, access_code=settings.access_code)


PortalServiceDep = Annotated[PortalService, Depends(get_portal_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
