"""Runtime settings for the portal web app.

Secrets come from the environment and are read on every call so a rotated
secret takes effect without a restart. Host, display-name and database path
settings come from ``config.json``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from valportal.infrastructure.db import (get_domain_name_overrides,
                                         get_frame_host_template,
                                         get_path_config)

JWT_SECRET_ENV = "PORTAL_JWT_SECRET"
ACCESS_CODE_ENV = "PORTAL_ACCESS_CODE"
ENVIRONMENT_ENV = "PORTAL_ENV"


def _env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass(frozen=True)
class PortalSettings:
    jwt_secret: str | None = None
    access_code: str | None = None
    production: bool = False
    frame_host_template: str = "https://{domain}.thinkval.io"
    domain_names: Dict[str, str] = field(default_factory=dict)
    db_path: Path | None = None

    @property
    def auth_enabled(self) -> bool:
        return self.jwt_secret is not None


def get_settings(config_path: Path | str | None = None) -> PortalSettings:
    """Build settings from the environment and the project configuration."""

    return PortalSettings(
        jwt_secret=_env(JWT_SECRET_ENV),
        access_code=_env(ACCESS_CODE_ENV),
        production=(_env(ENVIRONMENT_ENV) or "").lower() == "production",
        frame_host_template=get_frame_host_template(config_path),
        domain_names=get_domain_name_overrides(config_path),
        db_path=get_path_config(config_path)["db_path"],
    )


__all__ = [
    "ACCESS_CODE_ENV",
    "ENVIRONMENT_ENV",
    "JWT_SECRET_ENV",
    "PortalSettings",
    "get_settings",
]
