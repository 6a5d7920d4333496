from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

DEFAULT_DB_TIMEOUT = 30.0
DEFAULT_FRAME_HOST_TEMPLATE = "https://{domain}.thinkval.io"

_REPO_ROOT = Path(__file__).resolve().parents[3]
_CONFIG_FILE = _REPO_ROOT / "config.json"


def load_config(config_path: Path | str | None = None) -> Dict[str, Any]:
    """Load ``config.json`` if present and return it as a dictionary."""

    path = Path(config_path) if config_path is not None else _CONFIG_FILE
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def get_config(config_path: Path | str | None = None) -> Dict[str, Any]:
    """Return the loaded project configuration as a dictionary."""

    return load_config(config_path)


def get_path_config(config_path: Path | str | None = None) -> Dict[str, Path]:
    """Return resolved filesystem paths from the project configuration."""

    cfg = load_config(config_path)
    root = Path(config_path).parent if config_path is not None else _CONFIG_FILE.parent
    defaults = {
        "db_path": root / "portal.db",
    }
    paths_cfg = cfg.get("paths", {}) if isinstance(cfg.get("paths", {}), dict) else {}
    resolved: Dict[str, Path] = {}
    for key, default_value in defaults.items():
        raw_value = paths_cfg.get(key, default_value)
        resolved_value = Path(raw_value)
        if not resolved_value.is_absolute():
            resolved_value = (root / resolved_value).resolve()
        resolved[key] = resolved_value
    return resolved


def get_default_timeout(config_path: Path | str | None = None) -> float:
    """Read the preferred database timeout from configuration."""

    cfg = load_config(config_path)
    try:
        return float(cfg.get("db_timeout_seconds", DEFAULT_DB_TIMEOUT))
    except (TypeError, ValueError):
        return DEFAULT_DB_TIMEOUT


def get_portal_config_section(config_path: Path | str | None = None) -> Dict[str, Any]:
    """Return the ``portal`` section of the project configuration."""

    cfg = load_config(config_path)
    section = cfg.get("portal", {})
    return section if isinstance(section, dict) else {}


def get_frame_host_template(config_path: Path | str | None = None) -> str:
    """Host template used for tenant base URLs and ``frame-ancestors``."""

    template = get_portal_config_section(config_path).get("frame_host_template")
    if not isinstance(template, str) or "{domain}" not in template:
        return DEFAULT_FRAME_HOST_TEMPLATE
    return template


def get_domain_name_overrides(config_path: Path | str | None = None) -> Dict[str, str]:
    """Display-name overrides keyed by tenant domain."""

    domains = get_portal_config_section(config_path).get("domains", {})
    if not isinstance(domains, dict):
        return {}
    return {str(key): str(value) for key, value in domains.items() if value}
