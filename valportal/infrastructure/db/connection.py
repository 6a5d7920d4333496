"""Connections to the portal's SQLite catalog."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

from .config import get_default_timeout, get_path_config, load_config

CATALOG_TABLE_PREFIX = "portal_"
_WRITE_ACTIONS = frozenset(
    {sqlite3.SQLITE_INSERT, sqlite3.SQLITE_UPDATE, sqlite3.SQLITE_DELETE}
)


class DatabaseError(Exception):
    """The portal database could not be opened or configured."""


def iso_utcnow() -> str:
    """Return an ISO‑8601 timestamp in UTC with ``Z`` suffix."""

    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _pragma_statements(
    busy_timeout_ms: int, config_path: Path | str | None = None
) -> list[str]:
    cfg = load_config(config_path)
    db_cfg = cfg.get("db", {}) if isinstance(cfg.get("db"), dict) else {}
    statements = [f"PRAGMA busy_timeout={busy_timeout_ms};"]
    if db_cfg.get("enable_wal", True):
        statements.append("PRAGMA journal_mode=WAL;")
    if db_cfg.get("foreign_keys", True):
        statements.append("PRAGMA foreign_keys=ON;")
    return statements


def connect(
    db_path: str | Path | None = None,
    *,
    timeout: float | None = None,
    check_same_thread: bool = True,
    config_path: Path | str | None = None,
) -> sqlite3.Connection:
    """Open the catalog at ``db_path`` (default: ``paths.db_path`` in config.json).

    Raises :class:`DatabaseError` when the file cannot be created, opened or
    configured; the caller owns the returned connection.
    """

    path = Path(db_path) if db_path is not None else get_path_config(config_path)["db_path"]
    timeout_value = timeout if timeout is not None else get_default_timeout(config_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(
            path, timeout=timeout_value, check_same_thread=check_same_thread
        )
    except (OSError, sqlite3.Error) as exc:
        raise DatabaseError(f"Cannot open portal database {path}: {exc}") from exc
    try:
        for statement in _pragma_statements(int(timeout_value * 1000), config_path):
            conn.execute(statement)
    except sqlite3.Error as exc:
        conn.close()
        raise DatabaseError(f"Cannot configure portal database {path}: {exc}") from exc
    return conn


@contextmanager
def get_connection(
    db_path: str | Path | None = None,
    *,
    timeout: float | None = None,
    check_same_thread: bool = True,
) -> Iterator[sqlite3.Connection]:
    """Yield a catalog connection and close it afterwards."""

    conn = connect(db_path, timeout=timeout, check_same_thread=check_same_thread)
    try:
        yield conn
    finally:
        conn.close()


def _deny_catalog_writes(action: int, table: str | None, *_: object) -> int:
    if action in _WRITE_ACTIONS and (table or "").startswith(CATALOG_TABLE_PREFIX):
        return sqlite3.SQLITE_DENY
    return sqlite3.SQLITE_OK


def make_read_only(conn: sqlite3.Connection) -> sqlite3.Connection:
    """Refuse writes to the catalog tables on ``conn``.

    Denied statements raise :class:`sqlite3.DatabaseError`.
    """

    conn.set_authorizer(_deny_catalog_writes)
    return conn
