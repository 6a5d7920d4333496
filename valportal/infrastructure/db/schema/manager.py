from __future__ import annotations

import sqlite3

from ..connection import make_read_only
from .migrations import SchemaMigrator
from .tables import (
    SCHEMA_PORTAL_CONFIG_SQL,
    SCHEMA_PORTAL_DOCS_SQL,
    SCHEMA_PORTAL_RESOURCES_SQL,
)


def ensure_schema(conn) -> None:
    """Create the portal tables if needed and stamp the schema version."""

    migrator = SchemaMigrator(conn)
    migrator.ensure_table()
    migrator.apply_sql(
        "create_portal_resources_v1",
        SCHEMA_PORTAL_RESOURCES_SQL,
        notes="portal_resources",
    )
    migrator.apply_sql(
        "create_portal_config_v1", SCHEMA_PORTAL_CONFIG_SQL, notes="portal_config"
    )
    migrator.apply_sql(
        "create_portal_docs_v1", SCHEMA_PORTAL_DOCS_SQL, notes="portal_docs"
    )
    migrator.ensure_current_version()
    conn.commit()


def open_empty_catalog(*, check_same_thread: bool = True) -> sqlite3.Connection:
    """Schema-only in-memory catalog that refuses writes.

    Stands in for the real database while it cannot be opened: reads find
    nothing and saves fail like they would against a broken database.
    """

    conn = sqlite3.connect(":memory:", check_same_thread=check_same_thread)
    ensure_schema(conn)
    return make_read_only(conn)
