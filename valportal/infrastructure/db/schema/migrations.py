from __future__ import annotations

from ..connection import iso_utcnow
from .tables import SCHEMA_MIGRATIONS_SQL, SCHEMA_VERSION_SQL


# Current schema version - increment when making structural changes.
CURRENT_SCHEMA_VERSION = 1


class SchemaMigrator:
    """Lightweight migration bookkeeping backed by ``schema_migrations``.

    Named migrations are recorded once and skipped afterwards. Schema
    versioning is tracked separately in the ``schema_version`` table, which
    holds a single integer that must match ``CURRENT_SCHEMA_VERSION``.
    """

    def __init__(self, conn) -> None:
        self.conn = conn

    # -------------------------------------------------------------------------
    # Schema version tracking
    # -------------------------------------------------------------------------

    def ensure_version_table(self) -> None:
        self.conn.executescript(SCHEMA_VERSION_SQL)

    def get_version(self) -> int | None:
        """Return the current schema version, or None if not set."""
        self.ensure_version_table()
        row = self.conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
        return row[0] if row else None

    def set_version(self, version: int) -> None:
        self.ensure_version_table()
        self.conn.execute("DELETE FROM schema_version")
        self.conn.execute(
            "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
            (version, iso_utcnow()),
        )

    def ensure_current_version(self) -> None:
        current = self.get_version()
        if current is None or current < CURRENT_SCHEMA_VERSION:
            self.set_version(CURRENT_SCHEMA_VERSION)

    # -------------------------------------------------------------------------
    # Migration tracking (by name)
    # -------------------------------------------------------------------------

    def ensure_table(self) -> None:
        self.conn.executescript(SCHEMA_MIGRATIONS_SQL)

    def has_migration(self, name: str) -> bool:
        cur = self.conn.execute(
            "SELECT 1 FROM schema_migrations WHERE name = ?", (name,)
        )
        return cur.fetchone() is not None

    def record(self, name: str, notes: str | None = None) -> None:
        self.conn.execute(
            "INSERT INTO schema_migrations (name, applied_at, notes) VALUES (?, ?, ?)",
            (name, iso_utcnow(), notes),
        )

    def apply_sql(self, name: str, sql: str, notes: str | None = None) -> None:
        self.ensure_table()
        if self.has_migration(name) or not sql.strip():
            return
        self.conn.executescript(sql)
        self.record(name, notes)
