from __future__ import annotations

import json
import sqlite3
from typing import Any, Mapping, Sequence

from ..connection import iso_utcnow
from ..schema import ensure_schema
from .base import BaseRepository


def _decode(raw: str | None, default: Any) -> Any:
    if not raw:
        return default
    try:
        value = json.loads(raw)
    except ValueError:
        return default
    return value if isinstance(value, type(default)) else default


class PortalConfigRepository(BaseRepository):
    """Per-domain tab and section ordering stored as JSON columns."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        super().__init__(conn)
        ensure_schema(self.conn)

    def get(self, domain: str) -> dict[str, Any] | None:
        row = self._fetch_one_as_dict(
            "SELECT domain, tab_order, section_order, updated_at "
            "FROM portal_config WHERE domain = ?",
            (domain,),
        )
        if row is None:
            return None
        row["tab_order"] = _decode(row["tab_order"], [])
        row["section_order"] = _decode(row["section_order"], {})
        return row

    def upsert(
        self,
        domain: str,
        tab_order: Sequence[str],
        section_order: Mapping[str, Sequence[str]],
    ) -> None:
        self._execute(
            "INSERT INTO portal_config (domain, tab_order, section_order, updated_at) "
            "VALUES (?, ?, ?, ?) "
            "ON CONFLICT(domain) DO UPDATE SET "
            "tab_order = excluded.tab_order, "
            "section_order = excluded.section_order, "
            "updated_at = excluded.updated_at",
            (
                domain,
                json.dumps(list(tab_order)),
                json.dumps({k: list(v) for k, v in section_order.items()}),
                iso_utcnow(),
            ),
        )
        self.conn.commit()

    def delete(self, domain: str) -> None:
        self._execute("DELETE FROM portal_config WHERE domain = ?", (domain,))
        self.conn.commit()
