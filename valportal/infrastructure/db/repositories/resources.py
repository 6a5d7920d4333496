from __future__ import annotations

import sqlite3
from typing import Any, Iterable, Mapping

from ..connection import iso_utcnow
from ..schema import ensure_schema
from .base import BaseRepository

_RESOURCE_COLUMNS = (
    "resource_id, name, description, resource_type, resource_url, "
    "sitemap_group1, sitemap_group2, solution, portal_content, include_sitemap"
)


class ResourceRepository(BaseRepository):
    """Access to ``portal_resources``, the per-domain resource catalog."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        super().__init__(conn)
        ensure_schema(self.conn)

    def list_sitemap(self, domain: str) -> list[dict[str, Any]]:
        """Resources of ``domain`` tagged for inclusion in the sitemap."""
        return self._fetch_all_as_dicts(
            f"SELECT {_RESOURCE_COLUMNS} FROM portal_resources "
            "WHERE domain = ? AND include_sitemap = 1 ORDER BY id",
            (domain,),
        )

    def list(self, domain: str) -> list[dict[str, Any]]:
        return self._fetch_all_as_dicts(
            f"SELECT {_RESOURCE_COLUMNS} FROM portal_resources "
            "WHERE domain = ? ORDER BY sitemap_group1, sitemap_group2, name",
            (domain,),
        )

    def list_ids(self, domain: str) -> list[str]:
        cur = self._execute(
            "SELECT resource_id FROM portal_resources WHERE domain = ?", (domain,)
        )
        return [row[0] for row in cur.fetchall()]

    def upsert_many(self, domain: str, rows: Iterable[Mapping[str, Any]]) -> int:
        """Insert or update resources keyed by ``(domain, resource_id)``."""
        now = iso_utcnow()
        count = 0
        for row in rows:
            group1 = row["sitemap_group1"]
            self._execute(
                """
                INSERT INTO portal_resources (
                    domain, resource_id, name, description, resource_type,
                    resource_url, sitemap_group1, sitemap_group2, solution,
                    portal_content, include_sitemap, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(domain, resource_id) DO UPDATE SET
                    name = excluded.name,
                    description = excluded.description,
                    resource_type = excluded.resource_type,
                    resource_url = excluded.resource_url,
                    sitemap_group1 = excluded.sitemap_group1,
                    sitemap_group2 = excluded.sitemap_group2,
                    solution = excluded.solution,
                    portal_content = excluded.portal_content,
                    include_sitemap = excluded.include_sitemap,
                    updated_at = excluded.updated_at
                """,
                (
                    domain,
                    str(row["resource_id"]),
                    row.get("name") or str(row["resource_id"]),
                    row.get("description"),
                    row["resource_type"],
                    row.get("resource_url"),
                    group1,
                    row.get("sitemap_group2") or group1,
                    row.get("solution"),
                    row.get("portal_content"),
                    1 if row.get("include_sitemap", True) else 0,
                    now,
                ),
            )
            count += 1
        self.conn.commit()
        return count

    def delete_missing(self, domain: str, keep_ids: Iterable[str]) -> int:
        """Delete resources of ``domain`` whose id is not in ``keep_ids``."""
        keep = set(keep_ids)
        stale = [rid for rid in self.list_ids(domain) if rid not in keep]
        for resource_id in stale:
            self._execute(
                "DELETE FROM portal_resources WHERE domain = ? AND resource_id = ?",
                (domain, resource_id),
            )
        self.conn.commit()
        return len(stale)
