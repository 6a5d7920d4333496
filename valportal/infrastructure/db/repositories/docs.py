from __future__ import annotations

import sqlite3
from typing import Any

from ..connection import iso_utcnow
from ..schema import ensure_schema
from .base import BaseRepository

_DOC_COLUMNS = "id, domain, doc_type, title, summary, content, category, sort_order"


class DocRepository(BaseRepository):
    """Published documentation: per-domain docs and general guides."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        super().__init__(conn)
        ensure_schema(self.conn)

    def list_domain_docs(self, domain: str) -> list[dict[str, Any]]:
        return self._fetch_all_as_dicts(
            f"SELECT {_DOC_COLUMNS} FROM portal_docs "
            "WHERE domain = ? AND doc_type = 'domain' ORDER BY sort_order, title",
            (domain,),
        )

    def list_guides(self) -> list[dict[str, Any]]:
        return self._fetch_all_as_dicts(
            f"SELECT {_DOC_COLUMNS} FROM portal_docs "
            "WHERE doc_type = 'guide' ORDER BY category, title"
        )

    def upsert(
        self,
        *,
        doc_id: str,
        doc_type: str,
        title: str,
        content: str,
        domain: str | None = None,
        summary: str | None = None,
        category: str | None = None,
        sort_order: int = 0,
    ) -> None:
        self._execute(
            """
            INSERT INTO portal_docs (
                id, domain, doc_type, title, summary, content, category,
                sort_order, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                domain = excluded.domain,
                doc_type = excluded.doc_type,
                title = excluded.title,
                summary = excluded.summary,
                content = excluded.content,
                category = excluded.category,
                sort_order = excluded.sort_order,
                updated_at = excluded.updated_at
            """,
            (
                doc_id,
                domain,
                doc_type,
                title,
                summary,
                content,
                category,
                sort_order,
                iso_utcnow(),
            ),
        )
        self.conn.commit()
