from __future__ import annotations

SCHEMA_VERSION_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL
);
"""

SCHEMA_MIGRATIONS_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    applied_at TEXT NOT NULL,
    notes TEXT
);
"""

SCHEMA_PORTAL_RESOURCES_SQL = """
CREATE TABLE IF NOT EXISTS portal_resources (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    domain TEXT NOT NULL,
    resource_id TEXT NOT NULL,
    name TEXT NOT NULL,
    description TEXT,
    resource_type TEXT NOT NULL,
    resource_url TEXT,
    sitemap_group1 TEXT NOT NULL,
    sitemap_group2 TEXT,
    solution TEXT,
    portal_content TEXT,
    include_sitemap INTEGER NOT NULL DEFAULT 1,
    updated_at TEXT,
    UNIQUE (domain, resource_id)
);
CREATE INDEX IF NOT EXISTS idx_portal_resources_domain ON portal_resources (domain);
"""

SCHEMA_PORTAL_CONFIG_SQL = """
CREATE TABLE IF NOT EXISTS portal_config (
    domain TEXT PRIMARY KEY,
    tab_order TEXT NOT NULL DEFAULT '[]',
    section_order TEXT NOT NULL DEFAULT '{}',
    updated_at TEXT
);
"""

SCHEMA_PORTAL_DOCS_SQL = """
CREATE TABLE IF NOT EXISTS portal_docs (
    id TEXT PRIMARY KEY,
    domain TEXT,
    doc_type TEXT NOT NULL CHECK (doc_type IN ('domain', 'guide')),
    title TEXT NOT NULL,
    summary TEXT,
    content TEXT NOT NULL DEFAULT '',
    category TEXT,
    sort_order INTEGER NOT NULL DEFAULT 0,
    updated_at TEXT
);
CREATE INDEX IF NOT EXISTS idx_portal_docs_domain ON portal_docs (domain, doc_type);
"""
