"""Sitemap resource and documentation domain models."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping


class ResourceType(str, Enum):
    """Kinds of platform resources a portal can list."""

    DASHBOARD = "dashboard"
    QUERY = "query"
    WORKFLOW = "workflow"
    TABLE = "table"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, value: str | None) -> "ResourceType":
        """Convert a stored type string to a ResourceType, defaulting to UNKNOWN."""
        if not value:
            return cls.UNKNOWN
        normalized = value.lower().strip()
        if normalized == "workspace":
            return cls.TABLE
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN

    @property
    def label(self) -> str:
        return _TYPE_LABELS.get(self, "Resource")

    @property
    def icon(self) -> str:
        return _TYPE_ICONS.get(self, "table")


_TYPE_LABELS = {
    ResourceType.DASHBOARD: "Dashboard",
    ResourceType.WORKFLOW: "Workflow",
    ResourceType.TABLE: "Workspace",
    ResourceType.QUERY: "Query",
}

_TYPE_ICONS = {
    ResourceType.DASHBOARD: "bar-chart-3",
    ResourceType.WORKFLOW: "zap",
    ResourceType.TABLE: "table",
    ResourceType.QUERY: "layout-grid",
}

# Path segment per type on the analytics platform, relative to the tenant base URL.
_PLATFORM_PATHS = {
    ResourceType.DASHBOARD: "prism/dashboard",
    ResourceType.WORKFLOW: "workflow",
    ResourceType.TABLE: "workspace",
}

_TRAILING_ID_RE = re.compile(r"(\d+)$")


def build_resource_url(
    base_url: str, resource_type: ResourceType, platform_id: int | str
) -> str:
    """Build a platform URL for a resource from the tenant base URL."""

    base = base_url.rstrip("/")
    segment = _PLATFORM_PATHS.get(resource_type)
    if segment is None:
        return base
    return f"{base}/{segment}/{platform_id}"


@dataclass(frozen=True)
class SitemapResource:
    """A dashboard, workflow, table or query tagged for a tenant's sitemap.

    ``sitemap_group1`` names the tab and ``sitemap_group2`` the section the
    resource is listed under. Resources carrying ``portal_content`` are shown
    as content cards (their markdown opens in the portal); the others link
    out to ``resource_url``.
    """

    id: str
    name: str
    resource_type: ResourceType
    sitemap_group1: str
    sitemap_group2: str
    description: str | None = None
    resource_url: str | None = None
    solution: str | None = None
    portal_content: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> "SitemapResource":
        """Create a resource from a ``portal_resources`` row."""
        group1 = str(record.get("sitemap_group1") or "")
        group2 = record.get("sitemap_group2") or group1
        return cls(
            id=str(record["resource_id"]),
            name=str(record.get("name") or record["resource_id"]),
            resource_type=ResourceType.from_string(
                record.get("resource_type")  # type: ignore[arg-type]
            ),
            sitemap_group1=group1,
            sitemap_group2=str(group2),
            description=_optional_str(record.get("description")),
            resource_url=_optional_str(record.get("resource_url")),
            solution=_optional_str(record.get("solution")),
            portal_content=_optional_str(record.get("portal_content")),
        )

    @property
    def is_content_card(self) -> bool:
        return bool(self.portal_content)

    @property
    def type_label(self) -> str:
        return self.resource_type.label

    @property
    def href(self) -> str:
        return self.resource_url or "#"

    @property
    def platform_id(self) -> str | None:
        """Numeric platform id encoded at the end of the resource id, if any."""
        match = _TRAILING_ID_RE.search(self.id)
        return match.group(1) if match else None

    def with_fallback_url(self, base_url: str) -> "SitemapResource":
        """Return a copy with ``resource_url`` derived from the tenant base URL.

        Resources that already have a URL, or whose id carries no platform id,
        are returned unchanged.
        """
        if self.resource_url or self.platform_id is None:
            return self
        if self.resource_type not in _PLATFORM_PATHS:
            return self
        url = build_resource_url(base_url, self.resource_type, self.platform_id)
        return replace(self, resource_url=url)


class DocType(str, Enum):
    DOMAIN = "domain"
    GUIDE = "guide"


@dataclass(frozen=True)
class DocItem:
    """A published markdown document: tenant documentation or a general guide."""

    id: str
    title: str
    content: str
    summary: str | None = None
    category: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> "DocItem":
        return cls(
            id=str(record["id"]),
            title=str(record.get("title") or ""),
            content=str(record.get("content") or ""),
            summary=_optional_str(record.get("summary")),
            category=_optional_str(record.get("category")),
        )


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None
