"""
Centralized DTOs and input/output models for portal services.
"""

from __future__ import annotations

from pydantic import (BaseModel, ConfigDict, Field, ValidationInfo,
                      field_validator)

from valportal.domain.models import DocType, SitemapResource
from valportal.domain.sitemap import PortalConfig


# --- Portal config ---
class PortalConfigDTO(BaseModel):
    """Ordering overrides in the wire shape used by the admin UI."""

    model_config = ConfigDict(populate_by_name=True)

    tab_order: list[str] = Field(default_factory=list, alias="tabOrder")
    section_order: dict[str, list[str]] = Field(
        default_factory=dict, alias="sectionOrder"
    )

    @field_validator("tab_order", "section_order", mode="before")
    @classmethod
    def _null_is_empty(cls, value: object, info: ValidationInfo) -> object:
        if value is None:
            return [] if info.field_name == "tab_order" else {}
        return value

    def to_domain(self) -> PortalConfig:
        return PortalConfig.from_lists(self.tab_order, self.section_order)

    @classmethod
    def from_domain(cls, config: PortalConfig) -> "PortalConfigDTO":
        tab_order, section_order = config.to_lists()
        return cls(tab_order=tab_order, section_order=section_order)


# --- Resources ---
class ResourceDTO(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    description: str | None = None
    resource_type: str
    type_label: str
    resource_url: str | None = None
    sitemap_group1: str
    sitemap_group2: str
    solution: str | None = None
    has_content: bool = False

    @classmethod
    def from_domain(cls, resource: SitemapResource) -> "ResourceDTO":
        return cls(
            id=resource.id,
            name=resource.name,
            description=resource.description,
            resource_type=resource.resource_type.value,
            type_label=resource.type_label,
            resource_url=resource.resource_url,
            sitemap_group1=resource.sitemap_group1,
            sitemap_group2=resource.sitemap_group2,
            solution=resource.solution,
            has_content=resource.is_content_card,
        )


class SearchResultsDTO(BaseModel):
    model_config = ConfigDict(extra="forbid")

    query: str
    results: list[ResourceDTO]


# --- Catalog import ---
class ResourceImportDTO(BaseModel):
    """One catalog entry as exported by the knowledge base sync."""

    resource_id: str
    name: str | None = None
    description: str | None = None
    resource_type: str = "table"
    resource_url: str | None = None
    sitemap_group1: str | None = None
    sitemap_group2: str | None = None
    solution: str | None = None
    portal_content: str | None = None
    include_sitemap: bool = True

    @field_validator("resource_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @property
    def is_publishable(self) -> bool:
        return self.include_sitemap and bool(self.sitemap_group1)

    def to_record(self) -> dict[str, object]:
        record = self.model_dump()
        record["sitemap_group2"] = self.sitemap_group2 or self.sitemap_group1
        return record


class DocImportDTO(BaseModel):
    id: str
    doc_type: DocType
    title: str
    content: str = ""
    domain: str | None = None
    summary: str | None = None
    category: str | None = None
    sort_order: int = 0
