"""Portal data fetching and page assembly.

``PortalService`` is the glue between the repositories and the page: it loads
a tenant's sitemap resources, ordering config and documentation, groups them
into tabs and builds the view model the portal template renders. Storage
failures degrade to empty results so a broken catalog still renders a page.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Literal, Mapping
from urllib.parse import urlencode

from valportal.domain.models import (DocItem, DomainInfo, SitemapResource,
                                     get_domain_info)
from valportal.domain.sitemap import (PortalConfig, SitemapTab,
                                      config_from_tabs, filter_by_solution,
                                      group_docs_by_category, group_into_tabs,
                                      list_solutions, move_section, move_tab,
                                      select_tab)
from valportal.infrastructure.db import DEFAULT_FRAME_HOST_TEMPLATE, DatabaseError
from valportal.infrastructure.db.repositories import (DocRepository,
                                                      PortalConfigRepository,
                                                      ResourceRepository)
from valportal.infrastructure.observability import (get_logger, log_context,
                                                    log_exception,
                                                    record_config_save)
from valportal.services.search import ResourceSearch

_logger = get_logger(__name__)

_STORAGE_ERRORS = (sqlite3.Error, DatabaseError)

View = Literal["resources", "domain-docs", "guides"]
VIEW_RESOURCES: View = "resources"
VIEW_DOMAIN_DOCS: View = "domain-docs"
VIEW_GUIDES: View = "guides"

MoveKind = Literal["tab", "section"]


@dataclass(frozen=True)
class NavItem:
    key: View
    label: str
    count: int


@dataclass
class PortalPage:
    """Everything the portal template needs for one request."""

    domain_info: DomainInfo
    resources: list[SitemapResource]
    tabs: list[SitemapTab]
    visible_tabs: list[SitemapTab]
    active_tab: SitemapTab | None
    solutions: list[str]
    active_solution: str | None
    nav: list[NavItem]
    active_view: View
    domain_docs: list[tuple[str, list[DocItem]]] = field(default_factory=list)
    guides: list[tuple[str, list[DocItem]]] = field(default_factory=list)
    query: str = ""
    search_results: list[SitemapResource] = field(default_factory=list)
    content_resource: SitemapResource | None = None
    open_doc: DocItem | None = None
    edit_mode: bool = False

    @property
    def domain(self) -> str:
        return self.domain_info.domain

    @property
    def resource_count(self) -> int:
        return len(self.resources)

    @property
    def tab_count(self) -> int:
        return len(self.tabs)

    @property
    def docs_for_view(self) -> list[tuple[str, list[DocItem]]]:
        if self.active_view == VIEW_DOMAIN_DOCS:
            return self.domain_docs
        if self.active_view == VIEW_GUIDES:
            return self.guides
        return []

    def url(self, **overrides: object) -> str:
        """Link to this page keeping view, tab, solution and edit state."""
        params: dict[str, object] = {
            "view": None if self.active_view == VIEW_RESOURCES else self.active_view,
            "tab": self.active_tab.name if self.active_tab else None,
            "solution": self.active_solution,
            "edit": "1" if self.edit_mode else None,
        }
        params.update(overrides)
        if params["view"] == VIEW_RESOURCES:
            params["view"] = None
        query = {k: v for k, v in params.items() if v not in (None, "", False)}
        if not query:
            return f"/{self.domain}"
        return f"/{self.domain}?{urlencode(query)}"


class PortalService:
    """Service exposing portal data for the web app and the CLI.

    Uses repository injection pattern - caller manages connection lifecycle.
    """

    def __init__(
        self,
        resource_repository: ResourceRepository,
        config_repository: PortalConfigRepository,
        doc_repository: DocRepository,
        *,
        host_template: str = DEFAULT_FRAME_HOST_TEMPLATE,
        domain_names: Mapping[str, str] | None = None,
    ) -> None:
        self._resources = resource_repository
        self._configs = config_repository
        self._docs = doc_repository
        self._host_template = host_template
        self._domain_names = dict(domain_names or {})

    # ------------------------------------------------------------------
    # Data fetching
    # ------------------------------------------------------------------

    def get_domain_info(self, domain: str) -> DomainInfo:
        return get_domain_info(
            domain, host_template=self._host_template, overrides=self._domain_names
        )

    def get_sitemap_resources(self, domain: str) -> list[SitemapResource]:
        try:
            rows = self._resources.list_sitemap(domain)
        except _STORAGE_ERRORS as exc:
            log_exception(_logger, "Failed to load sitemap resources", exc, domain=domain)
            return []
        base_url = self.get_domain_info(domain).base_url
        return [SitemapResource.from_record(row).with_fallback_url(base_url) for row in rows]

    def get_portal_config(self, domain: str) -> PortalConfig:
        try:
            row = self._configs.get(domain)
        except _STORAGE_ERRORS as exc:
            log_exception(_logger, "Failed to load portal config", exc, domain=domain)
            return PortalConfig()
        if row is None:
            return PortalConfig()
        return PortalConfig.from_lists(row["tab_order"], row["section_order"])

    def get_domain_docs(self, domain: str) -> list[DocItem]:
        try:
            rows = self._docs.list_domain_docs(domain)
        except _STORAGE_ERRORS as exc:
            log_exception(_logger, "Failed to load domain docs", exc, domain=domain)
            return []
        return [DocItem.from_record(row) for row in rows]

    def get_general_docs(self) -> list[DocItem]:
        try:
            rows = self._docs.list_guides()
        except _STORAGE_ERRORS as exc:
            log_exception(_logger, "Failed to load guides", exc)
            return []
        return [DocItem.from_record(row) for row in rows]

    def save_portal_config(self, domain: str, config: PortalConfig) -> bool:
        """Persist the ordering for ``domain``; returns False when storage fails."""
        tab_order, section_order = config.to_lists()
        try:
            self._configs.upsert(domain, tab_order, section_order)
        except _STORAGE_ERRORS as exc:
            log_exception(_logger, "Failed to save portal config", exc, domain=domain)
            record_config_save(success=False)
            return False
        record_config_save(success=True)
        _logger.info("Saved portal order for %s (%d tabs)", domain, len(tab_order))
        return True

    # ------------------------------------------------------------------
    # Arrangement
    # ------------------------------------------------------------------

    def get_tabs(self, domain: str) -> list[SitemapTab]:
        return group_into_tabs(
            self.get_sitemap_resources(domain), self.get_portal_config(domain)
        )

    def move(
        self,
        domain: str,
        *,
        kind: MoveKind,
        tab: str,
        direction: int,
        section: str | None = None,
    ) -> PortalConfig | None:
        """Move a tab or a section one step and persist the resulting order.

        Returns the saved config, or None when it could not be stored.
        """
        tabs = self.get_tabs(domain)
        step = 1 if direction > 0 else -1
        if kind == "tab":
            arranged = move_tab(tabs, tab, step)
        else:
            arranged = move_section(tabs, tab, section or "", step)
        config = config_from_tabs(arranged)
        return config if self.save_portal_config(domain, config) else None

    # ------------------------------------------------------------------
    # Page assembly
    # ------------------------------------------------------------------

    def search(self, domain: str, query: str) -> list[SitemapResource]:
        return ResourceSearch(self.get_sitemap_resources(domain)).search(query)

    def build_page(
        self,
        domain: str,
        *,
        view: str | None = None,
        tab: str | None = None,
        solution: str | None = None,
        query: str | None = None,
        content_id: str | None = None,
        doc_id: str | None = None,
        edit: bool = False,
    ) -> PortalPage:
        with log_context(domain=domain):
            resources = self.get_sitemap_resources(domain)
            config = self.get_portal_config(domain)
            domain_docs = self.get_domain_docs(domain)
            guides = self.get_general_docs()

            tabs = group_into_tabs(resources, config)
            solutions = list_solutions(resources)
            active_solution = solution if solution in solutions else None
            visible_tabs = filter_by_solution(tabs, active_solution)

            nav = [NavItem(VIEW_RESOURCES, "Resources", len(resources))]
            if domain_docs:
                nav.append(NavItem(VIEW_DOMAIN_DOCS, "Documentation", len(domain_docs)))
            if guides:
                nav.append(NavItem(VIEW_GUIDES, "Guides", len(guides)))
            available_views = {item.key for item in nav}
            active_view: View = view if view in available_views else VIEW_RESOURCES  # type: ignore[assignment]

            query_text = (query or "").strip()
            search_results = (
                ResourceSearch(resources).search(query_text) if query_text else []
            )

            content_resource = next(
                (r for r in resources if r.id == content_id and r.is_content_card),
                None,
            )
            open_doc = next(
                (d for d in [*domain_docs, *guides] if d.id == doc_id), None
            )

            _logger.debug(
                "Built portal page: %d resources, %d tabs, view=%s",
                len(resources),
                len(tabs),
                active_view,
            )
            return PortalPage(
                domain_info=self.get_domain_info(domain),
                resources=resources,
                tabs=tabs,
                visible_tabs=visible_tabs,
                active_tab=select_tab(visible_tabs, tab),
                solutions=solutions,
                active_solution=active_solution,
                nav=nav,
                active_view=active_view,
                domain_docs=group_docs_by_category(domain_docs),
                guides=group_docs_by_category(guides),
                query=query_text,
                search_results=search_results,
                content_resource=content_resource,
                open_doc=open_doc,
                edit_mode=edit,
            )
