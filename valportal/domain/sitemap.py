"""Tab/section grouping of sitemap resources.

Resources are tagged with two levels: ``sitemap_group1`` (the tab) and
``sitemap_group2`` (the section inside the tab). ``group_into_tabs`` buckets a
flat resource list into that hierarchy and applies the tenant's ordering
overrides stored as a :class:`PortalConfig`.

The arrange helpers (``move_tab``, ``move_section``, ``config_from_tabs``)
back the admin mode: they operate on already grouped tabs and derive the
configuration that reproduces the arrangement.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, Sequence

from .models.resource import DocItem, SitemapResource

DEFAULT_DOC_CATEGORY = "General"


@dataclass(frozen=True)
class SitemapSection:
    name: str
    resources: tuple[SitemapResource, ...] = ()


@dataclass(frozen=True)
class SitemapTab:
    name: str
    sections: tuple[SitemapSection, ...] = ()

    @property
    def resource_count(self) -> int:
        return sum(len(section.resources) for section in self.sections)


@dataclass(frozen=True)
class PortalConfig:
    """Per-tenant ordering overrides for tabs and for sections within a tab."""

    tab_order: tuple[str, ...] = ()
    section_order: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_lists(
        cls,
        tab_order: Iterable[str] | None = None,
        section_order: Mapping[str, Iterable[str]] | None = None,
    ) -> "PortalConfig":
        return cls(
            tab_order=tuple(str(name) for name in tab_order or ()),
            section_order={
                str(tab): tuple(str(name) for name in names)
                for tab, names in (section_order or {}).items()
            },
        )

    @property
    def is_empty(self) -> bool:
        return not self.tab_order and not self.section_order

    def sections_for(self, tab_name: str) -> tuple[str, ...]:
        return tuple(self.section_order.get(tab_name, ()))

    def to_lists(self) -> tuple[list[str], dict[str, list[str]]]:
        return list(self.tab_order), {
            tab: list(names) for tab, names in self.section_order.items()
        }


def _name_key(name: str) -> tuple[str, str]:
    # Case-insensitive first, raw string as the tie-breaker so the order is total.
    return (name.casefold(), name)


def order_by_preference(names: Iterable[str], preferred: Sequence[str]) -> list[str]:
    """Order ``names`` by their position in ``preferred``.

    Names listed in ``preferred`` come first, in list order (the first
    occurrence wins when a name is repeated). Every other name follows in
    lexicographic order. Entries of ``preferred`` that are not in ``names``
    are ignored.
    """
    position: dict[str, int] = {}
    for index, name in enumerate(preferred):
        position.setdefault(name, index)

    unique = list(dict.fromkeys(names))
    ranked = sorted((n for n in unique if n in position), key=position.__getitem__)
    rest = sorted((n for n in unique if n not in position), key=_name_key)
    return ranked + rest


def group_into_tabs(
    resources: Iterable[SitemapResource], config: PortalConfig | None = None
) -> list[SitemapTab]:
    """Bucket resources into tabs and sections.

    Every resource lands in exactly one ``(sitemap_group1, sitemap_group2)``
    pair. Resources inside a section are sorted by name; sections and tabs
    follow the ordering overrides in ``config``.
    """
    config = config or PortalConfig()
    buckets: dict[str, dict[str, list[SitemapResource]]] = {}
    for resource in resources:
        sections = buckets.setdefault(resource.sitemap_group1, {})
        sections.setdefault(resource.sitemap_group2, []).append(resource)

    tabs_by_name: dict[str, SitemapTab] = {}
    for tab_name, sections in buckets.items():
        ordered_sections = order_by_preference(sections, config.sections_for(tab_name))
        tabs_by_name[tab_name] = SitemapTab(
            name=tab_name,
            sections=tuple(
                SitemapSection(
                    name=section_name,
                    resources=tuple(
                        sorted(sections[section_name], key=lambda r: _name_key(r.name))
                    ),
                )
                for section_name in ordered_sections
            ),
        )

    return [
        tabs_by_name[name]
        for name in order_by_preference(tabs_by_name, config.tab_order)
    ]


def list_solutions(resources: Iterable[SitemapResource]) -> list[str]:
    """Return the distinct solutions the resources belong to, sorted."""
    return sorted({r.solution for r in resources if r.solution})


def filter_by_solution(
    tabs: Sequence[SitemapTab], solution: str | None
) -> list[SitemapTab]:
    """Keep only resources of ``solution``; drop sections and tabs left empty."""
    if not solution:
        return list(tabs)

    filtered: list[SitemapTab] = []
    for tab in tabs:
        sections = []
        for section in tab.sections:
            kept = tuple(r for r in section.resources if r.solution == solution)
            if kept:
                sections.append(replace(section, resources=kept))
        if sections:
            filtered.append(replace(tab, sections=tuple(sections)))
    return filtered


def select_tab(tabs: Sequence[SitemapTab], requested: str | None) -> SitemapTab | None:
    """Return the requested tab when visible, otherwise the first one."""
    for tab in tabs:
        if tab.name == requested:
            return tab
    return tabs[0] if tabs else None


def _swap(items: Sequence, index: int, direction: int) -> list:
    result = list(items)
    target = index + direction
    if index < 0 or target < 0 or target >= len(result):
        return result
    result[index], result[target] = result[target], result[index]
    return result


def move_tab(tabs: Sequence[SitemapTab], name: str, direction: int) -> list[SitemapTab]:
    """Swap the tab called ``name`` with its neighbour (-1 left, +1 right)."""
    index = next((i for i, tab in enumerate(tabs) if tab.name == name), -1)
    return _swap(tabs, index, direction)


def move_section(
    tabs: Sequence[SitemapTab], tab_name: str, section_name: str, direction: int
) -> list[SitemapTab]:
    """Swap a section with its neighbour inside ``tab_name`` (-1 up, +1 down)."""
    result: list[SitemapTab] = []
    for tab in tabs:
        if tab.name != tab_name:
            result.append(tab)
            continue
        index = next(
            (i for i, s in enumerate(tab.sections) if s.name == section_name), -1
        )
        result.append(replace(tab, sections=tuple(_swap(tab.sections, index, direction))))
    return result


def config_from_tabs(tabs: Sequence[SitemapTab]) -> PortalConfig:
    """Derive the ordering config that reproduces the given arrangement."""
    return PortalConfig(
        tab_order=tuple(tab.name for tab in tabs),
        section_order={
            tab.name: tuple(section.name for section in tab.sections) for tab in tabs
        },
    )


def group_docs_by_category(docs: Iterable[DocItem]) -> list[tuple[str, list[DocItem]]]:
    """Bucket docs by category (missing → "General"), categories sorted."""
    grouped: dict[str, list[DocItem]] = {}
    for doc in docs:
        grouped.setdefault(doc.category or DEFAULT_DOC_CATEGORY, []).append(doc)
    return sorted(grouped.items(), key=lambda item: _name_key(item[0]))
