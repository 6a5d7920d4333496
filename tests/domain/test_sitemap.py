from valportal.domain.models import DocItem, ResourceType, SitemapResource
from valportal.domain.sitemap import (PortalConfig, config_from_tabs,
                                      filter_by_solution,
                                      group_docs_by_category, group_into_tabs,
                                      list_solutions, move_section, move_tab,
                                      order_by_preference, select_tab)


def _resource(rid, name, tab, section=None, solution=None):
    return SitemapResource(
        id=rid,
        name=name,
        resource_type=ResourceType.DASHBOARD,
        sitemap_group1=tab,
        sitemap_group2=section or tab,
        solution=solution,
    )


def _names(tabs):
    return [(tab.name, [s.name for s in tab.sections]) for tab in tabs]


RESOURCES = [
    _resource("dashboard_1", "Sales Daily", "Sales", "Daily", "Analytics"),
    _resource("dashboard_2", "Sales Weekly", "Sales", "Weekly", "Analytics"),
    _resource("workflow_3", "Stock sync", "Operations", "Inventory", "Automation"),
    _resource("dashboard_4", "Labour cost", "Finance", "Costs"),
    _resource("dashboard_5", "Another daily", "Sales", "Daily", "Analytics"),
]


def test_every_resource_lands_in_exactly_one_tab_section():
    tabs = group_into_tabs(RESOURCES)

    placements = [
        (tab.name, section.name, resource.id)
        for tab in tabs
        for section in tab.sections
        for resource in section.resources
    ]
    assert sorted(r for _, _, r in placements) == sorted(r.id for r in RESOURCES)
    for tab_name, section_name, rid in placements:
        resource = next(r for r in RESOURCES if r.id == rid)
        assert (resource.sitemap_group1, resource.sitemap_group2) == (
            tab_name,
            section_name,
        )


def test_default_order_is_alphabetical_and_resources_sorted_by_name():
    tabs = group_into_tabs(RESOURCES)

    assert _names(tabs) == [
        ("Finance", ["Costs"]),
        ("Operations", ["Inventory"]),
        ("Sales", ["Daily", "Weekly"]),
    ]
    daily = tabs[2].sections[0]
    assert [r.name for r in daily.resources] == ["Another daily", "Sales Daily"]
    assert tabs[2].resource_count == 3


def test_config_orders_named_items_first_then_the_rest_alphabetically():
    config = PortalConfig.from_lists(
        ["Sales", "Unknown tab"], {"Sales": ["Weekly"]}
    )

    tabs = group_into_tabs(RESOURCES, config)

    assert _names(tabs) == [
        ("Sales", ["Weekly", "Daily"]),
        ("Finance", ["Costs"]),
        ("Operations", ["Inventory"]),
    ]


def test_order_by_preference_ignores_duplicates_and_uses_case_insensitive_order():
    assert order_by_preference(["b", "A", "c", "a"], ["c", "c"]) == ["c", "A", "a", "b"]


def test_missing_section_falls_back_to_tab_name():
    resource = SitemapResource.from_record(
        {
            "resource_id": "table_9",
            "name": "Orders",
            "resource_type": "table",
            "sitemap_group1": "Data",
            "sitemap_group2": None,
        }
    )

    tabs = group_into_tabs([resource])

    assert _names(tabs) == [("Data", ["Data"])]


def test_empty_input_gives_no_tabs():
    assert group_into_tabs([]) == []
    assert select_tab([], "Sales") is None


def test_solution_filter_drops_empty_sections_and_tabs():
    tabs = group_into_tabs(RESOURCES)

    assert list_solutions(RESOURCES) == ["Analytics", "Automation"]
    filtered = filter_by_solution(tabs, "Automation")
    assert _names(filtered) == [("Operations", ["Inventory"])]
    assert filter_by_solution(tabs, None) == tabs


def test_select_tab_falls_back_to_first_visible_tab():
    tabs = group_into_tabs(RESOURCES)

    assert select_tab(tabs, "Sales").name == "Sales"
    assert select_tab(tabs, "Nope").name == "Finance"


def test_move_tab_swaps_neighbours_and_ignores_out_of_range():
    tabs = group_into_tabs(RESOURCES)

    moved = move_tab(tabs, "Sales", -1)
    assert [t.name for t in moved] == ["Finance", "Sales", "Operations"]
    assert [t.name for t in move_tab(tabs, "Finance", -1)] == [t.name for t in tabs]
    assert [t.name for t in move_tab(tabs, "Sales", 1)] == [t.name for t in tabs]
    assert [t.name for t in move_tab(tabs, "Missing", 1)] == [t.name for t in tabs]


def test_move_section_only_touches_the_named_tab():
    tabs = group_into_tabs(RESOURCES)

    moved = move_section(tabs, "Sales", "Daily", 1)

    assert _names(moved)[2] == ("Sales", ["Weekly", "Daily"])
    assert _names(moved)[:2] == _names(tabs)[:2]


def test_config_from_tabs_reproduces_arrangement():
    tabs = move_section(move_tab(group_into_tabs(RESOURCES), "Sales", -1), "Sales", "Weekly", -1)

    config = config_from_tabs(tabs)

    assert _names(group_into_tabs(RESOURCES, config)) == _names(tabs)


def test_portal_config_round_trips_lists():
    config = PortalConfig.from_lists(["A"], {"A": ["x", "y"]})

    assert config.to_lists() == (["A"], {"A": ["x", "y"]})
    assert PortalConfig().is_empty
    assert not config.is_empty


def test_docs_are_grouped_by_category_with_general_default():
    docs = [
        DocItem(id="1", title="Setup", content="", category="Onboarding"),
        DocItem(id="2", title="FAQ", content=""),
        DocItem(id="3", title="Alerts", content="", category="alerts"),
    ]

    grouped = group_docs_by_category(docs)

    assert [category for category, _ in grouped] == ["alerts", "General", "Onboarding"]
    assert [d.id for d in grouped[1][1]] == ["2"]
