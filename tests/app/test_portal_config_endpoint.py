import pytest
from fastapi.testclient import TestClient

from valportal.app.api import app
from valportal.app.config import PortalSettings
from valportal.app.dependencies import (get_portal_service,
                                        get_settings_dependency)

ROWS = [
    {
        "resource_id": "dashboard_1",
        "name": "Sales Daily",
        "resource_type": "dashboard",
        "sitemap_group1": "Sales",
        "sitemap_group2": "Daily",
    },
    {
        "resource_id": "dashboard_2",
        "name": "Sales Weekly",
        "resource_type": "dashboard",
        "sitemap_group1": "Sales",
        "sitemap_group2": "Weekly",
    },
    {
        "resource_id": "dashboard_3",
        "name": "Costs",
        "resource_type": "dashboard",
        "sitemap_group1": "Finance",
        "sitemap_group2": "Costs",
    },
]


def test_save_and_read_back_config(client):
    response = client.post(
        "/api/lag/portal-config",
        json={"tabOrder": ["Sales", "Finance"], "sectionOrder": {"Sales": ["Weekly", "Daily"]}},
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert client.get("/api/lag/portal-config").json() == {
        "tabOrder": ["Sales", "Finance"],
        "sectionOrder": {"Sales": ["Weekly", "Daily"]},
    }
    assert client.get("/api/koi/portal-config").json() == {"tabOrder": [], "sectionOrder": {}}


def test_missing_fields_default_to_empty(client):
    client.post("/api/lag/portal-config", json={"tabOrder": ["Sales"]})

    response = client.post("/api/lag/portal-config", json={})

    assert response.status_code == 200
    assert client.get("/api/lag/portal-config").json() == {"tabOrder": [], "sectionOrder": {}}


def test_malformed_body_is_rejected(client):
    response = client.post("/api/lag/portal-config", json={"tabOrder": "Sales"})

    assert response.status_code == 422


def test_failed_save_returns_500(client):
    class _FailingService:
        def save_portal_config(self, domain, config):
            return False

    app.dependency_overrides[get_portal_service] = lambda: _FailingService()

    response = client.post("/api/lag/portal-config", json={"tabOrder": []})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to save"}


def test_saved_order_is_applied_to_the_page(client, seed_resources):
    seed_resources("lag", ROWS)
    client.post(
        "/api/lag/portal-config",
        json={"tabOrder": ["Sales"], "sectionOrder": {"Sales": ["Weekly"]}},
    )

    html = client.get("/lag").text

    assert html.index(">Sales <") < html.index(">Finance <")
    assert html.index("<h2>Weekly</h2>") < html.index("<h2>Daily</h2>")


def test_move_endpoint_persists_and_redirects_to_edit_view(client, seed_resources):
    seed_resources("lag", ROWS)

    response = client.post(
        "/api/lag/portal-config/move",
        data={"kind": "tab", "tab": "Sales", "direction": "-1"},
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/lag?edit=1&tab=Sales"
    assert client.get("/api/lag/portal-config").json()["tabOrder"] == ["Sales", "Finance"]

    client.post(
        "/api/lag/portal-config/move",
        data={"kind": "section", "tab": "Sales", "section": "Daily", "direction": "1"},
    )
    assert client.get("/api/lag/portal-config").json()["sectionOrder"]["Sales"] == [
        "Weekly",
        "Daily",
    ]


def test_move_endpoint_flags_failed_save(client):
    class _FailingService:
        def move(self, domain, **kwargs):
            return None

    app.dependency_overrides[get_portal_service] = lambda: _FailingService()

    response = client.post(
        "/api/lag/portal-config/move",
        data={"kind": "tab", "tab": "Sales", "direction": "1", "solution": "Analytics"},
    )

    assert response.headers["location"] == (
        "/lag?edit=1&tab=Sales&solution=Analytics&save_failed=1"
    )


def test_invalid_domain_is_not_found(client):
    assert client.get("/api/LAG!/portal-config").status_code == 404
    assert client.post("/api/api/portal-config", json={}).status_code == 404


def test_null_order_fields_are_saved_as_empty(client):
    client.post("/api/lag/portal-config", json={"tabOrder": ["Sales"]})

    response = client.post(
        "/api/lag/portal-config", json={"tabOrder": None, "sectionOrder": None}
    )

    assert response.status_code == 200
    assert client.get("/api/lag/portal-config").json() == {"tabOrder": [], "sectionOrder": {}}


@pytest.fixture
def unreachable_db_client(tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("x", encoding="utf-8")
    settings = PortalSettings(db_path=blocker / "portal.db")
    app.dependency_overrides[get_settings_dependency] = lambda: settings
    try:
        yield TestClient(app, follow_redirects=False)
    finally:
        app.dependency_overrides.clear()


def test_unreachable_database_renders_empty_portal(unreachable_db_client):
    page = unreachable_db_client.get("/lag")
    config = unreachable_db_client.get("/api/lag/portal-config")
    search = unreachable_db_client.get("/api/lag/search", params={"q": "sales"})

    assert page.status_code == 200
    assert "No resources have been tagged for the sitemap yet." in page.text
    assert config.json() == {"tabOrder": [], "sectionOrder": {}}
    assert search.json() == {"query": "sales", "results": []}


def test_unreachable_database_reports_failed_saves(unreachable_db_client):
    save = unreachable_db_client.post("/api/lag/portal-config", json={"tabOrder": ["Sales"]})
    move = unreachable_db_client.post(
        "/api/lag/portal-config/move",
        data={"kind": "tab", "tab": "Sales", "direction": "1"},
    )

    assert save.status_code == 500
    assert save.json() == {"error": "Failed to save"}
    assert move.status_code == 303
    assert move.headers["location"].endswith("save_failed=1")
