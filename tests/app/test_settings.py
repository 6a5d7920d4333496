import json

from valportal.app.config import get_settings


def test_settings_read_environment_on_every_call(monkeypatch, tmp_path):
    config_path = tmp_path / "config.json"

    assert get_settings(config_path).jwt_secret is None

    monkeypatch.setenv("PORTAL_JWT_SECRET", "  rotated  ")
    monkeypatch.setenv("PORTAL_ACCESS_CODE", "")
    monkeypatch.setenv("PORTAL_ENV", "Production")
    settings = get_settings(config_path)

    assert settings.jwt_secret == "rotated"
    assert settings.access_code is None
    assert settings.production
    assert settings.auth_enabled


def test_settings_read_portal_section(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "portal": {
                    "frame_host_template": "https://{domain}.example.com",
                    "domains": {"acme": "Acme Foods"},
                }
            }
        ),
        encoding="utf-8",
    )

    settings = get_settings(config_path)

    assert settings.frame_host_template == "https://{domain}.example.com"
    assert settings.domain_names == {"acme": "Acme Foods"}


def test_invalid_host_template_falls_back(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"portal": {"frame_host_template": "nope"}}), encoding="utf-8")

    assert get_settings(config_path).frame_host_template == "https://{domain}.thinkval.io"


def test_settings_resolve_database_path(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"paths": {"db_path": "data/portal.db"}}), encoding="utf-8")

    assert get_settings(config_path).db_path == (tmp_path / "data" / "portal.db").resolve()
