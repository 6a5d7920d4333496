from valportal.infrastructure.security import is_valid_session_token

TEST_SECRET = "test-secret-with-at-least-32-bytes!!"


def test_login_without_configuration_returns_500(client):
    response = client.post("/api/auth/login", json={"password": "anything"})

    assert response.status_code == 500
    assert response.json() == {"error": "Auth not configured"}


def test_login_with_wrong_code_returns_401(client, auth_env):
    response = client.post("/api/auth/login", json={"password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid access code"}
    assert "set-cookie" not in response.headers


def test_login_sets_session_cookie(client, auth_env):
    response = client.post("/api/auth/login", json={"password": "open-sesame"})

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("portal_session=")
    assert "HttpOnly" in cookie
    assert "Max-Age=28800" in cookie
    assert "Path=/" in cookie
    assert "samesite=lax" in cookie.lower()
    assert "Secure" not in cookie
    assert is_valid_session_token(response.cookies["portal_session"], TEST_SECRET)


def test_login_cookie_is_secure_in_production(client, auth_env, monkeypatch):
    monkeypatch.setenv("PORTAL_ENV", "production")

    response = client.post("/api/auth/login", json={"password": "open-sesame"})

    assert "Secure" in response.headers["set-cookie"]


def test_session_cookie_opens_the_portal(client, auth_env):
    assert client.get("/lag").status_code == 307

    client.post("/api/auth/login", json={"password": "open-sesame"})

    assert client.get("/lag").status_code == 200


def test_logout_clears_cookie(client, auth_env):
    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert 'portal_session=""' in response.headers["set-cookie"]


def test_login_page_sanitizes_redirect(client):
    page = client.get("/login", params={"redirect": "/lag"})
    hostile = client.get("/login", params={"redirect": "//evil.example.com"})

    assert 'data-redirect="/lag"' in page.text
    assert 'data-redirect="/"' in hostile.text


def test_unconfigured_login_ignores_malformed_body(client):
    response = client.post(
        "/api/auth/login", content=b"not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Auth not configured"}


def test_configured_login_rejects_malformed_body(client, auth_env):
    garbled = client.post(
        "/api/auth/login", content=b"not json", headers={"Content-Type": "application/json"}
    )
    wrong_shape = client.post("/api/auth/login", json=["open-sesame"])

    assert garbled.status_code == 422
    assert wrong_shape.status_code == 422
