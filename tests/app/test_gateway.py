from datetime import datetime, timedelta, timezone

from valportal.app.gateway import (evaluate_request, frame_ancestors_policy,
                                   login_redirect_target, safe_redirect_target)
from valportal.infrastructure.security import issue_session_token

TEST_SECRET = "test-secret-with-at-least-32-bytes!!"


def _evaluate(path, *, fetch_dest=None, token=None, secret=TEST_SECRET):
    return evaluate_request(
        path=path, fetch_dest=fetch_dest, session_token=token, secret=secret
    )


def test_passthrough_paths_are_untouched():
    for path in ("/login", "/api/auth/login", "/api/lag/search", "/static/portal.css", "/favicon.ico"):
        decision = _evaluate(path)
        assert decision.allowed
        assert decision.reason == "passthrough"
        assert decision.content_security_policy is None


def test_auth_disabled_allows_with_frame_policy():
    decision = _evaluate("/lag", secret=None)

    assert decision.allowed
    assert decision.domain == "lag"
    assert decision.content_security_policy == (
        "frame-ancestors 'self' https://lag.thinkval.io"
    )


def test_iframe_requests_are_allowed_without_session():
    decision = _evaluate("/koi", fetch_dest="iframe")

    assert decision.allowed
    assert decision.reason == "iframe"
    assert "https://koi.thinkval.io" in decision.content_security_policy


def test_valid_session_is_allowed():
    decision = _evaluate("/lag", token=issue_session_token(TEST_SECRET))

    assert decision.allowed
    assert decision.reason == "session"


def test_missing_session_redirects_to_login_with_requested_path():
    decision = _evaluate("/lag", fetch_dest="document")

    assert not decision.allowed
    assert decision.redirect_to == "/login?redirect=%2Flag"
    assert not decision.clear_session


def test_invalid_or_expired_session_redirects_and_clears_cookie():
    expired = issue_session_token(
        TEST_SECRET, now=datetime.now(timezone.utc) - timedelta(hours=9)
    )

    for token in (expired, "garbage"):
        decision = _evaluate("/lag", token=token)
        assert not decision.allowed
        assert decision.clear_session
        assert decision.redirect_to == "/login?redirect=%2Flag"


def test_non_domain_paths_forbid_framing():
    decision = _evaluate("/", secret=None)

    assert decision.domain is None
    assert decision.content_security_policy == "frame-ancestors 'none'"
    assert _evaluate("/Lag", secret=None).domain is None
    assert _evaluate("/lag/extra", secret=None).domain is None


def test_redirect_helpers():
    assert login_redirect_target("/lag") == "/login?redirect=%2Flag"
    assert frame_ancestors_policy("fk", "https://{domain}.example.com") == (
        "frame-ancestors 'self' https://fk.example.com"
    )
    assert safe_redirect_target("/lag") == "/lag"
    assert safe_redirect_target("//evil.example.com") == "/"
    assert safe_redirect_target("https://evil.example.com") == "/"
    assert safe_redirect_target(None) == "/"


# --- middleware ---


def test_middleware_redirects_direct_navigation(client, auth_env):
    response = client.get("/lag")

    assert response.status_code == 307
    assert response.headers["location"] == "/login?redirect=%2Flag"


def test_middleware_clears_invalid_cookie(client, auth_env):
    client.cookies.set("portal_session", "garbage")

    response = client.get("/lag")

    assert response.status_code == 307
    assert 'portal_session=""' in response.headers["set-cookie"]


def test_middleware_allows_iframe_and_sets_csp(client, auth_env):
    response = client.get("/lag", headers={"Sec-Fetch-Dest": "iframe"})

    assert response.status_code == 200
    assert response.headers["content-security-policy"] == (
        "frame-ancestors 'self' https://lag.thinkval.io"
    )


def test_middleware_allows_valid_session(client, auth_env):
    client.cookies.set("portal_session", issue_session_token(TEST_SECRET))

    response = client.get("/lag")

    assert response.status_code == 200
    assert "content-security-policy" in response.headers


def test_middleware_leaves_login_and_api_alone(client, auth_env):
    login = client.get("/login")
    api = client.get("/api/lag/portal-config")

    assert login.status_code == 200
    assert "content-security-policy" not in login.headers
    assert api.status_code == 200
    assert "content-security-policy" not in api.headers


def test_home_cannot_be_framed(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["content-security-policy"] == "frame-ancestors 'none'"
    assert "Access your portal via your organization URL." in response.text
