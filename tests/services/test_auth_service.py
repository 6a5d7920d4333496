from datetime import datetime, timedelta, timezone

import pytest

from valportal.infrastructure.observability import get_counter_value
from valportal.infrastructure.observability.metrics import LOGIN_ATTEMPTS
from valportal.infrastructure.security import verify_session_token
from valportal.services.auth import (AuthNotConfiguredError, AuthService,
                                     InvalidAccessCodeError)

SECRET = "test-secret-with-at-least-32-bytes!!"


def test_login_returns_verifiable_token():
    service = AuthService(secret=SECRET, access_code="open-sesame")

    token = service.login("open-sesame")

    assert verify_session_token(token, SECRET)["access"] == "portal"


def test_configuration_values_are_trimmed():
    service = AuthService(secret=f"  {SECRET}\n", access_code=" code ")

    assert service.is_configured
    token = service.login("code")
    assert verify_session_token(token, SECRET)


@pytest.mark.parametrize(
    "secret, code", [(None, "code"), (SECRET, None), ("   ", "code"), (SECRET, "")]
)
def test_missing_configuration_raises(secret, code):
    service = AuthService(secret=secret, access_code=code)

    assert not service.is_configured
    with pytest.raises(AuthNotConfiguredError, match="Auth not configured"):
        service.login("code")


def test_wrong_code_raises_and_is_counted():
    service = AuthService(secret=SECRET, access_code="open-sesame")
    before = get_counter_value(LOGIN_ATTEMPTS, {"outcome": "invalid"})

    with pytest.raises(InvalidAccessCodeError, match="Invalid access code"):
        service.login("wrong")
    with pytest.raises(InvalidAccessCodeError):
        service.login(None)

    assert get_counter_value(LOGIN_ATTEMPTS, {"outcome": "invalid"}) == before + 2


def test_token_lifetime_is_eight_hours():
    service = AuthService(secret=SECRET, access_code="code")
    now = datetime.now(timezone.utc)

    claims = verify_session_token(service.login("code", now=now), SECRET)

    assert claims["exp"] - claims["iat"] == int(timedelta(hours=8).total_seconds())
