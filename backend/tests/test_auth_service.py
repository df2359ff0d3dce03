from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest
import requests

from tastematch.services import auth_service
from tastematch.services.auth_service import (
    TOKEN_SESSION_KEY,
    SpotifyAuthError,
    SpotifyAuthService,
    clear_token,
    get_access_token,
    store_token,
)


class FakeTokenResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


@pytest.fixture()
def auth():
    return SpotifyAuthService("client-id", "client-secret", "http://localhost/callback", timeout=3)


def test_authorize_url_carries_scopes_and_state(auth):
    url = auth.build_authorize_url(state="/compare/abc123")

    parsed = urlparse(url)
    params = parse_qs(parsed.query)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == auth_service.AUTHORIZE_URL
    assert params["response_type"] == ["code"]
    assert params["show_dialog"] == ["true"]
    assert params["state"] == ["/compare/abc123"]
    assert params["scope"][0].split(" ") == auth_service.SPOTIFY_SCOPES


def test_missing_credentials_are_rejected():
    with pytest.raises(SpotifyAuthError):
        SpotifyAuthService(None, "secret", "http://localhost/callback").build_authorize_url()


def test_exchange_code_uses_basic_auth(auth, monkeypatch):
    seen = {}

    def fake_post(url, data=None, auth=None, timeout=None):
        seen.update(url=url, data=data, auth=auth, timeout=timeout)
        return FakeTokenResponse({"access_token": "tok", "refresh_token": "ref", "expires_in": 3600})

    monkeypatch.setattr(auth_service.requests, "post", fake_post)

    token = auth.exchange_code("the-code", now=1_000.0)

    assert token == {"access_token": "tok", "refresh_token": "ref", "expires_at": 4_600.0}
    assert seen["url"] == auth_service.TOKEN_URL
    assert seen["auth"] == ("client-id", "client-secret")
    assert seen["data"]["grant_type"] == "authorization_code"
    assert seen["data"]["code"] == "the-code"
    assert seen["timeout"] == 3


def test_exchange_failure_raises_auth_error(auth, monkeypatch):
    monkeypatch.setattr(
        auth_service.requests,
        "post",
        lambda *args, **kwargs: FakeTokenResponse({"error": "invalid_grant"}, 400),
    )

    with pytest.raises(SpotifyAuthError):
        auth.exchange_code("bad-code")


def test_token_round_trip_through_session():
    session = {}
    store_token(session, {"access_token": "tok", "refresh_token": "ref", "expires_at": 5_000.0})

    assert get_access_token(session, now=1_000.0) == "tok"

    clear_token(session)
    assert TOKEN_SESSION_KEY not in session


def test_missing_or_expired_token():
    with pytest.raises(SpotifyAuthError, match="No authentication token"):
        get_access_token({})

    session = {TOKEN_SESSION_KEY: {"access_token": "tok", "expires_at": 1_030.0}}
    with pytest.raises(SpotifyAuthError, match="expired"):
        get_access_token(session, now=1_000.0)
