from __future__ import annotations

import logging
import time
from typing import Any, Mapping, MutableMapping
from urllib.parse import urlencode

import requests

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
TOKEN_URL = "https://accounts.spotify.com/api/token"

SPOTIFY_SCOPES = [
    "user-top-read",
    "playlist-read-private",
    "playlist-modify-private",
    "playlist-modify-public",
    "user-read-private",
    "user-read-email",
    "user-read-recently-played",
    "user-read-playback-state",
]

# Key inside Flask's signed cookie session
TOKEN_SESSION_KEY = "spotify_token"
TOKEN_EXPIRY_MARGIN_SECONDS = 60


class SpotifyAuthError(RuntimeError):
    """Raised when the caller has no usable Spotify grant or the exchange fails."""


class SpotifyAuthService:
    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str | None,
        timeout: float = 10,
    ) -> None:
        self.client_id = (client_id or "").strip()
        self.client_secret = (client_secret or "").strip()
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "SpotifyAuthService":
        return cls(
            client_id=config.get("SPOTIFY_CLIENT_ID"),
            client_secret=config.get("SPOTIFY_CLIENT_SECRET"),
            redirect_uri=config.get("SPOTIFY_REDIRECT_URI"),
            timeout=config.get("SPOTIFY_TIMEOUT_SECONDS", 10),
        )

    def _require_credentials(self) -> None:
        if not self.client_id or not self.client_secret or not self.redirect_uri:
            raise SpotifyAuthError("Spotify client ID/secret/redirect URI not configured")

    def build_authorize_url(self, state: str | None = None) -> str:
        self._require_credentials()
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(SPOTIFY_SCOPES),
            "show_dialog": "true",
        }
        if state:
            params["state"] = state
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    def exchange_code(self, code: str, now: float | None = None) -> dict[str, Any]:
        """
        Trade an authorization code for tokens (client auth via HTTP Basic).

        Returns the token payload with an absolute ``expires_at`` timestamp.
        """
        self._require_credentials()
        try:
            resp = requests.post(
                TOKEN_URL,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.redirect_uri,
                },
                auth=(self.client_id, self.client_secret),
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            status = getattr(getattr(exc, "response", None), "status_code", None)
            logger.warning("Spotify token exchange failed: status=%s", status)
            raise SpotifyAuthError("Spotify authentication failed") from exc

        data = resp.json()
        issued_at = time.time() if now is None else now
        return {
            "access_token": data["access_token"],
            "refresh_token": data.get("refresh_token"),
            "expires_at": issued_at + int(data.get("expires_in", 3600)),
        }


def store_token(session: MutableMapping[str, Any], token: Mapping[str, Any]) -> None:
    session[TOKEN_SESSION_KEY] = {
        "access_token": token["access_token"],
        "refresh_token": token.get("refresh_token"),
        "expires_at": token["expires_at"],
    }


def clear_token(session: MutableMapping[str, Any]) -> None:
    session.pop(TOKEN_SESSION_KEY, None)


def get_access_token(session: Mapping[str, Any], now: float | None = None) -> str:
    token = session.get(TOKEN_SESSION_KEY) or {}
    access_token = token.get("access_token")
    if not access_token:
        raise SpotifyAuthError("No authentication token")

    current = time.time() if now is None else now
    if current >= float(token.get("expires_at") or 0) - TOKEN_EXPIRY_MARGIN_SECONDS:
        raise SpotifyAuthError("Authentication token expired")
    return access_token
