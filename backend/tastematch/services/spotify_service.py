from __future__ import annotations

import logging
from typing import Any

import requests

from tastematch.models import Artist, SpotifyUser, TasteProfile, Track
from tastematch.services.metrics_service import calculate_track_metrics
from tastematch.utils.validation import TIME_RANGES, ValidationError

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.spotify.com/v1"
TOP_ITEMS_LIMIT = 50
METRICS_RECENT_LIMIT = 20
PLAYLIST_ADD_BATCH = 100


class SpotifyServiceError(RuntimeError):
    """Raised when the Spotify Web API call fails or returns an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SpotifyService:
    """Thin Spotify Web API client bound to one user's bearer token."""

    def __init__(self, access_token: str, timeout: float = 10) -> None:
        if not access_token:
            raise ValueError("access_token is required")
        self._access_token = access_token
        self._timeout = timeout

    # ---------- transport ----------

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{API_BASE_URL}{endpoint}"
        try:
            resp = requests.request(
                method,
                url,
                headers=self._headers(),
                timeout=self._timeout,
                **kwargs,
            )
            resp.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            logger.warning("Spotify API error for %s %s: status=%s", method, endpoint, status)
            raise SpotifyServiceError(f"Spotify API request failed: {endpoint}", status) from exc
        except requests.RequestException as exc:
            logger.warning("Spotify API unreachable for %s %s: %s", method, endpoint, exc)
            raise SpotifyServiceError(f"Spotify API unreachable: {endpoint}") from exc

        if not resp.content:
            return {}
        return resp.json()

    def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        return self._request("GET", endpoint, params=params)

    def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", endpoint, json=payload)

    @staticmethod
    def _check_time_range(time_range: str) -> str:
        if time_range not in TIME_RANGES:
            raise ValidationError(f"Unknown time range: {time_range}")
        return time_range

    # ---------- user data ----------

    def get_user_profile(self) -> SpotifyUser:
        return SpotifyUser.from_mapping(self._get("/me"))

    def get_top_artists(self, time_range: str = "medium_term") -> list[Artist]:
        data = self._get(
            "/me/top/artists",
            params={"limit": TOP_ITEMS_LIMIT, "time_range": self._check_time_range(time_range)},
        )
        return [Artist.from_mapping(item) for item in data.get("items") or []]

    def get_top_tracks(self, time_range: str = "medium_term") -> list[Track]:
        data = self._get(
            "/me/top/tracks",
            params={"limit": TOP_ITEMS_LIMIT, "time_range": self._check_time_range(time_range)},
        )
        tracks = [Track.from_mapping(item) for item in data.get("items") or []]
        logger.debug("Fetched %d top tracks for %s", len(tracks), time_range)
        return tracks

    def get_recently_played(self, limit: int = 50) -> list[Track]:
        data = self._get("/me/player/recently-played", params={"limit": limit})
        return [Track.from_mapping(item) for item in data.get("items") or [] if item.get("track")]

    def get_saved_tracks(self, limit: int = 50) -> list[Track]:
        data = self._get("/me/tracks", params={"limit": limit})
        return [Track.from_mapping(item) for item in data.get("items") or [] if item.get("track")]

    def get_tracks_for_time_range(self, time_range: str) -> list[Track]:
        """
        Track sample standing in for a listening window:
        short_term = recently played, medium_term = recently played + saved,
        long_term = saved + long-term top tracks.
        """
        time_range = self._check_time_range(time_range)
        if time_range == "short_term":
            return self.get_recently_played(50)
        if time_range == "medium_term":
            return self.get_recently_played(50) + self.get_saved_tracks(50)
        return self.get_saved_tracks(50) + self.get_top_tracks("long_term")

    def get_supplementary_tracks(self, window: str = "short_term") -> list[Track]:
        """Extra tracks used only to widen shared-track detection."""
        return self.get_top_tracks(window)

    def get_taste_profile(self, time_range: str = "medium_term") -> TasteProfile:
        time_range = self._check_time_range(time_range)
        user = self.get_user_profile()
        top_artists = self.get_top_artists(time_range)
        top_tracks = self.get_top_tracks(time_range)
        recently_played = self.get_recently_played(METRICS_RECENT_LIMIT)
        metrics = calculate_track_metrics(top_tracks, recently_played)

        logger.info(
            "Fetched taste profile for %s (%s): %d artists, %d tracks",
            user.id,
            time_range,
            len(top_artists),
            len(top_tracks),
        )
        return TasteProfile.build(user, top_artists, top_tracks, metrics)

    # ---------- playlists ----------

    def create_playlist(
        self,
        user_id: str,
        name: str,
        track_ids: list[str],
        description: str = "",
        public: bool = False,
    ) -> str:
        playlist = self._post(
            f"/users/{user_id}/playlists",
            {"name": name, "description": description, "public": public},
        )
        playlist_id = playlist.get("id")
        if not playlist_id:
            raise SpotifyServiceError("Spotify did not return a playlist id")

        uris = [f"spotify:track:{track_id}" for track_id in track_ids]
        for start in range(0, len(uris), PLAYLIST_ADD_BATCH):
            self._post(f"/playlists/{playlist_id}/tracks", {"uris": uris[start:start + PLAYLIST_ADD_BATCH]})

        logger.info("Created playlist %s with %d tracks for %s", playlist_id, len(uris), user_id)
        return playlist_id
