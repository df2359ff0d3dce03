from __future__ import annotations

import logging
import random
from functools import partial
from typing import Any, Callable, Sequence

from flask import Flask, current_app

from tastematch.models import ComparisonResult, ComparisonSession, TrackMetrics
from tastematch.services.metrics_service import calculate_track_metrics
from tastematch.services.playlist_service import (
    MAX_PLAYLIST_TRACKS,
    PLAYLIST_DESCRIPTION,
    annotate_track_genres,
    blend_playlists,
    build_playlist_name,
)
from tastematch.services.similarity_service import (
    all_genre_overlap,
    compare_tastes,
    genre_breakdown,
)
from tastematch.services.spotify_service import SpotifyService
from tastematch.session_store import SessionConflictError, SessionStore

logger = logging.getLogger(__name__)

_COMPARISON_SERVICE_KEY = "comparison_service"

SUPPLEMENTARY_WINDOW = "short_term"

SpotifyFactory = Callable[[str], SpotifyService]


class NotAParticipantError(RuntimeError):
    """Raised when the caller is neither listener of a comparison session."""


class IncompleteSessionError(RuntimeError):
    """Raised when an operation needs both participants but only one has joined."""


class ComparisonService:
    """
    Session-level workflows: open a session, let the second listener join,
    refresh data for a time range and build the blended playlist.
    """

    def __init__(
        self,
        store: SessionStore,
        spotify_factory: SpotifyFactory,
        choose: Callable[[Sequence[str]], str] = random.choice,
        playlist_max_tracks: int = MAX_PLAYLIST_TRACKS,
    ) -> None:
        self.store = store
        self.spotify_factory = spotify_factory
        self.choose = choose
        self.playlist_max_tracks = playlist_max_tracks

    # ---------- session lifecycle ----------

    def start_session(self, access_token: str, time_range: str = "medium_term") -> ComparisonSession:
        profile = self.spotify_factory(access_token).get_taste_profile(time_range)
        return self.store.create(profile, user1_token=access_token, time_range=time_range)

    def join(self, session: ComparisonSession, access_token: str, time_range: str) -> ComparisonSession:
        spotify = self.spotify_factory(access_token)
        profile = spotify.get_taste_profile(time_range)
        if profile.user.id == session.user1_profile.user.id:
            raise SessionConflictError("Waiting for a second listener to join this session")

        joined = self.store.add_user2(
            session.session_id, profile, user2_token=access_token, time_range=time_range
        )
        if joined is None:
            raise IncompleteSessionError("Session expired before the second listener joined")
        logger.info("User %s joined comparison session %s", profile.user.id, session.session_id)
        return joined

    def authorize_participant(self, session: ComparisonSession, access_token: str) -> str:
        """
        Resolve the caller's Spotify id and require it to be one of the
        session's listeners. Their stored token is swapped for the current one.
        """
        caller_id = self.spotify_factory(access_token).get_user_profile().id
        if caller_id not in session.participant_ids:
            logger.warning("User %s rejected from comparison session %s", caller_id, session.session_id)
            raise NotAParticipantError("You are not a participant in this comparison")
        self.store.update_token(session.session_id, caller_id, access_token)
        return caller_id

    @staticmethod
    def status(session: ComparisonSession) -> dict[str, Any]:
        return {
            "hasUser2": session.has_user2,
            "user1Name": session.user1_profile.user.display_name,
            "user2Name": session.user2_profile.user.display_name if session.user2_profile else None,
        }

    # ---------- comparisons ----------

    def _clients(self, session: ComparisonSession) -> tuple[SpotifyService, SpotifyService]:
        if session.user2_profile is None or not session.user2_token or not session.user1_token:
            raise IncompleteSessionError("Session not found or incomplete")
        return self.spotify_factory(session.user1_token), self.spotify_factory(session.user2_token)

    def compare(self, session: ComparisonSession, time_range: str) -> ComparisonResult:
        """Compare stored profiles, widening track overlap with short-term top tracks."""
        spotify1, spotify2 = self._clients(session)
        supplementary1 = supplementary2 = None
        if time_range != SUPPLEMENTARY_WINDOW:
            supplementary1 = spotify1.get_supplementary_tracks(SUPPLEMENTARY_WINDOW)
            supplementary2 = spotify2.get_supplementary_tracks(SUPPLEMENTARY_WINDOW)

        return compare_tastes(
            session.user1_profile,
            session.user2_profile,
            supplementary1,
            supplementary2,
            choose=self.choose,
        )

    def refresh(self, session: ComparisonSession, time_range: str) -> tuple[ComparisonSession, ComparisonResult]:
        spotify1, spotify2 = self._clients(session)
        profile1 = spotify1.get_taste_profile(time_range)
        profile2 = spotify2.get_taste_profile(time_range)
        updated = self.store.update_profiles(session.session_id, profile1, profile2, time_range)
        if updated is None:
            raise IncompleteSessionError("Session not found or incomplete")
        return updated, self.compare(updated, time_range)

    def refresh_top_items(
        self,
        session: ComparisonSession,
        time_range: str,
    ) -> tuple[ComparisonSession, ComparisonResult]:
        """New top artists/tracks for the window; metrics and genres stay as stored."""
        spotify1, spotify2 = self._clients(session)
        profile1 = session.user1_profile.with_top_items(
            spotify1.get_top_artists(time_range), spotify1.get_top_tracks(time_range)
        )
        profile2 = session.user2_profile.with_top_items(
            spotify2.get_top_artists(time_range), spotify2.get_top_tracks(time_range)
        )
        updated = self.store.update_profiles(session.session_id, profile1, profile2, time_range)
        if updated is None:
            raise IncompleteSessionError("Session not found or incomplete")
        return updated, self.compare(updated, time_range)

    def track_metrics(self, session: ComparisonSession, time_range: str) -> tuple[TrackMetrics, TrackMetrics]:
        spotify1, spotify2 = self._clients(session)
        metrics = []
        for spotify in (spotify1, spotify2):
            tracks = spotify.get_tracks_for_time_range(time_range)
            recent = spotify.get_recently_played(20)
            metrics.append(calculate_track_metrics(tracks, recent))
        return metrics[0], metrics[1]

    def genre_refresh(self, session: ComparisonSession, time_range: str) -> dict[str, Any]:
        spotify1, spotify2 = self._clients(session)
        artists1 = spotify1.get_top_artists(time_range)
        artists2 = spotify2.get_top_artists(time_range)
        return {
            "genreComparison": {
                "user1": [item.to_dict() for item in genre_breakdown(artists1)],
                "user2": [item.to_dict() for item in genre_breakdown(artists2)],
            },
            "genreOverlap": all_genre_overlap(artists1, artists2),
        }

    # ---------- playlists ----------

    def create_blended_playlist(self, session: ComparisonSession, access_token: str) -> dict[str, Any]:
        if session.user2_profile is None:
            raise IncompleteSessionError("Session not found or incomplete")
        owner_id = self.authorize_participant(session, access_token)

        profile1 = session.user1_profile
        profile2 = session.user2_profile
        track_ids = blend_playlists(
            annotate_track_genres(profile1.top_tracks, profile1.top_artists),
            profile1.genres,
            annotate_track_genres(profile2.top_tracks, profile2.top_artists),
            profile2.genres,
            max_tracks=self.playlist_max_tracks,
        )
        name = build_playlist_name(profile1.user.display_name, profile2.user.display_name)

        spotify = self.spotify_factory(access_token)
        playlist_id = spotify.create_playlist(owner_id, name, track_ids, description=PLAYLIST_DESCRIPTION)

        return {
            "playlistId": playlist_id,
            "playlistUrl": f"https://open.spotify.com/playlist/{playlist_id}",
            "trackCount": len(track_ids),
            "name": name,
        }


def init_comparison_service(app: Flask, store: SessionStore) -> ComparisonService:
    service = ComparisonService(
        store,
        spotify_factory=partial(SpotifyService, timeout=app.config.get("SPOTIFY_TIMEOUT_SECONDS", 10)),
        playlist_max_tracks=min(
            int(app.config.get("PLAYLIST_MAX_TRACKS", MAX_PLAYLIST_TRACKS)), MAX_PLAYLIST_TRACKS
        ),
    )
    app.extensions[_COMPARISON_SERVICE_KEY] = service
    return service


def get_comparison_service(app: Flask | None = None) -> ComparisonService:
    flask_app = app or current_app
    service = flask_app.extensions.get(_COMPARISON_SERVICE_KEY)
    if service is None:
        raise RuntimeError("Comparison service not initialised; call init_comparison_service(app)")
    return service
