"""Shared pytest fixtures: the Flask app in testing mode and model factories."""

from __future__ import annotations

import time
from typing import Iterable

import pytest

from tastematch import create_app
from tastematch.models import (
    Album,
    Artist,
    SpotifyUser,
    TasteProfile,
    Track,
    TrackArtist,
    TrackMetrics,
)
from tastematch.services.auth_service import TOKEN_SESSION_KEY


def make_artist(artist_id: str, *genres: str, name: str | None = None) -> Artist:
    return Artist(id=artist_id, name=name or artist_id.title(), genres=tuple(genres))


def make_track(
    track_id: str,
    name: str | None = None,
    artist: str = "Someone",
    popularity: int = 50,
    artist_id: str | None = None,
    genres: Iterable[str] = (),
) -> Track:
    return Track(
        id=track_id,
        name=name or f"Song {track_id}",
        artists=(TrackArtist(name=artist, id=artist_id, genres=tuple(genres)),),
        album=Album(name="Album", images=(f"https://img.example/{track_id}.jpg",)),
        popularity=popularity,
    )


def make_profile(
    user_id: str,
    artists: Iterable[Artist] = (),
    tracks: Iterable[Track] = (),
    metrics: TrackMetrics | None = None,
    display_name: str | None = None,
) -> TasteProfile:
    return TasteProfile.build(
        SpotifyUser(id=user_id, display_name=display_name or user_id.title()),
        artists,
        tracks,
        metrics or TrackMetrics(average_popularity=50.0, top_genre="Pop"),
    )


def first_choice(options):
    return options[0]


@pytest.fixture()
def app():
    return create_app("testing")


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def login(client):
    """Put a live Spotify token into the client's cookie session."""

    def _login(access_token: str = "token-alice") -> None:
        with client.session_transaction() as sess:
            sess[TOKEN_SESSION_KEY] = {
                "access_token": access_token,
                "refresh_token": "refresh",
                "expires_at": time.time() + 3600,
            }

    return _login
