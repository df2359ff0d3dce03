from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable

from .artist import Artist
from .track import Track
from .user import SpotifyUser


@dataclass(frozen=True, slots=True)
class RecentTrackSample:
    name: str
    artist: str
    popularity: int
    album_image: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "artist": self.artist,
            "popularity": self.popularity,
        }
        if self.album_image:
            payload["albumImage"] = self.album_image
        return payload

    @classmethod
    def from_track(cls, track: Track) -> "RecentTrackSample":
        return cls(
            name=track.name,
            artist=track.primary_artist or "Unknown",
            popularity=track.popularity,
            album_image=track.album.image_url,
        )


@dataclass(frozen=True, slots=True)
class TrackMetrics:
    average_popularity: float = 0.0
    top_genre: str = "Unknown"
    recent_tracks: tuple[RecentTrackSample, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "averagePopularity": self.average_popularity,
            "topGenre": self.top_genre,
            "recentTracks": [sample.to_dict() for sample in self.recent_tracks],
        }


def count_genres(artists: Iterable[Artist]) -> Counter[str]:
    """Genre mention counts: each artist adds one per genre tag it carries."""
    counts: Counter[str] = Counter()
    for artist in artists:
        for genre in artist.genres:
            counts[genre] += 1
    return counts


def collect_genres(artists: Iterable[Artist]) -> tuple[str, ...]:
    """Distinct genre tags across artists, in first-seen order."""
    seen: dict[str, None] = {}
    for artist in artists:
        for genre in artist.genres:
            seen.setdefault(genre, None)
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class TasteProfile:
    user: SpotifyUser
    top_artists: tuple[Artist, ...] = ()
    top_tracks: tuple[Track, ...] = ()
    track_metrics: TrackMetrics = field(default_factory=TrackMetrics)
    genres: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        user: SpotifyUser,
        top_artists: Iterable[Artist],
        top_tracks: Iterable[Track],
        track_metrics: TrackMetrics,
    ) -> "TasteProfile":
        artists = tuple(top_artists)
        return cls(
            user=user,
            top_artists=artists,
            top_tracks=tuple(top_tracks),
            track_metrics=track_metrics,
            genres=collect_genres(artists),
        )

    def with_top_items(self, top_artists: Iterable[Artist], top_tracks: Iterable[Track]) -> "TasteProfile":
        """Copy with new top artists/tracks; metrics and genres are carried over."""
        return TasteProfile(
            user=self.user,
            top_artists=tuple(top_artists),
            top_tracks=tuple(top_tracks),
            track_metrics=self.track_metrics,
            genres=self.genres,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "user": self.user.to_dict(),
            "topArtists": [artist.to_dict() for artist in self.top_artists],
            "topTracks": [track.to_dict() for track in self.top_tracks],
            "trackMetrics": self.track_metrics.to_dict(),
            "genres": list(self.genres),
        }
