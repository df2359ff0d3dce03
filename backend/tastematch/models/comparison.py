from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .artist import Artist
from .profile import TrackMetrics
from .track import Track


@dataclass(frozen=True, slots=True)
class GenreCount:
    genre: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"genre": self.genre, "count": self.count}


@dataclass(frozen=True, slots=True)
class GenreComparison:
    user1: tuple[GenreCount, ...] = ()
    user2: tuple[GenreCount, ...] = ()
    overlap: tuple[str, ...] = ()

    @property
    def user1_top_genre(self) -> str | None:
        return self.user1[0].genre if self.user1 else None

    @property
    def user2_top_genre(self) -> str | None:
        return self.user2[0].genre if self.user2 else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "user1": [item.to_dict() for item in self.user1],
            "user2": [item.to_dict() for item in self.user2],
            "overlap": list(self.overlap),
        }


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    compatibility_score: int
    user1_metrics: TrackMetrics
    user2_metrics: TrackMetrics
    shared_artists: tuple[Artist, ...]
    shared_tracks: tuple[Track, ...]
    genre_comparison: GenreComparison
    taste_summary: str
    user1_personality: str
    user2_personality: str
    genre_tag: str
    user1_top_artists: tuple[Artist, ...] = ()
    user1_top_tracks: tuple[Track, ...] = ()
    user2_top_artists: tuple[Artist, ...] = ()
    user2_top_tracks: tuple[Track, ...] = ()
    playful_summary: str | None = None
    personality_descriptions: dict[str, str] = field(default_factory=dict)

    @property
    def genre_overlap(self) -> tuple[str, ...]:
        return self.genre_comparison.overlap

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "compatibilityScore": self.compatibility_score,
            "trackMetricsComparison": {
                "user1": self.user1_metrics.to_dict(),
                "user2": self.user2_metrics.to_dict(),
            },
            "sharedArtists": [artist.to_dict() for artist in self.shared_artists],
            "sharedTracks": [track.to_dict() for track in self.shared_tracks],
            "genreOverlap": list(self.genre_overlap),
            "genreComparison": self.genre_comparison.to_dict(),
            "tasteSummary": self.taste_summary,
            "listeningPersonality": {
                "user1": self.user1_personality,
                "user2": self.user2_personality,
            },
            "personalityDescriptions": dict(self.personality_descriptions),
            "genreTag": self.genre_tag,
            "user1TopArtists": [artist.to_dict() for artist in self.user1_top_artists],
            "user1TopTracks": [track.to_dict() for track in self.user1_top_tracks],
            "user2TopArtists": [artist.to_dict() for artist in self.user2_top_artists],
            "user2TopTracks": [track.to_dict() for track in self.user2_top_tracks],
        }
        if self.playful_summary is not None:
            payload["playfulSummary"] = self.playful_summary
        return payload
