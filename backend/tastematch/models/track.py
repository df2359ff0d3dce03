from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


def _clamp_popularity(value: Any) -> int:
    try:
        popularity = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, popularity))


@dataclass(frozen=True, slots=True)
class TrackArtist:
    """Artist reference as it appears on a track (simplified Spotify artist)."""

    name: str
    id: str | None = None
    genres: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name}
        if self.id:
            payload["id"] = self.id
        if self.genres:
            payload["genres"] = list(self.genres)
        return payload

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TrackArtist":
        return cls(
            name=data.get("name") or "",
            id=data.get("id"),
            genres=tuple(data.get("genres") or ()),
        )


@dataclass(frozen=True, slots=True)
class Album:
    name: str
    images: tuple[str, ...] = ()
    release_date: str | None = None

    @property
    def image_url(self) -> str | None:
        return self.images[0] if self.images else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "images": [{"url": url} for url in self.images],
            "release_date": self.release_date,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Album":
        data = data or {}
        images = tuple(img["url"] for img in data.get("images") or [] if img and img.get("url"))
        return cls(
            name=data.get("name") or "",
            images=images,
            release_date=data.get("release_date"),
        )


@dataclass(frozen=True, slots=True)
class Track:
    id: str
    name: str
    artists: tuple[TrackArtist, ...] = ()
    album: Album = field(default_factory=lambda: Album(name=""))
    popularity: int = 0

    @property
    def primary_artist(self) -> str | None:
        return self.artists[0].name if self.artists else None

    @property
    def artist_names(self) -> list[str]:
        return [artist.name for artist in self.artists]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "artists": [artist.to_dict() for artist in self.artists],
            "album": self.album.to_dict(),
            "popularity": self.popularity,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Track":
        """
        Load a Spotify track object. Saved-track and recently-played items wrap
        the track under a "track" key; both shapes are accepted.
        """
        if "track" in data and isinstance(data["track"], Mapping):
            data = data["track"]
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            artists=tuple(TrackArtist.from_mapping(a) for a in data.get("artists") or []),
            album=Album.from_mapping(data.get("album")),
            popularity=_clamp_popularity(data.get("popularity")),
        )

