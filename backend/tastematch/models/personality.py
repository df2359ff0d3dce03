from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ListeningStats:
    unique_genre_count: int
    dominant_genre: str | None
    dominant_genre_share: float  # 0-1
    total_genre_mentions: int
    average_popularity: float

    @property
    def has_genre(self) -> bool:
        return self.dominant_genre is not None

