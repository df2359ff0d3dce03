from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Sequence

from tastematch.models import RecentTrackSample, Track, TrackMetrics

logger = logging.getLogger(__name__)

RECENT_TRACK_LIMIT = 5
DEFAULT_GENRE = "Pop"
UNKNOWN_GENRE = "Unknown"

# Ordered: the first rule whose keyword appears anywhere in the text wins.
GENRE_KEYWORD_RULES: list[tuple[tuple[str, ...], str]] = [
    (("rock", "metal"), "Rock"),
    (("hip", "rap"), "Hip Hop"),
    (("jazz",), "Jazz"),
    (("classical",), "Classical"),
    (("country",), "Country"),
    (("electronic", "edm"), "Electronic"),
]


def infer_top_genre(tracks: Iterable[Track]) -> str:
    """
    Coarse genre guess from a keyword scan over track and artist names.

    This is not a metadata lookup: "Rapture" counts as rap and "Rockstar"
    as rock. Downstream scores depend on this exact behaviour.
    """
    text = " ".join(
        f"{track.name} {' '.join(track.artist_names)}" for track in tracks
    ).lower()

    for keywords, genre in GENRE_KEYWORD_RULES:
        if any(keyword in text for keyword in keywords):
            return genre
    return DEFAULT_GENRE


def build_recent_samples(recently_played: Iterable[Track]) -> tuple[RecentTrackSample, ...]:
    samples: list[RecentTrackSample] = []
    for track in recently_played:
        if len(samples) >= RECENT_TRACK_LIMIT:
            break
        samples.append(RecentTrackSample.from_track(track))
    return tuple(samples)


def calculate_track_metrics(
    tracks: Sequence[Track],
    recently_played: Iterable[Track] = (),
) -> TrackMetrics:
    """
    Reduce a track list to one TrackMetrics snapshot.

    ``recently_played`` only feeds the exemplar list; popularity and genre
    come from ``tracks``. An empty ``tracks`` list yields the zero snapshot.
    """
    if not tracks:
        return TrackMetrics(average_popularity=0.0, top_genre=UNKNOWN_GENRE, recent_tracks=())

    average_popularity = sum(track.popularity for track in tracks) / len(tracks)
    top_genre = infer_top_genre(tracks)
    recent_tracks = build_recent_samples(recently_played)

    logger.debug(
        "Track metrics: avg_popularity=%.1f top_genre=%s tracks=%d recent=%d",
        average_popularity,
        top_genre,
        len(tracks),
        len(recent_tracks),
    )

    return TrackMetrics(
        average_popularity=average_popularity,
        top_genre=top_genre,
        recent_tracks=recent_tracks,
    )


def average_track_metrics(metrics: Sequence[TrackMetrics]) -> TrackMetrics:
    """Combine several snapshots, e.g. one per time window."""
    if not metrics:
        return TrackMetrics(average_popularity=0.0, top_genre=UNKNOWN_GENRE, recent_tracks=())

    average_popularity = sum(m.average_popularity for m in metrics) / len(metrics)

    # Counter keeps insertion order, so most_common breaks ties by first appearance
    genre_counts = Counter(m.top_genre for m in metrics)
    top_genre = genre_counts.most_common(1)[0][0]

    recent: list[RecentTrackSample] = []
    for snapshot in metrics:
        recent.extend(snapshot.recent_tracks)

    return TrackMetrics(
        average_popularity=average_popularity,
        top_genre=top_genre,
        recent_tracks=tuple(recent[:RECENT_TRACK_LIMIT]),
    )
