"""
Taste comparison engine.

Score = round(100 * (0.30 * metrics + 0.25 * artists + 0.20 * tracks + 0.25 * genres))

where ``metrics`` is the cosine similarity of the two metrics vectors and each
of the other terms is ``|shared| / max(|side1|, |side2|)``.
"""
from __future__ import annotations

import logging
import random
from typing import Callable, Iterable, Protocol, Sequence, TypeVar

from tastematch.models import (
    Artist,
    ComparisonResult,
    GenreComparison,
    GenreCount,
    TasteProfile,
    Track,
    TrackMetrics,
    count_genres,
)
from tastematch.services.narrative_service import (
    assign_genre_tag,
    generate_playful_summary,
    generate_taste_summary,
)
from tastematch.services.personality_service import classify_personality, describe_personality
from tastematch.utils.scoring import cosine_similarity, overlap_ratio, round_half_up

logger = logging.getLogger(__name__)

TOP_GENRE_LIMIT = 5

METRICS_WEIGHT = 0.30
ARTIST_WEIGHT = 0.25
TRACK_WEIGHT = 0.20
GENRE_WEIGHT = 0.25


class _HasId(Protocol):
    @property
    def id(self) -> str: ...


ItemT = TypeVar("ItemT", bound=_HasId)

Chooser = Callable[[Sequence[str]], str]


def find_shared_items(items1: Iterable[ItemT], items2: Iterable[ItemT]) -> list[ItemT]:
    """Items of ``items2`` whose id also appears in ``items1``, in ``items2`` order."""
    ids1 = {item.id for item in items1}
    return [item for item in items2 if item.id in ids1]


def merge_track_pool(primary: Iterable[Track], supplementary: Iterable[Track] | None) -> list[Track]:
    pool: list[Track] = []
    seen: set[str] = set()
    for track in list(primary) + list(supplementary or []):
        if track.id in seen:
            continue
        seen.add(track.id)
        pool.append(track)
    return pool


def genre_breakdown(artists: Iterable[Artist], limit: int | None = None) -> tuple[GenreCount, ...]:
    # most_common is a stable sort, so equal counts stay in first-seen order
    ranked = count_genres(artists).most_common(limit)
    return tuple(GenreCount(genre=genre, count=count) for genre, count in ranked)


def genre_comparison(artists1: Iterable[Artist], artists2: Iterable[Artist]) -> GenreComparison:
    top1 = genre_breakdown(artists1, TOP_GENRE_LIMIT)
    top2 = genre_breakdown(artists2, TOP_GENRE_LIMIT)
    top2_genres = {item.genre for item in top2}
    overlap = tuple(item.genre for item in top1 if item.genre in top2_genres)
    return GenreComparison(user1=top1, user2=top2, overlap=overlap)


def metrics_vectors(metrics1: TrackMetrics, metrics2: TrackMetrics) -> tuple[list[float], list[float]]:
    """
    Build the two metrics vectors.

    The genre-match flag and the recent-track-count similarity are pairwise
    values, so both vectors carry the same number in those slots. Only the
    popularity component differs between users.
    """
    genre_match = 1.0 if metrics1.top_genre == metrics2.top_genre else 0.0
    track_count_similarity = 1 - abs(len(metrics1.recent_tracks) - len(metrics2.recent_tracks)) / 3

    vec1 = [metrics1.average_popularity / 100, genre_match, track_count_similarity]
    vec2 = [metrics2.average_popularity / 100, genre_match, track_count_similarity]
    return vec1, vec2


def metrics_similarity(metrics1: TrackMetrics, metrics2: TrackMetrics) -> float:
    vec1, vec2 = metrics_vectors(metrics1, metrics2)
    return cosine_similarity(vec1, vec2)


def compatibility_score(
    metrics_sim: float,
    artist_ratio: float,
    track_ratio: float,
    genre_ratio: float,
) -> int:
    raw = (
        metrics_sim * METRICS_WEIGHT
        + artist_ratio * ARTIST_WEIGHT
        + track_ratio * TRACK_WEIGHT
        + genre_ratio * GENRE_WEIGHT
    )
    return max(0, min(100, round_half_up(raw * 100)))


def compare_tastes(
    profile1: TasteProfile,
    profile2: TasteProfile,
    supplementary_tracks1: Sequence[Track] | None = None,
    supplementary_tracks2: Sequence[Track] | None = None,
    choose: Chooser = random.choice,
) -> ComparisonResult:
    """
    Compare two taste profiles.

    Supplementary track lists (e.g. short-term top tracks) widen each side's
    track pool so overlaps outside the main top-track window still count.
    ``choose`` picks the genre tag template; everything else is deterministic.
    """
    metrics1 = profile1.track_metrics
    metrics2 = profile2.track_metrics
    metrics_sim = metrics_similarity(metrics1, metrics2)

    shared_artists = find_shared_items(profile1.top_artists, profile2.top_artists)

    pool1 = merge_track_pool(profile1.top_tracks, supplementary_tracks1)
    pool2 = merge_track_pool(profile2.top_tracks, supplementary_tracks2)
    shared_tracks = find_shared_items(pool1, pool2)

    genres = genre_comparison(profile1.top_artists, profile2.top_artists)

    artist_ratio = overlap_ratio(len(shared_artists), len(profile1.top_artists), len(profile2.top_artists))
    track_ratio = overlap_ratio(len(shared_tracks), len(pool1), len(pool2))
    genre_ratio = overlap_ratio(len(genres.overlap), len(genres.user1), len(genres.user2))

    score = compatibility_score(metrics_sim, artist_ratio, track_ratio, genre_ratio)

    logger.info(
        "Compared %s and %s: score=%d metrics=%.3f artists=%.2f tracks=%.2f genres=%.2f",
        profile1.user.id,
        profile2.user.id,
        score,
        metrics_sim,
        artist_ratio,
        track_ratio,
        genre_ratio,
    )

    user1_name = profile1.user.display_name
    user2_name = profile2.user.display_name

    taste_summary = generate_taste_summary(
        user1_name=user1_name,
        user2_name=user2_name,
        shared_artists=shared_artists,
        genre_comparison=genres,
        metrics1=metrics1,
        metrics2=metrics2,
        compatibility_score=score,
    )
    playful_summary = generate_playful_summary(
        user1_name=user1_name,
        user2_name=user2_name,
        shared_artists=shared_artists,
        shared_tracks=shared_tracks,
        genre_comparison=genres,
        metrics1=metrics1,
        metrics2=metrics2,
        user1_top_artists=profile1.top_artists,
        user2_top_artists=profile2.top_artists,
        user1_top_tracks=profile1.top_tracks,
        user2_top_tracks=profile2.top_tracks,
    )

    personality1 = classify_personality(profile1)
    personality2 = classify_personality(profile2)

    return ComparisonResult(
        compatibility_score=score,
        user1_metrics=metrics1,
        user2_metrics=metrics2,
        shared_artists=tuple(shared_artists),
        shared_tracks=tuple(shared_tracks),
        genre_comparison=genres,
        taste_summary=taste_summary,
        user1_personality=personality1,
        user2_personality=personality2,
        genre_tag=assign_genre_tag(genres, choose=choose),
        user1_top_artists=profile1.top_artists,
        user1_top_tracks=profile1.top_tracks,
        user2_top_artists=profile2.top_artists,
        user2_top_tracks=profile2.top_tracks,
        playful_summary=playful_summary,
        personality_descriptions={
            personality1: describe_personality(personality1),
            personality2: describe_personality(personality2),
        },
    )


def all_genre_overlap(artists1: Iterable[Artist], artists2: Iterable[Artist]) -> list[str]:
    """Every genre both users mention (not just top 5), in user1 first-seen order."""
    genres2 = set(count_genres(artists2))
    return [genre for genre in count_genres(artists1) if genre in genres2]
