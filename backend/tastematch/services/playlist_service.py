"""
Blend two users' top tracks into one playlist.

Tiers, in order:
  1. tracks both users have (at most SHARED_TRACK_LIMIT, user1 order)
  2. per side, up to GENRE_MATCH_LIMIT non-shared tracks whose artists carry a
     genre both users listen to, alternating user1/user2
  3. each side's remaining unique tracks, an equal number of slots each,
     alternating user1/user2
The result is de-duplicated by id and capped at ``max_tracks``; it is never padded.
"""
from __future__ import annotations

import logging
from itertools import zip_longest
from typing import Iterable, Sequence

from tastematch.models import Artist, Track, TrackArtist
from tastematch.utils.text import normalize_whitespace

logger = logging.getLogger(__name__)

MAX_PLAYLIST_TRACKS = 50
SHARED_TRACK_LIMIT = 10
GENRE_MATCH_LIMIT = 3
PLAYLIST_NAME_PREFIX = "TasteMatch"
PLAYLIST_DESCRIPTION = "Created by TasteMatch - A shared playlist based on your music taste!"


def build_playlist_name(user1_name: str, user2_name: str) -> str:
    return f"{PLAYLIST_NAME_PREFIX}: {normalize_whitespace(user1_name)} & {normalize_whitespace(user2_name)}"


def annotate_track_genres(tracks: Iterable[Track], artists: Iterable[Artist]) -> list[Track]:
    """
    Copy genre tags from a user's top artists onto the artist references of
    their tracks (matched by id, then by name). Track payloads from Spotify
    carry no genres of their own.
    """
    by_id: dict[str, tuple[str, ...]] = {}
    by_name: dict[str, tuple[str, ...]] = {}
    for artist in artists:
        if artist.id:
            by_id.setdefault(artist.id, artist.genres)
        by_name.setdefault(artist.name.lower(), artist.genres)

    annotated: list[Track] = []
    for track in tracks:
        track_artists = []
        for ref in track.artists:
            genres = ref.genres or by_id.get(ref.id or "") or by_name.get(ref.name.lower(), ())
            track_artists.append(TrackArtist(name=ref.name, id=ref.id, genres=tuple(genres)))
        annotated.append(
            Track(
                id=track.id,
                name=track.name,
                artists=tuple(track_artists),
                album=track.album,
                popularity=track.popularity,
            )
        )
    return annotated


def _has_genre(track: Track, genres: set[str]) -> bool:
    return any(genre in genres for artist in track.artists for genre in artist.genres)


def _interleave(first: Sequence[Track], second: Sequence[Track]) -> list[Track]:
    merged: list[Track] = []
    for a, b in zip_longest(first, second):
        if a is not None:
            merged.append(a)
        if b is not None:
            merged.append(b)
    return merged


def _dedupe(tracks: Iterable[Track]) -> list[Track]:
    seen: set[str] = set()
    unique: list[Track] = []
    for track in tracks:
        if track.id in seen:
            continue
        seen.add(track.id)
        unique.append(track)
    return unique


def blend_playlist_tracks(
    tracks1: Sequence[Track],
    genres1: Iterable[str],
    tracks2: Sequence[Track],
    genres2: Iterable[str],
    max_tracks: int = MAX_PLAYLIST_TRACKS,
) -> list[Track]:
    tracks2_ids = {track.id for track in tracks2}
    all_shared = _dedupe(track for track in tracks1 if track.id in tracks2_ids)
    all_shared_ids = {track.id for track in all_shared}

    result: list[Track] = list(all_shared[:SHARED_TRACK_LIMIT])

    # Tracks past the shared cap are still "shared" and never re-enter as unique picks
    unique1 = _dedupe(track for track in tracks1 if track.id not in all_shared_ids)
    unique2 = _dedupe(track for track in tracks2 if track.id not in all_shared_ids)

    genres2_set = set(genres2)
    shared_genres = {genre for genre in genres1 if genre in genres2_set}

    genre_picks1 = [t for t in unique1 if _has_genre(t, shared_genres)][:GENRE_MATCH_LIMIT]
    genre_picks2 = [t for t in unique2 if _has_genre(t, shared_genres)][:GENRE_MATCH_LIMIT]
    result.extend(_interleave(genre_picks1, genre_picks2))

    picked_ids = {track.id for track in result}
    remaining = max(0, max_tracks - len(result))
    per_side = remaining // 2

    fill1 = [t for t in unique1 if t.id not in picked_ids][:per_side]
    fill2 = [t for t in unique2 if t.id not in picked_ids][:per_side]
    result.extend(_interleave(fill1, fill2))

    blended = _dedupe(result)[:max_tracks]

    logger.debug(
        "Blended playlist: shared=%d/%d genre_matched=%d+%d fill=%d+%d total=%d",
        min(len(all_shared), SHARED_TRACK_LIMIT),
        len(all_shared),
        len(genre_picks1),
        len(genre_picks2),
        len(fill1),
        len(fill2),
        len(blended),
    )
    return blended


def blend_playlists(
    tracks1: Sequence[Track],
    genres1: Iterable[str],
    tracks2: Sequence[Track],
    genres2: Iterable[str],
    max_tracks: int = MAX_PLAYLIST_TRACKS,
) -> list[str]:
    """Ordered, de-duplicated track ids for the blended playlist."""
    return [track.id for track in blend_playlist_tracks(tracks1, genres1, tracks2, genres2, max_tracks)]
