"""
Display text for a comparison: the banded taste summary, the genre tag and
the short playful summary. None of this feeds back into scoring.
"""
from __future__ import annotations

import random
from typing import Callable, Optional, Sequence

from tastematch.models import Artist, GenreComparison, Track, TrackMetrics
from tastematch.utils.text import capitalize_words

Chooser = Callable[[Sequence[str]], str]

GENRE_TAG_TEMPLATES = (
    "{genre} Twins",
    "{genre} Squad",
    "{genre} Crew",
    "{genre} Vibes",
    "{genre} Lovers",
    "{genre} Heads",
)

PLAYFUL_SENTENCE_LIMIT = 2


def _popularity_gap(metrics1: TrackMetrics, metrics2: TrackMetrics) -> float:
    return abs(metrics1.average_popularity - metrics2.average_popularity)


# ---------- taste summary ----------


def generate_taste_summary(
    user1_name: str,
    user2_name: str,
    shared_artists: Sequence[Artist],
    genre_comparison: GenreComparison,
    metrics1: TrackMetrics,
    metrics2: TrackMetrics,
    compatibility_score: int,
) -> str:
    shared_genres = ", ".join(genre_comparison.overlap[:3])
    user1_top = genre_comparison.user1_top_genre or ""
    user2_top = genre_comparison.user2_top_genre or ""
    popularity_gap = _popularity_gap(metrics1, metrics2)

    if compatibility_score >= 80:
        summary = f"You and {user2_name} are musical soulmates! "
        if shared_genres:
            summary += f"You both love {shared_genres}"
        if shared_artists:
            summary += f" and share favorite artists like {shared_artists[0].name}"
            if len(shared_artists) > 1:
                summary += f" and {shared_artists[1].name}"
        summary += ". Your playlists would be practically identical!"
        return summary

    if compatibility_score >= 60:
        summary = f"You and {user2_name} have great musical chemistry! "
        if shared_genres:
            summary += f"You both enjoy {shared_genres}"
        if shared_artists:
            summary += f" and love {shared_artists[0].name}"
        summary += ". You'd have a blast sharing music!"
        return summary

    if compatibility_score >= 40:
        summary = f"You and {user2_name} have some musical overlap. "
        if shared_genres:
            summary += f"You both like {shared_genres}"
        else:
            summary += f"{user1_name} is into {user1_top} while {user2_name} prefers {user2_top}"
        if popularity_gap > 30:
            summary += ". One of you loves the hits, the other digs deeper!"
        summary += " You'll discover new music from each other!"
        return summary

    if compatibility_score >= 20:
        summary = f"You and {user2_name} have very different tastes! "
        if shared_genres:
            summary += f"You only share {shared_genres}"
        else:
            summary += f"{user1_name} loves {user1_top} while {user2_name} is all about {user2_top}"
        if popularity_gap > 40:
            summary += ". Your music discovery levels are completely opposite!"
        summary += " But opposites attract, right?"
        return summary

    summary = f"You and {user2_name} are musical opposites! "
    summary += f"{user1_name} is a {user1_top} fan while {user2_name} vibes with {user2_top}. "
    if not shared_artists:
        summary += "Not a single shared favorite artist! "
    if popularity_gap > 50:
        summary += "Your music discovery levels are polar opposites! "
    summary += "This could be interesting... or chaotic!"
    return summary


# ---------- genre tag ----------


def assign_genre_tag(genre_comparison: GenreComparison, choose: Chooser = random.choice) -> str:
    overlap = genre_comparison.overlap
    if len(overlap) >= 2:
        main_genre = capitalize_words(overlap[0])
        labels = [template.format(genre=main_genre) for template in GENRE_TAG_TEMPLATES]
        return choose(labels)
    if len(overlap) == 1:
        return f"{capitalize_words(overlap[0])} Buddies"

    user1_top = genre_comparison.user1_top_genre
    user2_top = genre_comparison.user2_top_genre
    if user1_top and user2_top:
        return f"{capitalize_words(user1_top)} x {capitalize_words(user2_top)} Opposites"
    return "Genre Explorers"


# ---------- playful summary ----------


def _first_unique(items: Sequence[Artist] | Sequence[Track], shared_ids: set[str]):
    return next((item for item in items if item.id not in shared_ids), None)


def generate_playful_summary(
    user1_name: str,
    user2_name: str,
    shared_artists: Sequence[Artist],
    shared_tracks: Sequence[Track],
    genre_comparison: GenreComparison,
    metrics1: TrackMetrics,
    metrics2: TrackMetrics,
    user1_top_artists: Sequence[Artist],
    user2_top_artists: Sequence[Artist],
    user1_top_tracks: Sequence[Track],
    user2_top_tracks: Sequence[Track],
) -> str:
    shared_genres = genre_comparison.overlap[:2]
    shared_artist_ids = {artist.id for artist in shared_artists}
    shared_track_ids = {track.id for track in shared_tracks}

    user1_artist = _first_unique(user1_top_artists, shared_artist_ids)
    user2_artist = _first_unique(user2_top_artists, shared_artist_ids)
    user1_track = _first_unique(user1_top_tracks, shared_track_ids)
    user2_track = _first_unique(user2_top_tracks, shared_track_ids)

    popularity_gap = _popularity_gap(metrics1, metrics2)
    both_mainstream = metrics1.average_popularity > 60 and metrics2.average_popularity > 60
    both_indie = metrics1.average_popularity < 40 and metrics2.average_popularity < 40

    def genre_line() -> Optional[str]:
        if shared_genres:
            return (
                f"You both enjoy {' and '.join(shared_genres)}. "
                "Looks like you'd have a good time swapping playlists."
            )
        return "You each bring something different to the mix, and unique tastes make for interesting listening!"

    def artist_line() -> Optional[str]:
        if shared_artists:
            return f"You both have a soft spot for {shared_artists[0].name}."
        return "No shared favorite artists, but plenty of new music to discover from each other!"

    def popularity_line() -> Optional[str]:
        if both_indie:
            return "Both of you dig deep for hidden gems, perfect for discovering new music together."
        if both_mainstream:
            return "You both love the hits, so your playlists would be full of crowd-pleasers."
        if popularity_gap > 30:
            return "One of you loves the hits, the other digs deeper. Nice balance!"
        return "Your music discovery levels are pretty well matched."

    def unique_artist_line() -> Optional[str]:
        if user1_artist and user2_artist:
            return (
                f"{user1_name} is into {user1_artist.name}, while {user2_name} prefers "
                f"{user2_artist.name}. Plenty to share!"
            )
        return None

    def unique_track_line() -> Optional[str]:
        if user1_track and user2_track:
            return (
                f'Top tracks like "{user1_track.name}" and "{user2_track.name}" '
                "show off your unique styles."
            )
        return None

    templates: list[Callable[[], Optional[str]]] = [
        genre_line,
        artist_line,
        popularity_line,
        unique_artist_line,
        unique_track_line,
    ]

    sentences: list[str] = []
    for template in templates:
        sentence = template()
        if sentence:
            sentences.append(sentence)
        if len(sentences) >= PLAYFUL_SENTENCE_LIMIT:
            break
    return " ".join(sentences)
