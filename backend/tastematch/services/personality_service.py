from __future__ import annotations

from typing import Iterable

from tastematch.models import Artist, ListeningStats, TasteProfile, count_genres

NOMAD = "The Nomad"
VOYAGER = "The Voyager"
ADVENTURER = "The Adventurer"
DEVOTEE = "The Devotee"
DEEP_DIVER = "The Deep Diver"
TOP_CHARTER = "The Top Charter"
SPECIALIST = "The Specialist"
MAVERICK = "The Maverick"
CONNOISSEUR = "The Connoisseur"
ENTHUSIAST = "The Enthusiast"
TIME_TRAVELER = "The Time Traveler"
FAN_CLUBBER = "The Fan Clubber"
JUKEBOXER = "The Jukeboxer"
MUSICOLOGIST = "The Musicologist"
REPLAYER = "The Replayer"
EARLY_ADOPTER = "The Early Adopter"

PERSONALITY_DESCRIPTIONS: dict[str, str] = {
    NOMAD: (
        'These "sonic explorers" are happy to listen to all kinds of music. But the handful of '
        'artists and songs they love will always be with them, "kind of like a musical souvenir."'
    ),
    VOYAGER: 'Voyagers live and breathe music and expand their world "through sound."',
    ADVENTURER: (
        'A "seeker of sound," Adventurers veer out into the "unknown, searching for fresher '
        'artists, deeper cuts, newer tracks."'
    ),
    DEVOTEE: (
        "Devoted listeners have an encyclopedic knowledge of their most beloved artists. "
        "They know the words to the deep cuts and the hits."
    ),
    DEEP_DIVER: (
        "Deep Divers delve into their favorite artists' catalogs to take "
        '"in all the sights and sounds" they discover along the way.'
    ),
    TOP_CHARTER: "While others prefer the obscure, the Top Charter is here for the hits only.",
    SPECIALIST: (
        "The most selective of the bunch. Specialists are curators, but once they fall in love "
        "with an artist, they're all in."
    ),
    MAVERICK: (
        'A more rebellious music lover, Mavericks are "frolicking in that sidestream" while the '
        "masses flock to the mainstream."
    ),
    CONNOISSEUR: (
        'The Connoisseur has "taste that people can get behind." The friend whose playlist '
        "never disappoints."
    ),
    ENTHUSIAST: (
        "Enthusiasts are super fans who always know what their idols are doing and are always "
        "ready to support them."
    ),
    TIME_TRAVELER: (
        "Time Travelers seek out music that's new to them, "
        '"regardless of whether it\'s new to the rest of the world."'
    ),
    FAN_CLUBBER: (
        "Every artist's ideal fan, the Fan Clubber, supports their fave through and through "
        'with their "full heart."'
    ),
    JUKEBOXER: (
        "Jukeboxers act like every song they like is one of their favorite songs, and they're "
        "happy to queue them all up."
    ),
    MUSICOLOGIST: (
        "Musicologists are more preoccupied with the sonic elements of songs, "
        '"gravitating towards songs that stand the test of time."'
    ),
    REPLAYER: 'These are "comfort listeners" who stick to a few core artists on their playlists.',
    EARLY_ADOPTER: (
        'Early Adopters are always on "the pulse of new music" and are the first to pick up on trends.'
    ),
}

FALLBACK_DESCRIPTION = "A unique music listener with their own special taste!"

PERSONALITY_LABELS: tuple[str, ...] = tuple(PERSONALITY_DESCRIPTIONS)


# ---------- stats ----------


def genre_stats(top_artists: Iterable[Artist], average_popularity: float = 0.0) -> ListeningStats:
    counts = count_genres(top_artists)
    total = sum(counts.values())

    if counts:
        dominant_genre, dominant_count = counts.most_common(1)[0]
    else:
        dominant_genre, dominant_count = None, 0

    return ListeningStats(
        unique_genre_count=len(counts),
        dominant_genre=dominant_genre,
        dominant_genre_share=dominant_count / total if total > 0 else 0.0,
        total_genre_mentions=total,
        average_popularity=average_popularity,
    )


def profile_stats(profile: TasteProfile) -> ListeningStats:
    return genre_stats(profile.top_artists, profile.track_metrics.average_popularity)


# ---------- classification ----------


def assign_listening_personality(stats: ListeningStats) -> str:
    """
    First matching rule wins. The conditions overlap on purpose, so the
    order of the checks is part of the behaviour.
    """
    unique = stats.unique_genre_count
    share = stats.dominant_genre_share
    popularity = stats.average_popularity

    if unique > 10:
        return NOMAD
    if unique > 6:
        return VOYAGER
    if unique > 4 and popularity < 50:
        return ADVENTURER
    if share > 0.7 and stats.has_genre:
        return DEVOTEE
    if popularity < 30:
        return DEEP_DIVER
    if popularity > 80:
        return TOP_CHARTER
    if unique <= 2 and stats.has_genre:
        return SPECIALIST
    if unique > 4 and popularity < 40:
        return MAVERICK
    if 60 < popularity < 80:
        return CONNOISSEUR
    if 3 < unique <= 5:
        return ENTHUSIAST
    if popularity < 40:
        return TIME_TRAVELER
    if 0.5 < share <= 0.7:
        return FAN_CLUBBER
    if 5 < unique <= 7:
        return JUKEBOXER
    if 40 < popularity < 60:
        return MUSICOLOGIST
    if unique <= 3:
        return REPLAYER
    return EARLY_ADOPTER


def classify_personality(profile: TasteProfile) -> str:
    return assign_listening_personality(profile_stats(profile))


def describe_personality(label: str) -> str:
    return PERSONALITY_DESCRIPTIONS.get(label, FALLBACK_DESCRIPTION)
