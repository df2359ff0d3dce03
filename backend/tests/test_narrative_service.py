"""Display text: banded taste summary, genre tag and playful summary."""

from __future__ import annotations

from conftest import first_choice, make_artist, make_track

from tastematch.models import GenreComparison, GenreCount, TrackMetrics
from tastematch.services.narrative_service import (
    GENRE_TAG_TEMPLATES,
    assign_genre_tag,
    generate_playful_summary,
    generate_taste_summary,
)


def comparison(user1=(), user2=(), overlap=()) -> GenreComparison:
    return GenreComparison(
        user1=tuple(GenreCount(genre, 1) for genre in user1),
        user2=tuple(GenreCount(genre, 1) for genre in user2),
        overlap=tuple(overlap),
    )


def metrics(popularity: float) -> TrackMetrics:
    return TrackMetrics(average_popularity=popularity, top_genre="Pop")


def summary(score, shared_artists=(), genres=None, pop1=50.0, pop2=50.0):
    return generate_taste_summary(
        user1_name="Alice",
        user2_name="Bob",
        shared_artists=list(shared_artists),
        genre_comparison=genres or comparison(),
        metrics1=metrics(pop1),
        metrics2=metrics(pop2),
        compatibility_score=score,
    )


def playful(shared_artists=(), shared_tracks=(), genres=None, pop1=50.0, pop2=50.0, **lists):
    return generate_playful_summary(
        user1_name="Alice",
        user2_name="Bob",
        shared_artists=list(shared_artists),
        shared_tracks=list(shared_tracks),
        genre_comparison=genres or comparison(),
        metrics1=metrics(pop1),
        metrics2=metrics(pop2),
        user1_top_artists=lists.get("artists1", []),
        user2_top_artists=lists.get("artists2", []),
        user1_top_tracks=lists.get("tracks1", []),
        user2_top_tracks=lists.get("tracks2", []),
    )


# ---------- taste summary ----------


def test_soulmates_band_mentions_two_shared_artists():
    genres = comparison(["pop", "rock"], ["pop", "rock"], ["pop", "rock"])
    artists = [make_artist("a1", name="Lorde"), make_artist("a2", name="Robyn")]

    text = summary(85, artists, genres)

    assert text == (
        "You and Bob are musical soulmates! You both love pop, rock and share favorite "
        "artists like Lorde and Robyn. Your playlists would be practically identical!"
    )


def test_band_boundaries():
    assert "soulmates" in summary(80)
    assert "great musical chemistry" in summary(79)
    assert "some musical overlap" in summary(40)
    assert "very different tastes" in summary(39)
    assert "very different tastes" in summary(20)
    assert "musical opposites" in summary(19)


def test_overlap_band_without_shared_genres_names_each_top_genre():
    genres = comparison(["jazz"], ["techno"])

    text = summary(45, genres=genres, pop1=20.0, pop2=60.0)

    assert "Alice is into jazz while Bob prefers techno" in text
    assert "One of you loves the hits, the other digs deeper!" in text


def test_musical_opposites_with_popularity_gap():
    genres = comparison(["metal"], ["bebop"])

    text = summary(12, genres=genres, pop1=20.0, pop2=90.0)

    assert text == (
        "You and Bob are musical opposites! Alice is a metal fan while Bob vibes with bebop. "
        "Not a single shared favorite artist! Your music discovery levels are polar opposites! "
        "This could be interesting... or chaotic!"
    )


def test_small_popularity_gap_has_no_callout():
    text = summary(12, genres=comparison(["metal"], ["bebop"]), pop1=40.0, pop2=60.0)

    assert "polar opposites" not in text


# ---------- genre tag ----------


def test_genre_tag_uses_injected_choice():
    genres = comparison(overlap=["hip hop", "trap"])

    assert assign_genre_tag(genres, choose=first_choice) == "Hip Hop Twins"
    assert assign_genre_tag(genres, choose=lambda options: options[-1]) == "Hip Hop Heads"


def test_genre_tag_offers_every_template():
    seen = []

    def record(options):
        seen.extend(options)
        return options[2]

    assert assign_genre_tag(comparison(overlap=["house", "disco"]), choose=record) == "House Crew"
    assert len(seen) == len(GENRE_TAG_TEMPLATES)


def test_genre_tag_single_and_empty_overlap():
    assert assign_genre_tag(comparison(overlap=["k-pop"])) == "K-pop Buddies"
    assert assign_genre_tag(comparison(["metal"], ["bebop"])) == "Metal x Bebop Opposites"
    assert assign_genre_tag(comparison(["metal"], [])) == "Genre Explorers"


# ---------- playful summary ----------


def test_playful_summary_uses_first_two_templates():
    genres = comparison(overlap=["pop", "rock", "jazz"])
    shared = [make_artist("a1", name="Lorde")]

    text = playful(shared_artists=shared, genres=genres)

    assert text == (
        "You both enjoy pop and rock. Looks like you'd have a good time swapping playlists. "
        "You both have a soft spot for Lorde."
    )


def test_playful_summary_without_overlap():
    text = playful()

    assert text == (
        "You each bring something different to the mix, and unique tastes make for "
        "interesting listening! No shared favorite artists, but plenty of new music to "
        "discover from each other!"
    )


def test_playful_summary_never_exceeds_two_sentences():
    text = playful(
        artists1=[make_artist("a1", name="Lorde")],
        artists2=[make_artist("b1", name="Burial")],
        tracks1=[make_track("t1", name="Royals")],
        tracks2=[make_track("u1", name="Archangel")],
        pop1=10.0,
        pop2=90.0,
    )

    assert "Lorde" not in text
    assert "Royals" not in text
