"""Comparison engine: overlap ratios, weighted score and the result payload."""

from __future__ import annotations

import pytest
from conftest import first_choice, make_artist, make_profile, make_track

from tastematch.models import TrackMetrics
from tastematch.services.similarity_service import (
    all_genre_overlap,
    compare_tastes,
    compatibility_score,
    find_shared_items,
    genre_comparison,
    metrics_similarity,
    metrics_vectors,
)

GENRES = ["indie rock", "dream pop", "shoegaze", "post punk", "synthwave"]


@pytest.fixture()
def close_friends():
    """Same top-5 genres, 3 of 5 artists and 2 of 5 tracks in common, popularity 70 each."""
    metrics = TrackMetrics(average_popularity=70.0, top_genre="Rock")
    artists1 = [make_artist(f"a{i}", GENRES[i]) for i in range(5)]
    artists2 = [make_artist(f"a{i}", GENRES[i]) for i in range(3)] + [
        make_artist("b3", GENRES[3]),
        make_artist("b4", GENRES[4]),
    ]
    tracks1 = [make_track(f"t{i}") for i in range(5)]
    tracks2 = [make_track("t0"), make_track("t1")] + [make_track(f"u{i}") for i in range(3)]
    return (
        make_profile("alice", artists1, tracks1, metrics),
        make_profile("bob", artists2, tracks2, metrics),
    )


@pytest.fixture()
def opposites():
    artists1 = [make_artist("r1", "metal"), make_artist("r2", "metal")]
    artists2 = [make_artist("j1", "bebop"), make_artist("j2", "cool jazz")]
    return (
        make_profile(
            "alice",
            artists1,
            [make_track("t1")],
            TrackMetrics(average_popularity=20.0, top_genre="Rock"),
        ),
        make_profile(
            "bob",
            artists2,
            [make_track("u1")],
            TrackMetrics(average_popularity=90.0, top_genre="Jazz"),
        ),
    )


def test_close_friends_score(close_friends):
    profile1, profile2 = close_friends

    result = compare_tastes(profile1, profile2, choose=first_choice)

    # 100 * (0.3 * 1 + 0.25 * 0.6 + 0.2 * 0.4 + 0.25 * 1.0)
    assert result.compatibility_score == 78
    assert [artist.id for artist in result.shared_artists] == ["a0", "a1", "a2"]
    assert [track.id for track in result.shared_tracks] == ["t0", "t1"]
    assert result.genre_overlap == tuple(GENRES)
    assert result.genre_tag == "Indie Rock Twins"
    assert result.taste_summary == (
        "You and Bob have great musical chemistry! "
        "You both enjoy indie rock, dream pop, shoegaze and love A0. "
        "You'd have a blast sharing music!"
    )


def test_identical_metrics_are_fully_similar(close_friends):
    profile1, profile2 = close_friends
    assert metrics_similarity(profile1.track_metrics, profile2.track_metrics) == pytest.approx(1.0)


def test_opposites_score_low_and_call_out_popularity_gap(opposites):
    profile1, profile2 = opposites

    result = compare_tastes(profile1, profile2, choose=first_choice)

    assert result.compatibility_score < 30
    assert result.compatibility_score == 26
    assert result.shared_artists == ()
    assert result.shared_tracks == ()
    assert result.genre_overlap == ()
    assert result.genre_tag == "Metal x Bebop Opposites"
    assert "very different tastes" in result.taste_summary
    assert "Alice loves metal while Bob is all about bebop" in result.taste_summary
    assert "completely opposite" in result.taste_summary


def test_metrics_vectors_share_pairwise_components():
    metrics1 = TrackMetrics(average_popularity=20.0, top_genre="Rock")
    metrics2 = TrackMetrics(average_popularity=90.0, top_genre="Jazz")

    vec1, vec2 = metrics_vectors(metrics1, metrics2)

    assert vec1 == [0.2, 0.0, 1.0]
    assert vec2 == [0.9, 0.0, 1.0]


def test_score_is_clamped():
    assert compatibility_score(1.0, 1.0, 1.0, 1.0) == 100
    assert compatibility_score(0.0, 0.0, 0.0, 0.0) == 0
    assert 0 <= compatibility_score(-1.0, 0.0, 0.0, 0.0) <= 100


def test_shared_sets_are_symmetric(close_friends):
    profile1, profile2 = close_friends

    forward = compare_tastes(profile1, profile2, choose=first_choice)
    backward = compare_tastes(profile2, profile1, choose=first_choice)

    assert {a.id for a in forward.shared_artists} == {a.id for a in backward.shared_artists}
    assert {t.id for t in forward.shared_tracks} == {t.id for t in backward.shared_tracks}
    assert forward.compatibility_score == backward.compatibility_score


def test_comparison_is_idempotent_with_fixed_choice(close_friends):
    profile1, profile2 = close_friends

    first = compare_tastes(profile1, profile2, choose=first_choice)
    second = compare_tastes(profile1, profile2, choose=first_choice)

    assert first.to_dict() == second.to_dict()


def test_supplementary_tracks_widen_track_overlap(close_friends):
    profile1, profile2 = close_friends
    extra1 = [make_track("x1")]
    extra2 = [make_track("x1")]

    result = compare_tastes(profile1, profile2, extra1, extra2, choose=first_choice)

    assert [track.id for track in result.shared_tracks] == ["t0", "t1", "x1"]


def test_find_shared_items_keeps_second_list_order():
    first = [make_artist("a"), make_artist("b"), make_artist("c")]
    second = [make_artist("c"), make_artist("z"), make_artist("a")]

    assert [artist.id for artist in find_shared_items(first, second)] == ["c", "a"]


def test_genre_comparison_takes_top_five_by_count():
    artists1 = [
        make_artist("a1", "pop", "dance pop"),
        make_artist("a2", "pop", "k-pop"),
        make_artist("a3", "house", "techno", "disco", "funk"),
    ]
    artists2 = [make_artist("b1", "funk", "pop")]

    comparison = genre_comparison(artists1, artists2)

    assert [item.genre for item in comparison.user1] == ["pop", "dance pop", "k-pop", "house", "techno"]
    assert comparison.user1[0].count == 2
    assert comparison.overlap == ("pop",)
    # funk is outside user1's top five but still counts in the full overlap
    assert all_genre_overlap(artists1, artists2) == ["pop", "funk"]


def test_result_payload_uses_camel_case(close_friends):
    profile1, profile2 = close_friends

    payload = compare_tastes(profile1, profile2, choose=first_choice).to_dict()

    assert payload["compatibilityScore"] == 78
    assert set(payload["trackMetricsComparison"]) == {"user1", "user2"}
    assert payload["genreOverlap"] == GENRES
    assert payload["listeningPersonality"]["user1"] in payload["personalityDescriptions"]
    assert len(payload["user2TopTracks"]) == 5
    assert payload["playfulSummary"].startswith("You both enjoy indie rock and dream pop.")
