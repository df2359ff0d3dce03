from __future__ import annotations

import pytest

from tastematch.utils.scoring import cosine_similarity, overlap_ratio, round_half_up
from tastematch.utils.validation import InvalidInputError, ValidationError, parse_time_range


def test_cosine_zero_norm_is_zero():
    assert cosine_similarity([0, 0, 0], [1, 2, 3]) == 0


def test_cosine_parallel_vectors():
    assert cosine_similarity([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)


def test_cosine_length_mismatch_raises():
    with pytest.raises(InvalidInputError):
        cosine_similarity([1, 2], [1, 2, 3])


def test_overlap_ratio_uses_larger_side():
    assert overlap_ratio(3, 5, 10) == 0.3
    assert overlap_ratio(0, 0, 0) == 0.0


def test_round_half_up():
    assert round_half_up(77.5) == 78
    assert round_half_up(78.5) == 79
    assert round_half_up(25.49) == 25


def test_parse_time_range():
    assert parse_time_range(None) == "medium_term"
    assert parse_time_range("") == "medium_term"
    assert parse_time_range(" Long_Term ") == "long_term"
    with pytest.raises(ValidationError):
        parse_time_range("forever")
