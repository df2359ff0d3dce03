from __future__ import annotations

import math
from typing import Sequence

from tastematch.utils.validation import InvalidInputError


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    if len(vec1) != len(vec2):
        raise InvalidInputError(
            f"Vectors must have the same length (got {len(vec1)} and {len(vec2)})"
        )

    dot = 0.0
    norm1 = 0.0
    norm2 = 0.0
    for a, b in zip(vec1, vec2):
        dot += a * b
        norm1 += a * a
        norm2 += b * b

    if norm1 == 0 or norm2 == 0:
        return 0.0

    return dot / (math.sqrt(norm1) * math.sqrt(norm2))


def overlap_ratio(shared: int, size1: int, size2: int) -> float:
    denominator = max(size1, size2)
    if denominator == 0:
        return 0.0
    return shared / denominator


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; scores round .5 upwards
    return int(math.floor(value + 0.5))
