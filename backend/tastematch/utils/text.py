from __future__ import annotations

import re

WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(value: str) -> str:
    return WHITESPACE_RE.sub(" ", value.strip())


def capitalize_words(value: str) -> str:
    """Upper-case the first letter of each space separated word ("hip hop" -> "Hip Hop")."""
    return " ".join(word[:1].upper() + word[1:] for word in value.split(" "))
