"""Similarity scoring between normalized course titles."""

import math
from collections import Counter

from ..constants import DEPARTMENT_BONUS, JACCARD_WEIGHT, TRIGRAM_WEIGHT


def _tokens(text: str) -> list[str]:
    """Whitespace tokens in order of first appearance, without duplicates."""
    seen: dict[str, None] = {}
    for token in text.split(" "):
        token = token.strip()
        if token:
            seen[token] = None
    return list(seen)


def _trigrams(text: str) -> Counter:
    return Counter(text[i : i + 3] for i in range(len(text) - 2))


def token_set_jaccard(first: str, second: str) -> float:
    """Jaccard index of the two titles' token sets.

    Returns:
        |intersection| / |union|, or 0.0 if both titles are empty
    """
    tokens1 = set(_tokens(first))
    tokens2 = set(_tokens(second))
    union = tokens1 | tokens2
    if not union:
        return 0.0
    return len(tokens1 & tokens2) / len(union)


def char_trigram_cosine(first: str, second: str) -> float:
    """Cosine similarity over character trigram counts.

    Titles shorter than three characters have no trigrams and score 0.0.
    """
    t1 = _trigrams(first)
    t2 = _trigrams(second)

    dot_product = sum(count * t2[trigram] for trigram, count in t1.items())
    norm1 = sum(count * count for count in t1.values())
    norm2 = sum(count * count for count in t2.values())

    # Integer product under one root keeps identical titles at exactly 1.0
    denominator = math.sqrt(norm1 * norm2)
    if denominator == 0:
        return 0.0
    return dot_product / denominator


def compute_similarity(
    offering_title: str, canonical_title: str, department_match: bool = False
) -> float:
    """Blend token and trigram similarity into a single score.

    score = 0.6 * jaccard + 0.4 * trigram, plus a 0.02 bonus (capped at 1.0)
    when the offering and canonical course belong to the same department.

    Args:
        offering_title: Normalized offering title
        canonical_title: Normalized canonical title
        department_match: Whether both departments are equal

    Returns:
        Similarity in [0.0, 1.0]
    """
    jaccard = token_set_jaccard(offering_title, canonical_title)
    trigram = char_trigram_cosine(offering_title, canonical_title)
    score = JACCARD_WEIGHT * jaccard + TRIGRAM_WEIGHT * trigram

    if department_match:
        score = min(score + DEPARTMENT_BONUS, 1.0)

    return score


def get_token_overlap(first: str, second: str) -> str:
    """Shared tokens, in the order they appear in the first title."""
    tokens2 = set(_tokens(second))
    return ", ".join(t for t in _tokens(first) if t in tokens2)
