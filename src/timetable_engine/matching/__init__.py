"""Course matching: similarity scoring and the offering-to-catalog rule cascade."""

from .matcher import Matcher
from .scorer import (
    char_trigram_cosine,
    compute_similarity,
    get_token_overlap,
    token_set_jaccard,
)

__all__ = [
    "Matcher",
    "char_trigram_cosine",
    "compute_similarity",
    "get_token_overlap",
    "token_set_jaccard",
]
