"""Normalization utilities for course codes and titles."""

import re

import pandas as pd

from .constants import TITLE_ABBREVIATIONS, TITLE_STOPWORDS

# Separators removed from course codes before the alphanumeric filter
CODE_SEPARATOR_PATTERN = r"[\s\-/]"
CODE_INVALID_PATTERN = r"[^A-Z0-9]"

# Punctuation replaced with a space in titles
TITLE_PUNCTUATION_PATTERN = r"[,.:\-]"


def _to_text(value) -> str:
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    return str(value)


def normalize_code(code: str) -> str:
    """Normalize a course code for exact comparison.

    "CS 101-A", "cs101a" and "CS/101/A" all normalize to "CS101A".

    Args:
        code: Raw course code

    Returns:
        Uppercase alphanumeric code
    """
    cleaned = _to_text(code).strip().upper()
    cleaned = re.sub(CODE_SEPARATOR_PATTERN, "", cleaned)
    return re.sub(CODE_INVALID_PATTERN, "", cleaned)


def normalize_title(title: str, remove_stopwords: bool = False) -> str:
    """Normalize a course title for comparison.

    Args:
        title: Raw course title
        remove_stopwords: Drop common English stopwords (THE, AND, OF, ...)

    Returns:
        Uppercase title with punctuation replaced and whitespace collapsed
    """
    normalized = _to_text(title).strip().upper()
    normalized = re.sub(TITLE_PUNCTUATION_PATTERN, " ", normalized)
    normalized = re.sub(r"\s+", " ", normalized)

    if remove_stopwords:
        normalized = " ".join(
            word for word in normalized.split(" ") if word not in TITLE_STOPWORDS
        )

    return normalized.strip()


def expand_abbreviations(normalized_title: str) -> str:
    """Replace common course-title abbreviations with their full words.

    Works on an already normalized title, e.g. "INTRO TO PROGRAMMING" becomes
    "INTRODUCTION TO PROGRAMMING". Used only for similarity scoring; stored
    normalized titles are left as they are.

    Args:
        normalized_title: Output of normalize_title()

    Returns:
        Title with known abbreviations expanded
    """
    return " ".join(
        TITLE_ABBREVIATIONS.get(token, token) for token in normalized_title.split()
    )
