"""
Module: exam.scoring.matching

Purpose:
    Lenient free-text comparisons used by story recall.

Key Functions:
    - contains_keyword(): Exact, whole-token or condensed-substring match
    - contains_phrase(): Phrase on word boundaries
    - matches_region_answer(): Region answer vs region keyword (contains or same region)

Dependencies:
    - re (std)
    - core.utils.text
    - common.regions: Region Lookup

Used By:
    - exam.scoring.engine
"""

from __future__ import annotations

import re

from cogniquest.common.regions import lookup_region
from cogniquest.core.models import RegionInfo
from cogniquest.core.utils.text import condense, normalize, tokenize

_WORD = re.compile(r"[A-Za-z]+")


def contains_keyword(answer: str, keyword: str) -> bool:
    """
    Check whether a free-text answer contains a keyword.

    Matches when, after trimming and lower-casing:
    1. The answer equals the keyword
    2. One of the answer's tokens equals the keyword
    3. The condensed answer contains the condensed keyword
       (so "stock broker" matches "stockbroker")

    Example:
        >>> contains_keyword("She was a Stock-Broker", "stockbroker")
        True
        >>> contains_keyword("", "jill")
        False
    """
    normalized_answer = normalize(answer)
    normalized_keyword = normalize(keyword)
    if not normalized_answer or not normalized_keyword:
        return False
    if normalized_answer == normalized_keyword:
        return True
    if normalized_keyword in tokenize(normalized_answer):
        return True
    condensed_keyword = condense(normalized_keyword)
    return bool(condensed_keyword) and condensed_keyword in condense(normalized_answer)


def contains_phrase(answer: str, phrase: str) -> bool:
    """True if ``phrase`` appears in ``answer`` on word boundaries."""
    words = tokenize(phrase)
    if not words:
        return False
    pattern = r"\b" + r"\s+".join(re.escape(w) for w in words) + r"\b"
    return re.search(pattern, " ".join(tokenize(answer))) is not None


def _mentions_region(answer: str, region: RegionInfo) -> bool:
    """True if the answer names ``region`` anywhere, by name or upper-case code."""
    if region.matches(answer):
        return True
    if contains_phrase(answer, region.full_name):
        return True
    return any(
        word.isupper() and word == region.abbreviation.upper()
        for word in _WORD.findall(answer)
    )


def matches_region_answer(answer: str, keyword: str) -> bool:
    """
    Check a story region answer against the region keyword.

    Matches when the normalized answer equals the keyword, contains it,
    or names the region the keyword stands for anywhere in the text
    ("Chicago IL" vs "illinois", "Iowa, no wait, IL" vs "illinois").

    Abbreviations are only recognised inside longer text when written in
    upper case, so "lives in nevada" never counts as naming "IN".

    Example:
        >>> matches_region_answer("IL", "illinois")
        True
        >>> matches_region_answer("Chicagoland", "chicago")
        True
    """
    normalized_answer = normalize(answer)
    normalized_keyword = normalize(keyword)
    if not normalized_answer or not normalized_keyword:
        return False
    if normalized_answer == normalized_keyword:
        return True
    if normalized_keyword in normalized_answer:
        return True

    target_region = lookup_region(keyword)
    if target_region is None:
        return False
    return _mentions_region(str(answer), target_region)
