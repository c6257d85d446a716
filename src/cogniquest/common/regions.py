"""
Module: common.regions

Purpose:
    Static region table (50 US states plus the District of Columbia) with
    exact and free-text lookup. The table is closed; nothing outside it
    ever resolves.

Key Functions:
    - all_regions(): Every RegionInfo, in table order
    - lookup_region(): Exact full-name or abbreviation lookup
    - find_region_in_text(): Locate a region named inside free text

Dependencies:
    - re (std)
    - core.models.RegionInfo
    - core.utils.text

Used By:
    - exam.scoring.matching: Story region check
    - exam.collaborators: StaticRegionResolver
    - cli: --region argument
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

from cogniquest.core.models.regions import RegionInfo
from cogniquest.core.utils.text import normalize

_TABLE: Tuple[Tuple[str, str], ...] = (
    ("Alabama", "AL"),
    ("Alaska", "AK"),
    ("Arizona", "AZ"),
    ("Arkansas", "AR"),
    ("California", "CA"),
    ("Colorado", "CO"),
    ("Connecticut", "CT"),
    ("Delaware", "DE"),
    ("District of Columbia", "DC"),
    ("Florida", "FL"),
    ("Georgia", "GA"),
    ("Hawaii", "HI"),
    ("Idaho", "ID"),
    ("Illinois", "IL"),
    ("Indiana", "IN"),
    ("Iowa", "IA"),
    ("Kansas", "KS"),
    ("Kentucky", "KY"),
    ("Louisiana", "LA"),
    ("Maine", "ME"),
    ("Maryland", "MD"),
    ("Massachusetts", "MA"),
    ("Michigan", "MI"),
    ("Minnesota", "MN"),
    ("Mississippi", "MS"),
    ("Missouri", "MO"),
    ("Montana", "MT"),
    ("Nebraska", "NE"),
    ("Nevada", "NV"),
    ("New Hampshire", "NH"),
    ("New Jersey", "NJ"),
    ("New Mexico", "NM"),
    ("New York", "NY"),
    ("North Carolina", "NC"),
    ("North Dakota", "ND"),
    ("Ohio", "OH"),
    ("Oklahoma", "OK"),
    ("Oregon", "OR"),
    ("Pennsylvania", "PA"),
    ("Rhode Island", "RI"),
    ("South Carolina", "SC"),
    ("South Dakota", "SD"),
    ("Tennessee", "TN"),
    ("Texas", "TX"),
    ("Utah", "UT"),
    ("Vermont", "VT"),
    ("Virginia", "VA"),
    ("Washington", "WA"),
    ("West Virginia", "WV"),
    ("Wisconsin", "WI"),
    ("Wyoming", "WY"),
)

_REGIONS: Tuple[RegionInfo, ...] = tuple(RegionInfo(name, abbr) for name, abbr in _TABLE)
_BY_NAME: Dict[str, RegionInfo] = {r.full_name.lower(): r for r in _REGIONS}
_BY_ABBREVIATION: Dict[str, RegionInfo] = {r.abbreviation.lower(): r for r in _REGIONS}

# Longest names first so "west virginia" wins over "virginia"
_NAME_PATTERN = re.compile(
    r"\b("
    + "|".join(re.escape(n) for n in sorted(_BY_NAME, key=len, reverse=True))
    + r")\b"
)
_WORD = re.compile(r"[A-Za-z]+")


def all_regions() -> Tuple[RegionInfo, ...]:
    """Return every region in the table."""
    return _REGIONS


def lookup_region(raw: Optional[str]) -> Optional[RegionInfo]:
    """
    Look up a region by exact full name or abbreviation.

    Comparison is trimmed and case-insensitive.

    Example:
        >>> lookup_region(" va ")
        RegionInfo(full_name='Virginia', abbreviation='VA')
        >>> lookup_region("virgin") is None
        True
    """
    key = normalize(raw)
    if not key:
        return None
    return _BY_NAME.get(key) or _BY_ABBREVIATION.get(key)


def find_region_in_text(text: Optional[str]) -> Optional[RegionInfo]:
    """
    Find the region named somewhere in free text.

    Resolution order:
    1. The whole text is a name or abbreviation (any case)
    2. A full name appears on word boundaries; longest name wins
    3. An upper-case two-letter token is an abbreviation

    Lower-case abbreviations inside a sentence are ignored because they
    collide with ordinary words ("in", "me", "or", "hi").

    Args:
        text: Raw answer text

    Returns:
        RegionInfo or None if nothing in the table is named
    """
    if not text:
        return None

    exact = lookup_region(text)
    if exact is not None:
        return exact

    match = _NAME_PATTERN.search(" ".join(normalize(text).split()))
    if match:
        return _BY_NAME[match.group(1)]

    for word in _WORD.findall(text):
        if len(word) == 2 and word.isupper():
            region = _BY_ABBREVIATION.get(word.lower())
            if region is not None:
                return region
    return None
