"""
Module: core.utils.text

Purpose:
    Text normalization shared by the scoring rules and the region lookup.
    All comparisons in the rubric are trimmed and case-insensitive.

Key Functions:
    - normalize(): Trim and lower-case
    - tokenize(): Split into alphanumeric tokens
    - condense(): Join tokens with no separator

Used By:
    - common.regions
    - exam.scoring.matching
"""

from __future__ import annotations

import re
from typing import Any, List, Optional

_NON_ALNUM = re.compile(r"[^0-9a-z]+")


def normalize(text: Any) -> str:
    """
    Trim whitespace and lower-case. Non-string values are converted first.

    Example:
        >>> normalize("  PEN ")
        'pen'
    """
    if text is None:
        return ""
    return str(text).strip().lower()


def tokenize(text: Optional[str]) -> List[str]:
    """
    Split normalized text on every non-alphanumeric run.

    Example:
        >>> tokenize("When the kids were in their teens!")
        ['when', 'the', 'kids', 'were', 'in', 'their', 'teens']
    """
    return [t for t in _NON_ALNUM.split(normalize(text)) if t]


def condense(text: Optional[str]) -> str:
    """
    Tokens joined with no separator.

    Example:
        >>> condense("Stock-broker")
        'stockbroker'
    """
    return "".join(tokenize(text))
