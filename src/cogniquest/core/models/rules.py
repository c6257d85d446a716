"""
Module: rules

Purpose:
    Scoring-rule descriptors attached to questions. Each rule kind is its
    own frozen dataclass so that a question carries exactly the data its
    scorer needs, and absence is a ``None`` rule rather than an empty
    field on a catch-all record.

Key Classes:
    - DynamicRule: Orientation rules evaluated at scoring time
    - OrientationRule: Wraps an optional DynamicRule
    - ExactMatchRule: Positional (or set) expected string values
    - ThresholdRule: Ascending tier cut points
    - KeywordRule: Story recall keywords

Key Functions:
    - rule_to_criteria(): Serialize a rule to the bank's criteria dict
    - rule_from_criteria(): Build the rule a question type expects

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - core.models.questions.Question
    - exam.loading.parser
    - exam.scoring.engine

Notes:
    Rules are not validated for length here. A short rule is a data
    problem the scoring engine absorbs by awarding 0 for the affected
    sub-check.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Union

logger = logging.getLogger(__name__)

# Older banks name the region rule after US states
_RULE_ALIASES = {"matches_state": "matches_region"}


class DynamicRule(str, Enum):
    """Orientation rule evaluated against today's date or region."""
    CURRENT_DAY = "current_day"
    CURRENT_YEAR = "current_year"
    NON_EMPTY = "non_empty"
    MATCHES_REGION = "matches_region"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional[DynamicRule]:
        """
        Parse a rule name, accepting snake_case or camelCase.

        Args:
            raw: Rule name like "current_day" or "currentDay"

        Returns:
            DynamicRule or None if raw is empty or unknown

        Raises:
            TypeError: If raw is not a string
        """
        if not raw:
            return None
        if not isinstance(raw, str):
            raise TypeError(f"dynamic_rule must be a string, got {type(raw).__name__}")
        key = "".join("_" + ch.lower() if ch.isupper() else ch for ch in raw.strip())
        key = _RULE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            logger.warning(f"Unknown dynamic rule {raw!r}; question will score 0")
            return None


@dataclass(frozen=True, slots=True)
class OrientationRule:
    """Orientation question rule; a ``None`` dynamic rule always scores 0."""

    dynamic_rule: Optional[DynamicRule] = None


@dataclass(frozen=True, slots=True)
class ExactMatchRule:
    """
    Expected string values.

    Calculation, number series and shape identification read entries by
    position. Five-word recall treats the values as an unordered set.
    """

    values: tuple[str, ...] = ()

    def at(self, index: int) -> Optional[str]:
        """Return the value at index, or None when the rule is too short."""
        if 0 <= index < len(self.values):
            return self.values[index]
        return None


@dataclass(frozen=True, slots=True)
class ThresholdRule:
    """Ascending cut points ``(low, mid, high)`` for tiered counts."""

    thresholds: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class KeywordRule:
    """Story recall keywords ``(name, profession, time phrase, region)``."""

    keywords: tuple[str, ...] = ()

    def at(self, index: int) -> Optional[str]:
        """Return the keyword at index, or None when the rule is too short."""
        if 0 <= index < len(self.keywords):
            return self.keywords[index]
        return None


ScoringRule = Union[OrientationRule, ExactMatchRule, ThresholdRule, KeywordRule]


def rule_to_criteria(rule: Optional[ScoringRule]) -> Optional[Dict[str, Any]]:
    """
    Serialize a rule to the question bank's ``scoring_criteria`` dict.

    Args:
        rule: Rule to serialize (None passes through)

    Returns:
        Criteria dict or None
    """
    if rule is None:
        return None
    if isinstance(rule, OrientationRule):
        return {"dynamic_rule": rule.dynamic_rule.value if rule.dynamic_rule else None}
    if isinstance(rule, ExactMatchRule):
        return {"exact_matches": list(rule.values)}
    if isinstance(rule, ThresholdRule):
        return {"thresholds": list(rule.thresholds)}
    if isinstance(rule, KeywordRule):
        return {"keywords": list(rule.keywords)}
    raise TypeError(f"Unsupported scoring rule: {rule!r}")


def _strings(values: Sequence[Any]) -> tuple[str, ...]:
    return tuple(str(v) for v in values)


def rule_from_criteria(
    rule_kind: Optional[type],
    criteria: Optional[Dict[str, Any]],
) -> Optional[ScoringRule]:
    """
    Build the rule a question type expects from a criteria dict.

    Only the field relevant to ``rule_kind`` is read; other populated
    fields are ignored. A missing criteria dict or missing field gives
    an empty rule of the right kind (scores 0) rather than an error.

    Args:
        rule_kind: Rule class expected by the question type, or None
            for types that are not scored from a rule
        criteria: Raw ``scoring_criteria`` mapping (may be None)

    Returns:
        ScoringRule instance or None
    """
    if rule_kind is None:
        return None
    criteria = criteria or {}

    if rule_kind is OrientationRule:
        raw = criteria.get("dynamic_rule", criteria.get("dynamicRule"))
        return OrientationRule(dynamic_rule=DynamicRule.parse(raw))
    if rule_kind is ExactMatchRule:
        raw = criteria.get("exact_matches", criteria.get("exactMatches")) or []
        return ExactMatchRule(values=_strings(raw))
    if rule_kind is ThresholdRule:
        raw = criteria.get("thresholds") or []
        return ThresholdRule(thresholds=tuple(int(v) for v in raw))
    if rule_kind is KeywordRule:
        raw = criteria.get("keywords") or []
        return KeywordRule(keywords=_strings(raw))
    raise TypeError(f"Unsupported scoring rule kind: {rule_kind!r}")
