"""
Module: exam.scoring.interpretation

Purpose:
    Map a total score to an interpretation band using the
    education-dependent cut lines.

Key Functions:
    - interpret_score(): total -> Interpretation

Dependencies:
    - common.thresholds.InterpretationThresholds

Used By:
    - exam.scoring.engine
    - exam.output
"""

from __future__ import annotations

from cogniquest.common.thresholds import INTERPRETATION_THRESHOLDS, InterpretationThresholds
from cogniquest.core.models.results import Interpretation


def interpret_score(
    total: int,
    has_high_school_education: bool,
    thresholds: InterpretationThresholds = INTERPRETATION_THRESHOLDS,
) -> Interpretation:
    """
    Interpret a total score.

    With the default thresholds and high-school education, 27-30 is
    normal, 21-26 mild impairment likely and 0-20 likely impaired.
    Without high-school education the cut lines are 25 and 20.

    Example:
        >>> interpret_score(26, True).label
        'Mild Neurocognitive Disorder Likely'
        >>> interpret_score(26, False).label
        'Normal Cognition'
    """
    normal, mild = thresholds.cut_lines(has_high_school_education)
    if total >= normal:
        return Interpretation.NORMAL
    if total >= mild:
        return Interpretation.MILD_IMPAIRMENT_LIKELY
    return Interpretation.LIKELY_IMPAIRED
