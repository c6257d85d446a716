"""
Module: exam.config

Purpose:
    Configuration dataclass for an exam session. Immutable configuration
    with validation on construction.

Key Classes:
    - ExamConfig: Main configuration for running and scoring an exam

Dependencies:
    - dataclasses (std)
    - pathlib (std)
    - common.thresholds: Interpretation cut lines

Used By:
    - exam.controller: Session orchestration
    - cli: Built from command-line arguments
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from cogniquest.common.thresholds import InterpretationThresholds

MIN_TIMER_DURATION = 10
MAX_TIMER_DURATION = 120


@dataclass(frozen=True)
class ExamConfig:
    """
    Configuration for an exam session (immutable).

    Attributes:
        question_bank_path: JSON question bank, or None for the packaged bank
        timer_duration: Seconds allowed per question (10-120)
        has_high_school_education: Selects the interpretation cut lines
        narration_delay: Pause between narrated utterances in seconds
        region_timeout: Seconds to wait for region resolution at finish
        strict_validation: Run full JSON Schema validation on the bank
        thresholds: Interpretation cut lines

    Example:
        >>> config = ExamConfig(timer_duration=90, has_high_school_education=False)
    """

    question_bank_path: Optional[Path] = None
    timer_duration: int = 60
    has_high_school_education: bool = True

    narration_delay: float = 1.0
    region_timeout: float = 5.0
    strict_validation: bool = False

    thresholds: InterpretationThresholds = field(default_factory=InterpretationThresholds)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not MIN_TIMER_DURATION <= self.timer_duration <= MAX_TIMER_DURATION:
            raise ValueError(
                f"timer_duration must be {MIN_TIMER_DURATION}-{MAX_TIMER_DURATION} seconds: "
                f"{self.timer_duration}"
            )
        if self.narration_delay < 0:
            raise ValueError(f"narration_delay must be non-negative: {self.narration_delay}")
        if self.region_timeout <= 0:
            raise ValueError(f"region_timeout must be positive: {self.region_timeout}")
        if self.question_bank_path is not None and not isinstance(self.question_bank_path, Path):
            object.__setattr__(self, "question_bank_path", Path(self.question_bank_path))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ExamConfig:
        """
        Build a config from a JSON-style dict; missing keys keep defaults.

        Raises:
            ValueError: If a value fails validation
        """
        defaults = cls()
        bank = data.get("question_bank_path")
        return cls(
            question_bank_path=Path(bank) if bank else None,
            timer_duration=int(data.get("timer_duration", defaults.timer_duration)),
            has_high_school_education=bool(
                data.get("has_high_school_education", defaults.has_high_school_education)
            ),
            narration_delay=float(data.get("narration_delay", defaults.narration_delay)),
            region_timeout=float(data.get("region_timeout", defaults.region_timeout)),
            strict_validation=bool(data.get("strict_validation", defaults.strict_validation)),
            thresholds=InterpretationThresholds.from_dict(data.get("thresholds", {})),
        )
