"""Centralized rubric thresholds.

The interpretation cut lines are the only tuning constants in the rubric.
Keeping them in one dataclass lets a deployment adjust them through
configuration without touching the scoring code.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InterpretationThresholds:
    """Lowest total for each band, split by education level."""

    # With high-school education
    high_school_normal: int = 27  # 27-30 normal
    high_school_mild: int = 21  # 21-26 mild neurocognitive disorder

    # Without high-school education
    low_education_normal: int = 25  # 25-30 normal
    low_education_mild: int = 20  # 20-24 mild neurocognitive disorder

    def __post_init__(self) -> None:
        if self.high_school_normal <= self.high_school_mild:
            raise ValueError(
                f"high_school_normal ({self.high_school_normal}) must exceed "
                f"high_school_mild ({self.high_school_mild})"
            )
        if self.low_education_normal <= self.low_education_mild:
            raise ValueError(
                f"low_education_normal ({self.low_education_normal}) must exceed "
                f"low_education_mild ({self.low_education_mild})"
            )

    def cut_lines(self, has_high_school_education: bool) -> tuple[int, int]:
        """Return ``(normal, mild)`` lower bounds for the education level."""
        if has_high_school_education:
            return self.high_school_normal, self.high_school_mild
        return self.low_education_normal, self.low_education_mild

    def to_dict(self) -> dict:
        return {
            "high_school_normal": self.high_school_normal,
            "high_school_mild": self.high_school_mild,
            "low_education_normal": self.low_education_normal,
            "low_education_mild": self.low_education_mild,
        }

    @classmethod
    def from_dict(cls, data: dict) -> InterpretationThresholds:
        defaults = cls()
        return cls(
            high_school_normal=int(data.get("high_school_normal", defaults.high_school_normal)),
            high_school_mild=int(data.get("high_school_mild", defaults.high_school_mild)),
            low_education_normal=int(data.get("low_education_normal", defaults.low_education_normal)),
            low_education_mild=int(data.get("low_education_mild", defaults.low_education_mild)),
        )


# Global instance for easy import
INTERPRETATION_THRESHOLDS = InterpretationThresholds()
