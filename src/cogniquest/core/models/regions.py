"""
Module: regions

Purpose:
    Provides the RegionInfo dataclass - an administrative region (US state
    or federal district) as a full name plus its postal abbreviation.

Key Classes:
    - RegionInfo: Immutable region identity

Dependencies:
    - dataclasses (std)

Used By:
    - common.regions: Static lookup table
    - exam.scoring.engine: matches_region and story region checks
    - exam.collaborators: Region resolvers
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RegionInfo:
    """
    Administrative region identity (immutable).

    Attributes:
        full_name: Display name like "Virginia"
        abbreviation: Upper-case postal code like "VA"

    Example:
        >>> RegionInfo("Virginia", "VA").matches("va")
        True
    """

    full_name: str
    abbreviation: str

    def __post_init__(self) -> None:
        """Validate region on construction."""
        if not self.full_name.strip():
            raise ValueError("full_name must not be empty")
        if not self.abbreviation.strip():
            raise ValueError("abbreviation must not be empty")

    def matches(self, text: str) -> bool:
        """
        Check whether text names this region exactly.

        Comparison is trimmed and case-insensitive against either the
        full name or the abbreviation. Partial names do not match.

        Args:
            text: Raw answer text

        Returns:
            True if text equals the full name or abbreviation
        """
        normalized = text.strip().lower()
        if not normalized:
            return False
        return normalized in (self.full_name.lower(), self.abbreviation.lower())

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON storage."""
        return {"full_name": self.full_name, "abbreviation": self.abbreviation}

    @classmethod
    def from_dict(cls, data: dict) -> RegionInfo:
        """Deserialize from dictionary."""
        return cls(full_name=data["full_name"], abbreviation=data["abbreviation"])

    def __str__(self) -> str:
        return f"{self.full_name} ({self.abbreviation})"
