"""Shared lookup tables and rubric constants."""
