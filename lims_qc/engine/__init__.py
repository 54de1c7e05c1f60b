"""
Validation Engine Package

Record validation, scoring and batch reporting.
"""

from .validator import DataValidator, create_validator, resolve_record_id
from .scoring import grade_for, score_results, LEVEL_PENALTIES, MISSING_FIELD_PENALTY

__all__ = [
    "DataValidator",
    "create_validator",
    "resolve_record_id",
    "grade_for",
    "score_results",
    "LEVEL_PENALTIES",
    "MISSING_FIELD_PENALTY",
]
