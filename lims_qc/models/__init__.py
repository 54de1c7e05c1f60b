"""
Quality Control Models Module

Defines data structures for validation results, standards, scores and reports.
"""

from .validation_result import ValidationLevel, ValidationResult
from .experiment import ExperimentType
from .quality import (
    SCORE_CATEGORIES,
    QualityStandard,
    QualityScore,
    StandardCheck,
    RecordDetail,
    ReportSummary,
    QualityReport,
)

__all__ = [
    "ExperimentType",
    "ValidationLevel",
    "ValidationResult",
    "SCORE_CATEGORIES",
    "QualityStandard",
    "QualityScore",
    "StandardCheck",
    "RecordDetail",
    "ReportSummary",
    "QualityReport",
]
