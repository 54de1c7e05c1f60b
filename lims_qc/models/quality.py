"""
Quality standard, score and report models.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Tuple

from .validation_result import ValidationLevel, ValidationResult


SCORE_CATEGORIES = ("completeness", "accuracy", "consistency", "reliability")


@dataclass(frozen=True)
class QualityStandard:
    """
    Acceptable envelope for one measurable parameter of one experiment stage.

    Looked up by ``parameter``; the first match in a table wins.
    """

    name: str
    parameter: str
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    optimal_value: Optional[float] = None
    optimal_range: Optional[Tuple[float, float]] = None
    unit: Optional[str] = None
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "name": self.name,
            "parameter": self.parameter,
            "minValue": self.min_value,
            "maxValue": self.max_value,
            "optimalValue": self.optimal_value,
            "optimalRange": list(self.optimal_range) if self.optimal_range else None,
            "unit": self.unit,
            "source": self.source,
        }
        return {k: v for k, v in data.items() if v is not None}

    def __str__(self):
        low, high = self.optimal_range or (None, None)
        return (
            f"{self.parameter}: min={self.min_value} max={self.max_value} "
            f"optimal={low}-{high} {self.unit or ''}"
        ).rstrip()


@dataclass
class QualityScore:
    """Score of one record, recomputed on demand. Never persisted."""

    total_score: float
    grade: str
    category_scores: Dict[str, float]
    improvements: List[str] = field(default_factory=list)
    max_score: float = 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalScore": self.total_score,
            "maxScore": self.max_score,
            "grade": self.grade,
            "categoryScores": dict(self.category_scores),
            "improvements": list(self.improvements),
        }


@dataclass(frozen=True)
class StandardCheck:
    """Outcome of checking a bare value against a quality standard."""

    is_valid: bool
    level: ValidationLevel
    message: str
    standard: Optional[QualityStandard] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "isValid": self.is_valid,
            "level": self.level.value,
            "message": self.message,
        }
        if self.standard is not None:
            data["standard"] = self.standard.to_dict()
        return data


@dataclass
class RecordDetail:
    """Per-record entry of a quality report."""

    record_id: str
    score: QualityScore
    validation_results: List[ValidationResult] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(
            r.level in (ValidationLevel.ERROR, ValidationLevel.CRITICAL)
            for r in self.validation_results
        )

    @property
    def has_warnings(self) -> bool:
        return any(r.level == ValidationLevel.WARNING for r in self.validation_results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recordId": self.record_id,
            "score": self.score.to_dict(),
            "validationResults": [r.to_dict() for r in self.validation_results],
        }


@dataclass
class ReportSummary:
    """Aggregate counts over a batch of records."""

    total_records: int = 0
    valid_records: int = 0
    error_records: int = 0
    warning_records: int = 0
    average_score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRecords": self.total_records,
            "validRecords": self.valid_records,
            "errorRecords": self.error_records,
            "warningRecords": self.warning_records,
            "averageScore": self.average_score,
        }


@dataclass
class QualityReport:
    """
    Fleet-wide quality report over a batch of records.

    Attributes:
        summary: Aggregate counts and the average score
        details: One entry per record, in input order
        recommendations: Most frequent issue messages, annotated with counts
    """

    summary: ReportSummary
    details: List[RecordDetail] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def grade_distribution(self) -> Dict[str, int]:
        """Count of records per grade, A through F."""
        distribution = {grade: 0 for grade in "ABCDF"}
        for detail in self.details:
            distribution[detail.score.grade] += 1
        return distribution

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "details": [d.to_dict() for d in self.details],
            "recommendations": list(self.recommendations),
        }

    def to_export_dict(
        self, experiment_type: str, timestamp: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Payload offered to users as a downloadable JSON file."""
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)
        return {
            "timestamp": timestamp.isoformat(),
            "experimentType": experiment_type,
            "summary": self.summary.to_dict(),
            "recommendations": list(self.recommendations),
        }
