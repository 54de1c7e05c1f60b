"""
Prometheus Metrics for Data Quality Validation

Exposes quality control metrics in Prometheus format for monitoring and alerting.

Metrics Exposed:
- lims_qc_records_validated_total: Records validated, by experiment type
- lims_qc_records_by_grade: Records per quality grade
- lims_qc_findings_total: Findings by level
- lims_qc_field_findings_total: Findings by field
- lims_qc_validation_duration_seconds: Per-record processing time
- lims_qc_average_score: Mean total score of validated records
"""

from typing import Dict, Any, Iterable, Optional
from collections import defaultdict
import time

from ..models import QualityScore, ValidationResult


class QualityMetrics:
    """
    Collects and formats quality control metrics for Prometheus.

    Usage:
        metrics = QualityMetrics()

        # Record one scored record
        metrics.record_evaluation("pcr_amplification", results, score, 0.002)

        # Export metrics
        print(metrics.export_text())
    """

    def __init__(self):
        """Initialize metrics collectors."""
        self.total_records = 0
        self.records_by_type: Dict[str, int] = defaultdict(int)
        self.records_by_grade: Dict[str, int] = defaultdict(int)
        self.findings_by_level: Dict[str, int] = defaultdict(int)
        self.findings_by_field: Dict[str, int] = defaultdict(int)
        self.score_sum = 0.0

        # Processing time histogram (buckets in seconds)
        self.duration_buckets = [0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5]
        self.duration_counts = defaultdict(int)
        self.duration_sum = 0.0
        self.duration_count = 0

        self.start_time = time.time()

    def record_evaluation(
        self,
        experiment_type: str,
        results: Iterable[ValidationResult],
        score: QualityScore,
        duration_seconds: Optional[float] = None,
    ) -> None:
        """
        Record one validated record and update metrics.

        Args:
            experiment_type: Experiment stage of the record
            results: Findings for the record
            score: Quality score of the record
            duration_seconds: Time spent validating and scoring it
        """
        self.total_records += 1
        self.records_by_type[experiment_type] += 1
        self.records_by_grade[score.grade] += 1
        self.score_sum += score.total_score

        for result in results:
            self.findings_by_level[result.level.value] += 1
            self.findings_by_field[result.field] += 1

        if duration_seconds is not None:
            self.duration_sum += duration_seconds
            self.duration_count += 1

            for bucket in self.duration_buckets:
                if duration_seconds <= bucket:
                    self.duration_counts[bucket] += 1

    @property
    def average_score(self) -> float:
        return self.score_sum / self.total_records if self.total_records > 0 else 0.0

    def export_text(self) -> str:
        """
        Export metrics in Prometheus text format.

        Returns:
            Metrics formatted as Prometheus text exposition format
        """
        lines = []

        lines.append("# LIMS Quality Control Metrics")
        lines.append("")

        lines.append("# HELP lims_qc_records_validated_total Records validated by experiment type")
        lines.append("# TYPE lims_qc_records_validated_total counter")
        for experiment_type, count in sorted(self.records_by_type.items()):
            lines.append(
                f'lims_qc_records_validated_total{{experiment_type="{experiment_type}"}} {count}')
        lines.append("")

        lines.append("# HELP lims_qc_records_by_grade Records per quality grade")
        lines.append("# TYPE lims_qc_records_by_grade counter")
        for grade, count in sorted(self.records_by_grade.items()):
            lines.append(f'lims_qc_records_by_grade{{grade="{grade}"}} {count}')
        lines.append("")

        lines.append("# HELP lims_qc_findings_total Validation findings by level")
        lines.append("# TYPE lims_qc_findings_total counter")
        for level, count in sorted(self.findings_by_level.items()):
            lines.append(f'lims_qc_findings_total{{level="{level}"}} {count}')
        lines.append("")

        lines.append("# HELP lims_qc_field_findings_total Validation findings by field")
        lines.append("# TYPE lims_qc_field_findings_total counter")
        for field, count in sorted(self.findings_by_field.items()):
            lines.append(f'lims_qc_field_findings_total{{field="{field}"}} {count}')
        lines.append("")

        lines.append(
            "# HELP lims_qc_validation_duration_seconds Record validation time distribution")
        lines.append("# TYPE lims_qc_validation_duration_seconds histogram")
        # Bucket counts are already cumulative
        for bucket in sorted(self.duration_buckets):
            lines.append(
                f'lims_qc_validation_duration_seconds_bucket{{le="{bucket}"}} {self.duration_counts[bucket]}')
        lines.append(
            f'lims_qc_validation_duration_seconds_bucket{{le="+Inf"}} {self.duration_count}')
        lines.append(f'lims_qc_validation_duration_seconds_sum {self.duration_sum:.6f}')
        lines.append(f'lims_qc_validation_duration_seconds_count {self.duration_count}')
        lines.append("")

        lines.append("# HELP lims_qc_average_score Mean total score of validated records")
        lines.append("# TYPE lims_qc_average_score gauge")
        lines.append(f"lims_qc_average_score {self.average_score:.2f}")
        lines.append("")

        return "\n".join(lines)

    def export_json(self) -> Dict[str, Any]:
        """
        Export metrics as JSON (for logging/debugging).

        Returns:
            Metrics as dictionary
        """
        avg_duration = (self.duration_sum /
                        self.duration_count) if self.duration_count > 0 else 0
        passing = self.records_by_grade.get("A", 0) + self.records_by_grade.get("B", 0)

        return {
            'total_records': self.total_records,
            'records_by_type': dict(self.records_by_type),
            'records_by_grade': dict(self.records_by_grade),
            'findings_by_level': dict(self.findings_by_level),
            'findings_by_field': dict(self.findings_by_field),
            'average_score': self.average_score,
            'pass_rate': passing / self.total_records if self.total_records > 0 else 0,
            'avg_processing_time_seconds': avg_duration,
            'uptime_seconds': time.time() - self.start_time
        }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        self.total_records = 0
        self.records_by_type.clear()
        self.records_by_grade.clear()
        self.findings_by_level.clear()
        self.findings_by_field.clear()
        self.score_sum = 0.0
        self.duration_counts.clear()
        self.duration_sum = 0.0
        self.duration_count = 0
        self.start_time = time.time()


# Global metrics instance (singleton pattern)
_global_metrics: Optional[QualityMetrics] = None


def get_metrics() -> QualityMetrics:
    """
    Get global metrics instance (singleton).

    Returns:
        Global QualityMetrics instance
    """
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = QualityMetrics()
    return _global_metrics


def reset_metrics() -> None:
    """Reset global metrics instance."""
    global _global_metrics
    if _global_metrics:
        _global_metrics.reset()


def metrics_endpoint() -> str:
    """
    Global metrics as Prometheus text, for the host application to serve to
    its scraper (this package has no HTTP surface of its own).

    Returns:
        Metrics in Prometheus text format
    """
    return get_metrics().export_text()
