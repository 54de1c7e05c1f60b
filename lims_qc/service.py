"""
Quality Control Service

High-level API used by list, detail and dashboard pages.

This module wires together:
1. One DataValidator per experiment type (rules and standards from settings)
2. Metrics collection
3. Report export

Usage:
    from lims_qc import QualityControlService

    service = QualityControlService()
    results, score = service.evaluate("pcr_amplification", record)
"""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .config import Settings
from .engine import DataValidator
from .engine.scoring import PASSING_GRADES
from .metrics import QualityMetrics, get_metrics
from .models import ExperimentType, QualityReport, QualityScore, ValidationResult
from .reports import ReportGenerator
from .rules import get_rules
from .standards import get_standards, load_standards

logger = logging.getLogger(__name__)


class QualityControlService:
    """
    High-level API for record quality control.

    Integrates validators, metrics and report export.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        metrics: Optional[QualityMetrics] = None,
    ):
        """
        Initialize the service.

        Args:
            settings: Runtime settings (defaults to Settings.from_env())
            metrics: Metrics collector (defaults to the global instance when enabled)
        """
        self.settings = settings or Settings.from_env()
        self.enable_metrics = self.settings.enable_metrics
        self.metrics = metrics or (get_metrics() if self.enable_metrics else None)

        self._standards_tables = (
            load_standards(self.settings.standards_path)
            if self.settings.standards_path else None
        )
        self._validators: Dict[ExperimentType, DataValidator] = {}

    def validator(self, experiment_type: Union[str, ExperimentType]) -> DataValidator:
        """Validator for an experiment type, built on first use."""
        experiment_type = ExperimentType.parse(experiment_type)

        if experiment_type not in self._validators:
            self._validators[experiment_type] = DataValidator(
                experiment_type,
                rules=get_rules(experiment_type, self.settings.rules_dir),
                standards=get_standards(experiment_type, self._standards_tables),
            )
            logger.info(f"Initialized validator: {self._validators[experiment_type]!r}")

        return self._validators[experiment_type]

    def evaluate(
        self,
        experiment_type: Union[str, ExperimentType],
        record: Any,
    ) -> Tuple[List[ValidationResult], QualityScore]:
        """
        Validate and score a single record.

        Returns:
            (findings, score)
        """
        validator = self.validator(experiment_type)

        start_time = time.time()
        results = validator.validate_record(record)
        score = validator.calculate_quality_score(record)
        duration = time.time() - start_time

        if self.enable_metrics and self.metrics:
            self.metrics.record_evaluation(
                validator.experiment_type.value, results, score, duration)

        return results, score

    def report(
        self,
        experiment_type: Union[str, ExperimentType],
        records: Sequence[Any],
    ) -> QualityReport:
        """Build the quality report for a batch of records."""
        validator = self.validator(experiment_type)

        start_time = time.time()
        report = validator.generate_quality_report(records)
        elapsed = time.time() - start_time

        if self.enable_metrics and self.metrics:
            per_record = elapsed / len(report.details) if report.details else None
            for detail in report.details:
                self.metrics.record_evaluation(
                    validator.experiment_type.value,
                    detail.validation_results,
                    detail.score,
                    per_record,
                )

        logger.info(
            f"Quality report ({validator.experiment_type.value}): "
            f"{report.summary.total_records} records, "
            f"{report.summary.error_records} with errors, "
            f"average score {report.summary.average_score}"
        )
        return report

    def export_report(
        self,
        experiment_type: Union[str, ExperimentType],
        records: Sequence[Any],
    ) -> str:
        """JSON export of the batch report, as offered for download."""
        experiment_type = ExperimentType.parse(experiment_type)
        report = self.report(experiment_type, records)
        return ReportGenerator.generate_json_report(report, experiment_type.value)

    def should_advance(self, score: QualityScore) -> bool:
        """
        Whether a scored record is good enough to move to the next stage.

        Only grades A and B advance.
        """
        return score.grade in PASSING_GRADES
