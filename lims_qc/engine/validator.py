"""
Data Validator

The quality control engine for one experiment type:
1. Runs every field rule against a record
2. Scores the record (0-100, letter grade, category scores)
3. Checks bare values against the stage's quality standards
4. Validates batches and builds a fleet-wide quality report

The validator holds only the rule list and standards table chosen at
construction. No call mutates the validator or the records it is given, so a
single instance can serve any number of callers.
"""

import logging
from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, List, Optional, Sequence, Union

from ..checks import ValidationRule, get_field_value, is_blank, to_number, format_number
from ..models import (
    ExperimentType,
    ValidationLevel,
    ValidationResult,
    QualityStandard,
    QualityScore,
    StandardCheck,
    RecordDetail,
    ReportSummary,
    QualityReport,
)
from ..rules import get_rules
from ..standards import get_standards, find_standard
from .scoring import MAX_SCORE, PASSING_GRADES, grade_for, score_results

logger = logging.getLogger(__name__)

UNKNOWN_RECORD_ID = "unknown"
TOP_RECOMMENDATIONS = 5


def round_half_up(value: float) -> float:
    """Round to two decimals, halves away from zero (98.125 -> 98.13)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def resolve_record_id(record: Any) -> Any:
    """Record key: ``id``, else ``sampleCode``, else "unknown"."""
    return (
        get_field_value(record, "id")
        or get_field_value(record, "sampleCode")
        or UNKNOWN_RECORD_ID
    )


class DataValidator:
    """
    Quality control engine for one experiment type.

    Usage:
        validator = DataValidator("pcr_amplification")
        results = validator.validate_record(record)
        score = validator.calculate_quality_score(record)

        if score.grade in ("A", "B"):
            # Record is good enough to move to the next stage
            pass
    """

    def __init__(
        self,
        experiment_type: Union[str, ExperimentType],
        rules: Optional[Sequence[ValidationRule]] = None,
        standards: Optional[Sequence[QualityStandard]] = None,
    ):
        """
        Initialize the validator.

        Args:
            experiment_type: nucleic_extraction, pcr_amplification or library_construction
            rules: Rule list overriding the packaged rule set
            standards: Standards table overriding the packaged table

        Raises:
            UnknownExperimentTypeError: if experiment_type names no experiment stage
        """
        self.experiment_type = ExperimentType.parse(experiment_type)
        self.rules: List[ValidationRule] = list(
            rules if rules is not None else get_rules(self.experiment_type))
        self.standards = tuple(
            standards if standards is not None else get_standards(self.experiment_type))

        logger.debug(
            f"DataValidator for {self.experiment_type.value}: "
            f"{len(self.rules)} rules, {len(self.standards)} standards"
        )

    @property
    def required_fields(self) -> List[str]:
        """Fields bound to rules flagged as required, in rule order."""
        return [rule.field for rule in self.rules if rule.required]

    def validate_record(self, record: Any) -> List[ValidationResult]:
        """
        Run every rule against a record.

        All rules always run; findings keep rule order and are not deduplicated.

        Args:
            record: Key-value record (extra fields are ignored)

        Returns:
            List of findings, empty when the record is clean
        """
        results = []

        for rule in self.rules:
            value = get_field_value(record, rule.field)
            try:
                result = rule.validate(value, record)
            except Exception as e:
                # Rules are written not to raise; a custom rule that does is
                # reported rather than aborting the whole record
                logger.exception(f"Rule {rule.name!r} raised on field {rule.field!r}")
                result = ValidationResult(
                    field=rule.field,
                    level=ValidationLevel.CRITICAL,
                    message=f"校验规则执行异常: {e}",
                    current_value=value,
                    reference=rule.name,
                )

            if result is not None:
                results.append(result)

        return results

    def validate_records(self, records: Sequence[Any]) -> Dict[Any, List[ValidationResult]]:
        """
        Validate a batch of records, keyed by record id.

        Records resolving to the same key (duplicate ids, or several records
        with neither ``id`` nor ``sampleCode``) overwrite each other: the last
        one wins. Check key uniqueness beforehand if that matters.
        """
        results_by_id = {}

        for record in records:
            record_id = resolve_record_id(record)
            if record_id in results_by_id:
                logger.debug(f"Record key {record_id!r} seen again; keeping the later record's results")
            results_by_id[record_id] = self.validate_record(record)

        return results_by_id

    def missing_required_fields(self, record: Any) -> List[str]:
        """Required fields that are absent or falsy (None, blank, 0, False) in the record."""
        missing = []
        for field in self.required_fields:
            value = get_field_value(record, field)
            if is_blank(value) or not value:
                missing.append(field)
        return missing

    def calculate_quality_score(self, record: Any) -> QualityScore:
        """
        Score a record.

        Starts from 100 for the total and each category, subtracts a flat
        penalty per finding (critical 25 reliability, error 15 accuracy,
        warning 8 consistency, info 2 completeness) and 10 per missing
        required field from completeness. A missing required field is thus
        charged twice: once for its error finding, once as missing.
        """
        return self._score(record, self.validate_record(record))

    def _score(self, record: Any, results: List[ValidationResult]) -> QualityScore:
        total, categories, improvements = score_results(
            results, self.missing_required_fields(record))

        return QualityScore(
            total_score=total,
            max_score=MAX_SCORE,
            grade=grade_for(total),
            category_scores=categories,
            improvements=improvements,
        )

    def get_quality_standard(self, parameter: str) -> Optional[QualityStandard]:
        """First standard whose parameter matches, or None."""
        return find_standard(self.standards, parameter)

    def check_value_against_standard(self, parameter: str, value: Any) -> StandardCheck:
        """
        Check one value against the parameter's standard.

        Order of checks:
        1. No standard -> valid, info (missing reference data never blocks)
        2. Inside the optimal range -> valid, info
        3. Above max -> invalid, error
        4. Below min -> invalid, warning
        5. Otherwise -> valid, info ("acceptable")
        """
        standard = self.get_quality_standard(parameter)

        if standard is None:
            return StandardCheck(
                is_valid=True,
                level=ValidationLevel.INFO,
                message="未找到相关质量标准",
            )

        number = to_number(value)
        if number is None:
            return StandardCheck(
                is_valid=False,
                level=ValidationLevel.ERROR,
                message=f"{parameter}必须是有效数字",
                standard=standard,
            )

        unit = f" {standard.unit}" if standard.unit else ""

        if standard.optimal_range is not None:
            low, high = standard.optimal_range
            if low <= number <= high:
                return StandardCheck(
                    is_valid=True,
                    level=ValidationLevel.INFO,
                    message=f"{parameter}在理想范围内",
                    standard=standard,
                )

        if standard.max_value is not None and number > standard.max_value:
            return StandardCheck(
                is_valid=False,
                level=ValidationLevel.ERROR,
                message=f"{parameter}超出最大允许值 {format_number(standard.max_value)}{unit}",
                standard=standard,
            )

        if standard.min_value is not None and number < standard.min_value:
            return StandardCheck(
                is_valid=False,
                level=ValidationLevel.WARNING,
                message=f"{parameter}低于最小推荐值 {format_number(standard.min_value)}{unit}",
                standard=standard,
            )

        return StandardCheck(
            is_valid=True,
            level=ValidationLevel.INFO,
            message=f"{parameter}在可接受范围内",
            standard=standard,
        )

    def generate_quality_report(self, records: Sequence[Any]) -> QualityReport:
        """
        Build a quality report over a batch of records.

        Recommendations are the five most frequent finding messages (exact
        text), most frequent first, annotated with how many findings carry
        that message. Ties keep first-seen order.
        """
        details = []
        for record in records:
            results = self.validate_record(record)
            details.append(RecordDetail(
                record_id=resolve_record_id(record),
                score=self._score(record, results),
                validation_results=results,
            ))

        total_records = len(details)
        average = (
            sum(d.score.total_score for d in details) / total_records
            if total_records > 0 else 0.0
        )

        summary = ReportSummary(
            total_records=total_records,
            valid_records=sum(1 for d in details if d.score.grade in PASSING_GRADES),
            error_records=sum(1 for d in details if d.has_errors),
            warning_records=sum(1 for d in details if d.has_warnings),
            average_score=round_half_up(average),
        )

        common_issues = Counter(
            result.message
            for detail in details
            for result in detail.validation_results
        )
        recommendations = [
            f"{message} (影响 {count} 条记录)"
            for message, count in common_issues.most_common(TOP_RECOMMENDATIONS)
        ]

        logger.debug(
            f"Quality report for {self.experiment_type.value}: {total_records} records, "
            f"average score {summary.average_score}"
        )

        return QualityReport(summary=summary, details=details, recommendations=recommendations)

    def __repr__(self) -> str:
        return (
            f"DataValidator(experiment_type={self.experiment_type.value}, "
            f"rules={len(self.rules)}, standards={len(self.standards)})"
        )


def create_validator(experiment_type: Union[str, ExperimentType]) -> DataValidator:
    """
    Factory function to create a validator for an experiment type.

    Args:
        experiment_type: nucleic_extraction, pcr_amplification or library_construction

    Returns:
        DataValidator using the packaged rules and standards
    """
    return DataValidator(experiment_type)
