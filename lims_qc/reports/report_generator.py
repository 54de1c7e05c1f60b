"""
Quality report generator.
"""

from datetime import datetime, timezone
from typing import List, Optional
import json

from lims_qc.models import QualityReport, RecordDetail, ValidationLevel


class ReportGenerator:
    """
    Generates human-readable and downloadable reports from quality reports.
    """

    @staticmethod
    def generate_text_report(
        report: QualityReport,
        experiment_type: str,
        generated_at: Optional[datetime] = None,
        max_details: int = 50,
    ) -> str:
        """
        Generate a text-based quality report.

        Args:
            report: QualityReport from DataValidator.generate_quality_report
            experiment_type: Experiment stage the records belong to
            generated_at: Report timestamp (defaults to now, UTC)
            max_details: Maximum number of records listed with their issues

        Returns:
            Formatted text report
        """
        if generated_at is None:
            generated_at = datetime.now(timezone.utc)

        summary = report.summary
        lines = []
        lines.append("=" * 80)
        lines.append("LIMS DATA QUALITY REPORT")
        lines.append("=" * 80)
        lines.append("")
        lines.append(f"Generated:       {generated_at.strftime('%Y-%m-%d %H:%M:%S UTC')}")
        lines.append(f"Experiment Type: {experiment_type}")
        lines.append("")
        lines.append("-" * 80)
        lines.append("SUMMARY")
        lines.append("-" * 80)
        lines.append(f"Total Records:    {summary.total_records}")
        lines.append(f"Valid (A/B):      {summary.valid_records}")
        lines.append(f"With Errors:      {summary.error_records}")
        lines.append(f"With Warnings:    {summary.warning_records}")
        lines.append(f"Average Score:    {summary.average_score:.2f}")
        lines.append("")

        if report.details:
            lines.append("Grade Distribution:")
            for grade, count in report.grade_distribution.items():
                lines.append(f"  {grade}: {count}")
            lines.append("")
            lines.append("Findings by Level:")
            for level, count in ReportGenerator.count_by_level(report).items():
                lines.append(f"  {level.upper()}: {count}")
            lines.append("")

        if not report.details:
            lines.append("No records to report.")
            lines.append("=" * 80)
            return "\n".join(lines)

        if report.recommendations:
            lines.append("-" * 80)
            lines.append("RECOMMENDATIONS")
            lines.append("-" * 80)
            for i, recommendation in enumerate(report.recommendations, 1):
                lines.append(f"  {i}. {recommendation}")
            lines.append("")

        flagged = [d for d in report.details if d.validation_results]
        if flagged:
            lines.append("-" * 80)
            lines.append(f"RECORDS WITH ISSUES ({len(flagged)})")
            lines.append("-" * 80)
            for detail in flagged[:max_details]:
                lines.extend(ReportGenerator._format_record_detail(detail))
            if len(flagged) > max_details:
                lines.append("")
                lines.append(f"  ... and {len(flagged) - max_details} more")
            lines.append("")
        else:
            lines.append("All records passed validation.")
            lines.append("")

        lines.append("=" * 80)
        lines.append("END OF REPORT")
        lines.append("=" * 80)

        return "\n".join(lines)

    @staticmethod
    def _format_record_detail(detail: RecordDetail) -> List[str]:
        """Format one record's score and findings, most severe first."""
        lines = []
        lines.append("")
        lines.append(
            f"[{detail.score.grade}] {detail.record_id}  "
            f"score {detail.score.total_score}/{detail.score.max_score}"
        )

        ordered = sorted(detail.validation_results, key=lambda r: r.level, reverse=True)
        for result in ordered:
            lines.append(f"  - {result.level.label} {result.field}: {result.message}")
            if result.suggestion:
                lines.append(f"      建议: {result.suggestion}")
            if result.expected_range:
                lines.append(f"      期望: {result.expected_range} (当前: {result.current_value})")

        return lines

    @staticmethod
    def generate_json_report(
        report: QualityReport,
        experiment_type: str,
        generated_at: Optional[datetime] = None,
        include_details: bool = False,
    ) -> str:
        """
        Generate the downloadable JSON report.

        Args:
            report: QualityReport
            experiment_type: Experiment stage the records belong to
            generated_at: Report timestamp (defaults to now, UTC)
            include_details: Also include per-record scores and findings

        Returns:
            JSON string
        """
        payload = report.to_export_dict(experiment_type, timestamp=generated_at)
        if include_details:
            payload["details"] = [d.to_dict() for d in report.details]

        return json.dumps(payload, indent=2, ensure_ascii=False, default=str)

    @staticmethod
    def count_by_level(report: QualityReport) -> dict:
        """Number of findings per level across the whole report."""
        counts = {level.value: 0 for level in ValidationLevel}
        for detail in report.details:
            for result in detail.validation_results:
                counts[result.level.value] += 1
        return counts

    @staticmethod
    def save_report(
        report: QualityReport,
        experiment_type: str,
        output_path: str,
        format: str = "text",
    ):
        """
        Save report to file.

        Args:
            report: QualityReport
            experiment_type: Experiment stage the records belong to
            output_path: Path to save report
            format: 'text' or 'json'
        """
        if format == "json":
            content = ReportGenerator.generate_json_report(
                report, experiment_type, include_details=True)
        else:
            content = ReportGenerator.generate_text_report(report, experiment_type)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)
