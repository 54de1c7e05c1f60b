#!/usr/bin/env python3
"""
LIMS Quality Control CLI

Command-line interface for validating exported experiment records.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import colorama
from colorama import Fore, Style

from .config import Settings, setup_logging
from .models import ExperimentType
from .reports import ReportGenerator
from .service import QualityControlService

logger = logging.getLogger("lims_qc.cli")

GRADE_COLORS = {
    "A": Fore.GREEN,
    "B": Fore.GREEN,
    "C": Fore.YELLOW,
    "D": Fore.YELLOW,
    "F": Fore.RED,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lims-qc",
        description="LIMS data quality validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate PCR records and print a text report
  lims-qc validate --type pcr_amplification records.json

  # Write the downloadable JSON report
  lims-qc validate --type library_construction records.json --format json --output report.json

  # Show the quality standards used for nucleic acid extraction
  lims-qc standards --type nucleic_extraction
        """,
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LIMS_QC_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Validate a JSON array of records")
    validate.add_argument("records", type=str, help="Path to a JSON file holding a list of records")
    validate.add_argument(
        "--type",
        dest="experiment_type",
        required=True,
        choices=[t.value for t in ExperimentType],
        help="Experiment type of the records",
    )
    validate.add_argument(
        "--format",
        type=str,
        default="text",
        choices=["text", "json"],
        help="Report format (default: text)",
    )
    validate.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the report to this file instead of stdout",
    )
    validate.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured grade output",
    )

    standards = subparsers.add_parser("standards", help="List quality standards")
    standards.add_argument(
        "--type",
        dest="experiment_type",
        required=True,
        choices=[t.value for t in ExperimentType],
        help="Experiment type",
    )

    return parser


def _load_records(path: str) -> list:
    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)

    if not isinstance(records, list):
        raise ValueError(f"{path} must contain a JSON array of records")
    return records


def _print_grades(report, use_color: bool) -> None:
    if use_color:
        colorama.init()
    for detail in report.details:
        color = GRADE_COLORS.get(detail.score.grade, "") if use_color else ""
        reset = Style.RESET_ALL if use_color else ""
        print(f"{color}[{detail.score.grade}] {detail.record_id}: "
              f"{detail.score.total_score}/{detail.score.max_score}{reset}")


def run_validate(args, service: QualityControlService) -> int:
    records = _load_records(args.records)
    logger.info(f"Loaded {len(records)} records from {args.records}")

    report = service.report(args.experiment_type, records)

    if args.format == "json":
        content = ReportGenerator.generate_json_report(
            report, args.experiment_type, include_details=True)
    else:
        content = ReportGenerator.generate_text_report(report, args.experiment_type)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(content)
        logger.info(f"Report saved to {args.output}")
        _print_grades(report, use_color=not args.no_color)
    else:
        print(content)

    return 1 if report.summary.error_records > 0 else 0


def run_standards(args, service: QualityControlService) -> int:
    validator = service.validator(args.experiment_type)
    for standard in validator.standards:
        low, high = standard.optimal_range or ("-", "-")
        print(f"{standard.parameter:<24} {standard.name:<16} "
              f"min={standard.min_value} max={standard.max_value} "
              f"optimal={low}-{high} {standard.unit or ''}  [{standard.source or '-'}]")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    setup_logging(args.log_level or settings.log_level, settings.log_format)

    try:
        service = QualityControlService(settings=settings)
        if args.command == "validate":
            return run_validate(args, service)
        return run_standards(args, service)
    except (OSError, ValueError) as e:
        # RuleConfigurationError and UnknownExperimentTypeError are ValueErrors
        logger.error(f"{type(e).__name__}: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
