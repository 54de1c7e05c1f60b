"""
LIMS Quality Control Package

Data quality validation and scoring for sequencing lab records
(nucleic acid extraction, PCR amplification, library construction).

Main Components:
- engine: DataValidator (validate, score, standards check, batch report)
- checks: Field rule implementations and quick_validate
- rules: YAML rule sets per experiment type
- standards: Quality standards tables
- models: Result, score and report data structures
- reports: Text and JSON report rendering
- metrics: Prometheus-compatible metrics

Quick Start:
    from lims_qc import create_validator

    validator = create_validator("pcr_amplification")
    score = validator.calculate_quality_score(record)

    if score.grade in ("A", "B"):
        # Record can move to the next stage
        pass
"""

from .engine import DataValidator, create_validator
from .checks import ValidationRule, quick_validate
from .exceptions import UnknownExperimentTypeError, RuleConfigurationError
from .models import (
    ExperimentType,
    ValidationLevel,
    ValidationResult,
    QualityStandard,
    QualityScore,
    StandardCheck,
    QualityReport,
)
from .rules import (
    get_nucleic_extraction_rules,
    get_pcr_amplification_rules,
    get_library_construction_rules,
)
from .standards import (
    NUCLEIC_EXTRACTION_STANDARDS,
    PCR_AMPLIFICATION_STANDARDS,
    LIBRARY_CONSTRUCTION_STANDARDS,
)
from .service import QualityControlService
from .metrics import get_metrics

__version__ = "2.0.0"

__all__ = [
    "DataValidator",
    "create_validator",
    "quick_validate",
    "ValidationRule",
    "ExperimentType",
    "ValidationLevel",
    "ValidationResult",
    "QualityStandard",
    "QualityScore",
    "StandardCheck",
    "QualityReport",
    "UnknownExperimentTypeError",
    "RuleConfigurationError",
    "get_nucleic_extraction_rules",
    "get_pcr_amplification_rules",
    "get_library_construction_rules",
    "NUCLEIC_EXTRACTION_STANDARDS",
    "PCR_AMPLIFICATION_STANDARDS",
    "LIBRARY_CONSTRUCTION_STANDARDS",
    "QualityControlService",
    "get_metrics",
]
