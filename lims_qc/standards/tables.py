"""
Quality standards tables.

Loaded once at import from quality_standards.yaml into immutable tuples of
QualityStandard, one table per experiment type.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Any, Mapping, Optional, Tuple, Union

import yaml

from ..checks.base import to_number
from ..exceptions import RuleConfigurationError
from ..models.experiment import ExperimentType
from ..models.quality import QualityStandard

logger = logging.getLogger(__name__)

STANDARDS_PATH = Path(__file__).parent / "quality_standards.yaml"

StandardsTable = Tuple[QualityStandard, ...]


def _optional_number(entry: Dict[str, Any], key: str) -> Optional[float]:
    value = entry.get(key)
    if value is None:
        return None
    number = to_number(value)
    if number is None:
        raise RuleConfigurationError(
            f"Standard {entry.get('parameter')!r}: {key} must be numeric, got {value!r}")
    return number


def _build_standard(entry: Dict[str, Any]) -> QualityStandard:
    if not isinstance(entry, dict) or 'parameter' not in entry:
        raise RuleConfigurationError(f"Standard entry needs a 'parameter', got {entry!r}")

    optimal_range = entry.get('optimal_range')
    if optimal_range is not None:
        if not isinstance(optimal_range, (list, tuple)) or len(optimal_range) != 2:
            raise RuleConfigurationError(
                f"Standard {entry['parameter']!r}: optimal_range must be [low, high]")
        low, high = (to_number(v) for v in optimal_range)
        if low is None or high is None:
            raise RuleConfigurationError(
                f"Standard {entry['parameter']!r}: optimal_range must be numeric")
        optimal_range = (low, high)

    return QualityStandard(
        name=str(entry.get('name', entry['parameter'])),
        parameter=str(entry['parameter']),
        min_value=_optional_number(entry, 'min_value'),
        max_value=_optional_number(entry, 'max_value'),
        optimal_value=_optional_number(entry, 'optimal_value'),
        optimal_range=optimal_range,
        unit=entry.get('unit'),
        source=entry.get('source'),
    )


def load_standards(path: Union[str, Path] = STANDARDS_PATH) -> Mapping[ExperimentType, StandardsTable]:
    """
    Load standards tables from a YAML file.

    Experiment types absent from the file get an empty table.

    Raises:
        FileNotFoundError: if the file does not exist
        RuleConfigurationError: if an entry is malformed
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Standards file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            document = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise RuleConfigurationError(f"Invalid YAML in {path}: {e}") from None

    if not isinstance(document, dict):
        raise RuleConfigurationError(f"{path} must map experiment types to standards lists")

    tables = {}
    for experiment_type in ExperimentType:
        entries = document.get(experiment_type.value) or []
        tables[experiment_type] = tuple(_build_standard(entry) for entry in entries)

    counts = {t.value: len(s) for t, s in tables.items()}
    logger.debug(f"Loaded standards from {path}: {counts}")
    return MappingProxyType(tables)


STANDARDS = load_standards()

NUCLEIC_EXTRACTION_STANDARDS: StandardsTable = STANDARDS[ExperimentType.NUCLEIC_EXTRACTION]
PCR_AMPLIFICATION_STANDARDS: StandardsTable = STANDARDS[ExperimentType.PCR_AMPLIFICATION]
LIBRARY_CONSTRUCTION_STANDARDS: StandardsTable = STANDARDS[ExperimentType.LIBRARY_CONSTRUCTION]


def get_standards(
    experiment_type: Union[str, ExperimentType],
    tables: Optional[Mapping[ExperimentType, StandardsTable]] = None
) -> StandardsTable:
    """Standards table for an experiment type (defaults to the packaged tables)."""
    experiment_type = ExperimentType.parse(experiment_type)
    return (tables if tables is not None else STANDARDS)[experiment_type]


def find_standard(table: StandardsTable, parameter: str) -> Optional[QualityStandard]:
    """First standard in the table whose parameter matches, or None."""
    for standard in table:
        if standard.parameter == parameter:
            return standard
    return None
