"""
Rule Set Loader

Loads the per-experiment YAML rule files and instantiates rule objects.

Each experiment type has one file named ``<experiment_type>.yaml`` listing its
rules in order. Rule order only decides the order findings are reported in.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple, Union

import yaml

from ..checks import ValidationRule, SampleCodeRule, NumericRule, StatusRule
from ..exceptions import RuleConfigurationError
from ..models.experiment import ExperimentType

logger = logging.getLogger(__name__)

RULES_DIR = Path(__file__).parent

RULE_TYPES = {
    SampleCodeRule.check_type: SampleCodeRule,
    NumericRule.check_type: NumericRule,
    StatusRule.check_type: StatusRule,
}


def build_rule(definition: Dict[str, Any]) -> ValidationRule:
    """
    Instantiate one rule from its YAML mapping.

    Raises:
        RuleConfigurationError: if the check_type is unknown or the definition is malformed
    """
    if not isinstance(definition, dict):
        raise RuleConfigurationError(f"Rule definition must be a mapping, got {definition!r}")

    check_type = definition.get('check_type')
    rule_class = RULE_TYPES.get(check_type)
    if rule_class is None:
        raise RuleConfigurationError(
            f"Unknown check_type {check_type!r} for rule {definition.get('name')!r}")

    return rule_class.from_definition(definition)


def load_rules(rules_path: Union[str, Path]) -> List[ValidationRule]:
    """
    Load validation rules from a YAML file.

    Raises:
        FileNotFoundError: if the file does not exist
        RuleConfigurationError: if the document is malformed
    """
    path = Path(rules_path)

    if not path.exists():
        raise FileNotFoundError(f"Rules file not found: {rules_path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RuleConfigurationError(f"Invalid YAML in {path}: {e}") from None

    if not isinstance(document, dict) or not isinstance(document.get('rules'), list):
        raise RuleConfigurationError(f"{path} must contain a 'rules' list")

    rules = [build_rule(definition) for definition in document['rules']]
    logger.debug(f"Loaded {len(rules)} rules (version {document.get('version', 'unknown')}) from {path}")
    return rules


@lru_cache(maxsize=None)
def _cached_rules(experiment_type: ExperimentType, rules_dir: str) -> Tuple[ValidationRule, ...]:
    return tuple(load_rules(Path(rules_dir) / f"{experiment_type.value}.yaml"))


def get_rules(
    experiment_type: Union[str, ExperimentType],
    rules_dir: Optional[Union[str, Path]] = None
) -> List[ValidationRule]:
    """
    Get the ordered rule list for an experiment type.

    Rule files are parsed once per directory; callers receive a fresh list.

    Args:
        experiment_type: Experiment stage (enum or string value)
        rules_dir: Directory holding the rule files (defaults to this package)
    """
    experiment_type = ExperimentType.parse(experiment_type)
    directory = Path(rules_dir) if rules_dir is not None else RULES_DIR
    return list(_cached_rules(experiment_type, str(directory.resolve())))


def get_nucleic_extraction_rules() -> List[ValidationRule]:
    """Rules for nucleic acid extraction records."""
    return get_rules(ExperimentType.NUCLEIC_EXTRACTION)


def get_pcr_amplification_rules() -> List[ValidationRule]:
    """Rules for PCR amplification records."""
    return get_rules(ExperimentType.PCR_AMPLIFICATION)


def get_library_construction_rules() -> List[ValidationRule]:
    """Rules for sequencing library construction records."""
    return get_rules(ExperimentType.LIBRARY_CONSTRUCTION)


def clear_rule_cache() -> None:
    """Forget parsed rule files (after editing them at runtime or in tests)."""
    _cached_rules.cache_clear()
