"""
Validation Checks Package

Contains the rule implementations used by the rule sets:
- base: rule interface, outcome branches and value helpers
- text_checks: sample code presence and format
- numeric_checks: tiered threshold rules, optionally cross-field
- status_checks: enumerated status -> severity tables
- quick: stand-alone single value validation
"""

from .base import (
    ValidationRule,
    Branch,
    Condition,
    get_field_value,
    is_blank,
    to_number,
    format_number,
)
from .text_checks import SampleCodeRule
from .numeric_checks import NumericRule, Tier
from .status_checks import StatusRule
from .quick import quick_validate

__all__ = [
    'ValidationRule',
    'Branch',
    'Condition',
    'SampleCodeRule',
    'NumericRule',
    'Tier',
    'StatusRule',
    'quick_validate',
    'get_field_value',
    'is_blank',
    'to_number',
    'format_number',
]
