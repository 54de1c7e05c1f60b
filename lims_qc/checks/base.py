"""
Rule Building Blocks

Shared pieces of every field rule:
- ValidationRule: the rule interface (one field, one optional finding)
- Branch: a literal outcome (level, message, advisory text)
- Condition: a sibling-field predicate for cross-field rules
- Value helpers that never raise on odd input
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any, Optional, Mapping

from ..exceptions import RuleConfigurationError
from ..models.validation_result import ValidationLevel, ValidationResult


def get_field_value(record: Any, path: str) -> Optional[Any]:
    """
    Safely retrieve a value from a record using dot notation.

    Records are usually plain dicts; objects exposing attributes are accepted too.

    Args:
        record: The record to search
        path: Dot-separated path (e.g., "dnaConcentration", "qc.status")

    Returns:
        The value if found, None otherwise

    Examples:
        >>> get_field_value({"qc": {"status": "pass"}}, "qc.status")
        'pass'
        >>> get_field_value({"qc": {}}, "qc.status")
    """
    current = record

    for key in path.split('.'):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(key)
        else:
            current = getattr(current, key, None)

    return current


def is_blank(value: Any) -> bool:
    """True for None, NaN and empty or whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ''
    if isinstance(value, float):
        return math.isnan(value)
    return False


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a record value to a number.

    Returns None when the value cannot be read as a finite-or-infinite number.
    Booleans are rejected; numeric strings are accepted.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, (str, Decimal)):
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    else:
        return None

    if isinstance(number, float) and math.isnan(number):
        return None
    return number


def format_number(value: Any) -> str:
    """Render 10.0 as "10" and 2.2 as "2.2" for messages."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Branch:
    """
    One literal outcome of a rule.

    include_value controls whether the inspected value is echoed back as
    ``current_value`` (missing-value branches never echo).
    """
    level: ValidationLevel
    message: str
    suggestion: Optional[str] = None
    expected_range: Optional[str] = None
    reference: Optional[str] = None
    include_value: bool = True

    def to_result(self, field: str, value: Any = None) -> ValidationResult:
        return ValidationResult(
            field=field,
            level=self.level,
            message=self.message,
            suggestion=self.suggestion,
            current_value=value if self.include_value else None,
            expected_range=self.expected_range,
            reference=self.reference,
        )

    @classmethod
    def from_definition(cls, definition: Dict[str, Any], include_value: bool = True) -> "Branch":
        """Build a branch from its YAML mapping."""
        if not isinstance(definition, Mapping):
            raise RuleConfigurationError(f"Branch must be a mapping, got {definition!r}")
        try:
            level = ValidationLevel.parse(definition['level'])
            message = str(definition['message'])
        except KeyError as e:
            raise RuleConfigurationError(f"Branch is missing key {e}") from None
        except ValueError as e:
            raise RuleConfigurationError(str(e)) from None

        return cls(
            level=level,
            message=message,
            suggestion=definition.get('suggestion'),
            expected_range=definition.get('expected_range'),
            reference=definition.get('reference'),
            include_value=include_value,
        )


@dataclass(frozen=True)
class Condition:
    """Sibling-field predicate: ``record[field] == equals``."""
    field: str
    equals: Any

    def matches(self, record: Any) -> bool:
        return get_field_value(record, self.field) == self.equals

    @classmethod
    def from_definition(cls, definition: Dict[str, Any]) -> "Condition":
        if not isinstance(definition, Mapping) or 'field' not in definition or 'equals' not in definition:
            raise RuleConfigurationError(
                f"Condition needs 'field' and 'equals', got {definition!r}")
        return cls(field=definition['field'], equals=definition['equals'])


class ValidationRule(ABC):
    """
    A single field rule.

    ``validate(value, record)`` returns None when the value is acceptable, or
    exactly one ValidationResult whose ``field`` is the rule's field. Rules
    never raise on record content and never mutate the record.
    """

    check_type = "base"

    def __init__(
        self,
        name: str,
        field: str,
        required: bool = False,
        description: Optional[str] = None,
        label: Optional[str] = None,
    ):
        self.name = name
        self.field = field
        self.required = required
        self.description = description
        self.label = label or field

    @abstractmethod
    def validate(self, value: Any, record: Any = None) -> Optional[ValidationResult]:
        """Check one value; ``record`` is the whole record for cross-field rules."""

    @classmethod
    def _common_kwargs(cls, definition: Dict[str, Any]) -> Dict[str, Any]:
        """Constructor arguments shared by every rule type."""
        try:
            return {
                'name': str(definition['name']),
                'field': str(definition['field']),
                'required': bool(definition.get('required', False)),
                'description': definition.get('description'),
                'label': definition.get('label'),
            }
        except KeyError as e:
            raise RuleConfigurationError(
                f"Rule definition is missing key {e}: {definition!r}") from None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, field={self.field!r}, "
            f"required={self.required})"
        )
