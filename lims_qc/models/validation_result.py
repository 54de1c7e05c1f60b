"""
Validation Result Data Models

Defines the core data structures for representing record-level validation
outcomes in the sequencing lab workflow.

Design Philosophy:
- Immutable where possible (use dataclasses with frozen=True)
- Type-safe (use enums for levels, proper typing)
- Serializable (exported as JSON for UI rendering and download)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any


class ValidationLevel(Enum):
    """
    Severity of a single validation finding.

    INFO:     Acknowledgement or soft advice, nothing to fix
    WARNING:  Value is usable but outside the recommended envelope
    ERROR:    Value is missing or wrong and should be corrected
    CRITICAL: Record cannot be trusted
    """
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def __lt__(self, other):
        """Allow severity comparison."""
        if not isinstance(other, ValidationLevel):
            return NotImplemented
        return _LEVEL_ORDER[self] < _LEVEL_ORDER[other]

    @property
    def label(self) -> str:
        """Display label used in improvement lists and reports."""
        return _LEVEL_LABELS[self]

    @property
    def badge(self) -> str:
        """Badge colour name used by UI renderers."""
        return _LEVEL_BADGES[self]

    @classmethod
    def parse(cls, value: Any) -> "ValidationLevel":
        """
        Convert a string (case-insensitive) or level into a ValidationLevel.

        Raises:
            ValueError: if the value does not name a level
        """
        if isinstance(value, ValidationLevel):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown validation level: {value!r}") from None


_LEVEL_ORDER = {
    ValidationLevel.INFO: 1,
    ValidationLevel.WARNING: 2,
    ValidationLevel.ERROR: 3,
    ValidationLevel.CRITICAL: 4,
}

_LEVEL_LABELS = {
    ValidationLevel.INFO: "提示",
    ValidationLevel.WARNING: "警告",
    ValidationLevel.ERROR: "错误",
    ValidationLevel.CRITICAL: "严重错误",
}

_LEVEL_BADGES = {
    ValidationLevel.INFO: "blue",
    ValidationLevel.WARNING: "orange",
    ValidationLevel.ERROR: "red",
    ValidationLevel.CRITICAL: "magenta",
}


@dataclass(frozen=True)
class ValidationResult:
    """
    Represents a single issue detected on one field of a record.

    Attributes:
        field: Name of the offending attribute (e.g., "dnaConcentration")
        level: Severity of the finding
        message: Human-readable description
        suggestion: How to fix it (optional)
        current_value: The value that was inspected (optional)
        expected_range: Acceptable range, as display text (optional)
        reference: Protocol or guideline the threshold comes from (optional)
    """
    field: str
    level: ValidationLevel
    message: str
    suggestion: Optional[str] = None
    current_value: Optional[Any] = None
    expected_range: Optional[str] = None
    reference: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization. Optional keys are omitted when unset."""
        data = {
            'field': self.field,
            'level': self.level.value,
            'message': self.message,
        }
        optional = {
            'suggestion': self.suggestion,
            'currentValue': self._serialize_value(self.current_value),
            'expectedRange': self.expected_range,
            'reference': self.reference,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @staticmethod
    def _serialize_value(value: Any) -> Any:
        """Safely serialize values for JSON export."""
        if value is None:
            return None
        if isinstance(value, (str, int, float, bool)):
            return value
        if isinstance(value, (list, dict)):
            return value
        return str(value)

    def __str__(self) -> str:
        """Human-readable representation."""
        msg = f"[{self.level.value}] {self.field}: {self.message}"
        if self.expected_range is not None:
            msg += f" (expected: {self.expected_range}, got: {self.current_value})"
        return msg
