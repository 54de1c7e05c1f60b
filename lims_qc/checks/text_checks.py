"""
Text Field Checks

Validates identifier-like text fields such as sample codes:
- Presence (blank or missing is an error path)
- Optional format pattern
"""

import re
from typing import Dict, Any, Optional

from ..exceptions import RuleConfigurationError
from ..models.validation_result import ValidationResult
from .base import ValidationRule, Branch, is_blank


class SampleCodeRule(ValidationRule):
    """
    Required text field with an optional format check.

    Evaluation order:
    1. Missing, blank or otherwise falsy (0, False) -> ``missing`` branch
    2. Present but not matching ``pattern`` -> ``mismatch`` branch
    3. Otherwise no finding
    """

    check_type = "sample_code"

    def __init__(
        self,
        name: str,
        field: str,
        missing: Branch,
        pattern: Optional[str] = None,
        mismatch: Optional[Branch] = None,
        **kwargs
    ):
        super().__init__(name, field, **kwargs)
        self.missing = missing
        self.pattern = re.compile(pattern) if pattern else None
        self.mismatch = mismatch

        if self.pattern is not None and self.mismatch is None:
            raise RuleConfigurationError(
                f"Rule '{name}' declares a pattern without a mismatch branch")

    def validate(self, value: Any, record: Any = None) -> Optional[ValidationResult]:
        if is_blank(value) or not value:
            return self.missing.to_result(self.field)

        if self.pattern is not None:
            text = value if isinstance(value, str) else str(value)
            if not self.pattern.match(text):
                return self.mismatch.to_result(self.field, value)

        return None

    @classmethod
    def from_definition(cls, definition: Dict[str, Any]) -> "SampleCodeRule":
        if 'missing' not in definition:
            raise RuleConfigurationError(
                f"Rule '{definition.get('name')}' needs a 'missing' branch")

        pattern = definition.get('pattern')
        if pattern is not None:
            try:
                re.compile(pattern)
            except re.error as e:
                raise RuleConfigurationError(
                    f"Invalid regex pattern for field '{definition.get('field')}': {e}") from None

        mismatch = definition.get('mismatch')
        return cls(
            missing=Branch.from_definition(definition['missing'], include_value=False),
            pattern=pattern,
            mismatch=Branch.from_definition(mismatch) if mismatch else None,
            **cls._common_kwargs(definition)
        )
