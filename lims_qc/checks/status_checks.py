"""
Status Field Checks

Maps enumerated outcome values (amplification result, library QC status)
to findings. Each field carries its own value -> level table; tables are
never shared between fields.
"""

from typing import Dict, Any, Optional

from ..exceptions import RuleConfigurationError
from ..models.validation_result import ValidationResult
from .base import ValidationRule, Branch, is_blank


class StatusRule(ValidationRule):
    """
    Enumerated status rule.

    Missing -> ``missing`` branch; a value listed in ``statuses`` -> its branch;
    any other value -> no finding.
    """

    check_type = "status"

    def __init__(
        self,
        name: str,
        field: str,
        missing: Branch,
        statuses: Dict[str, Branch],
        **kwargs
    ):
        super().__init__(name, field, **kwargs)
        self.missing = missing
        self.statuses = dict(statuses)

    def validate(self, value: Any, record: Any = None) -> Optional[ValidationResult]:
        if is_blank(value) or value is False:
            return self.missing.to_result(self.field)

        if not isinstance(value, str):
            return None

        branch = self.statuses.get(value.strip())
        if branch is None:
            return None
        return branch.to_result(self.field, value)

    @classmethod
    def from_definition(cls, definition: Dict[str, Any]) -> "StatusRule":
        if 'missing' not in definition:
            raise RuleConfigurationError(
                f"Rule '{definition.get('name')}' needs a 'missing' branch")

        statuses = definition.get('statuses') or {}
        if not isinstance(statuses, dict):
            raise RuleConfigurationError(
                f"'statuses' must map values to branches, got {statuses!r}")

        return cls(
            missing=Branch.from_definition(definition['missing'], include_value=False),
            statuses={str(k): Branch.from_definition(v) for k, v in statuses.items()},
            **cls._common_kwargs(definition)
        )
