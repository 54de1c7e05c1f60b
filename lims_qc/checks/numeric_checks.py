"""
Numeric Field Checks

Validates measured quantities (concentrations, volumes, ratios, sizes)
against a tiered threshold table.

Tiers are evaluated top-down and the first matching tier fires. The order is
part of the rule: a negative concentration must report "negative" even though
it is also below the low threshold.
"""

import operator
from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Tuple, Union

from ..exceptions import RuleConfigurationError
from ..models.validation_result import ValidationLevel, ValidationResult
from .base import ValidationRule, Branch, Condition, is_blank, to_number


_COMPARATORS = {
    'lt': operator.lt,
    'le': operator.le,
    'gt': operator.gt,
    'ge': operator.ge,
}


@dataclass(frozen=True)
class Tier:
    """
    One threshold band of a numeric rule.

    op is one of lt, le, gt, ge (against ``bound``) or between (inclusive,
    against a ``(low, high)`` pair).
    """
    op: str
    bound: Union[float, Tuple[float, float]]
    branch: Branch

    def matches(self, number: float) -> bool:
        if self.op == 'between':
            low, high = self.bound
            return low <= number <= high
        return _COMPARATORS[self.op](number, self.bound)

    @classmethod
    def from_definition(cls, definition: Dict[str, Any]) -> "Tier":
        when = definition.get('when')
        if not isinstance(when, dict) or len(when) != 1:
            raise RuleConfigurationError(
                f"Tier needs exactly one comparison under 'when', got {when!r}")

        op, bound = next(iter(when.items()))
        if op == 'between':
            if not isinstance(bound, (list, tuple)) or len(bound) != 2:
                raise RuleConfigurationError(f"'between' needs [low, high], got {bound!r}")
            low, high = to_number(bound[0]), to_number(bound[1])
            if low is None or high is None:
                raise RuleConfigurationError(f"'between' bounds must be numeric, got {bound!r}")
            bound = (low, high)
        elif op in _COMPARATORS:
            if to_number(bound) is None:
                raise RuleConfigurationError(f"Tier bound must be numeric, got {bound!r}")
            bound = to_number(bound)
        else:
            raise RuleConfigurationError(f"Unknown tier comparison: {op!r}")

        return cls(op=op, bound=bound, branch=Branch.from_definition(definition))


class NumericRule(ValidationRule):
    """
    Tiered numeric rule.

    Evaluation order:
    1. Missing value -> ``missing`` branch, or nothing when ``missing`` is None.
       With a ``missing_when`` condition, absence is only reported when the
       condition holds on the sibling fields of the record. With
       ``falsy_is_missing`` a zero or false value also counts as not recorded.
    2. Value not readable as a number -> error
    3. First matching tier
    4. Otherwise no finding
    """

    check_type = "numeric"

    def __init__(
        self,
        name: str,
        field: str,
        tiers: List[Tier],
        missing: Optional[Branch] = None,
        missing_when: Optional[Condition] = None,
        falsy_is_missing: bool = False,
        **kwargs
    ):
        super().__init__(name, field, **kwargs)
        self.tiers = tuple(tiers)
        self.missing = missing
        self.missing_when = missing_when
        self.falsy_is_missing = falsy_is_missing

    def _is_missing(self, value: Any) -> bool:
        if is_blank(value):
            return True
        return self.falsy_is_missing and not value

    def validate(self, value: Any, record: Any = None) -> Optional[ValidationResult]:
        if self._is_missing(value):
            if self.missing is None:
                return None
            if self.missing_when is not None and not self.missing_when.matches(record):
                return None
            return self.missing.to_result(self.field)

        number = to_number(value)
        if number is None:
            return ValidationResult(
                field=self.field,
                level=ValidationLevel.ERROR,
                message=f"{self.label}必须是有效数字",
                suggestion="请输入数值",
                current_value=value,
            )

        for tier in self.tiers:
            if tier.matches(number):
                return tier.branch.to_result(self.field, value)

        return None

    @classmethod
    def from_definition(cls, definition: Dict[str, Any]) -> "NumericRule":
        missing = definition.get('missing')
        missing_when = None
        falsy_is_missing = False
        if missing:
            branch = Branch.from_definition(missing, include_value=False)
            if 'when' in missing:
                missing_when = Condition.from_definition(missing['when'])
            falsy_is_missing = bool(missing.get('falsy', False))
            missing = branch

        return cls(
            tiers=[Tier.from_definition(t) for t in definition.get('tiers') or []],
            missing=missing or None,
            missing_when=missing_when,
            falsy_is_missing=falsy_is_missing,
            **cls._common_kwargs(definition)
        )
