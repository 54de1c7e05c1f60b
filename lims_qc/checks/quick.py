"""
Quick Field Validation

Stand-alone checks for one bare value, independent of experiment rule sets.
Used by forms that only need required/type/range/pattern checks.
"""

import math
import re
from typing import Dict, Any, Optional, Pattern, Union
from urllib.parse import urlsplit

from ..models.validation_result import ValidationLevel, ValidationResult
from .base import format_number


EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
URL_SCHEME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*$')

# Schemes that are meaningless without a host
_HOST_SCHEMES = {'http', 'https', 'ftp', 'ws', 'wss'}


def _is_empty(value: Any) -> bool:
    return value is None or value == ''


def _as_number(value: Any) -> Optional[float]:
    """Loose numeric coercion; None when the value is not a number."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return None if isinstance(value, float) and math.isnan(value) else value
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _parse_url(text: str):
    """
    Parse an absolute URL.

    Raises:
        ValueError: if the text is not an absolute URL
    """
    parts = urlsplit(text)
    if not parts.scheme or not URL_SCHEME_PATTERN.match(parts.scheme):
        raise ValueError(f"Missing or invalid URL scheme: {text!r}")
    if parts.scheme.lower() in _HOST_SCHEMES and not parts.hostname:
        raise ValueError(f"URL has no host: {text!r}")
    # Accessing the port validates it
    parts.port
    return parts


def _failure(field: str, level: ValidationLevel, message: str, value: Any = None,
             expected_range: Optional[str] = None, suggestion: Optional[str] = None) -> ValidationResult:
    return ValidationResult(
        field=field,
        level=level,
        message=message,
        suggestion=suggestion,
        current_value=value,
        expected_range=expected_range,
    )


def quick_validate(
    value: Any,
    rules: Optional[Dict[str, Any]] = None,
    *,
    required: Optional[bool] = None,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
    pattern: Optional[Union[str, Pattern]] = None,
    value_type: Optional[str] = None,
    field: str = "value"
) -> Optional[ValidationResult]:
    """
    Validate a single value against inline options.

    Options may be passed as a dict using the keys ``required``, ``min``,
    ``max``, ``pattern`` and ``type``, or as keyword arguments. Keyword
    arguments win over the dict.

    Checks run in this order and the first failure is returned:
    1. required (error)
    2. empty and not required -> pass
    3. type: number / email / url (error)
    4. numeric range: min, then max (warning)
    5. pattern (warning)

    Args:
        value: Value to check
        rules: Options dict
        field: Field name reported in the result

    Returns:
        ValidationResult for the first failing check, None if valid
    """
    options = dict(rules or {})
    if required is not None:
        options['required'] = required
    if min_value is not None:
        options['min'] = min_value
    if max_value is not None:
        options['max'] = max_value
    if pattern is not None:
        options['pattern'] = pattern
    if value_type is not None:
        options['type'] = value_type

    if options.get('required') and _is_empty(value):
        return _failure(field, ValidationLevel.ERROR, "此字段为必填项",
                        suggestion="请输入有效值")

    if _is_empty(value):
        return None

    declared_type = options.get('type')

    if declared_type == 'number':
        if _as_number(value) is None:
            return _failure(field, ValidationLevel.ERROR, "必须是有效数字", value)
    elif declared_type == 'email':
        if not EMAIL_PATTERN.match(str(value)):
            return _failure(field, ValidationLevel.ERROR, "邮箱格式不正确", value)
    elif declared_type == 'url':
        try:
            _parse_url(str(value))
        except ValueError:
            return _failure(field, ValidationLevel.ERROR, "URL格式不正确", value)

    is_numeric = isinstance(value, (int, float)) and not isinstance(value, bool)
    if declared_type == 'number' or is_numeric:
        number = _as_number(value)
        minimum = options.get('min')
        maximum = options.get('max')

        if number is not None and minimum is not None and number < minimum:
            return _failure(field, ValidationLevel.WARNING,
                            f"值不能小于 {format_number(minimum)}", value,
                            expected_range=f"≥ {format_number(minimum)}")

        if number is not None and maximum is not None and number > maximum:
            return _failure(field, ValidationLevel.WARNING,
                            f"值不能大于 {format_number(maximum)}", value,
                            expected_range=f"≤ {format_number(maximum)}")

    regex = options.get('pattern')
    if regex is not None:
        try:
            compiled = re.compile(regex) if isinstance(regex, str) else regex
        except re.error:
            return _failure(field, ValidationLevel.ERROR, "正则表达式无效", value,
                            expected_range=str(regex))
        if not compiled.search(str(value)):
            return _failure(field, ValidationLevel.WARNING, "格式不符合要求", value)

    return None
