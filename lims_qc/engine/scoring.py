"""
Quality scoring constants and helpers.

Every finding costs a flat penalty, applied to the total and to exactly one
category. Missing required fields cost an extra penalty each on top of the
finding reported for them.
"""

from typing import Dict, List, Iterable, Tuple

from ..models import SCORE_CATEGORIES, ValidationLevel, ValidationResult

MAX_SCORE = 100

# level -> (penalty, category)
LEVEL_PENALTIES: Dict[ValidationLevel, Tuple[int, str]] = {
    ValidationLevel.CRITICAL: (25, "reliability"),
    ValidationLevel.ERROR: (15, "accuracy"),
    ValidationLevel.WARNING: (8, "consistency"),
    ValidationLevel.INFO: (2, "completeness"),
}

MISSING_FIELD_PENALTY = 10

GRADE_THRESHOLDS = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)

PASSING_GRADES = ("A", "B")


def grade_for(total_score: float) -> str:
    """Letter grade for a clamped total score."""
    for threshold, grade in GRADE_THRESHOLDS:
        if total_score >= threshold:
            return grade
    return "F"


def score_results(
    results: Iterable[ValidationResult],
    missing_fields: List[str]
) -> Tuple[float, Dict[str, float], List[str]]:
    """
    Apply penalties for findings and missing required fields.

    Returns:
        (total, category scores, improvements), all scores clamped to >= 0
    """
    total = MAX_SCORE
    categories = {name: MAX_SCORE for name in SCORE_CATEGORIES}
    improvements = []

    for result in results:
        penalty, category = LEVEL_PENALTIES[result.level]
        total -= penalty
        categories[category] -= penalty
        improvements.append(f"{result.level.label}: {result.message}")

    if missing_fields:
        penalty = MISSING_FIELD_PENALTY * len(missing_fields)
        total -= penalty
        categories["completeness"] -= penalty
        improvements.append(f"缺少必填字段: {', '.join(missing_fields)}")

    total = max(0, total)
    categories = {name: max(0, score) for name, score in categories.items()}

    return total, categories, improvements
