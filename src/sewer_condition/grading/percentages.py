"""Percentage extraction and percentage-driven grade escalation."""

import re
from typing import List, Optional

MAX_GRADE = 5

_PERCENT = re.compile(r"(\d+(?:\.\d+)?)\s*%")


def extract_percentages(text: str) -> List[float]:
    """All percentage figures in the text, in order of appearance."""
    return [float(m.group(1)) for m in _PERCENT.finditer(text or "")]


def max_percentage(text: str) -> Optional[float]:
    """Largest percentage in the text, or None if there is none."""
    values = extract_percentages(text)
    return max(values) if values else None


def escalate_grade(grade: int, percentage: Optional[float]) -> int:
    """
    Adjust a taxonomy default grade by a percentage figure.

    >=50% raises by two and >=30% by one (both capped at 5); >=10% leaves
    the grade unchanged; below 10% lowers by one, never below 1. A grade
    of 0 is never raised by the floor.
    """
    if percentage is None:
        return grade
    if percentage >= 50:
        return min(grade + 2, MAX_GRADE)
    if percentage >= 30:
        return min(grade + 1, MAX_GRADE)
    if percentage >= 10:
        return grade
    return max(grade - 1, min(grade, 1))
