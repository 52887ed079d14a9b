"""Reference data models: defect taxonomy and method tables."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .enums import DefectCategory, OperationType


@dataclass(frozen=True)
class DefectTaxonomyEntry:
    """
    One row of the defect taxonomy.

    The recommended action is a Jinja2 template; it may reference
    ``meterage``, ``pipe_size``, ``percentage`` and ``code``.
    """
    code: str
    description: str
    category: DefectCategory
    default_grade: int
    risk_narrative: str
    recommended_action: str
    action_priority: int = 0  # Higher wins the dominant recommendation
    operation_type: OperationType = OperationType.PATCHING

    @property
    def is_structural(self) -> bool:
        return self.category is DefectCategory.STRUCTURAL

    @property
    def is_service(self) -> bool:
        return self.category is DefectCategory.SERVICE


@dataclass(frozen=True)
class RepairMethod:
    """Repair-method reference row keyed by defect code."""
    code: str
    suggested_repairs: Tuple[str, ...] = field(default_factory=tuple)
    repair_priority: str = ""


@dataclass(frozen=True)
class CleaningMethod:
    """Cleaning-method reference row keyed by defect code."""
    code: str
    recommended_methods: Tuple[str, ...] = field(default_factory=tuple)
    cleaning_frequency: str = ""


@dataclass(frozen=True)
class SrmScoreRow:
    """One SRM scoring row for a (category, grade) pair."""
    category: DefectCategory
    grade: int
    description: str
    criteria: str
    action_required: str
    adoptable: bool


@dataclass(frozen=True)
class SectorRecommendationRule:
    """
    Sector-specific replacement for a defect's recommended action.

    A rule fires when the sector and code match, the grade condition holds
    and, if ``text_contains`` is set, the section text contains it.
    Rules are tried by ascending ``priority``.
    """
    id: str
    sector: str
    codes: Tuple[str, ...]
    template: str
    priority: int = 100
    category: Optional[DefectCategory] = None  # None = any category
    grade: Optional[int] = None  # None = any grade
    text_contains: Optional[str] = None
    text_absent: Optional[str] = None
    enabled: bool = True

    def applies_to(self, sector: str, code: str, category: DefectCategory, grade: int, text: str) -> bool:
        """Check whether this rule applies to a dominant defect."""
        if not self.enabled or self.sector != sector:
            return False
        if self.codes and code not in self.codes:
            return False
        if self.category is not None and self.category is not category:
            return False
        if self.grade is not None and self.grade != grade:
            return False
        lowered = text.lower()
        if self.text_contains and self.text_contains.lower() not in lowered:
            return False
        if self.text_absent and self.text_absent.lower() in lowered:
            return False
        return True
