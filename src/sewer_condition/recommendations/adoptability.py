"""Adoptability resolution from (category, grade)."""

from typing import Union

from ..models.enums import Adoptability, DefectCategory, SectionCategory

CategoryLike = Union[SectionCategory, DefectCategory, str]


def _category_value(category: CategoryLike) -> str:
    return category if isinstance(category, str) else category.value


def resolve_adoptability(category: CategoryLike, grade: int) -> Adoptability:
    """
    Map a section category and severity grade to an adoptability verdict.

    Grade 0 is always adoptable and grade 4 or above never is. Grade 3 is
    conditional, as is grade 2 for structural and service sections. Sector
    plays no part in the decision.
    """
    value = _category_value(category)
    if grade <= 0:
        return Adoptability.YES
    if grade >= 4:
        return Adoptability.NO
    if grade == 3:
        return Adoptability.CONDITIONAL
    if grade == 2 and value in (DefectCategory.STRUCTURAL.value, DefectCategory.SERVICE.value):
        return Adoptability.CONDITIONAL
    return Adoptability.YES
