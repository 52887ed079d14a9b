"""Parsed observation model."""

from dataclasses import dataclass
from typing import Optional

from .enums import DefectCategory


@dataclass(frozen=True)
class ParsedObservation:
    """
    Structured form of one survey observation string.

    ``category`` is filled from the taxonomy by the parser; the structural
    and service flags are derived from it and cannot be set separately.
    """
    code: str
    meterage_start: Optional[float]
    meterage_end: Optional[float]
    description: str
    full_text: str
    category: Optional[DefectCategory] = None
    synthesized: bool = False

    @property
    def is_structural(self) -> bool:
        return self.category is DefectCategory.STRUCTURAL

    @property
    def is_service(self) -> bool:
        return self.category is DefectCategory.SERVICE

    @property
    def is_running(self) -> bool:
        """True for range defects recorded "from X to Y"."""
        return self.meterage_start is not None and self.meterage_end is not None

    @property
    def meterage(self) -> Optional[float]:
        return self.meterage_start
