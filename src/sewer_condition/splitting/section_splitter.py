"""Partitioning of mixed sections into service and structural records."""

import string
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from ..config.models import CodeVocabulary
from ..grading.service_connections import analyze_service_connection
from ..models.observation import ParsedObservation


@dataclass(frozen=True)
class SectionPartition:
    """
    A section's retained observations divided by category.

    Every retained observation lands in exactly one side.
    """
    service: Tuple[ParsedObservation, ...] = field(default_factory=tuple)
    structural: Tuple[ParsedObservation, ...] = field(default_factory=tuple)
    has_service_defect: bool = False

    @property
    def is_mixed(self) -> bool:
        """True when both sides hold at least one gradable defect."""
        return self.has_service_defect and any(o.is_structural for o in self.structural)

    @property
    def all(self) -> Tuple[ParsedObservation, ...]:
        return self.service + self.structural


class SectionSplitter:
    """
    Splits a section holding both structural and service defects.

    Service defects, and anything without a category, stay with the bare
    item number. Structural defects, together with junctions kept for
    being near one, go to the record with the letter suffix.
    """

    def __init__(self, vocabulary: CodeVocabulary):
        self._vocabulary = vocabulary

    def partition(self, observations: Iterable[ParsedObservation]) -> SectionPartition:
        service = []
        structural = []
        for observation in observations:
            if observation.is_structural or self._is_located_junction(observation):
                structural.append(observation)
            else:
                service.append(observation)
        return SectionPartition(
            service=tuple(service),
            structural=tuple(structural),
            has_service_defect=any(self._is_service_defect(o) for o in service),
        )

    def _is_service_defect(self, observation: ParsedObservation) -> bool:
        """Water levels and service connections needing no action do not count."""
        if not observation.is_service or observation.code == self._vocabulary.water_level_code:
            return False
        if observation.code == self._vocabulary.service_connection_code:
            return analyze_service_connection(observation.full_text).requires_contractor_confirmation
        return True

    def _is_located_junction(self, observation: ParsedObservation) -> bool:
        return self._vocabulary.is_junction(observation.code) and observation.meterage_start is not None

    @staticmethod
    def suffix(index: int = 0) -> str:
        """Letter suffix for the index-th split record: "a", "b", ..."""
        if not 0 <= index < len(string.ascii_lowercase):
            raise ValueError(f"Split index out of range: {index}")
        return string.ascii_lowercase[index]

    @classmethod
    def split_item_number(cls, item_number: Optional[str], index: int = 0) -> Optional[str]:
        if item_number is None:
            return None
        return f"{item_number}{cls.suffix(index)}"
