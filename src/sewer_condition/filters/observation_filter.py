"""Proximity and exclusion filtering of parsed observations."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config.models import CodeVocabulary
from ..models.observation import ParsedObservation

logger = logging.getLogger(__name__)

DEFAULT_JUNCTION_TOLERANCE_M = 0.7

# Absorbs binary rounding in metre arithmetic (3.7 - 3.0 > 0.7 in floats)
_EPSILON = 1e-9


@dataclass(frozen=True)
class JunctionProximity:
    """A retained junction and the structural defect that kept it."""
    junction_code: str
    junction_meterage: float
    defect_code: str
    defect_meterage: float
    distance: float


@dataclass(frozen=True)
class FilterResult:
    """Observations kept and dropped for one section."""
    retained: Tuple[ParsedObservation, ...]
    excluded: Tuple[ParsedObservation, ...] = field(default_factory=tuple)
    junction_proximity: Tuple[JunctionProximity, ...] = field(default_factory=tuple)

    @property
    def has_structural(self) -> bool:
        return any(o.is_structural for o in self.retained)

    @property
    def has_service(self) -> bool:
        return any(o.is_service for o in self.retained)

    @property
    def structural_positions(self) -> List[float]:
        return [o.meterage_start for o in self.retained if o.is_structural and o.meterage_start is not None]

    @property
    def service_positions(self) -> List[float]:
        return [o.meterage_start for o in self.retained if o.is_service and o.meterage_start is not None]


class ObservationFilter:
    """
    Drops observations that are not worth reporting.

    Manhole markers are always dropped. A junction is kept only when it
    lies within the tolerance of a structural defect (inclusive), since
    only then may it need reopening after a cut-and-patch repair.
    """

    def __init__(self, vocabulary: CodeVocabulary, tolerance: float = DEFAULT_JUNCTION_TOLERANCE_M):
        if tolerance < 0:
            raise ValueError("Junction tolerance must be non-negative")
        self._vocabulary = vocabulary
        self._tolerance = tolerance

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def filter(self, observations: List[ParsedObservation]) -> FilterResult:
        structural = [o for o in observations if o.is_structural and o.meterage_start is not None]

        retained: List[ParsedObservation] = []
        excluded: List[ParsedObservation] = []
        proximity: List[JunctionProximity] = []

        for observation in observations:
            if self._vocabulary.is_metadata(observation.code):
                logger.debug(f"Dropping metadata observation: {observation.full_text!r}")
                excluded.append(observation)
                continue

            if self._vocabulary.is_junction(observation.code) and observation.meterage_start is not None:
                nearest = self._nearest_structural(observation.meterage_start, structural)
                if nearest is None:
                    logger.debug(f"Dropping junction with no nearby structural defect: {observation.full_text!r}")
                    excluded.append(observation)
                    continue
                proximity.append(JunctionProximity(
                    junction_code=observation.code,
                    junction_meterage=observation.meterage_start,
                    defect_code=nearest[0].code,
                    defect_meterage=nearest[0].meterage_start,
                    distance=round(nearest[1], 3),
                ))

            retained.append(observation)

        return FilterResult(
            retained=tuple(retained),
            excluded=tuple(excluded),
            junction_proximity=tuple(proximity),
        )

    def is_near(self, junction: float, defect: ParsedObservation) -> bool:
        """Check whether a junction meterage lies within tolerance of a structural defect."""
        return self._distance(junction, defect) <= self._tolerance + _EPSILON

    def _distance(self, junction: float, defect: ParsedObservation) -> float:
        start = defect.meterage_start
        end = defect.meterage_end if defect.meterage_end is not None else start
        low, high = min(start, end), max(start, end)
        if low <= junction <= high:
            return 0.0
        return low - junction if junction < low else junction - high

    def _nearest_structural(
        self, junction: float, structural: List[ParsedObservation]
    ) -> Optional[Tuple[ParsedObservation, float]]:
        best: Optional[Tuple[ParsedObservation, float]] = None
        for defect in structural:
            if not self.is_near(junction, defect):
                continue
            distance = self._distance(junction, defect)
            if best is None or distance < best[1]:
                best = (defect, distance)
        return best
