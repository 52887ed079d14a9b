"""Belly (gradient sag) detection from water level readings."""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..config.models import SectorThresholds
from ..models.classification import BellyAnalysis
from ..models.observation import ParsedObservation
from .percentages import max_percentage

logger = logging.getLogger(__name__)

MIN_READINGS = 3

_WATER_LEVEL = re.compile(r"\bWL\s+(\d+(?:\.\d+)?)\s*m\b.*?(\d+(?:\.\d+)?)\s*%", re.IGNORECASE)


@dataclass(frozen=True)
class WaterLevelReading:
    """Water level as a percentage of pipe height at a meterage."""
    meterage: float
    percentage: float


def readings_from_observations(
    observations: Iterable[ParsedObservation], water_level_code: str = "WL"
) -> List[WaterLevelReading]:
    """Readings from WL observations that carry both a meterage and a percentage."""
    readings = []
    for observation in observations:
        if observation.code != water_level_code or observation.meterage_start is None:
            continue
        percentage = max_percentage(observation.description or observation.full_text)
        if percentage is not None:
            readings.append(WaterLevelReading(observation.meterage_start, percentage))
    return readings


def readings_from_text(text: str) -> List[WaterLevelReading]:
    """Readings written as "WL <m>m ... <n>%" anywhere in free text."""
    return [
        WaterLevelReading(float(m.group(1)), float(m.group(2)))
        for m in _WATER_LEVEL.finditer(text or "")
    ]


def _pct(value: float) -> str:
    return f"{value:g}"


class BellyAnalyzer:
    """
    Detects a rise-then-fall pattern in water levels along a section.

    Readings are ordered by meterage. Any interior reading strictly higher
    than both neighbours is a belly; the highest such peak is compared with
    the sector's belly threshold.
    """

    def analyze(self, readings: Iterable[WaterLevelReading], thresholds: SectorThresholds) -> BellyAnalysis:
        ordered = sorted(readings, key=lambda r: r.meterage)
        limit = thresholds.belly_threshold_pct
        standard = thresholds.standard_name
        highest = max((r.percentage for r in ordered), default=0.0)

        if len(ordered) < MIN_READINGS:
            return BellyAnalysis(
                has_belly=False,
                max_water_level=highest,
                fails_threshold=False,
                threshold_pct=limit,
                standard_name=standard,
                observation="Insufficient water level readings for gradient analysis",
            )

        peak = self._peak(ordered)
        if peak is None:
            return BellyAnalysis(
                has_belly=False,
                max_water_level=highest,
                fails_threshold=False,
                threshold_pct=limit,
                standard_name=standard,
                observation="No belly detected in water level readings",
            )

        fails = peak.percentage > limit
        logger.debug(
            f"Belly peaking at {peak.percentage}% at {peak.meterage}m "
            f"against {standard} limit {limit}%: {'fail' if fails else 'pass'}"
        )
        if fails:
            observation = (
                f"Belly detected with water level peaking at {_pct(peak.percentage)}% "
                f"- exceeds {standard} limit of {_pct(limit)}%"
            )
            recommendation = (
                f"We recommend excavation to correct the fall, water level peaked at "
                f"{_pct(peak.percentage)}% against the {standard} limit of {_pct(limit)}%"
            )
        else:
            observation = (
                f"Belly detected with water level peaking at {_pct(peak.percentage)}% "
                f"- within {standard} tolerance of {_pct(limit)}%"
            )
            recommendation = f"Belly within {standard} tolerance, monitoring recommended"

        return BellyAnalysis(
            has_belly=True,
            max_water_level=peak.percentage,
            fails_threshold=fails,
            threshold_pct=limit,
            standard_name=standard,
            observation=observation,
            recommendation=recommendation,
        )

    @staticmethod
    def _peak(ordered: List[WaterLevelReading]) -> Optional[WaterLevelReading]:
        peak = None
        for previous, current, following in zip(ordered, ordered[1:], ordered[2:]):
            if current.percentage > previous.percentage and current.percentage > following.percentage:
                if peak is None or current.percentage > peak.percentage:
                    peak = current
        return peak
