"""Proximity and exclusion filtering."""

from .observation_filter import (
    DEFAULT_JUNCTION_TOLERANCE_M,
    FilterResult,
    JunctionProximity,
    ObservationFilter,
)

__all__ = [
    "DEFAULT_JUNCTION_TOLERANCE_M",
    "FilterResult",
    "JunctionProximity",
    "ObservationFilter",
]
