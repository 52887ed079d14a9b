"""Recommendation composition and adoptability resolution."""

from .adoptability import resolve_adoptability
from .recommendation_generator import (
    DEFAULT_PIPE_SIZE_MM,
    JUNCTION_REOPEN_CLAUSE,
    Recommendation,
    RecommendationGenerator,
)

__all__ = [
    "DEFAULT_PIPE_SIZE_MM",
    "JUNCTION_REOPEN_CLAUSE",
    "Recommendation",
    "RecommendationGenerator",
    "resolve_adoptability",
]
