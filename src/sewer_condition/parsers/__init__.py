"""Observation parsing for survey text."""

from .formatting import display_text, format_meterage, summarize_observations
from .observation_parser import (
    STRATEGIES,
    SYNTHESIS_RULES,
    ObservationMatch,
    ObservationParser,
    ParserStrategy,
    SynthesisRule,
)

__all__ = [
    "ObservationMatch",
    "ObservationParser",
    "ParserStrategy",
    "STRATEGIES",
    "SYNTHESIS_RULES",
    "SynthesisRule",
    "display_text",
    "format_meterage",
    "summarize_observations",
]
