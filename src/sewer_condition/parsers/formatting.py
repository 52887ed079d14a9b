"""Rendering of parsed observations back to summary text."""

from typing import Dict, Iterable, List, Optional, Tuple

from ..models.observation import ParsedObservation


def format_meterage(value: Optional[float]) -> str:
    """Format a meterage the way surveys print it, e.g. 13.27m."""
    if value is None:
        return ""
    return f"{value:.2f}".rstrip("0").rstrip(".") + "m"


def display_text(observation: ParsedObservation) -> str:
    """Original text, prefixed with the code when it was synthesized."""
    if observation.synthesized:
        return f"{observation.code} {observation.full_text}"
    return observation.full_text


def summarize_observations(observations: Iterable[ParsedObservation]) -> str:
    """
    Join observations into one summary string.

    Point observations sharing a code and description are merged, e.g.
    "DES Settled deposits at 13.27m, 16.63m". Order of first appearance
    is kept.
    """
    groups: Dict[Tuple[str, str], List[ParsedObservation]] = {}
    order: List[object] = []
    for observation in observations:
        if observation.synthesized or observation.is_running or observation.meterage_start is None:
            order.append(observation)
            continue
        key = (observation.code, observation.description)
        if key not in groups:
            groups[key] = []
            order.append(key)
        groups[key].append(observation)

    parts: List[str] = []
    for item in order:
        if isinstance(item, ParsedObservation):
            parts.append(display_text(item))
            continue
        members = groups[item]
        if len(members) == 1:
            parts.append(display_text(members[0]))
            continue
        code, description = item
        points = ", ".join(format_meterage(o.meterage_start) for o in members)
        parts.append(f"{code} {description} at {points}" if description else f"{code} at {points}")
    return ". ".join(parts)
