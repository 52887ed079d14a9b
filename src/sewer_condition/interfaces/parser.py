"""Observation parser interface for the sewer condition engine."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from ..models.observation import ParsedObservation


class IObservationParser(ABC):
    """
    Abstract interface for observation parsing.

    Implementations turn one free-text survey observation into a
    structured record, or report that no code could be isolated.
    """

    @abstractmethod
    def parse(self, text: str) -> Optional[ParsedObservation]:
        """
        Parse one observation string.

        Args:
            text: Raw observation text from the survey.

        Returns:
            ParsedObservation, or None if no code-like token was found.
            Never raises on malformed text.
        """
        pass

    @abstractmethod
    def parse_many(self, texts: Iterable[str]) -> Tuple[List[ParsedObservation], List[str]]:
        """
        Parse a section's observation strings.

        Args:
            texts: Raw observation strings in survey order.

        Returns:
            Tuple of (parsed observations, strings that could not be parsed).
        """
        pass
