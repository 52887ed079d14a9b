"""Section classifier interface for the sewer condition engine."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Union

from ..models.classification import (
    OverrideGrades,
    SectionClassification,
    SectionInput,
    SplitSectionPair,
)

ClassificationResult = Union[SectionClassification, SplitSectionPair]


class ISectionClassifier(ABC):
    """
    Abstract interface for section classification.

    Implementations are pure: the same inputs and reference data always
    produce the same result, and no state is kept between calls.
    """

    @abstractmethod
    def classify_section(
        self,
        raw_observations: Sequence[str],
        override_grades: Optional[OverrideGrades],
        sector: str,
        item_number: Optional[str] = None,
        section_length: Optional[float] = None,
    ) -> ClassificationResult:
        """
        Classify one pipe section.

        Args:
            raw_observations: Observation strings for the section.
            override_grades: Grades supplied by an upstream source, if any.
            sector: Client sector id, e.g. "utilities".
            item_number: Section identifier.
            section_length: Total section length in metres.

        Returns:
            A single SectionClassification, or a SplitSectionPair when the
            section mixes structural and service defects.
        """
        pass

    @abstractmethod
    def classify_batch(
        self,
        sections: Iterable[SectionInput],
        max_workers: int = 1,
    ) -> List[ClassificationResult]:
        """
        Classify many independent sections.

        Args:
            sections: Section inputs.
            max_workers: Worker threads; 1 classifies sequentially.

        Returns:
            Results in input order.
        """
        pass
