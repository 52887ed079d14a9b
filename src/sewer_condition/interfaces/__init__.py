"""Abstract interfaces for the sewer condition engine."""

from .classifier import ClassificationResult, ISectionClassifier
from .parser import IObservationParser

__all__ = [
    "ClassificationResult",
    "IObservationParser",
    "ISectionClassifier",
]
