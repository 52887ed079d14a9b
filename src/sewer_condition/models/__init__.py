"""Data models and enums for the sewer condition classification engine."""

from .enums import (
    Adoptability,
    DefectCategory,
    ObservationOnlyReason,
    OperationType,
    SectionCategory,
)
from .taxonomy import (
    CleaningMethod,
    DefectTaxonomyEntry,
    RepairMethod,
    SectorRecommendationRule,
    SrmScoreRow,
)
from .observation import ParsedObservation
from .classification import (
    BellyAnalysis,
    DefectDetail,
    OverrideGrades,
    SectionClassification,
    SectionInput,
    SplitSectionPair,
    SrmGrading,
)

__all__ = [
    # Enums
    "Adoptability",
    "DefectCategory",
    "ObservationOnlyReason",
    "OperationType",
    "SectionCategory",
    # Reference data models
    "CleaningMethod",
    "DefectTaxonomyEntry",
    "RepairMethod",
    "SectorRecommendationRule",
    "SrmScoreRow",
    # Parsing models
    "ParsedObservation",
    # Classification models
    "BellyAnalysis",
    "DefectDetail",
    "OverrideGrades",
    "SectionClassification",
    "SectionInput",
    "SplitSectionPair",
    "SrmGrading",
]
