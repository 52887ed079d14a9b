"""
Sewer Condition Classification Engine

Turns CCTV sewer survey observation text into graded, sector-aware
condition classifications with repair and cleaning recommendations.
"""

__version__ = "0.1.0"

# Export main components
from .classifier import SectionClassifier
from .config import (
    CodeVocabulary,
    ConfigurationError,
    ConfigurationManager,
    ConfigurationType,
    ReferenceData,
    SectorThresholds,
    SectorThresholdTable,
    ValidationResult,
)
from .diagnostics import ClassificationDiagnostic, DiagnosticCollector, DiagnosticKind
from .filters import FilterResult, ObservationFilter
from .grading import BellyAnalyzer, SeverityAssessment, SeverityGradingEngine, WaterLevelReading
from .models.classification import (
    BellyAnalysis,
    DefectDetail,
    OverrideGrades,
    SectionClassification,
    SectionInput,
    SplitSectionPair,
    SrmGrading,
)
from .models.enums import (
    Adoptability,
    DefectCategory,
    ObservationOnlyReason,
    OperationType,
    SectionCategory,
)
from .models.observation import ParsedObservation
from .models.taxonomy import DefectTaxonomyEntry
from .parsers import ObservationParser
from .recommendations import RecommendationGenerator, resolve_adoptability
from .reporting import SectorReportGenerator
from .serialization import ClassificationSerializer
from .splitting import SectionSplitter
from .storage import DatabaseManager, SectorThresholdStore

__all__ = [
    "Adoptability",
    "BellyAnalysis",
    "BellyAnalyzer",
    "ClassificationDiagnostic",
    "ClassificationSerializer",
    "CodeVocabulary",
    "ConfigurationError",
    "ConfigurationManager",
    "ConfigurationType",
    "DatabaseManager",
    "DefectCategory",
    "DefectDetail",
    "DefectTaxonomyEntry",
    "DiagnosticCollector",
    "DiagnosticKind",
    "FilterResult",
    "ObservationFilter",
    "ObservationOnlyReason",
    "ObservationParser",
    "OperationType",
    "OverrideGrades",
    "ParsedObservation",
    "RecommendationGenerator",
    "ReferenceData",
    "SectionCategory",
    "SectionClassification",
    "SectionClassifier",
    "SectionInput",
    "SectionSplitter",
    "SectorReportGenerator",
    "SectorThresholdStore",
    "SectorThresholds",
    "SectorThresholdTable",
    "SeverityAssessment",
    "SeverityGradingEngine",
    "SplitSectionPair",
    "SrmGrading",
    "ValidationResult",
    "WaterLevelReading",
    "resolve_adoptability",
]
