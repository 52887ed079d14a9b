"""Severity grading, percentage escalation and belly analysis."""

from .belly_analyzer import (
    MIN_READINGS,
    BellyAnalyzer,
    WaterLevelReading,
    readings_from_observations,
    readings_from_text,
)
from .percentages import escalate_grade, extract_percentages, max_percentage
from .service_connections import ServiceConnectionAnalysis, analyze_service_connection
from .severity_engine import (
    CLEANSE_AND_RESURVEY,
    HIGH_WATER_ACTION,
    NO_ACTION_REQUIRED,
    GradedObservation,
    SeverityAssessment,
    SeverityGradingEngine,
)

__all__ = [
    "BellyAnalyzer",
    "CLEANSE_AND_RESURVEY",
    "GradedObservation",
    "HIGH_WATER_ACTION",
    "MIN_READINGS",
    "NO_ACTION_REQUIRED",
    "ServiceConnectionAnalysis",
    "SeverityAssessment",
    "SeverityGradingEngine",
    "WaterLevelReading",
    "analyze_service_connection",
    "escalate_grade",
    "extract_percentages",
    "max_percentage",
    "readings_from_observations",
    "readings_from_text",
]
