"""Configuration management for the sewer condition engine."""

from .config_manager import CONFIG_FILES, ConfigurationManager
from .models import (
    CodeVocabulary,
    ConfigurationError,
    ConfigurationType,
    EngineConfiguration,
    ReferenceData,
    SectorThresholds,
    SectorThresholdTable,
    ValidationResult,
)

__all__ = [
    "CONFIG_FILES",
    "CodeVocabulary",
    "ConfigurationError",
    "ConfigurationManager",
    "ConfigurationType",
    "EngineConfiguration",
    "ReferenceData",
    "SectorThresholds",
    "SectorThresholdTable",
    "ValidationResult",
]
