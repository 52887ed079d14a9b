"""Enumerations for the sewer condition classification engine."""

from enum import Enum


class DefectCategory(Enum):
    """Category a taxonomy code belongs to."""
    STRUCTURAL = "structural"
    SERVICE = "service"


class SectionCategory(Enum):
    """Category assigned to a classified section."""
    STRUCTURAL = "structural"
    SERVICE = "service"
    OBSERVATION_ONLY = "observation-only"


class Adoptability(Enum):
    """Whether a section can be accepted into an adopted network."""
    YES = "Yes"
    CONDITIONAL = "Conditional"
    NO = "No"


class OperationType(Enum):
    """Kind of site operation a defect calls for."""
    CLEANING = "cleaning"
    PATCHING = "patching"
    LINING = "lining"
    EXCAVATION = "excavation"


class ObservationOnlyReason(Enum):
    """Why a section ended up graded as observation-only."""
    NO_DEFECTS = "no_defects"
    NO_CODING_PRESENT = "no_coding_present"
    LINE_DEVIATION = "line_deviation"
    FEATURES_ONLY = "features_only"
    WATER_LEVEL = "water_level"
    BELLY_WITHIN_TOLERANCE = "belly_within_tolerance"
