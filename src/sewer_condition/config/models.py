"""Data models for reference data and sector threshold configuration."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..models.enums import DefectCategory
from ..models.taxonomy import (
    CleaningMethod,
    DefectTaxonomyEntry,
    RepairMethod,
    SectorRecommendationRule,
    SrmScoreRow,
)


class ConfigurationType(Enum):
    """Types of configuration supported by the engine."""
    TAXONOMY = "taxonomy"
    THRESHOLDS = "thresholds"
    REPAIR_METHODS = "repair_methods"
    CLEANING_METHODS = "cleaning_methods"
    SRM_SCORES = "srm_scores"
    SECTOR_RULES = "sector_rules"


@dataclass(frozen=True)
class SectorThresholds:
    """
    Numeric limits applied for one client sector.

    ``standard_name`` is cited in generated recommendation text.
    """
    sector: str
    standard_name: str
    belly_threshold_pct: float
    max_water_level_pct: float = 50.0
    water_level_monitor_pct: float = 40.0
    min_structural_grade: int = 0
    version: int = 1


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result


class SectorThresholdTable:
    """
    Read-only lookup of sector thresholds.

    Unknown sector ids resolve to a conservative record built from the
    strictest configured limits, so a typo never loosens the standard.
    """

    CONSERVATIVE_SECTOR = "conservative-default"

    def __init__(self, records: Mapping[str, SectorThresholds]):
        if not records:
            raise ConfigurationError("Sector threshold table must contain at least one sector")
        self._records = MappingProxyType(dict(records))
        self._conservative = self._build_conservative(self._records.values())

    @staticmethod
    def _build_conservative(records) -> SectorThresholds:
        records = list(records)
        return SectorThresholds(
            sector=SectorThresholdTable.CONSERVATIVE_SECTOR,
            standard_name="strictest configured standard",
            belly_threshold_pct=min(r.belly_threshold_pct for r in records),
            max_water_level_pct=min(r.max_water_level_pct for r in records),
            water_level_monitor_pct=min(r.water_level_monitor_pct for r in records),
            min_structural_grade=max(r.min_structural_grade for r in records),
            version=max(r.version for r in records),
        )

    @property
    def sectors(self) -> Tuple[str, ...]:
        return tuple(sorted(self._records))

    @property
    def conservative_default(self) -> SectorThresholds:
        return self._conservative

    def __contains__(self, sector: str) -> bool:
        return sector in self._records

    def get(self, sector: str) -> Optional[SectorThresholds]:
        """Get the record for a sector, or None if it is not configured."""
        return self._records.get(sector)

    def resolve(self, sector: str) -> Tuple[SectorThresholds, bool]:
        """
        Resolve a sector to its thresholds.

        Returns:
            Tuple of (thresholds, fell_back). ``fell_back`` is True when the
            sector was unknown and the conservative default was used.
        """
        record = self._records.get(sector)
        if record is not None:
            return record, False
        return self._conservative, True

    def to_list(self) -> List[Dict[str, Any]]:
        return [
            {
                "sector": r.sector,
                "standard_name": r.standard_name,
                "belly_threshold_pct": r.belly_threshold_pct,
                "max_water_level_pct": r.max_water_level_pct,
                "water_level_monitor_pct": r.water_level_monitor_pct,
                "min_structural_grade": r.min_structural_grade,
                "version": r.version,
            }
            for r in (self._records[s] for s in self.sectors)
        ]


@dataclass(frozen=True)
class CodeVocabulary:
    """
    Code sets and phrase lists that are not defects in their own right
    but steer filtering and observation-only detection.
    """
    metadata_codes: Tuple[str, ...] = ("MH", "MHF")
    junction_codes: Tuple[str, ...] = ("JN", "CN")
    observation_codes: Tuple[str, ...] = (
        "LL", "LR", "LU", "LD", "REM", "MCPP", "REST", "BEND", "RE", "BRF", "CPF", "GP", "IC", "ICF",
    )
    water_level_code: str = "WL"
    service_connection_code: str = "SA"
    structural_keywords: Tuple[str, ...] = (
        "deformity", "deformed", "deformation", "fracture", "crack",
        "joint displacement", "collapse",
    )
    line_deviation_phrases: Tuple[str, ...] = ("line deviates", "line deviation", "rest bend", "bend")
    feature_phrases: Tuple[str, ...] = ("construction features", "miscellaneous features")
    no_coding_phrases: Tuple[str, ...] = ("no coding present", "no coding")

    def is_metadata(self, code: str) -> bool:
        return code in self.metadata_codes

    def is_junction(self, code: str) -> bool:
        return code in self.junction_codes

    def is_observation(self, code: str) -> bool:
        return code in self.observation_codes

    def has_structural_evidence(self, text: str) -> bool:
        lowered = text.lower()
        return any(k in lowered for k in self.structural_keywords)


@dataclass(frozen=True)
class ReferenceData:
    """
    Complete read-only rule set handed to the classifier.

    Built by ``ConfigurationManager.build_reference_data()`` or
    ``ReferenceData.default()``. Several instances can coexist, which lets
    two rule-set versions be compared side by side.
    """
    taxonomy: Mapping[str, DefectTaxonomyEntry]
    thresholds: SectorThresholdTable
    repair_methods: Mapping[str, RepairMethod] = field(default_factory=lambda: MappingProxyType({}))
    cleaning_methods: Mapping[str, CleaningMethod] = field(default_factory=lambda: MappingProxyType({}))
    srm_scores: Mapping[Tuple[str, int], SrmScoreRow] = field(default_factory=lambda: MappingProxyType({}))
    sector_rules: Tuple[SectorRecommendationRule, ...] = field(default_factory=tuple)
    vocabulary: CodeVocabulary = field(default_factory=CodeVocabulary)
    version: str = "MSCC5-2024.1"

    @classmethod
    def default(cls) -> "ReferenceData":
        """Build reference data from the built-in tables."""
        from . import defaults

        return cls(
            taxonomy=MappingProxyType({e.code: e for e in defaults.DEFAULT_TAXONOMY}),
            thresholds=SectorThresholdTable({t.sector: t for t in defaults.DEFAULT_SECTOR_THRESHOLDS}),
            repair_methods=MappingProxyType({m.code: m for m in defaults.DEFAULT_REPAIR_METHODS}),
            cleaning_methods=MappingProxyType({m.code: m for m in defaults.DEFAULT_CLEANING_METHODS}),
            srm_scores=MappingProxyType({(r.category.value, r.grade): r for r in defaults.DEFAULT_SRM_SCORES}),
            sector_rules=tuple(defaults.DEFAULT_SECTOR_RULES),
        )

    def entry(self, code: str) -> Optional[DefectTaxonomyEntry]:
        return self.taxonomy.get(code)

    def category_of(self, code: str) -> Optional[DefectCategory]:
        entry = self.taxonomy.get(code)
        return entry.category if entry else None

    def srm_row(self, category: DefectCategory, grade: int) -> Optional[SrmScoreRow]:
        return self.srm_scores.get((category.value, min(max(grade, 0), 5)))

    def rules_for(self, sector: str) -> List[SectorRecommendationRule]:
        """Get enabled sector recommendation rules sorted by priority."""
        return sorted(
            [r for r in self.sector_rules if r.enabled and r.sector == sector],
            key=lambda r: r.priority
        )


@dataclass
class EngineConfiguration:
    """
    Mutable working set held by ``ConfigurationManager`` while loading.

    Frozen into a ``ReferenceData`` by ``build_reference_data()``.
    """
    taxonomy: List[DefectTaxonomyEntry] = field(default_factory=list)
    thresholds: List[SectorThresholds] = field(default_factory=list)
    repair_methods: List[RepairMethod] = field(default_factory=list)
    cleaning_methods: List[CleaningMethod] = field(default_factory=list)
    srm_scores: List[SrmScoreRow] = field(default_factory=list)
    sector_rules: List[SectorRecommendationRule] = field(default_factory=list)
    version: str = "MSCC5-2024.1"
    metadata: Dict[str, Any] = field(default_factory=dict)

