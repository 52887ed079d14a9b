"""Classification result models for the sewer condition engine."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .enums import Adoptability, OperationType, SectionCategory


@dataclass(frozen=True)
class OverrideGrades:
    """
    Grades supplied by an upstream source (e.g. a survey package's own
    section statistics). Any field may be None.
    """
    structural: Optional[int] = None
    service: Optional[int] = None
    observation: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["OverrideGrades"]:
        if data is None:
            return None
        return cls(
            structural=data.get("structural"),
            service=data.get("service"),
            observation=data.get("observation"),
        )

    @property
    def is_empty(self) -> bool:
        return self.structural is None and self.service is None and self.observation is None


@dataclass(frozen=True)
class SrmGrading:
    """The SRM row and reference data actually used for a classification."""
    category: str
    grade: int
    description: str
    criteria: str
    action_required: str
    adoptable: bool
    taxonomy_code: Optional[str]
    sector: str
    standard_name: str
    thresholds_version: int = 1


@dataclass(frozen=True)
class BellyAnalysis:
    """Outcome of water-level trend analysis for one section."""
    has_belly: bool
    max_water_level: float
    fails_threshold: bool
    threshold_pct: float
    standard_name: str
    observation: str = ""
    recommendation: str = ""


@dataclass(frozen=True)
class DefectDetail:
    """Per-observation grading detail carried on the result."""
    code: str
    meterage_start: Optional[float]
    meterage_end: Optional[float]
    percentage: Optional[float]
    grade: int
    category: str
    operation_type: OperationType
    description: str
    synthesized: bool = False


@dataclass(frozen=True)
class SectionClassification:
    """
    Engine output for one physical section or one split sub-section.

    Built fresh on every classification call and never mutated.
    """
    item_number: Optional[str]
    defect_summary_text: str
    category: SectionCategory
    severity_grade: int
    severity_by_category: Dict[str, Optional[int]]
    recommendation: str
    adoptable: Adoptability
    srm_grading: SrmGrading
    sector: str
    defect_codes: Tuple[str, ...] = field(default_factory=tuple)
    defects: Tuple[DefectDetail, ...] = field(default_factory=tuple)
    recommendation_methods: Tuple[str, ...] = field(default_factory=tuple)
    cleaning_methods: Tuple[str, ...] = field(default_factory=tuple)
    recommendation_priority: str = ""
    cleaning_frequency: str = ""
    risk_assessment: str = ""
    belly: Optional[BellyAnalysis] = None
    letter_suffix: Optional[str] = None
    unparsed_observations: Tuple[str, ...] = field(default_factory=tuple)
    diagnostics: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_observation_only(self) -> bool:
        return self.category is SectionCategory.OBSERVATION_ONLY


@dataclass(frozen=True)
class SplitSectionPair:
    """
    Two records produced from one section holding both structural and
    service defects. The service record keeps the bare identifier; the
    structural record carries the letter suffix.
    """
    original_item_number: Optional[str]
    service: SectionClassification
    structural: SectionClassification

    @property
    def records(self) -> List[SectionClassification]:
        return [self.service, self.structural]


@dataclass(frozen=True)
class SectionInput:
    """One section's input for batch classification."""
    raw_observations: Tuple[str, ...]
    sector: str
    override_grades: Optional[OverrideGrades] = None
    item_number: Optional[str] = None
    section_length: Optional[float] = None
