"""Severity grading of a section's retained observations.

Grades are computed per category (structural / service) as the maximum
over the section's observations, after percentage escalation, caller
overrides, the sector's structural floor and the deformation area-loss
rule. Sections without coded defects are resolved here too: water-level
only sections through the high-water and belly checks, everything else as
observation-only.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..config.models import ReferenceData, SectorThresholds
from ..diagnostics import DiagnosticCollector, DiagnosticKind
from ..models.classification import BellyAnalysis, OverrideGrades
from ..models.enums import DefectCategory, ObservationOnlyReason, SectionCategory
from ..models.observation import ParsedObservation
from ..models.taxonomy import DefectTaxonomyEntry
from .belly_analyzer import MIN_READINGS, BellyAnalyzer, readings_from_observations
from .percentages import MAX_GRADE, escalate_grade, max_percentage
from .service_connections import VERIFY_CONNECTION, analyze_service_connection

logger = logging.getLogger(__name__)

NO_ACTION_REQUIRED = "No action required pipe observed in acceptable structural and service condition"
CLEANSE_AND_RESURVEY = "We would recommend cleansing and resurveying this section"
HIGH_WATER_ACTION = (
    "Cleanse and survey to investigate the high water levels, "
    "consideration should be given to downstream access"
)
HIGH_WATER_MONITOR = "Monitor water levels and consider downstream investigation"

AREA_LOSS_GRADE = 4
BELLY_FAILURE_GRADE = 4
HIGH_WATER_GRADE = 3
DEFORMITY_OVERRIDE_FLOOR = 2

_DEFORMATION_WORDS = ("deformation", "deformity")
_AREA_LOSS_PHRASE = "cross-sectional area loss"


@dataclass(frozen=True)
class GradedObservation:
    """One observation with the grade it contributes to its category."""
    observation: ParsedObservation
    entry: DefectTaxonomyEntry
    grade: int
    percentage: Optional[float] = None

    @property
    def category(self) -> DefectCategory:
        return self.entry.category


@dataclass(frozen=True)
class SeverityAssessment:
    """Section-level grading outcome."""
    thresholds: SectorThresholds
    structural_grade: Optional[int] = None
    service_grade: Optional[int] = None
    graded: Tuple[GradedObservation, ...] = field(default_factory=tuple)
    observation_only_reason: Optional[ObservationOnlyReason] = None
    fixed_recommendation: Optional[str] = None
    risk_assessment: Optional[str] = None
    belly: Optional[BellyAnalysis] = None
    max_water_level: Optional[float] = None
    area_loss_override: bool = False

    @property
    def is_observation_only(self) -> bool:
        return self.observation_only_reason is not None

    @property
    def category(self) -> SectionCategory:
        if self.is_observation_only:
            return SectionCategory.OBSERVATION_ONLY
        if self.structural_grade is not None and (
            self.service_grade is None or self.structural_grade >= self.service_grade
        ):
            return SectionCategory.STRUCTURAL
        return SectionCategory.SERVICE

    @property
    def severity_grade(self) -> int:
        grades = [g for g in (self.structural_grade, self.service_grade) if g is not None]
        return max(grades) if grades else 0

    @property
    def severity_by_category(self) -> Dict[str, Optional[int]]:
        return {
            DefectCategory.STRUCTURAL.value: self.structural_grade,
            DefectCategory.SERVICE.value: self.service_grade,
        }

    def grade_for(self, category: DefectCategory) -> Optional[int]:
        if category is DefectCategory.STRUCTURAL:
            return self.structural_grade
        return self.service_grade


class SeverityGradingEngine:
    """
    Converts a section's observations into per-category severity grades.

    Stateless apart from the injected reference data; safe to share
    between threads.
    """

    def __init__(self, reference_data: ReferenceData, belly_analyzer: Optional[BellyAnalyzer] = None):
        self._reference = reference_data
        self._belly_analyzer = belly_analyzer or BellyAnalyzer()

    def grade(
        self,
        observations: Sequence[ParsedObservation],
        thresholds: SectorThresholds,
        overrides: Optional[OverrideGrades] = None,
        collector: Optional[DiagnosticCollector] = None,
        notes: Sequence[str] = (),
        area_loss: Optional[bool] = None,
    ) -> SeverityAssessment:
        """
        Grade one section (or one split sub-section).

        Args:
            observations: Retained observations for the section.
            thresholds: Resolved sector thresholds.
            overrides: Upstream grades; text evidence decides whether
                each one applies.
            collector: Receives recoverable inconsistencies.
            notes: Uncoded survey text, consulted only to tell apart the
                observation-only cases ("no coding present" and the like).
            area_loss: Deformation area-loss finding for the whole section.
                When None it is read from these observations alone.

        Returns:
            SeverityAssessment for the section.
        """
        collector = collector or DiagnosticCollector()
        vocabulary = self._reference.vocabulary
        lowered = " ".join(o.full_text for o in observations).lower()

        graded = self._grade_observations(observations, collector)
        has_defects = any(g.observation.code != vocabulary.water_level_code for g in graded)

        structural_grade: Optional[int] = None
        service_grade: Optional[int] = None
        if has_defects:
            structural_grade = self._max_grade(graded, DefectCategory.STRUCTURAL)
            service_grade = self._max_grade(graded, DefectCategory.SERVICE)

        structural_grade, service_grade = self._apply_overrides(
            structural_grade, service_grade, overrides, graded, lowered, collector
        )
        self._check_observation_override(overrides, collector)

        if structural_grade is None and service_grade is None:
            notes_text = " ".join(notes).lower()
            return self._grade_without_defects(observations, graded, thresholds, f"{lowered} {notes_text}")

        if structural_grade is not None and structural_grade < thresholds.min_structural_grade:
            logger.debug(
                f"Raising structural grade {structural_grade} to sector floor "
                f"{thresholds.min_structural_grade} ({thresholds.sector})"
            )
            structural_grade = thresholds.min_structural_grade

        if area_loss is None:
            area_loss = self._has_area_loss(lowered)
        if area_loss:
            structural_grade = AREA_LOSS_GRADE

        belly = None
        readings = readings_from_observations(observations, vocabulary.water_level_code)
        if len(readings) >= MIN_READINGS:
            belly = self._belly_analyzer.analyze(readings, thresholds)
            if belly.fails_threshold:
                service_grade = max(service_grade or 0, BELLY_FAILURE_GRADE)

        return SeverityAssessment(
            thresholds=thresholds,
            structural_grade=structural_grade,
            service_grade=service_grade,
            graded=tuple(graded),
            belly=belly,
            max_water_level=self._max_water_level(observations),
            area_loss_override=area_loss,
        )

    # =========================================================================
    # Per-observation grading
    # =========================================================================

    def _grade_observations(
        self, observations: Sequence[ParsedObservation], collector: DiagnosticCollector
    ) -> List[GradedObservation]:
        vocabulary = self._reference.vocabulary
        graded: List[GradedObservation] = []
        reported_unknown = set()

        for observation in observations:
            entry = self._reference.entry(observation.code)
            if entry is None:
                if not (
                    vocabulary.is_junction(observation.code)
                    or vocabulary.is_observation(observation.code)
                    or vocabulary.is_metadata(observation.code)
                    or observation.code in reported_unknown
                ):
                    reported_unknown.add(observation.code)
                    collector.report(
                        DiagnosticKind.UNKNOWN_CODE,
                        f"Code '{observation.code}' is not in the defect taxonomy and was not graded",
                        code=observation.code,
                    )
                continue

            if observation.code == vocabulary.service_connection_code:
                analysis = analyze_service_connection(observation.full_text)
                if not analysis.requires_contractor_confirmation:
                    logger.debug(f"Service connection needs no action: {observation.full_text!r}")
                    continue
                graded.append(GradedObservation(observation, entry, entry.default_grade))
                continue

            percentage = max_percentage(observation.description or observation.full_text)
            grade = escalate_grade(entry.default_grade, percentage)
            graded.append(GradedObservation(observation, entry, grade, percentage))

        return graded

    @staticmethod
    def _max_grade(graded: List[GradedObservation], category: DefectCategory) -> Optional[int]:
        grades = [g.grade for g in graded if g.category is category]
        return max(grades) if grades else None

    # =========================================================================
    # Overrides
    # =========================================================================

    def _apply_overrides(
        self,
        structural_grade: Optional[int],
        service_grade: Optional[int],
        overrides: Optional[OverrideGrades],
        graded: List[GradedObservation],
        lowered: str,
        collector: DiagnosticCollector,
    ) -> Tuple[Optional[int], Optional[int]]:
        if overrides is None:
            return structural_grade, service_grade

        vocabulary = self._reference.vocabulary
        evidence = {
            DefectCategory.STRUCTURAL: (
                any(g.category is DefectCategory.STRUCTURAL for g in graded)
                or vocabulary.has_structural_evidence(lowered)
            ),
            DefectCategory.SERVICE: any(g.category is DefectCategory.SERVICE for g in graded),
        }
        grades = {
            DefectCategory.STRUCTURAL: structural_grade,
            DefectCategory.SERVICE: service_grade,
        }
        values = {
            DefectCategory.STRUCTURAL: overrides.structural,
            DefectCategory.SERVICE: overrides.service,
        }

        for category, value in values.items():
            if value is None:
                continue
            if not evidence[category]:
                collector.report(
                    DiagnosticKind.OVERRIDE_CONFLICT,
                    f"{category.value.capitalize()} override grade {value} ignored: "
                    f"no {category.value} defects in the observation text",
                    category=category.value,
                    override=value,
                )
                continue

            value = min(max(int(value), 0), MAX_GRADE)
            if (
                category is DefectCategory.STRUCTURAL
                and value < DEFORMITY_OVERRIDE_FLOOR
                and any(word in lowered for word in ("deformity", "deformed", "deformation"))
            ):
                collector.report(
                    DiagnosticKind.OVERRIDE_CONFLICT,
                    f"Structural override grade {value} raised to {DEFORMITY_OVERRIDE_FLOOR}: "
                    f"deformity recorded in the observation text",
                    category=category.value,
                    override=value,
                )
                value = DEFORMITY_OVERRIDE_FLOOR
            grades[category] = value

        return grades[DefectCategory.STRUCTURAL], grades[DefectCategory.SERVICE]

    @staticmethod
    def _check_observation_override(
        overrides: Optional[OverrideGrades], collector: DiagnosticCollector
    ) -> None:
        if overrides is None or not overrides.observation:
            return
        collector.report(
            DiagnosticKind.OBSERVATION_OVERRIDE_IGNORED,
            f"Observation override grade {overrides.observation} ignored: "
            f"observation-only sections are always grade 0",
            override=overrides.observation,
        )

    # =========================================================================
    # Sections without coded defects
    # =========================================================================

    def _grade_without_defects(
        self,
        observations: Sequence[ParsedObservation],
        graded: List[GradedObservation],
        thresholds: SectorThresholds,
        lowered: str,
    ) -> SeverityAssessment:
        vocabulary = self._reference.vocabulary
        max_wl = self._max_water_level(observations)

        if max_wl is None:
            reason = self._observation_only_reason(lowered)
            if reason is ObservationOnlyReason.NO_CODING_PRESENT:
                recommendation = CLEANSE_AND_RESURVEY
            elif any(o.code == vocabulary.service_connection_code for o in observations):
                recommendation = VERIFY_CONNECTION
            else:
                recommendation = NO_ACTION_REQUIRED
            return SeverityAssessment(
                thresholds=thresholds,
                observation_only_reason=reason,
                fixed_recommendation=recommendation,
            )

        readings = readings_from_observations(observations, vocabulary.water_level_code)
        belly = self._belly_analyzer.analyze(readings, thresholds)

        if belly.has_belly and belly.fails_threshold:
            return SeverityAssessment(
                thresholds=thresholds,
                service_grade=BELLY_FAILURE_GRADE,
                graded=tuple(graded),
                fixed_recommendation=belly.recommendation,
                risk_assessment=belly.observation,
                belly=belly,
                max_water_level=max_wl,
            )

        if max_wl >= thresholds.max_water_level_pct:
            return SeverityAssessment(
                thresholds=thresholds,
                service_grade=HIGH_WATER_GRADE,
                graded=tuple(graded),
                fixed_recommendation=HIGH_WATER_ACTION,
                risk_assessment=(
                    f"High water levels detected ({max_wl:g}%) suggesting downstream blockage "
                    f"- exceeds sector threshold for {thresholds.sector}"
                ),
                belly=belly if belly.has_belly else None,
                max_water_level=max_wl,
            )

        if belly.has_belly:
            return SeverityAssessment(
                thresholds=thresholds,
                observation_only_reason=ObservationOnlyReason.BELLY_WITHIN_TOLERANCE,
                fixed_recommendation=belly.recommendation,
                risk_assessment=belly.observation,
                belly=belly,
                max_water_level=max_wl,
            )

        monitor = max_wl >= thresholds.water_level_monitor_pct
        return SeverityAssessment(
            thresholds=thresholds,
            observation_only_reason=ObservationOnlyReason.WATER_LEVEL,
            fixed_recommendation=HIGH_WATER_MONITOR if monitor else NO_ACTION_REQUIRED,
            max_water_level=max_wl,
        )

    def _observation_only_reason(self, lowered: str) -> ObservationOnlyReason:
        vocabulary = self._reference.vocabulary
        if any(p in lowered for p in vocabulary.no_coding_phrases):
            return ObservationOnlyReason.NO_CODING_PRESENT
        if any(p in lowered for p in vocabulary.feature_phrases):
            return ObservationOnlyReason.FEATURES_ONLY
        if any(p in lowered for p in vocabulary.line_deviation_phrases):
            return ObservationOnlyReason.LINE_DEVIATION
        return ObservationOnlyReason.NO_DEFECTS

    # =========================================================================
    # Helpers
    # =========================================================================

    def _max_water_level(self, observations: Sequence[ParsedObservation]) -> Optional[float]:
        code = self._reference.vocabulary.water_level_code
        values = [
            max_percentage(o.description or o.full_text)
            for o in observations
            if o.code == code
        ]
        values = [v for v in values if v is not None]
        return max(values) if values else None

    def has_area_loss(self, observations: Sequence[ParsedObservation]) -> bool:
        """True when the text records a deformation with cross-sectional area loss."""
        return self._has_area_loss(" ".join(o.full_text for o in observations).lower())

    @staticmethod
    def _has_area_loss(lowered: str) -> bool:
        return _AREA_LOSS_PHRASE in lowered and any(w in lowered for w in _DEFORMATION_WORDS)
