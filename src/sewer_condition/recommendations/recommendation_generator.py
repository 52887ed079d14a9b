"""Recommendation text composition.

The dominant defect's recommended action (a Jinja2 template) is rendered
with site specifics, optionally replaced by a sector rule, and followed by
connection clauses, the belly outcome and a site clause listing codes, the
worst percentage, meterages in pipe order and section length. Absent site
details are left out.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from jinja2 import Environment, Template, select_autoescape

from ..config.models import ReferenceData
from ..filters.observation_filter import JunctionProximity
from ..grading.percentages import max_percentage
from ..grading.service_connections import analyze_service_connection
from ..grading.severity_engine import NO_ACTION_REQUIRED, GradedObservation, SeverityAssessment
from ..models.enums import DefectCategory
from ..models.observation import ParsedObservation
from ..parsers.formatting import format_meterage

logger = logging.getLogger(__name__)

DEFAULT_PIPE_SIZE_MM = 150

JUNCTION_REOPEN_CLAUSE = (
    "Consideration needs to be given to reopen the JN or CN due to proximity of connections"
)
AREA_LOSS_RISK = "Deformation with cross-sectional area loss presents a critical structural risk"
ACCEPTABLE_CONDITION_RISK = "Pipe in acceptable condition"


@dataclass(frozen=True)
class Recommendation:
    """Composed recommendation for one section record."""
    text: str
    dominant_code: Optional[str] = None
    rule_id: Optional[str] = None
    methods: Tuple[str, ...] = field(default_factory=tuple)
    cleaning_methods: Tuple[str, ...] = field(default_factory=tuple)
    priority: str = ""
    cleaning_frequency: str = ""
    risk_assessment: str = ""


def _join_sentences(sentences: Sequence[str]) -> str:
    cleaned = []
    for sentence in sentences:
        sentence = (sentence or "").strip().rstrip(".").strip()
        if sentence and sentence not in cleaned:
            cleaned.append(sentence)
    return ". ".join(cleaned)


def _distinct(values: Sequence[str]) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


class RecommendationGenerator:
    """
    Builds recommendation text and method references for a graded section.

    Templates are compiled once per distinct template string.
    """

    def __init__(
        self,
        reference_data: ReferenceData,
        pipe_size_mm: int = DEFAULT_PIPE_SIZE_MM,
        environment: Optional[Environment] = None,
    ):
        self._reference = reference_data
        self._pipe_size_mm = pipe_size_mm
        self.env = environment or Environment(
            autoescape=select_autoescape(['html', 'xml'], default_for_string=False)
        )
        self._templates: Dict[str, Template] = {}

    def generate(
        self,
        assessment: SeverityAssessment,
        observations: Sequence[ParsedObservation],
        sector: str,
        section_length: Optional[float] = None,
        junction_proximity: Sequence[JunctionProximity] = (),
    ) -> Recommendation:
        """
        Compose the recommendation for one section record.

        Args:
            assessment: Grading outcome for the record.
            observations: The record's retained observations.
            sector: Sector id used to select sector rules.
            section_length: Total section length in metres, if known.
            junction_proximity: Junctions kept for being near a structural defect.

        Returns:
            Recommendation with text, methods and risk narrative.
        """
        if assessment.is_observation_only:
            return Recommendation(
                text=assessment.fixed_recommendation or NO_ACTION_REQUIRED,
                risk_assessment=assessment.risk_assessment or ACCEPTABLE_CONDITION_RISK,
            )

        text = " ".join(o.full_text for o in observations)
        dominant = self._dominant(assessment.graded)

        sentences: List[str] = []
        rule_id = None
        if assessment.fixed_recommendation:
            sentences.append(assessment.fixed_recommendation)
        elif dominant is not None:
            action, rule_id = self._action_for(dominant, assessment, sector, text)
            sentences.append(action)

        sentences.extend(self._service_connection_clauses(assessment.graded))

        if assessment.belly is not None and assessment.belly.has_belly:
            sentences.append(assessment.belly.recommendation)

        has_structural = any(g.category is DefectCategory.STRUCTURAL for g in assessment.graded)
        if junction_proximity and has_structural:
            sentences.append(JUNCTION_REOPEN_CLAUSE)

        sentences.append(self._site_clause(observations, section_length))

        return Recommendation(
            text=_join_sentences(sentences),
            dominant_code=dominant.entry.code if dominant else None,
            rule_id=rule_id,
            methods=self._repair_methods(assessment.graded, dominant),
            cleaning_methods=self._cleaning_methods(assessment.graded, dominant),
            priority=self._repair_priority(assessment.graded, dominant),
            cleaning_frequency=self._cleaning_frequency(assessment.graded, dominant),
            risk_assessment=self._risk(assessment, dominant),
        )

    # =========================================================================
    # Dominant action
    # =========================================================================

    @staticmethod
    def _dominant(graded: Sequence[GradedObservation]) -> Optional[GradedObservation]:
        """Highest action priority wins; ties go to the higher grade, then the first seen."""
        if not graded:
            return None
        _, best = max(
            enumerate(graded),
            key=lambda item: (item[1].entry.action_priority, item[1].grade, -item[0]),
        )
        return best

    def _action_for(
        self,
        dominant: GradedObservation,
        assessment: SeverityAssessment,
        sector: str,
        text: str,
    ) -> Tuple[str, Optional[str]]:
        entry = dominant.entry
        context = self._context(dominant)

        if entry.code == self._reference.vocabulary.service_connection_code:
            default_action = analyze_service_connection(dominant.observation.full_text).recommendation
        else:
            default_action = self._render(entry.recommended_action, context)

        grade = assessment.grade_for(entry.category)
        for rule in self._reference.rules_for(sector):
            if rule.applies_to(sector, entry.code, entry.category, grade, text):
                logger.debug(f"Sector rule '{rule.id}' replaces action for {entry.code}")
                return self._render(rule.template, dict(context, default_action=default_action)), rule.id
        return default_action, None

    def _context(self, graded: GradedObservation) -> Dict[str, Any]:
        code = graded.entry.code
        repair = self._reference.repair_methods.get(code)
        patch_option = repair.suggested_repairs[1] if repair and len(repair.suggested_repairs) > 1 else ""
        meterage = graded.observation.meterage_start
        return {
            "code": code,
            "meterage": format_meterage(meterage) if meterage is not None else None,
            "percentage": f"{graded.percentage:g}%" if graded.percentage is not None else None,
            "pipe_size": self._pipe_size_mm,
            "patch_option": patch_option,
            "default_action": "",
        }

    def _render(self, source: str, context: Dict[str, Any]) -> str:
        template = self._templates.get(source)
        if template is None:
            template = self.env.from_string(source)
            self._templates[source] = template
        return template.render(**context).strip()

    # =========================================================================
    # Clauses
    # =========================================================================

    def _service_connection_clauses(self, graded: Sequence[GradedObservation]) -> List[str]:
        code = self._reference.vocabulary.service_connection_code
        return [
            analyze_service_connection(g.observation.full_text).recommendation
            for g in graded
            if g.entry.code == code
        ]

    @staticmethod
    def _site_clause(observations: Sequence[ParsedObservation], section_length: Optional[float]) -> str:
        parts = []

        codes = _distinct([o.code for o in observations])
        if codes:
            parts.append(f"codes {', '.join(codes)}")

        worst = max_percentage(" ".join(o.description for o in observations))
        if worst is not None:
            parts.append(f"maximum {worst:g}%")

        points = []
        located = sorted(
            (o for o in observations if o.meterage_start is not None),
            key=lambda o: (o.meterage_start, o.meterage_end or o.meterage_start),
        )
        for o in located:
            if o.is_running:
                points.append(f"{format_meterage(o.meterage_start)} to {format_meterage(o.meterage_end)}")
            else:
                points.append(format_meterage(o.meterage_start))
        points = _distinct(points)
        if points:
            parts.append(f"meterage {', '.join(points)}")

        if section_length is not None:
            parts.append(f"section length {format_meterage(section_length)}")

        if not parts:
            return ""
        return "Site details: " + "; ".join(parts)

    # =========================================================================
    # Method references
    # =========================================================================

    @staticmethod
    def _ordered_codes(
        graded: Sequence[GradedObservation],
        dominant: Optional[GradedObservation],
        category: DefectCategory,
    ) -> List[str]:
        codes = [g.entry.code for g in graded if g.category is category]
        if dominant is not None and dominant.category is category:
            codes.insert(0, dominant.entry.code)
        return _distinct(codes)

    def _repair_methods(self, graded, dominant) -> Tuple[str, ...]:
        methods: List[str] = []
        for code in self._ordered_codes(graded, dominant, DefectCategory.STRUCTURAL):
            method = self._reference.repair_methods.get(code)
            if method:
                methods.extend(method.suggested_repairs)
        return tuple(_distinct(methods))

    def _cleaning_methods(self, graded, dominant) -> Tuple[str, ...]:
        methods: List[str] = []
        for code in self._ordered_codes(graded, dominant, DefectCategory.SERVICE):
            method = self._reference.cleaning_methods.get(code)
            if method:
                methods.extend(method.recommended_methods)
        return tuple(_distinct(methods))

    def _repair_priority(self, graded, dominant) -> str:
        for code in self._ordered_codes(graded, dominant, DefectCategory.STRUCTURAL):
            method = self._reference.repair_methods.get(code)
            if method and method.repair_priority:
                return method.repair_priority
        return ""

    def _cleaning_frequency(self, graded, dominant) -> str:
        for code in self._ordered_codes(graded, dominant, DefectCategory.SERVICE):
            method = self._reference.cleaning_methods.get(code)
            if method and method.cleaning_frequency:
                return method.cleaning_frequency
        return ""

    @staticmethod
    def _risk(assessment: SeverityAssessment, dominant: Optional[GradedObservation]) -> str:
        if assessment.area_loss_override:
            return AREA_LOSS_RISK
        if assessment.risk_assessment:
            return assessment.risk_assessment
        return dominant.entry.risk_narrative if dominant else ""
