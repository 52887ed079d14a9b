"""Section classification: the engine's entry point.

``SectionClassifier.classify_section`` runs one section's observation
strings through parsing, proximity filtering, splitting, grading,
recommendation and adoptability, and returns a fresh
``SectionClassification`` (or a ``SplitSectionPair`` for mixed sections).
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .config.models import ConfigurationError, ReferenceData, SectorThresholds, ValidationResult
from .diagnostics import DiagnosticCollector, DiagnosticKind, DiagnosticSink
from .filters.observation_filter import DEFAULT_JUNCTION_TOLERANCE_M, JunctionProximity, ObservationFilter
from .grading.severity_engine import SeverityGradingEngine
from .interfaces.classifier import ClassificationResult, ISectionClassifier
from .models.classification import (
    DefectDetail,
    OverrideGrades,
    SectionClassification,
    SectionInput,
    SplitSectionPair,
    SrmGrading,
)
from .models.enums import DefectCategory, SectionCategory
from .models.observation import ParsedObservation
from .parsers.formatting import summarize_observations
from .parsers.observation_parser import ObservationParser
from .recommendations.adoptability import resolve_adoptability
from .recommendations.recommendation_generator import DEFAULT_PIPE_SIZE_MM, RecommendationGenerator
from .splitting.section_splitter import SectionSplitter

logger = logging.getLogger(__name__)

OverrideLike = Union[OverrideGrades, Mapping[str, Optional[int]], None]


class SectionClassifier(ISectionClassifier):
    """
    Classifies pipe sections from CCTV survey observation text.

    Reference data is injected and read-only, so one classifier can be
    shared between threads, and several classifiers built on different
    rule-set versions can run side by side.
    """

    def __init__(
        self,
        reference_data: ReferenceData,
        diagnostic_sink: Optional[DiagnosticSink] = None,
        pipe_size_mm: int = DEFAULT_PIPE_SIZE_MM,
        junction_tolerance: float = DEFAULT_JUNCTION_TOLERANCE_M,
    ):
        """
        Initialize the classifier.

        Args:
            reference_data: Taxonomy, thresholds and method tables.
            diagnostic_sink: Receives recoverable inconsistencies. Defaults
                to logging them as warnings.
            pipe_size_mm: Pipe diameter quoted in repair templates.
            junction_tolerance: Junction proximity tolerance in metres.

        Raises:
            ConfigurationError: If the defect taxonomy is missing or empty.
        """
        if reference_data is None or not reference_data.taxonomy:
            result = ValidationResult(is_valid=True)
            result.add_error("Defect taxonomy is missing or empty")
            raise ConfigurationError(
                "Cannot classify sections without a defect taxonomy",
                validation_result=result,
            )

        self._reference = reference_data
        self._sink = diagnostic_sink
        self._parser = ObservationParser(reference_data)
        self._filter = ObservationFilter(reference_data.vocabulary, tolerance=junction_tolerance)
        self._splitter = SectionSplitter(reference_data.vocabulary)
        self._engine = SeverityGradingEngine(reference_data)
        self._generator = RecommendationGenerator(reference_data, pipe_size_mm=pipe_size_mm)

    @property
    def reference_data(self) -> ReferenceData:
        return self._reference

    def classify_section(
        self,
        raw_observations: Sequence[str],
        override_grades: OverrideLike,
        sector: str,
        item_number: Optional[str] = None,
        section_length: Optional[float] = None,
    ) -> ClassificationResult:
        item_number = str(item_number) if item_number is not None else None
        overrides = self._coerce_overrides(override_grades)
        collector = DiagnosticCollector(item_number=item_number, sink=self._sink)

        thresholds, fell_back = self._reference.thresholds.resolve(sector)
        if fell_back:
            collector.report(
                DiagnosticKind.SECTOR_FALLBACK,
                f"Unknown sector '{sector}', using conservative default thresholds",
                sector=sector,
            )

        parsed, unparsed = self._parser.parse_many(raw_observations or [])
        if unparsed:
            logger.debug(f"Item {item_number}: {len(unparsed)} observation(s) without a code were excluded")

        filtered = self._filter.filter(parsed)
        partition = self._splitter.partition(filtered.retained)

        if not partition.is_mixed:
            record = self._build_record(
                filtered.retained, item_number, None, sector, thresholds, overrides,
                collector, unparsed, filtered.junction_proximity, section_length,
            )
            return replace(record, diagnostics=collector.messages)

        logger.debug(
            f"Item {item_number}: splitting {len(partition.service)} service and "
            f"{len(partition.structural)} structural observations"
        )
        suffix = self._splitter.suffix(0)
        area_loss = self._engine.has_area_loss(filtered.retained)
        service = self._build_record(
            partition.service, item_number, None, sector, thresholds,
            OverrideGrades(service=overrides.service) if overrides else None,
            collector, unparsed, (), section_length, area_loss=False,
        )
        structural = self._build_record(
            partition.structural, self._splitter.split_item_number(item_number), suffix, sector, thresholds,
            OverrideGrades(structural=overrides.structural) if overrides else None,
            collector, (), filtered.junction_proximity, section_length, area_loss=area_loss,
        )
        return SplitSectionPair(
            original_item_number=item_number,
            service=replace(service, diagnostics=collector.messages),
            structural=replace(structural, diagnostics=collector.messages),
        )

    def classify_batch(
        self,
        sections: Iterable[SectionInput],
        max_workers: int = 1,
    ) -> List[ClassificationResult]:
        sections = list(sections)
        if max_workers <= 1 or len(sections) <= 1:
            return [self._classify_input(s) for s in sections]
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self._classify_input, sections))

    def _classify_input(self, section: SectionInput) -> ClassificationResult:
        return self.classify_section(
            section.raw_observations,
            section.override_grades,
            section.sector,
            item_number=section.item_number,
            section_length=section.section_length,
        )

    # =========================================================================
    # Record construction
    # =========================================================================

    def _build_record(
        self,
        observations: Tuple[ParsedObservation, ...],
        item_number: Optional[str],
        letter_suffix: Optional[str],
        sector: str,
        thresholds: SectorThresholds,
        overrides: Optional[OverrideGrades],
        collector: DiagnosticCollector,
        unparsed: Sequence[str],
        junction_proximity: Sequence[JunctionProximity],
        section_length: Optional[float],
        area_loss: Optional[bool] = None,
    ) -> SectionClassification:
        assessment = self._engine.grade(
            observations, thresholds, overrides, collector, notes=unparsed, area_loss=area_loss
        )
        recommendation = self._generator.generate(
            assessment, observations, sector,
            section_length=section_length,
            junction_proximity=junction_proximity,
        )

        category = assessment.category
        grade = assessment.severity_grade
        adoptable = resolve_adoptability(category, grade)

        srm_category = DefectCategory.STRUCTURAL if category is SectionCategory.STRUCTURAL else DefectCategory.SERVICE
        srm_row = self._reference.srm_row(srm_category, grade)
        srm_grading = SrmGrading(
            category=category.value,
            grade=grade,
            description=srm_row.description if srm_row else "",
            criteria=srm_row.criteria if srm_row else "",
            action_required=srm_row.action_required if srm_row else "",
            adoptable=srm_row.adoptable if srm_row else grade < 4,
            taxonomy_code=recommendation.dominant_code,
            sector=thresholds.sector,
            standard_name=thresholds.standard_name,
            thresholds_version=thresholds.version,
        )

        defects = tuple(
            DefectDetail(
                code=g.entry.code,
                meterage_start=g.observation.meterage_start,
                meterage_end=g.observation.meterage_end,
                percentage=g.percentage,
                grade=g.grade,
                category=g.category.value,
                operation_type=g.entry.operation_type,
                description=g.observation.description,
                synthesized=g.observation.synthesized,
            )
            for g in assessment.graded
        )

        return SectionClassification(
            item_number=item_number,
            defect_summary_text=summarize_observations(observations),
            category=category,
            severity_grade=grade,
            severity_by_category=assessment.severity_by_category,
            recommendation=recommendation.text,
            adoptable=adoptable,
            srm_grading=srm_grading,
            sector=sector,
            defect_codes=tuple(dict.fromkeys(o.code for o in observations)),
            defects=defects,
            recommendation_methods=recommendation.methods,
            cleaning_methods=recommendation.cleaning_methods,
            recommendation_priority=recommendation.priority,
            cleaning_frequency=recommendation.cleaning_frequency,
            risk_assessment=recommendation.risk_assessment,
            belly=assessment.belly,
            letter_suffix=letter_suffix,
            unparsed_observations=tuple(unparsed),
        )

    @staticmethod
    def _coerce_overrides(override_grades: OverrideLike) -> Optional[OverrideGrades]:
        if override_grades is None or isinstance(override_grades, OverrideGrades):
            return override_grades
        return OverrideGrades.from_dict(dict(override_grades))
