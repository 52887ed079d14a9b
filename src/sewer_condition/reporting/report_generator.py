"""Markdown sector analysis report over a batch of classified sections."""

import os
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..config.models import ReferenceData
from ..interfaces.classifier import ClassificationResult
from ..models.classification import SectionClassification, SplitSectionPair
from ..models.enums import Adoptability, SectionCategory


@dataclass
class SectorReportSummary:
    """Aggregate figures for one sector's classified sections."""
    sector: str
    standard_name: str
    reference_version: str
    total_records: int = 0
    split_count: int = 0
    structural_count: int = 0
    service_count: int = 0
    observation_only_count: int = 0
    adoptability_counts: Dict[str, int] = field(default_factory=dict)
    grade_counts: Dict[int, int] = field(default_factory=dict)

    @property
    def adoptable_pct(self) -> float:
        if not self.total_records:
            return 0.0
        return round(100.0 * self.adoptability_counts.get(Adoptability.YES.value, 0) / self.total_records, 1)


def flatten_results(results: Iterable[ClassificationResult]) -> List[SectionClassification]:
    """Expand split pairs into their records, keeping input order."""
    records: List[SectionClassification] = []
    for result in results:
        if isinstance(result, SplitSectionPair):
            records.extend(result.records)
        else:
            records.append(result)
    return records


class SectorReportGenerator:
    """
    Renders a sector analysis report using Jinja2 templates.

    Only engineering figures are reported; costs are left to the caller.
    """

    def __init__(self, reference_data: ReferenceData, template_dir: Optional[str] = None):
        """
        Initialize the report generator.

        Args:
            reference_data: Reference data the sections were classified with.
            template_dir: Directory containing Jinja2 templates.
                If not provided, uses the package's templates directory.
        """
        if template_dir is None:
            template_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")

        self._reference = reference_data
        self.template_dir = template_dir
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(['html', 'xml']),
            trim_blocks=True,
        )

    def summarize(self, results: Iterable[ClassificationResult], sector: str) -> SectorReportSummary:
        results = list(results)
        records = flatten_results(results)
        thresholds, _ = self._reference.thresholds.resolve(sector)

        categories = Counter(r.category for r in records)
        adoptability = Counter(r.adoptable.value for r in records)
        grades = Counter(r.severity_grade for r in records)

        return SectorReportSummary(
            sector=sector,
            standard_name=thresholds.standard_name,
            reference_version=self._reference.version,
            total_records=len(records),
            split_count=sum(1 for r in results if isinstance(r, SplitSectionPair)),
            structural_count=categories[SectionCategory.STRUCTURAL],
            service_count=categories[SectionCategory.SERVICE],
            observation_only_count=categories[SectionCategory.OBSERVATION_ONLY],
            adoptability_counts={a.value: adoptability.get(a.value, 0) for a in Adoptability},
            grade_counts={g: grades.get(g, 0) for g in range(6)},
        )

    def render(
        self,
        results: Iterable[ClassificationResult],
        sector: str,
        title: Optional[str] = None,
    ) -> str:
        """
        Render the Markdown report.

        Args:
            results: Classification results for one sector.
            sector: Sector id the sections were classified under.
            title: Report heading.

        Returns:
            Markdown text.
        """
        results = list(results)
        records = flatten_results(results)
        diagnostics = sorted({d for r in records for d in r.diagnostics})

        template = self.env.get_template("sector_report.md.j2")
        return template.render(
            title=title or f"Sector analysis report: {sector}",
            summary=self.summarize(results, sector),
            records=records,
            diagnostics=diagnostics,
        )
