"""Sector analysis reporting."""

from .report_generator import SectorReportGenerator, SectorReportSummary, flatten_results

__all__ = ["SectorReportGenerator", "SectorReportSummary", "flatten_results"]
