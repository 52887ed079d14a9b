"""Multi-defect section splitting."""

from .section_splitter import SectionPartition, SectionSplitter

__all__ = ["SectionPartition", "SectionSplitter"]
