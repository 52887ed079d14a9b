"""Recoverable classification diagnostics.

The engine never raises on survey text. Inconsistencies it resolves on its
own (unknown sector, override grades contradicted by the text, threshold
store unavailable) are recorded as ``ClassificationDiagnostic`` objects,
forwarded to a caller-supplied sink and carried on the result.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    """Kinds of recoverable inconsistency."""
    SECTOR_FALLBACK = "sector_fallback"
    THRESHOLD_STORE_FALLBACK = "threshold_store_fallback"
    OVERRIDE_CONFLICT = "override_conflict"
    OBSERVATION_OVERRIDE_IGNORED = "observation_override_ignored"
    UNKNOWN_CODE = "unknown_code"


@dataclass
class ClassificationDiagnostic:
    """
    A recoverable inconsistency found while classifying a section.

    Attributes:
        message: Human-readable description.
        kind: Category of the inconsistency.
        item_number: Section the diagnostic belongs to, if known.
        details: Additional context.
    """
    message: str
    kind: DiagnosticKind = DiagnosticKind.OVERRIDE_CONFLICT
    item_number: Optional[str] = None
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}

    def __str__(self) -> str:
        if self.item_number:
            return f"[{self.kind.value}] Item {self.item_number}: {self.message}"
        return f"[{self.kind.value}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert diagnostic to dictionary for logging/serialization."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "item_number": self.item_number,
            "details": self.details,
        }


DiagnosticSink = Callable[[ClassificationDiagnostic], None]


def log_diagnostic(diagnostic: ClassificationDiagnostic) -> None:
    """Default sink: log the diagnostic as a warning."""
    logger.warning(str(diagnostic))


class DiagnosticCollector:
    """
    Collects diagnostics for one classification call.

    Every diagnostic is forwarded to the sink as soon as it is reported.
    """

    def __init__(self, item_number: Optional[str] = None, sink: Optional[DiagnosticSink] = None):
        self.item_number = item_number
        self.sink = sink or log_diagnostic
        self.diagnostics: List[ClassificationDiagnostic] = []

    def report(self, kind: DiagnosticKind, message: str, **details: Any) -> ClassificationDiagnostic:
        """Record a diagnostic and forward it to the sink."""
        diagnostic = ClassificationDiagnostic(
            message=message,
            kind=kind,
            item_number=self.item_number,
            details=details,
        )
        self.diagnostics.append(diagnostic)
        self.sink(diagnostic)
        return diagnostic

    @property
    def messages(self) -> Tuple[str, ...]:
        return tuple(str(d) for d in self.diagnostics)

