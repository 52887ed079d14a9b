"""Persisted sector threshold store with a built-in fallback."""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..config import defaults
from ..config.models import ConfigurationError, SectorThresholds, SectorThresholdTable
from ..diagnostics import (
    ClassificationDiagnostic,
    DiagnosticKind,
    DiagnosticSink,
    log_diagnostic,
)
from .database import DatabaseManager
from .models import SectorStandardModel

logger = logging.getLogger(__name__)


class SectorThresholdStore:
    """
    Reads and writes sector thresholds through SQLAlchemy.

    ``load_table`` never fails: when the store cannot be read, or holds no
    rows, the built-in table is returned and the diagnostic sink is told.
    """

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self.db = db_manager or DatabaseManager()

    def save(self, records: Iterable[SectorThresholds]) -> int:
        """
        Insert or update threshold records, keyed by sector.

        Returns:
            Number of records written.
        """
        count = 0
        with self.db.get_session() as session:
            for record in records:
                row = session.execute(
                    select(SectorStandardModel).where(SectorStandardModel.sector == record.sector)
                ).scalar_one_or_none()
                if row is None:
                    row = SectorStandardModel(sector=record.sector)
                    session.add(row)
                row.standard_name = record.standard_name
                row.belly_threshold_pct = record.belly_threshold_pct
                row.max_water_level_pct = record.max_water_level_pct
                row.water_level_monitor_pct = record.water_level_monitor_pct
                row.min_structural_grade = record.min_structural_grade
                row.version = record.version
                count += 1
        logger.info(f"Saved {count} sector threshold records")
        return count

    def seed_defaults(self) -> int:
        """Create the schema and write the built-in thresholds."""
        self.db.init_database()
        return self.save(defaults.DEFAULT_SECTOR_THRESHOLDS)

    def load(self) -> List[SectorThresholds]:
        """Read every stored threshold record, ordered by sector."""
        with self.db.get_session() as session:
            rows = session.execute(
                select(SectorStandardModel).order_by(SectorStandardModel.sector)
            ).scalars().all()
            return [
                SectorThresholds(
                    sector=row.sector,
                    standard_name=row.standard_name,
                    belly_threshold_pct=row.belly_threshold_pct,
                    max_water_level_pct=row.max_water_level_pct,
                    water_level_monitor_pct=row.water_level_monitor_pct,
                    min_structural_grade=row.min_structural_grade,
                    version=row.version,
                )
                for row in rows
            ]

    def delete(self, sector: str) -> bool:
        """Delete a sector's record. Returns True if a row was removed."""
        with self.db.get_session() as session:
            row = session.execute(
                select(SectorStandardModel).where(SectorStandardModel.sector == sector)
            ).scalar_one_or_none()
            if row is None:
                return False
            session.delete(row)
            return True

    def load_table(
        self,
        fallback: Optional[Iterable[SectorThresholds]] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> SectorThresholdTable:
        """
        Build a threshold table from the store.

        Args:
            fallback: Records used when the store is unavailable or empty.
                Defaults to the built-in table.
            sink: Receives a diagnostic when the fallback is used.
        """
        sink = sink or log_diagnostic
        fallback = list(fallback) if fallback is not None else list(defaults.DEFAULT_SECTOR_THRESHOLDS)

        try:
            if not self.db.has_schema():
                raise LookupError(SectorStandardModel.__tablename__)
            records = self.load()
        except (SQLAlchemyError, LookupError) as e:
            sink(ClassificationDiagnostic(
                message=f"Sector threshold store unavailable, using built-in table: {e.__class__.__name__}",
                kind=DiagnosticKind.THRESHOLD_STORE_FALLBACK,
                details={"database_url": self.db.database_url},
            ))
            return SectorThresholdTable({t.sector: t for t in fallback})

        if not records:
            sink(ClassificationDiagnostic(
                message="Sector threshold store is empty, using built-in table",
                kind=DiagnosticKind.THRESHOLD_STORE_FALLBACK,
                details={"database_url": self.db.database_url},
            ))
            return SectorThresholdTable({t.sector: t for t in fallback})

        try:
            return SectorThresholdTable({t.sector: t for t in records})
        except ConfigurationError as e:
            sink(ClassificationDiagnostic(
                message=f"Stored sector thresholds rejected, using built-in table: {e.message}",
                kind=DiagnosticKind.THRESHOLD_STORE_FALLBACK,
            ))
            return SectorThresholdTable({t.sector: t for t in fallback})
