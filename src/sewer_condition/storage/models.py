"""SQLAlchemy models for persisted sector standards."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class SectorStandardModel(Base):
    """Sector threshold table model. One row per sector id."""
    __tablename__ = "sector_standards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sector = Column(String(50), nullable=False, unique=True)
    standard_name = Column(String(255), nullable=False)
    belly_threshold_pct = Column(Float, nullable=False)
    max_water_level_pct = Column(Float, nullable=False, default=50.0)
    water_level_monitor_pct = Column(Float, nullable=False, default=40.0)
    min_structural_grade = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("idx_sector_standards_sector", "sector"),
    )
