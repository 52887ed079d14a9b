"""Persistence of sector threshold configuration."""

from .database import DatabaseManager, get_database_url
from .models import Base, SectorStandardModel
from .threshold_store import SectorThresholdStore

__all__ = [
    "Base",
    "DatabaseManager",
    "SectorStandardModel",
    "SectorThresholdStore",
    "get_database_url",
]
