"""Unit tests for the persisted sector threshold store."""

import pytest

from sewer_condition.config import defaults
from sewer_condition.config.models import SectorThresholds
from sewer_condition.diagnostics import DiagnosticKind
from sewer_condition.storage import DatabaseManager, SectorThresholdStore, get_database_url


@pytest.fixture
def db_manager(tmp_path):
    """File-backed SQLite database, one per test."""
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'thresholds.db'}")
    yield manager
    manager.close()


@pytest.fixture
def store(db_manager):
    db_manager.init_database()
    return SectorThresholdStore(db_manager)


class TestSectorThresholdStore:
    """Test saving and loading sector thresholds."""

    def test_seed_defaults(self, db_manager):
        """Test seeding writes every built-in sector."""
        store = SectorThresholdStore(db_manager)

        count = store.seed_defaults()

        assert count == len(defaults.DEFAULT_SECTOR_THRESHOLDS)
        assert [r.sector for r in store.load()] == sorted(t.sector for t in defaults.DEFAULT_SECTOR_THRESHOLDS)

    def test_save_updates_existing(self, store):
        """Test saving a sector twice updates it in place."""
        store.save([SectorThresholds(sector="highways", standard_name="HADDMS", belly_threshold_pct=15)])
        store.save([SectorThresholds(sector="highways", standard_name="HADDMS", belly_threshold_pct=12, version=2)])

        records = store.load()

        assert len(records) == 1
        assert records[0].belly_threshold_pct == 12
        assert records[0].version == 2

    def test_delete(self, store):
        """Test deleting a sector."""
        store.seed_defaults()

        assert store.delete("insurance")
        assert not store.delete("insurance")
        assert "insurance" not in [r.sector for r in store.load()]

    def test_health_check(self, db_manager):
        """Test the database answers a health check."""
        assert db_manager.health_check()


class TestLoadTable:
    """Test the fallback behaviour of load_table."""

    def test_loads_stored_records(self, store):
        """Test stored thresholds become the table."""
        store.save([SectorThresholds(sector="construction", standard_name="BS EN 1610:2015", belly_threshold_pct=8)])
        received = []

        table = store.load_table(sink=received.append)

        assert table.sectors == ("construction",)
        assert table.get("construction").belly_threshold_pct == 8
        assert received == []

    def test_empty_store_falls_back(self, store):
        """Test an empty store gives the built-in table and a diagnostic."""
        received = []

        table = store.load_table(sink=received.append)

        assert "adoption" in table
        assert received[0].kind is DiagnosticKind.THRESHOLD_STORE_FALLBACK

    def test_unavailable_store_falls_back(self, db_manager):
        """Test a store without its schema gives the fallback table."""
        store = SectorThresholdStore(db_manager)
        received = []
        fallback = [SectorThresholds(sector="domestic", standard_name="Trading Standards", belly_threshold_pct=25)]

        table = store.load_table(fallback=fallback, sink=received.append)

        assert table.sectors == ("domestic",)
        assert "unavailable" in received[0].message


class TestDatabaseManager:
    """Test URL resolution and schema detection."""

    def test_url_from_environment(self, monkeypatch):
        """Test the environment variable is used when no URL is given."""
        monkeypatch.setenv("SEWER_CONDITION_DATABASE_URL", "sqlite:///from-env.db")

        assert get_database_url() == "sqlite:///from-env.db"
        assert get_database_url("sqlite:///explicit.db") == "sqlite:///explicit.db"

    def test_has_schema(self, db_manager):
        """Test schema detection before and after initialisation."""
        assert not db_manager.has_schema()

        db_manager.init_database()

        assert db_manager.has_schema()
