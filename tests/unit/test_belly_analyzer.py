"""Unit tests for belly detection."""

import pytest

from sewer_condition.grading import BellyAnalyzer, WaterLevelReading
from sewer_condition.grading.belly_analyzer import readings_from_observations, readings_from_text
from sewer_condition.parsers import ObservationParser


@pytest.fixture
def analyzer():
    return BellyAnalyzer()


@pytest.fixture
def construction(reference_data):
    """BS EN 1610:2015 thresholds (10% belly limit)."""
    return reference_data.thresholds.get("construction")


@pytest.fixture
def insurance(reference_data):
    """ABI thresholds (30% belly limit)."""
    return reference_data.thresholds.get("insurance")


def _readings(*pairs):
    return [WaterLevelReading(m, p) for m, p in pairs]


class TestBellyDetection:
    """Test rise-then-fall detection and threshold comparison."""

    def test_belly_fails_construction(self, analyzer, construction):
        """Test a 45% peak fails the 10% construction limit."""
        result = analyzer.analyze(_readings((2.0, 10), (5.0, 45), (8.0, 15)), construction)

        assert result.has_belly
        assert result.max_water_level == 45
        assert result.fails_threshold
        assert result.threshold_pct == 10
        assert result.standard_name == "BS EN 1610:2015"
        assert "excavation" in result.recommendation

    def test_belly_within_tolerance(self, analyzer, insurance):
        """Test a 25% peak passes the 30% insurance limit."""
        result = analyzer.analyze(_readings((2.0, 10), (5.0, 25), (8.0, 15)), insurance)

        assert result.has_belly
        assert not result.fails_threshold
        assert "tolerance" in result.recommendation

    def test_peak_equal_to_limit_passes(self, analyzer, construction):
        """Test a peak exactly at the limit does not fail."""
        result = analyzer.analyze(_readings((1.0, 5), (2.0, 10), (3.0, 5)), construction)

        assert result.has_belly
        assert not result.fails_threshold

    def test_readings_sorted_by_meterage(self, analyzer, construction):
        """Test readings are ordered by meterage before analysis."""
        result = analyzer.analyze(_readings((8.0, 15), (2.0, 10), (5.0, 45)), construction)

        assert result.has_belly
        assert result.max_water_level == 45

    def test_rising_levels_are_not_a_belly(self, analyzer, construction):
        """Test a monotonic rise has no interior peak."""
        result = analyzer.analyze(_readings((1.0, 10), (2.0, 20), (3.0, 30)), construction)

        assert not result.has_belly
        assert not result.fails_threshold
        assert result.max_water_level == 30

    def test_plateau_is_not_a_belly(self, analyzer, construction):
        """Test an interior reading must be strictly higher than both neighbours."""
        result = analyzer.analyze(_readings((1.0, 10), (2.0, 40), (3.0, 40), (4.0, 10)), construction)

        assert not result.has_belly

    def test_highest_of_several_peaks(self, analyzer, construction):
        """Test the highest interior peak is reported."""
        result = analyzer.analyze(
            _readings((1.0, 5), (2.0, 20), (3.0, 5), (4.0, 35), (5.0, 5)), construction
        )

        assert result.max_water_level == 35

    def test_too_few_readings(self, analyzer, construction):
        """Test fewer than three readings give no belly."""
        result = analyzer.analyze(_readings((1.0, 10), (2.0, 60)), construction)

        assert not result.has_belly
        assert not result.fails_threshold
        assert result.max_water_level == 60


class TestReadings:
    """Test reading extraction."""

    def test_from_observations(self, reference_data):
        """Test only located WL observations with a percentage are used."""
        parser = ObservationParser(reference_data)
        parsed, _ = parser.parse_many([
            "WL 2.0m (10%)",
            "WL (20%)",
            "DER 3.0m (30%)",
            "WL 4.0m (Water level)",
            "WL 5.0m (45%)",
        ])

        assert readings_from_observations(parsed) == _readings((2.0, 10), (5.0, 45))

    def test_from_text(self):
        """Test readings embedded in free text."""
        readings = readings_from_text("WL 2m 10%. WL 5.5m water level 45%. FC 3.0m")

        assert readings == _readings((2.0, 10), (5.5, 45))
