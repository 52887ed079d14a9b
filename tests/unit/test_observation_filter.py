"""Unit tests for junction proximity and metadata filtering."""

import pytest

from sewer_condition.filters import ObservationFilter
from sewer_condition.parsers import ObservationParser


@pytest.fixture
def parser(reference_data):
    return ObservationParser(reference_data)


@pytest.fixture
def observation_filter(reference_data):
    """Create a filter with the standard 0.7m tolerance."""
    return ObservationFilter(reference_data.vocabulary)


def _parse(parser, texts):
    parsed, _ = parser.parse_many(texts)
    return parsed


class TestMetadata:
    """Test manhole markers are dropped."""

    def test_manhole_markers_excluded(self, parser, observation_filter):
        """Test MH observations never reach the retained set."""
        result = observation_filter.filter(_parse(parser, [
            "MH 0.0m (Start node MH1)",
            "DER 2.0m (Deposits)",
            "MHF 25.0m (Finish node MH2)",
        ]))

        assert [o.code for o in result.retained] == ["DER"]
        assert [o.code for o in result.excluded] == ["MH", "MHF"]


class TestJunctionProximity:
    """Test junctions are kept only near structural defects."""

    @pytest.mark.parametrize("junction, kept", [
        ("3.7", True),
        ("2.3", True),
        ("3.7000001", False),
        ("3.8", False),
        ("2.2", False),
    ])
    def test_tolerance_boundary(self, parser, observation_filter, junction, kept):
        """Test the 0.7m tolerance is inclusive on both sides."""
        result = observation_filter.filter(_parse(parser, [
            "FC 3.0m (Fracture circumferential)",
            f"JN {junction}m (Junction)",
        ]))

        assert any(o.code == "JN" for o in result.retained) is kept

    def test_junction_near_service_defect_dropped(self, parser, observation_filter):
        """Test a junction next to a service defect only is dropped."""
        result = observation_filter.filter(_parse(parser, [
            "DER 3.0m (Deposits)",
            "JN 3.2m (Junction)",
        ]))

        assert [o.code for o in result.retained] == ["DER"]
        assert result.junction_proximity == ()

    def test_junction_within_running_defect(self, parser, observation_filter):
        """Test distance to a range defect is measured to its nearest end."""
        result = observation_filter.filter(_parse(parser, [
            "FL Longitudinal fracture from 2.0m to 6.0m",
            "JN 4.0m (Junction)",
            "CN 6.5m (Connection)",
            "JN 7.0m (Junction)",
        ]))

        retained = [(o.code, o.meterage_start) for o in result.retained]
        assert ("JN", 4.0) in retained
        assert ("CN", 6.5) in retained
        assert ("JN", 7.0) not in retained
        assert [p.distance for p in result.junction_proximity] == [0.0, 0.5]

    def test_proximity_records_nearest_defect(self, parser, observation_filter):
        """Test the proximity record names the closest structural defect."""
        result = observation_filter.filter(_parse(parser, [
            "CR 1.0m (Crack)",
            "FC 2.0m (Fracture)",
            "JN 1.8m (Junction)",
        ]))

        proximity = result.junction_proximity[0]
        assert proximity.defect_code == "FC"
        assert proximity.junction_meterage == 1.8
        assert proximity.distance == 0.2

    def test_unlocated_junction_passes_through(self, parser, observation_filter):
        """Test a junction without a meterage is not filtered."""
        result = observation_filter.filter(_parse(parser, [
            "DER 3.0m (Deposits)",
            "JN (Junction at 2 o'clock)",
        ]))

        assert [o.code for o in result.retained] == ["DER", "JN"]

    def test_custom_tolerance(self, reference_data, parser):
        """Test a wider tolerance keeps more junctions."""
        wide = ObservationFilter(reference_data.vocabulary, tolerance=1.5)

        result = wide.filter(_parse(parser, ["FC 3.0m (Fracture)", "JN 4.5m (Junction)"]))

        assert len(result.junction_proximity) == 1

    def test_negative_tolerance_rejected(self, reference_data):
        """Test a negative tolerance is a programming error."""
        with pytest.raises(ValueError):
            ObservationFilter(reference_data.vocabulary, tolerance=-0.1)


class TestFilterResult:
    """Test FilterResult helpers."""

    def test_category_flags(self, parser, observation_filter):
        """Test structural and service presence flags."""
        result = observation_filter.filter(_parse(parser, [
            "FC 3.0m (Fracture)",
            "DER 5.0m (Deposits)",
        ]))

        assert result.has_structural
        assert result.has_service
        assert result.structural_positions == [3.0]
        assert result.service_positions == [5.0]
