"""Unit tests for mixed-section partitioning and adoptability."""

import pytest

from sewer_condition.models.enums import Adoptability, DefectCategory, SectionCategory
from sewer_condition.parsers import ObservationParser
from sewer_condition.recommendations import resolve_adoptability
from sewer_condition.splitting import SectionSplitter


@pytest.fixture
def splitter(reference_data):
    return SectionSplitter(reference_data.vocabulary)


@pytest.fixture
def parse(reference_data):
    parser = ObservationParser(reference_data)

    def _parse(texts):
        parsed, _ = parser.parse_many(texts)
        return parsed
    return _parse


class TestPartition:
    """Test observations are divided by category."""

    def test_mixed_section(self, splitter, parse):
        """Test structural and service defects land on separate sides."""
        partition = splitter.partition(parse([
            "DER 1.0m (Deposits)",
            "FC 3.0m (Fracture)",
            "JN 3.5m (Junction)",
            "LL 6.0m (Line deviates left)",
        ]))

        assert partition.is_mixed
        assert [o.code for o in partition.service] == ["DER", "LL"]
        assert [o.code for o in partition.structural] == ["FC", "JN"]

    def test_every_observation_on_one_side(self, splitter, parse):
        """Test no observation is lost or duplicated."""
        observations = parse([
            "DER 1.0m (Deposits)",
            "FC 3.0m (Fracture)",
            "JN (Junction)",
            "WL 4.0m (20%)",
        ])

        partition = splitter.partition(observations)

        assert sorted(o.full_text for o in partition.all) == sorted(o.full_text for o in observations)
        assert [o.code for o in partition.service] == ["DER", "JN", "WL"]

    def test_structural_only_not_mixed(self, splitter, parse):
        """Test a section with one category is not split."""
        partition = splitter.partition(parse(["FC 3.0m (Fracture)", "JN 3.2m (Junction)"]))

        assert not partition.is_mixed

    def test_water_level_alone_not_mixed(self, splitter, parse):
        """Test a water level reading is not a service defect for splitting."""
        partition = splitter.partition(parse(["FC 2.0m (Fracture)", "WL 3.0m (5%)"]))

        assert not partition.is_mixed
        assert not partition.has_service_defect

    @pytest.mark.parametrize("connection, mixed", [
        ("S/A 4.0m (Service connection)", False),
        ("S/A 4.0m (Service connection, bung in line)", True),
    ])
    def test_service_connection_counts_only_when_action_needed(self, splitter, parse, connection, mixed):
        """Test an S/A splits the section only when it needs confirmation."""
        partition = splitter.partition(parse(["FC 2.0m (Fracture)", connection]))

        assert partition.is_mixed is mixed

    def test_service_with_observations_not_mixed(self, splitter, parse):
        """Test uncategorised observations do not make a section mixed."""
        partition = splitter.partition(parse(["DER 1.0m (Deposits)", "LL 6.0m (Line deviates left)"]))

        assert not partition.is_mixed


class TestItemNumbers:
    """Test letter suffixes for split records."""

    def test_suffixes(self):
        """Test suffixes run a, b, c."""
        assert [SectionSplitter.suffix(i) for i in range(3)] == ["a", "b", "c"]

    def test_split_item_number(self):
        """Test the structural record gets the suffixed number."""
        assert SectionSplitter.split_item_number("12") == "12a"
        assert SectionSplitter.split_item_number(None) is None

    def test_suffix_out_of_range(self):
        """Test more than 26 split records is an error."""
        with pytest.raises(ValueError):
            SectionSplitter.suffix(26)


class TestAdoptability:
    """Test adoptability from category and grade."""

    @pytest.mark.parametrize("category, grade, expected", [
        (SectionCategory.OBSERVATION_ONLY, 0, Adoptability.YES),
        (SectionCategory.STRUCTURAL, 0, Adoptability.YES),
        (SectionCategory.STRUCTURAL, 1, Adoptability.YES),
        (SectionCategory.SERVICE, 1, Adoptability.YES),
        (SectionCategory.STRUCTURAL, 2, Adoptability.CONDITIONAL),
        (SectionCategory.SERVICE, 2, Adoptability.CONDITIONAL),
        (SectionCategory.SERVICE, 3, Adoptability.CONDITIONAL),
        (SectionCategory.STRUCTURAL, 4, Adoptability.NO),
        (SectionCategory.SERVICE, 5, Adoptability.NO),
    ])
    def test_resolve(self, category, grade, expected):
        """Test the adoptability table."""
        assert resolve_adoptability(category, grade) is expected

    def test_accepts_defect_category_and_string(self):
        """Test defect categories and plain strings are accepted."""
        assert resolve_adoptability(DefectCategory.SERVICE, 2) is Adoptability.CONDITIONAL
        assert resolve_adoptability("structural", 4) is Adoptability.NO
