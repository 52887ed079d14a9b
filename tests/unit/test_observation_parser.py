"""Unit tests for observation parsing and summary formatting."""

import pytest

from sewer_condition.models.enums import DefectCategory
from sewer_condition.parsers import ObservationParser
from sewer_condition.parsers.formatting import format_meterage, summarize_observations
from sewer_condition.parsers.observation_parser import STRATEGIES


@pytest.fixture
def parser(reference_data):
    """Create a parser over the built-in reference data."""
    return ObservationParser(reference_data)


class TestObservationFormats:
    """Test each supported observation format."""

    def test_parenthesized_description(self, parser):
        """Test 'CODE m (description)'."""
        observation = parser.parse("DER 13.07m (Settled deposits, coarse, 5% cross-sectional area loss)")

        assert observation.code == "DER"
        assert observation.meterage_start == 13.07
        assert observation.meterage_end is None
        assert observation.description == "Settled deposits, coarse, 5% cross-sectional area loss"
        assert observation.category is DefectCategory.SERVICE
        assert not observation.synthesized

    def test_colon_description(self, parser):
        """Test 'CODE m: description'."""
        observation = parser.parse("FC 3.0m: Fracture circumferential")

        assert observation.code == "FC"
        assert observation.meterage_start == 3.0
        assert observation.description == "Fracture circumferential"
        assert observation.is_structural

    def test_meterage_without_unit(self, parser):
        """Test the metre suffix is optional."""
        observation = parser.parse("DES 7.5 (Fine settled deposits)")

        assert observation.code == "DES"
        assert observation.meterage_start == 7.5

    def test_code_without_meterage(self, parser):
        """Test 'CODE (description)' has no meterage."""
        observation = parser.parse("JN (Junction at 2 o'clock)")

        assert observation.code == "JN"
        assert observation.meterage_start is None
        assert observation.category is None

    def test_running_defect_range(self, parser):
        """Test 'CODE description from a to b'."""
        observation = parser.parse("DES Settled deposits from 2.0m to 4.5m")

        assert observation.code == "DES"
        assert observation.meterage_start == 2.0
        assert observation.meterage_end == 4.5
        assert observation.is_running
        assert observation.description == "Settled deposits"

    def test_code_at_point(self, parser):
        """Test 'CODE description at m'."""
        observation = parser.parse("FL Longitudinal fracture at 6.25m")

        assert observation.code == "FL"
        assert observation.meterage_start == 6.25
        assert observation.description == "Longitudinal fracture"

    def test_leading_code_fallback(self, parser):
        """Test a bare leading code is still recognised."""
        observation = parser.parse("RI roots through joint")

        assert observation.code == "RI"
        assert observation.meterage_start is None
        assert observation.description == "roots through joint"

    def test_service_connection_code_normalised(self, parser):
        """Test 'S/A' is read as the SA code."""
        observation = parser.parse("S/A 4.5m (Service connection, bung in line)")

        assert observation.code == "SA"
        assert observation.meterage_start == 4.5
        assert observation.category is DefectCategory.SERVICE

    def test_percentage_not_read_as_meterage(self, parser):
        """Test a percentage directly after the code is not a meterage."""
        observation = parser.parse("WL 30% water level")

        assert observation.code == "WL"
        assert observation.meterage_start is None

    def test_malformed_meterage_falls_through(self, parser):
        """Test a malformed figure is not turned into a meterage."""
        observation = parser.parse("DER 3.2.1m (Settled deposits)")

        assert observation.code == "DER"
        assert observation.meterage_start is None

    def test_strategy_order(self):
        """Test the most specific formats are tried first."""
        names = [s.name for s in STRATEGIES]

        assert names[0] == "code_meterage_parenthesized"
        assert names[-1] == "leading_code"


class TestSynthesis:
    """Test code recovery from uncoded defect wording."""

    def test_deformity_synthesized(self, parser):
        """Test deformity wording yields DEF with its meterage."""
        observation = parser.parse("Deformity at 3.2m, 12% cross-sectional area loss")

        assert observation.code == "DEF"
        assert observation.meterage_start == 3.2
        assert observation.synthesized
        assert observation.is_structural

    def test_major_open_joint(self, parser):
        """Test a major open joint yields OJM."""
        observation = parser.parse("Open joint major 5.4m")

        assert observation.code == "OJM"
        assert observation.meterage_start == 5.4

    def test_open_joint(self, parser):
        """Test an open joint without 'major' yields OJL."""
        observation = parser.parse("open joint at 2m")

        assert observation.code == "OJL"
        assert observation.meterage_start == 2.0

    def test_unknown_code_with_defect_wording(self, parser):
        """Test synthesis also replaces a code missing from the taxonomy."""
        observation = parser.parse("XX 4.0m (Pipe deformed)")

        assert observation.code == "DEF"
        assert observation.synthesized

    def test_unknown_code_kept_without_wording(self, parser):
        """Test an unknown code with no defect wording is kept as parsed."""
        observation = parser.parse("ZZ 4.0m (Something odd)")

        assert observation.code == "ZZ"
        assert observation.category is None
        assert not observation.synthesized


class TestUnparseable:
    """Test text that yields no observation."""

    @pytest.mark.parametrize("text", ["", "   ", "No coding present", "general remark about the survey"])
    def test_returns_none(self, parser, text):
        """Test unparseable text returns None."""
        assert parser.parse(text) is None

    def test_parse_many_separates_unparsed(self, parser):
        """Test parse_many keeps unparsed text apart, in order."""
        parsed, unparsed = parser.parse_many([
            "MH 0.0m (Start node)",
            "No coding present",
            "DER 2.0m (Deposits)",
            "",
        ])

        assert [o.code for o in parsed] == ["MH", "DER"]
        assert unparsed == ["No coding present"]


class TestFormatting:
    """Test summary text helpers."""

    @pytest.mark.parametrize("value, expected", [
        (13.27, "13.27m"),
        (3.0, "3m"),
        (3.5, "3.5m"),
        (None, ""),
    ])
    def test_format_meterage(self, value, expected):
        """Test meterage formatting."""
        assert format_meterage(value) == expected

    def test_summary_merges_repeated_points(self, parser):
        """Test repeated code and description pairs are merged."""
        observations = [
            parser.parse("DES 13.27m (Settled deposits)"),
            parser.parse("DES 16.63m (Settled deposits)"),
            parser.parse("FC 3.0m (Fracture)"),
        ]

        assert summarize_observations(observations) == (
            "DES Settled deposits at 13.27m, 16.63m. FC 3.0m (Fracture)"
        )

    def test_summary_prefixes_synthesized_code(self, parser):
        """Test synthesized observations show their recovered code."""
        observation = parser.parse("Deformity at 3.2m")

        assert summarize_observations([observation]) == "DEF Deformity at 3.2m"
