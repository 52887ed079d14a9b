"""Unit tests for the Configuration Manager."""

import json
import tempfile
from pathlib import Path

import pytest

from sewer_condition.config import (
    ConfigurationError,
    ConfigurationManager,
    ReferenceData,
    SectorThresholdTable,
    ValidationResult,
)
from sewer_condition.config.config_manager import CONFIG_FILES
from sewer_condition.models.enums import DefectCategory, OperationType


def _taxonomy_entry(**overrides):
    entry = {
        "code": "FC",
        "description": "Fracture circumferential",
        "category": "structural",
        "default_grade": 4,
        "risk_narrative": "Circumferential fractures risk collapse",
        "recommended_action": "Patch repair at {{ meterage }}",
        "action_priority": 90,
        "operation_type": "patching",
    }
    entry.update(overrides)
    return entry


class TestDefectTaxonomy:
    """Tests for defect taxonomy configuration."""

    def test_load_taxonomy_from_dict(self):
        """Test loading the taxonomy from a dictionary with an entries list."""
        manager = ConfigurationManager()

        result = manager.load_taxonomy({"entries": [_taxonomy_entry()]})

        assert result.is_valid
        assert len(manager.configuration.taxonomy) == 1
        entry = manager.configuration.taxonomy[0]
        assert entry.code == "FC"
        assert entry.category is DefectCategory.STRUCTURAL
        assert entry.operation_type is OperationType.PATCHING

    def test_load_taxonomy_from_list(self):
        """Test loading the taxonomy from a list of entries."""
        manager = ConfigurationManager()

        result = manager.load_taxonomy([
            _taxonomy_entry(),
            _taxonomy_entry(code="der", category="service", default_grade=3, operation_type="cleaning"),
        ])

        assert result.is_valid
        assert [e.code for e in manager.configuration.taxonomy] == ["FC", "DER"]

    def test_taxonomy_validation_missing_fields(self):
        """Test validation fails for missing required fields."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError) as exc_info:
            manager.load_taxonomy([{"code": "FC", "description": "Fracture"}])

        errors = exc_info.value.validation_result.errors
        assert any("category" in e for e in errors)
        assert any("default_grade" in e for e in errors)

    def test_taxonomy_validation_grade_out_of_range(self):
        """Test validation rejects grades outside 0-5."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError) as exc_info:
            manager.load_taxonomy([_taxonomy_entry(default_grade=7)])

        assert any("between 0 and 5" in e for e in exc_info.value.validation_result.errors)

    def test_taxonomy_validation_unknown_category(self):
        """Test validation rejects categories other than structural and service."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError):
            manager.load_taxonomy([_taxonomy_entry(category="cosmetic")])

    def test_taxonomy_validation_duplicate_codes(self):
        """Test validation fails for duplicate codes."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError) as exc_info:
            manager.load_taxonomy([_taxonomy_entry(), _taxonomy_entry()])

        assert any("Duplicate" in e for e in exc_info.value.validation_result.errors)

    def test_taxonomy_validation_bad_template(self):
        """Test validation rejects recommended actions that are not valid templates."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError) as exc_info:
            manager.load_taxonomy([_taxonomy_entry(recommended_action="Patch at {{ meterage ")])

        assert any("not a valid template" in e for e in exc_info.value.validation_result.errors)

    def test_empty_taxonomy_rejected(self):
        """Test an empty taxonomy is a configuration error."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError):
            manager.load_taxonomy({"entries": []})

    def test_get_taxonomy_entry(self):
        """Test retrieving a taxonomy entry by code."""
        manager = ConfigurationManager.with_defaults()

        entry = manager.get_taxonomy_entry("DER")

        assert entry is not None
        assert entry.category is DefectCategory.SERVICE
        assert manager.get_taxonomy_entry("ZZZ") is None


class TestSectorThresholds:
    """Tests for sector threshold configuration."""

    def test_load_thresholds(self):
        """Test loading sector thresholds."""
        manager = ConfigurationManager()

        result = manager.load_sector_thresholds({
            "sectors": [
                {"sector": "Construction", "standard_name": "BS EN 1610:2015", "belly_threshold_pct": 10},
                {
                    "sector": "adoption",
                    "standard_name": "OS20x adoption",
                    "belly_threshold_pct": 20,
                    "min_structural_grade": 3,
                },
            ]
        })

        assert result.is_valid
        construction = manager.get_sector_thresholds("construction")
        assert construction.belly_threshold_pct == 10.0
        assert construction.max_water_level_pct == 50.0
        assert manager.get_sector_thresholds("adoption").min_structural_grade == 3

    def test_threshold_percentage_out_of_range(self):
        """Test validation rejects percentages outside 0-100."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError):
            manager.load_sector_thresholds([
                {"sector": "construction", "standard_name": "BS EN 1610:2015", "belly_threshold_pct": 140}
            ])

    def test_monitor_above_action_warns(self):
        """Test a monitoring level above the action level produces a warning."""
        manager = ConfigurationManager()

        result = manager.load_sector_thresholds([
            {
                "sector": "utilities",
                "standard_name": "WRc/MSCC5",
                "belly_threshold_pct": 25,
                "max_water_level_pct": 40,
                "water_level_monitor_pct": 60,
            }
        ])

        assert result.is_valid
        assert len(result.warnings) == 1

    def test_duplicate_sectors_rejected(self):
        """Test two records for the same sector are rejected."""
        manager = ConfigurationManager()
        record = {"sector": "highways", "standard_name": "HADDMS", "belly_threshold_pct": 15}

        with pytest.raises(ConfigurationError):
            manager.load_sector_thresholds([record, dict(record)])


class TestMethodTables:
    """Tests for repair, cleaning and SRM tables."""

    def test_load_repair_methods(self):
        """Test loading repair methods."""
        manager = ConfigurationManager()

        result = manager.load_repair_methods({
            "methods": [{"code": "fc", "suggested_repairs": ["Patch repair", "Excavate"], "repair_priority": "High"}]
        })

        assert result.is_valid
        assert manager.configuration.repair_methods[0].code == "FC"
        assert manager.configuration.repair_methods[0].suggested_repairs == ("Patch repair", "Excavate")

    def test_repair_methods_must_be_strings(self):
        """Test suggested repairs must all be strings."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError):
            manager.load_repair_methods([{"code": "FC", "suggested_repairs": ["Patch", 3]}])

    def test_load_cleaning_methods(self):
        """Test loading cleaning methods."""
        manager = ConfigurationManager()

        result = manager.load_cleaning_methods([
            {"code": "DER", "recommended_methods": ["Jetting"], "cleaning_frequency": "Annual"}
        ])

        assert result.is_valid
        assert manager.configuration.cleaning_methods[0].cleaning_frequency == "Annual"

    def test_srm_scores_warn_on_missing_grades(self):
        """Test an incomplete SRM table loads with warnings."""
        manager = ConfigurationManager()

        result = manager.load_srm_scores([
            {
                "category": "structural",
                "grade": 1,
                "description": "Excellent structural condition",
                "criteria": "No defects observed",
                "action_required": "None",
                "adoptable": True,
            }
        ])

        assert result.is_valid
        assert result.warnings

    def test_srm_scores_duplicate_pair_rejected(self):
        """Test a (category, grade) pair may only appear once."""
        manager = ConfigurationManager()
        row = {
            "category": "service",
            "grade": 2,
            "description": "Minor service impacts",
            "criteria": "Minor deposits",
            "action_required": "Routine cleaning",
            "adoptable": True,
        }

        with pytest.raises(ConfigurationError):
            manager.load_srm_scores([row, dict(row)])


class TestSectorRules:
    """Tests for sector recommendation rules."""

    def test_load_rules_sorted_by_priority(self):
        """Test rules are sorted by priority after loading."""
        manager = ConfigurationManager()

        result = manager.load_sector_rules([
            {"id": "late", "sector": "construction", "codes": ["OJL"], "template": "Patch", "priority": 50},
            {"id": "early", "sector": "construction", "codes": ["OJM"], "template": "Patch now", "priority": 5},
        ])

        assert result.is_valid
        assert [r.id for r in manager.configuration.sector_rules] == ["early", "late"]
        assert manager.get_sector_rule("late").codes == ("OJL",)

    def test_rule_without_codes_or_category_warns(self):
        """Test a rule matching every defect is flagged."""
        manager = ConfigurationManager()

        result = manager.load_sector_rules([
            {"id": "catch_all", "sector": "domestic", "template": "Refer to surveyor"}
        ])

        assert result.is_valid
        assert any("matches every defect" in w for w in result.warnings)

    def test_rule_negative_priority_rejected(self):
        """Test negative priorities are rejected."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError):
            manager.load_sector_rules([
                {"id": "bad", "sector": "construction", "codes": ["OJM"], "template": "x", "priority": -1}
            ])


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_add_error_marks_invalid(self):
        """Test adding an error marks the result invalid."""
        result = ValidationResult(is_valid=True)

        result.add_error("Missing taxonomy")

        assert not result.is_valid
        assert result.errors == ["Missing taxonomy"]

    def test_merge(self):
        """Test merging two results."""
        first = ValidationResult(is_valid=True, warnings=["w1"])
        second = ValidationResult(is_valid=False, errors=["e1"])

        merged = first.merge(second)

        assert not merged.is_valid
        assert merged.errors == ["e1"]
        assert merged.warnings == ["w1"]


class TestCrossReferenceValidation:
    """Tests for validation across tables."""

    def test_defaults_are_consistent(self):
        """Test the built-in tables validate without warnings."""
        manager = ConfigurationManager.with_defaults()

        result = manager.validate_configuration()

        assert result.is_valid
        assert result.warnings == []

    def test_method_for_unknown_code_warns(self):
        """Test a method table entry with no taxonomy code produces a warning."""
        manager = ConfigurationManager()
        manager.load_taxonomy([_taxonomy_entry()])
        manager.load_repair_methods([{"code": "XYZ", "suggested_repairs": ["Reline"]}])

        result = manager.validate_configuration()

        assert result.is_valid
        assert any("XYZ" in w for w in result.warnings)

    def test_empty_taxonomy_invalid(self):
        """Test validation fails when nothing has been loaded."""
        manager = ConfigurationManager()

        result = manager.validate_configuration()

        assert not result.is_valid


class TestReferenceData:
    """Tests for freezing configuration into reference data."""

    def test_build_fills_defaults(self):
        """Test tables not loaded fall back to the built-in ones."""
        manager = ConfigurationManager()
        manager.load_taxonomy([_taxonomy_entry()])

        reference = manager.build_reference_data()

        assert list(reference.taxonomy) == ["FC"]
        assert "construction" in reference.thresholds
        assert reference.srm_row(DefectCategory.STRUCTURAL, 4) is not None

    def test_build_without_taxonomy_raises(self):
        """Test reference data cannot be built without a taxonomy."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError):
            manager.build_reference_data()

    def test_build_with_external_thresholds(self):
        """Test a supplied threshold table replaces the loaded one."""
        manager = ConfigurationManager.with_defaults()
        table = ReferenceData.default().thresholds
        custom = SectorThresholdTable({"construction": table.get("construction")})

        reference = manager.build_reference_data(thresholds=custom)

        assert reference.thresholds.sectors == ("construction",)

    def test_reference_data_is_read_only(self):
        """Test the taxonomy mapping cannot be modified."""
        reference = ConfigurationManager.with_defaults().build_reference_data()

        with pytest.raises(TypeError):
            reference.taxonomy["NEW"] = None


class TestFileOperations:
    """Tests for file-based configuration operations."""

    def test_load_from_json_file(self):
        """Test loading the taxonomy from a JSON file."""
        manager = ConfigurationManager()

        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False, encoding="utf-8") as f:
            json.dump({"entries": [_taxonomy_entry()]}, f)
            temp_path = f.name

        try:
            result = manager.load_taxonomy(temp_path)
            assert result.is_valid
            assert manager.configuration.taxonomy[0].code == "FC"
        finally:
            Path(temp_path).unlink()

    def test_load_missing_file(self):
        """Test loading from a path that does not exist."""
        manager = ConfigurationManager()

        with pytest.raises(ConfigurationError):
            manager.load_taxonomy("/nonexistent/taxonomy.json")

    def test_load_invalid_json(self):
        """Test loading a file that is not JSON."""
        manager = ConfigurationManager()

        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False, encoding="utf-8") as f:
            f.write("{not json")
            temp_path = f.name

        try:
            with pytest.raises(ConfigurationError):
                manager.load_taxonomy(temp_path)
        finally:
            Path(temp_path).unlink()

    def test_save_and_load_directory(self):
        """Test a saved configuration directory loads back to the same tables."""
        manager = ConfigurationManager.with_defaults()

        with tempfile.TemporaryDirectory() as temp_dir:
            manager.save_to_directory(temp_dir)
            for filename, _ in CONFIG_FILES.values():
                assert (Path(temp_dir) / filename).exists()

            reloaded = ConfigurationManager()
            result = reloaded.load_from_directory(temp_dir)

            assert result.is_valid
            assert reloaded.to_dict() == manager.to_dict()

    def test_load_directory_reports_bad_file(self):
        """Test an invalid file is reported without stopping the other loads."""
        manager = ConfigurationManager()

        with tempfile.TemporaryDirectory() as temp_dir:
            (Path(temp_dir) / "taxonomy.json").write_text(
                json.dumps({"entries": [_taxonomy_entry()]}), encoding="utf-8"
            )
            (Path(temp_dir) / "thresholds.json").write_text(
                json.dumps({"sectors": [{"sector": "x"}]}), encoding="utf-8"
            )

            result = manager.load_from_directory(temp_dir)

        assert not result.is_valid
        assert manager.configuration.taxonomy[0].code == "FC"

    def test_save_without_directory_raises(self):
        """Test saving needs a target directory."""
        manager = ConfigurationManager.with_defaults()

        with pytest.raises(ConfigurationError):
            manager.save_to_directory()

    def test_reset(self):
        """Test resetting the configuration."""
        manager = ConfigurationManager.with_defaults()

        manager.reset()

        assert not manager.is_loaded
        assert manager.configuration.taxonomy == []
