"""Configuration Manager implementation for the sewer condition engine.

This module provides functionality to load, validate, and manage the
reference data the classifier runs on: the defect taxonomy, sector
thresholds, repair and cleaning method tables, the SRM scoring table and
sector recommendation rules.
"""

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from jinja2 import Environment, TemplateSyntaxError

from ..models.enums import DefectCategory, OperationType
from ..models.taxonomy import (
    CleaningMethod,
    DefectTaxonomyEntry,
    RepairMethod,
    SectorRecommendationRule,
    SrmScoreRow,
)
from . import defaults
from .models import (
    ConfigurationError,
    ConfigurationType,
    EngineConfiguration,
    ReferenceData,
    SectorThresholds,
    SectorThresholdTable,
    ValidationResult,
)

Source = Union[str, Path, Dict[str, Any], List[Dict[str, Any]]]

# File name and wrapper key for each configuration type
CONFIG_FILES: Dict[ConfigurationType, Tuple[str, str]] = {
    ConfigurationType.TAXONOMY: ("taxonomy.json", "entries"),
    ConfigurationType.THRESHOLDS: ("thresholds.json", "sectors"),
    ConfigurationType.REPAIR_METHODS: ("repair_methods.json", "methods"),
    ConfigurationType.CLEANING_METHODS: ("cleaning_methods.json", "methods"),
    ConfigurationType.SRM_SCORES: ("srm_scores.json", "scores"),
    ConfigurationType.SECTOR_RULES: ("sector_rules.json", "rules"),
}

_VALID_CATEGORIES = [c.value for c in DefectCategory]
_VALID_OPERATIONS = [o.value for o in OperationType]

_template_checker = Environment()


class ConfigurationManager:
    """
    Manager for engine reference data.

    Handles loading, validation, and export of every table the classifier
    consumes, and freezes them into a ``ReferenceData`` snapshot.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Optional directory path for configuration files.
        """
        self._config_dir = Path(config_dir) if config_dir else None
        self._configuration = EngineConfiguration()
        self._is_loaded = False

    @classmethod
    def with_defaults(cls) -> "ConfigurationManager":
        """Create a manager pre-populated with the built-in tables."""
        manager = cls()
        manager._configuration = EngineConfiguration(
            taxonomy=list(defaults.DEFAULT_TAXONOMY),
            thresholds=list(defaults.DEFAULT_SECTOR_THRESHOLDS),
            repair_methods=list(defaults.DEFAULT_REPAIR_METHODS),
            cleaning_methods=list(defaults.DEFAULT_CLEANING_METHODS),
            srm_scores=list(defaults.DEFAULT_SRM_SCORES),
            sector_rules=sorted(defaults.DEFAULT_SECTOR_RULES, key=lambda r: r.priority),
        )
        manager._is_loaded = True
        return manager

    @property
    def configuration(self) -> EngineConfiguration:
        """Get the current engine configuration."""
        return self._configuration

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    # =========================================================================
    # Defect Taxonomy
    # =========================================================================

    def load_taxonomy(self, source: Source) -> ValidationResult:
        """
        Load and validate the defect taxonomy.

        Supports loading from:
        - JSON file path
        - Dictionary with an ``entries`` list
        - List of entry dictionaries

        Args:
            source: File path, dictionary, or list of dictionaries.

        Returns:
            ValidationResult indicating success or failure with details.

        Raises:
            ConfigurationError: If validation fails or the taxonomy is empty.
        """
        entries, result = self._load_records(
            source, "entries", self._validate_taxonomy_entry, key=lambda e: e.code,
            label="taxonomy code",
        )
        if not entries:
            result.add_error("Defect taxonomy must contain at least one entry")

        if not result.is_valid:
            raise ConfigurationError("Defect taxonomy validation failed", validation_result=result)

        self._configuration.taxonomy = entries
        self._is_loaded = True
        return result

    def _validate_taxonomy_entry(
        self,
        data: Dict[str, Any],
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[DefectTaxonomyEntry]]:
        """Validate a single taxonomy entry dictionary."""
        result = ValidationResult(is_valid=True)
        prefix = f"Taxonomy entry [{index}]"

        required_fields = [
            "code", "description", "category", "default_grade",
            "risk_narrative", "recommended_action",
        ]
        self._check_required(data, required_fields, prefix, result)
        if not result.is_valid:
            return result, None

        self._check_string(data, "code", prefix, result)
        self._check_string(data, "description", prefix, result)

        if data["category"] not in _VALID_CATEGORIES:
            result.add_error(f"{prefix}: 'category' must be one of {_VALID_CATEGORIES}")

        self._check_grade(data, "default_grade", prefix, result)

        if not isinstance(data.get("action_priority", 0), int):
            result.add_error(f"{prefix}: 'action_priority' must be an integer")

        operation = data.get("operation_type", OperationType.PATCHING.value)
        if operation not in _VALID_OPERATIONS:
            result.add_error(f"{prefix}: 'operation_type' must be one of {_VALID_OPERATIONS}")

        self._check_template(data, "recommended_action", prefix, result)

        if not result.is_valid:
            return result, None

        entry = DefectTaxonomyEntry(
            code=data["code"].strip().upper(),
            description=data["description"].strip(),
            category=DefectCategory(data["category"]),
            default_grade=data["default_grade"],
            risk_narrative=data["risk_narrative"],
            recommended_action=data["recommended_action"],
            action_priority=data.get("action_priority", 0),
            operation_type=OperationType(operation),
        )
        return result, entry

    def get_taxonomy_entry(self, code: str) -> Optional[DefectTaxonomyEntry]:
        """Get a taxonomy entry by code."""
        for entry in self._configuration.taxonomy:
            if entry.code == code:
                return entry
        return None

    # =========================================================================
    # Sector Thresholds
    # =========================================================================

    def load_sector_thresholds(self, source: Source) -> ValidationResult:
        """
        Load and validate the per-sector threshold table.

        Args:
            source: File path, dictionary, or list of dictionaries.

        Returns:
            ValidationResult indicating success or failure with details.

        Raises:
            ConfigurationError: If validation fails.
        """
        records, result = self._load_records(
            source, "sectors", self._validate_sector_thresholds, key=lambda t: t.sector,
            label="sector",
        )

        if not result.is_valid:
            raise ConfigurationError("Sector threshold validation failed", validation_result=result)

        self._configuration.thresholds = records
        self._is_loaded = True
        return result

    def _validate_sector_thresholds(
        self,
        data: Dict[str, Any],
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[SectorThresholds]]:
        """Validate a single sector threshold dictionary."""
        result = ValidationResult(is_valid=True)
        prefix = f"Sector thresholds [{index}]"

        self._check_required(data, ["sector", "standard_name", "belly_threshold_pct"], prefix, result)
        if not result.is_valid:
            return result, None

        self._check_string(data, "sector", prefix, result)
        self._check_string(data, "standard_name", prefix, result)

        for pct_field in ["belly_threshold_pct", "max_water_level_pct", "water_level_monitor_pct"]:
            if pct_field not in data:
                continue
            value = data[pct_field]
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                result.add_error(f"{prefix}: '{pct_field}' must be a number")
            elif not 0 <= value <= 100:
                result.add_error(f"{prefix}: '{pct_field}' must be between 0 and 100")

        if "min_structural_grade" in data:
            self._check_grade(data, "min_structural_grade", prefix, result)

        if not isinstance(data.get("version", 1), int):
            result.add_error(f"{prefix}: 'version' must be an integer")

        if result.is_valid:
            monitor = data.get("water_level_monitor_pct", 40.0)
            action = data.get("max_water_level_pct", 50.0)
            if monitor > action:
                result.add_warning(
                    f"{prefix}: 'water_level_monitor_pct' ({monitor}) is above "
                    f"'max_water_level_pct' ({action}); monitoring notes will never be produced"
                )

        if not result.is_valid:
            return result, None

        record = SectorThresholds(
            sector=data["sector"].strip().lower(),
            standard_name=data["standard_name"].strip(),
            belly_threshold_pct=float(data["belly_threshold_pct"]),
            max_water_level_pct=float(data.get("max_water_level_pct", 50.0)),
            water_level_monitor_pct=float(data.get("water_level_monitor_pct", 40.0)),
            min_structural_grade=data.get("min_structural_grade", 0),
            version=data.get("version", 1),
        )
        return result, record

    def get_sector_thresholds(self, sector: str) -> Optional[SectorThresholds]:
        """Get the threshold record for a sector."""
        for record in self._configuration.thresholds:
            if record.sector == sector:
                return record
        return None

    # =========================================================================
    # Repair and Cleaning Methods
    # =========================================================================

    def load_repair_methods(self, source: Source) -> ValidationResult:
        """Load and validate the repair-method reference table."""
        methods, result = self._load_records(
            source, "methods", self._validate_repair_method, key=lambda m: m.code,
            label="repair method code",
        )
        if not result.is_valid:
            raise ConfigurationError("Repair method validation failed", validation_result=result)

        self._configuration.repair_methods = methods
        self._is_loaded = True
        return result

    def _validate_repair_method(
        self,
        data: Dict[str, Any],
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[RepairMethod]]:
        result = ValidationResult(is_valid=True)
        prefix = f"Repair method [{index}]"

        self._check_required(data, ["code", "suggested_repairs"], prefix, result)
        if not result.is_valid:
            return result, None

        self._check_string(data, "code", prefix, result)
        self._check_string_list(data, "suggested_repairs", prefix, result)

        if not result.is_valid:
            return result, None

        return result, RepairMethod(
            code=data["code"].strip().upper(),
            suggested_repairs=tuple(data["suggested_repairs"]),
            repair_priority=data.get("repair_priority", ""),
        )

    def load_cleaning_methods(self, source: Source) -> ValidationResult:
        """Load and validate the cleaning-method reference table."""
        methods, result = self._load_records(
            source, "methods", self._validate_cleaning_method, key=lambda m: m.code,
            label="cleaning method code",
        )
        if not result.is_valid:
            raise ConfigurationError("Cleaning method validation failed", validation_result=result)

        self._configuration.cleaning_methods = methods
        self._is_loaded = True
        return result

    def _validate_cleaning_method(
        self,
        data: Dict[str, Any],
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[CleaningMethod]]:
        result = ValidationResult(is_valid=True)
        prefix = f"Cleaning method [{index}]"

        self._check_required(data, ["code", "recommended_methods"], prefix, result)
        if not result.is_valid:
            return result, None

        self._check_string(data, "code", prefix, result)
        self._check_string_list(data, "recommended_methods", prefix, result)

        if not result.is_valid:
            return result, None

        return result, CleaningMethod(
            code=data["code"].strip().upper(),
            recommended_methods=tuple(data["recommended_methods"]),
            cleaning_frequency=data.get("cleaning_frequency", ""),
        )

    # =========================================================================
    # SRM Scoring
    # =========================================================================

    def load_srm_scores(self, source: Source) -> ValidationResult:
        """
        Load and validate the SRM scoring table.

        Each (category, grade) pair may appear only once. Missing pairs are
        reported as warnings; the classifier then omits SRM text for them.
        """
        rows, result = self._load_records(
            source, "scores", self._validate_srm_row, key=lambda r: f"{r.category.value}:{r.grade}",
            label="SRM (category, grade) pair",
        )

        present = {(r.category, r.grade) for r in rows}
        for category in DefectCategory:
            missing = [g for g in range(6) if (category, g) not in present]
            if missing and rows:
                result.add_warning(f"SRM table has no {category.value} rows for grades {missing}")

        if not result.is_valid:
            raise ConfigurationError("SRM scoring validation failed", validation_result=result)

        self._configuration.srm_scores = rows
        self._is_loaded = True
        return result

    def _validate_srm_row(
        self,
        data: Dict[str, Any],
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[SrmScoreRow]]:
        result = ValidationResult(is_valid=True)
        prefix = f"SRM score [{index}]"

        required_fields = ["category", "grade", "description", "criteria", "action_required", "adoptable"]
        self._check_required(data, required_fields, prefix, result)
        if not result.is_valid:
            return result, None

        if data["category"] not in _VALID_CATEGORIES:
            result.add_error(f"{prefix}: 'category' must be one of {_VALID_CATEGORIES}")
        self._check_grade(data, "grade", prefix, result)
        if not isinstance(data["adoptable"], bool):
            result.add_error(f"{prefix}: 'adoptable' must be a boolean")

        if not result.is_valid:
            return result, None

        return result, SrmScoreRow(
            category=DefectCategory(data["category"]),
            grade=data["grade"],
            description=data["description"],
            criteria=data["criteria"],
            action_required=data["action_required"],
            adoptable=data["adoptable"],
        )

    # =========================================================================
    # Sector Recommendation Rules
    # =========================================================================

    def load_sector_rules(self, source: Source) -> ValidationResult:
        """
        Load and validate sector recommendation rules.

        Rules are sorted by priority after loading.
        """
        rules, result = self._load_records(
            source, "rules", self._validate_sector_rule, key=lambda r: r.id,
            label="sector rule ID",
        )

        if not result.is_valid:
            raise ConfigurationError("Sector rule validation failed", validation_result=result)

        rules.sort(key=lambda r: r.priority)
        self._configuration.sector_rules = rules
        self._is_loaded = True
        return result

    def _validate_sector_rule(
        self,
        data: Dict[str, Any],
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[SectorRecommendationRule]]:
        """Validate a single sector rule dictionary."""
        result = ValidationResult(is_valid=True)
        prefix = f"Sector rule [{index}]"

        self._check_required(data, ["id", "sector", "template"], prefix, result)
        if not result.is_valid:
            return result, None

        self._check_string(data, "id", prefix, result)
        self._check_string(data, "sector", prefix, result)
        self._check_template(data, "template", prefix, result)

        codes = data.get("codes", [])
        if not isinstance(codes, list) or not all(isinstance(c, str) for c in codes):
            result.add_error(f"{prefix}: 'codes' must be a list of strings")

        priority = data.get("priority", 100)
        if not isinstance(priority, int):
            result.add_error(f"{prefix}: 'priority' must be an integer")
        elif priority < 0:
            result.add_error(f"{prefix}: 'priority' must be non-negative")

        category = data.get("category")
        if category is not None and category not in _VALID_CATEGORIES:
            result.add_error(f"{prefix}: 'category' must be one of {_VALID_CATEGORIES}")

        if data.get("grade") is not None:
            self._check_grade(data, "grade", prefix, result)

        if result.is_valid and not codes and category is None:
            result.add_warning(f"{prefix}: rule '{data['id']}' matches every defect in its sector")

        if not result.is_valid:
            return result, None

        rule = SectorRecommendationRule(
            id=data["id"].strip(),
            sector=data["sector"].strip().lower(),
            codes=tuple(c.strip().upper() for c in codes),
            template=data["template"],
            priority=priority,
            category=DefectCategory(category) if category else None,
            grade=data.get("grade"),
            text_contains=data.get("text_contains"),
            text_absent=data.get("text_absent"),
            enabled=data.get("enabled", True),
        )
        return result, rule

    def get_sector_rule(self, rule_id: str) -> Optional[SectorRecommendationRule]:
        """Get a sector rule by ID."""
        for rule in self._configuration.sector_rules:
            if rule.id == rule_id:
                return rule
        return None

    # =========================================================================
    # Configuration Validation
    # =========================================================================

    def validate_configuration(
        self,
        config: Optional[EngineConfiguration] = None
    ) -> ValidationResult:
        """
        Validate cross-references between the loaded tables.

        Checks for:
        - An empty taxonomy (error)
        - Method and rule codes without a taxonomy entry (warnings)
        - Sector rules for sectors without thresholds (warnings)

        Args:
            config: Configuration to validate. Uses current config if None.

        Returns:
            ValidationResult with all errors and warnings.
        """
        config = config or self._configuration
        result = ValidationResult(is_valid=True)

        if not config.taxonomy:
            result.add_error("Defect taxonomy is empty")

        codes = {e.code for e in config.taxonomy}
        for method in list(config.repair_methods) + list(config.cleaning_methods):
            if codes and method.code not in codes:
                result.add_warning(f"Method table references unknown code '{method.code}'")

        sectors = {t.sector for t in config.thresholds}
        for rule in config.sector_rules:
            unknown = [c for c in rule.codes if codes and c not in codes]
            if unknown:
                result.add_warning(f"Sector rule '{rule.id}' references unknown codes {unknown}")
            if sectors and rule.sector not in sectors:
                result.add_warning(
                    f"Sector rule '{rule.id}' targets sector '{rule.sector}' which has no thresholds"
                )

        return result

    def build_reference_data(
        self,
        thresholds: Optional[SectorThresholdTable] = None,
        fill_defaults: bool = True,
    ) -> ReferenceData:
        """
        Freeze the loaded tables into a read-only ``ReferenceData``.

        Args:
            thresholds: Optional threshold table (e.g. from the threshold
                store) that replaces the loaded thresholds.
            fill_defaults: Use the built-in tables for anything not loaded,
                except the taxonomy, which must always be present.

        Raises:
            ConfigurationError: If the taxonomy is missing or empty.
        """
        config = self._configuration
        result = self.validate_configuration(config)
        if not result.is_valid:
            raise ConfigurationError("Cannot build reference data", validation_result=result)

        def pick(loaded, builtin):
            return loaded if loaded or not fill_defaults else builtin

        if thresholds is None:
            records = pick(config.thresholds, defaults.DEFAULT_SECTOR_THRESHOLDS)
            thresholds = SectorThresholdTable({t.sector: t for t in records})

        srm_rows = pick(config.srm_scores, defaults.DEFAULT_SRM_SCORES)
        return ReferenceData(
            taxonomy=MappingProxyType({e.code: e for e in config.taxonomy}),
            thresholds=thresholds,
            repair_methods=MappingProxyType(
                {m.code: m for m in pick(config.repair_methods, defaults.DEFAULT_REPAIR_METHODS)}
            ),
            cleaning_methods=MappingProxyType(
                {m.code: m for m in pick(config.cleaning_methods, defaults.DEFAULT_CLEANING_METHODS)}
            ),
            srm_scores=MappingProxyType({(r.category.value, r.grade): r for r in srm_rows}),
            sector_rules=tuple(
                sorted(pick(config.sector_rules, defaults.DEFAULT_SECTOR_RULES), key=lambda r: r.priority)
            ),
            version=config.version,
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _load_records(
        self,
        source: Source,
        wrapper_key: str,
        validator: Callable[[Dict[str, Any], int], Tuple[ValidationResult, Any]],
        key: Callable[[Any], str],
        label: str,
    ) -> Tuple[List[Any], ValidationResult]:
        """Parse a source, validate each record and check for duplicate keys."""
        raw_data = self._parse_source(source)

        # Handle both single dict and list formats
        if isinstance(raw_data, dict):
            if wrapper_key in raw_data:
                records_data = raw_data[wrapper_key]
            else:
                records_data = [raw_data]
        else:
            records_data = raw_data

        result = ValidationResult(is_valid=True)
        records: List[Any] = []

        if not isinstance(records_data, list):
            result.add_error(f"'{wrapper_key}' must be a list")
            return records, result

        for i, record_dict in enumerate(records_data):
            if not isinstance(record_dict, dict):
                result.add_error(f"Record [{i}] must be an object")
                continue
            record_result, record = validator(record_dict, i)
            result = result.merge(record_result)
            if record:
                records.append(record)

        keys = [key(r) for r in records]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            result.add_error(f"Duplicate {label}s found: {duplicates}")

        return records, result

    @staticmethod
    def _check_required(
        data: Dict[str, Any], fields: List[str], prefix: str, result: ValidationResult
    ) -> None:
        for name in fields:
            if name not in data:
                result.add_error(f"{prefix}: Missing required field '{name}'")

    @staticmethod
    def _check_string(data: Dict[str, Any], name: str, prefix: str, result: ValidationResult) -> None:
        if not isinstance(data[name], str) or not data[name].strip():
            result.add_error(f"{prefix}: '{name}' must be a non-empty string")

    @staticmethod
    def _check_string_list(data: Dict[str, Any], name: str, prefix: str, result: ValidationResult) -> None:
        if not isinstance(data[name], list):
            result.add_error(f"{prefix}: '{name}' must be a list")
        elif not all(isinstance(v, str) for v in data[name]):
            result.add_error(f"{prefix}: All items in '{name}' must be strings")

    @staticmethod
    def _check_grade(data: Dict[str, Any], name: str, prefix: str, result: ValidationResult) -> None:
        value = data[name]
        if not isinstance(value, int) or isinstance(value, bool):
            result.add_error(f"{prefix}: '{name}' must be an integer")
        elif not 0 <= value <= 5:
            result.add_error(f"{prefix}: '{name}' must be between 0 and 5")

    @staticmethod
    def _check_template(data: Dict[str, Any], name: str, prefix: str, result: ValidationResult) -> None:
        value = data[name]
        if not isinstance(value, str):
            result.add_error(f"{prefix}: '{name}' must be a string")
            return
        try:
            _template_checker.parse(value)
        except TemplateSyntaxError as e:
            result.add_error(f"{prefix}: '{name}' is not a valid template: {e.message}")

    def _parse_source(self, source: Source) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")

            with open(path, "r", encoding="utf-8") as f:
                try:
                    return json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigurationError(f"Invalid JSON in {path}: {e}")

        return source

    def _loaders(self) -> Dict[ConfigurationType, Callable[[Source], ValidationResult]]:
        return {
            ConfigurationType.TAXONOMY: self.load_taxonomy,
            ConfigurationType.THRESHOLDS: self.load_sector_thresholds,
            ConfigurationType.REPAIR_METHODS: self.load_repair_methods,
            ConfigurationType.CLEANING_METHODS: self.load_cleaning_methods,
            ConfigurationType.SRM_SCORES: self.load_srm_scores,
            ConfigurationType.SECTOR_RULES: self.load_sector_rules,
        }

    def load_from_directory(self, config_dir: Union[str, Path]) -> ValidationResult:
        """
        Load all configuration files from a directory.

        Expects any of the files named in ``CONFIG_FILES``; missing files are
        skipped.

        Args:
            config_dir: Directory containing configuration files.

        Returns:
            Combined ValidationResult for all loaded configurations.
        """
        config_dir = Path(config_dir)
        result = ValidationResult(is_valid=True)

        for config_type, loader in self._loaders().items():
            filename, _ = CONFIG_FILES[config_type]
            path = config_dir / filename
            if not path.exists():
                continue
            try:
                result = result.merge(loader(path))
            except ConfigurationError as e:
                result.add_error(f"{config_type.value} loading failed: {e.message}")
                if e.validation_result:
                    result = result.merge(e.validation_result)

        self._config_dir = config_dir
        return result

    def save_to_directory(self, config_dir: Optional[Union[str, Path]] = None) -> None:
        """
        Save current configuration to a directory.

        Args:
            config_dir: Directory to save to. Uses current config_dir if None.
        """
        config_dir = Path(config_dir) if config_dir else self._config_dir
        if not config_dir:
            raise ConfigurationError("No configuration directory specified")

        config_dir.mkdir(parents=True, exist_ok=True)

        for config_type, records in self._export_tables().items():
            if not records:
                continue
            filename, wrapper_key = CONFIG_FILES[config_type]
            with open(config_dir / filename, "w", encoding="utf-8") as f:
                json.dump({wrapper_key: records}, f, indent=2, ensure_ascii=False)

    def reset(self) -> None:
        """Reset configuration to empty state."""
        self._configuration = EngineConfiguration()
        self._is_loaded = False

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as a dictionary."""
        data: Dict[str, Any] = {"version": self._configuration.version}
        for config_type, records in self._export_tables().items():
            data[config_type.value] = records
        data["metadata"] = self._configuration.metadata
        return data

    def _export_tables(self) -> Dict[ConfigurationType, List[Dict[str, Any]]]:
        config = self._configuration
        return {
            ConfigurationType.TAXONOMY: [
                {
                    "code": e.code,
                    "description": e.description,
                    "category": e.category.value,
                    "default_grade": e.default_grade,
                    "risk_narrative": e.risk_narrative,
                    "recommended_action": e.recommended_action,
                    "action_priority": e.action_priority,
                    "operation_type": e.operation_type.value,
                }
                for e in config.taxonomy
            ],
            ConfigurationType.THRESHOLDS: SectorThresholdTable(
                {t.sector: t for t in config.thresholds}
            ).to_list() if config.thresholds else [],
            ConfigurationType.REPAIR_METHODS: [
                {
                    "code": m.code,
                    "suggested_repairs": list(m.suggested_repairs),
                    "repair_priority": m.repair_priority,
                }
                for m in config.repair_methods
            ],
            ConfigurationType.CLEANING_METHODS: [
                {
                    "code": m.code,
                    "recommended_methods": list(m.recommended_methods),
                    "cleaning_frequency": m.cleaning_frequency,
                }
                for m in config.cleaning_methods
            ],
            ConfigurationType.SRM_SCORES: [
                {
                    "category": r.category.value,
                    "grade": r.grade,
                    "description": r.description,
                    "criteria": r.criteria,
                    "action_required": r.action_required,
                    "adoptable": r.adoptable,
                }
                for r in config.srm_scores
            ],
            ConfigurationType.SECTOR_RULES: [
                {
                    "id": r.id,
                    "sector": r.sector,
                    "codes": list(r.codes),
                    "template": r.template,
                    "priority": r.priority,
                    "category": r.category.value if r.category else None,
                    "grade": r.grade,
                    "text_contains": r.text_contains,
                    "text_absent": r.text_absent,
                    "enabled": r.enabled,
                }
                for r in config.sector_rules
            ],
        }
