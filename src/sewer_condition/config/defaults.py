"""Built-in reference tables for the sewer condition classification engine.

These tables are the fallback rule set used when no configuration store or
configuration directory is supplied. Each table is versioned through
``ReferenceData.version`` and ``SectorThresholds.version``; a revision of the
governing standard is a change here (or in the configuration files), not in
the engine code.

Recommended actions and sector rule templates are Jinja2 templates. The
variables available when they are rendered are ``code``, ``meterage``,
``percentage``, ``pipe_size``, ``default_action`` and ``patch_option``.
"""

from ..models.enums import DefectCategory, OperationType
from ..models.taxonomy import (
    CleaningMethod,
    DefectTaxonomyEntry,
    RepairMethod,
    SectorRecommendationRule,
    SrmScoreRow,
)
from .models import SectorThresholds

STRUCTURAL = DefectCategory.STRUCTURAL
SERVICE = DefectCategory.SERVICE


# =============================================================================
# Defect taxonomy
# =============================================================================

DEFAULT_TAXONOMY = [
    # -- Structural -----------------------------------------------------------
    DefectTaxonomyEntry(
        code="FC",
        description="Fracture - circumferential",
        category=STRUCTURAL,
        default_grade=4,
        risk_narrative="High risk of collapse or infiltration",
        recommended_action="Immediate structural repair required",
        action_priority=90,
        operation_type=OperationType.PATCHING,
    ),
    DefectTaxonomyEntry(
        code="FL",
        description="Fracture - longitudinal",
        category=STRUCTURAL,
        default_grade=3,
        risk_narrative="Medium risk of structural failure",
        recommended_action="Medium-term structural repair",
        action_priority=80,
        operation_type=OperationType.LINING,
    ),
    DefectTaxonomyEntry(
        code="CR",
        description="Crack",
        category=STRUCTURAL,
        default_grade=2,
        risk_narrative="Low to medium risk depending on extent",
        recommended_action="Monitor and consider repair",
        action_priority=60,
        operation_type=OperationType.PATCHING,
    ),
    DefectTaxonomyEntry(
        code="CL",
        description="Crack - longitudinal",
        category=STRUCTURAL,
        default_grade=2,
        risk_narrative="Low to medium risk depending on extent",
        recommended_action="Monitor and consider repair",
        action_priority=60,
        operation_type=OperationType.PATCHING,
    ),
    DefectTaxonomyEntry(
        code="CCJ",
        description="Crack - circumferential at joint",
        category=STRUCTURAL,
        default_grade=2,
        risk_narrative="Low to medium risk of infiltration at the joint",
        recommended_action="Monitor and consider joint sealing",
        action_priority=58,
        operation_type=OperationType.PATCHING,
    ),
    DefectTaxonomyEntry(
        code="CLJ",
        description="Crack - longitudinal at joint",
        category=STRUCTURAL,
        default_grade=2,
        risk_narrative="Low to medium risk of infiltration at the joint",
        recommended_action="Monitor and consider joint sealing",
        action_priority=58,
        operation_type=OperationType.PATCHING,
    ),
    DefectTaxonomyEntry(
        code="JDL",
        description="Joint displacement - large",
        category=STRUCTURAL,
        default_grade=4,
        risk_narrative="High risk of pipe misalignment and infiltration",
        recommended_action="Immediate joint repair or replacement",
        action_priority=85,
        operation_type=OperationType.PATCHING,
    ),
    DefectTaxonomyEntry(
        code="JDS",
        description="Joint displacement - small",
        category=STRUCTURAL,
        default_grade=2,
        risk_narrative="Low to medium risk of infiltration",
        recommended_action="Monitor and consider sealing",
        action_priority=55,
        operation_type=OperationType.PATCHING,
    ),
    DefectTaxonomyEntry(
        code="JDM",
        description="Joint displacement - major",
        category=STRUCTURAL,
        default_grade=1,
        risk_narrative="Major joint misalignment causing structural instability and infiltration",
        recommended_action="First consideration should be given to a patch repair for joint displacement",
        action_priority=74,
        operation_type=OperationType.PATCHING,
    ),
    DefectTaxonomyEntry(
        code="DEF",
        description="Deformity",
        category=STRUCTURAL,
        default_grade=3,
        risk_narrative="Medium risk of structural compromise",
        recommended_action="Structural assessment and repair consideration",
        action_priority=75,
        operation_type=OperationType.LINING,
    ),
    DefectTaxonomyEntry(
        code="D",
        description="Deformity",
        category=STRUCTURAL,
        default_grade=3,
        risk_narrative="Progressive structural deterioration affecting pipe integrity",
        recommended_action="Structural assessment and repair",
        action_priority=75,
        operation_type=OperationType.LINING,
    ),
    DefectTaxonomyEntry(
        code="OJL",
        description="Open joint - longitudinal",
        category=STRUCTURAL,
        default_grade=3,
        risk_narrative="Water infiltration and potential collapse",
        recommended_action="Joint sealing or pipe replacement required",
        action_priority=70,
        operation_type=OperationType.PATCHING,
    ),
    DefectTaxonomyEntry(
        code="OJM",
        description="Open joint - major",
        category=STRUCTURAL,
        default_grade=1,
        risk_narrative="Significant structural failure requiring immediate patch repair",
        recommended_action=(
            "Immediate patch repair required - first consideration for construction compliance. "
            "Joint replacement alternative if patch ineffective"
        ),
        action_priority=72,
        operation_type=OperationType.PATCHING,
    ),
    DefectTaxonomyEntry(
        code="BRK",
        description="Broken pipe",
        category=STRUCTURAL,
        default_grade=4,
        risk_narrative="Loss of pipe fabric with high risk of collapse",
        recommended_action="Excavate and replace the broken length",
        action_priority=95,
        operation_type=OperationType.EXCAVATION,
    ),
    DefectTaxonomyEntry(
        code="COL",
        description="Collapse",
        category=STRUCTURAL,
        default_grade=5,
        risk_narrative="Pipe has collapsed and is no longer serviceable",
        recommended_action="Immediate excavation and replacement required",
        action_priority=100,
        operation_type=OperationType.EXCAVATION,
    ),
    # -- Service --------------------------------------------------------------
    DefectTaxonomyEntry(
        code="DER",
        description="Deposits - coarse",
        category=SERVICE,
        default_grade=3,
        risk_narrative="Flow restriction and potential blockage",
        recommended_action="Mechanical or hydraulic cleaning",
        action_priority=40,
        operation_type=OperationType.CLEANING,
    ),
    DefectTaxonomyEntry(
        code="DES",
        description="Deposits - fine settled",
        category=SERVICE,
        default_grade=2,
        risk_narrative="Gradual flow reduction",
        recommended_action="Hydraulic cleaning or jetting",
        action_priority=35,
        operation_type=OperationType.CLEANING,
    ),
    DefectTaxonomyEntry(
        code="DEC",
        description="Deposits - concrete",
        category=SERVICE,
        default_grade=4,
        risk_narrative="Concrete deposits requiring removal",
        recommended_action="Directional water cutting to remove hard deposits",
        action_priority=45,
        operation_type=OperationType.CLEANING,
    ),
    DefectTaxonomyEntry(
        code="WL",
        description="Water level",
        category=SERVICE,
        default_grade=1,
        risk_narrative="May indicate downstream blockage",
        recommended_action="Investigate downstream and clear if necessary",
        action_priority=10,
        operation_type=OperationType.CLEANING,
    ),
    DefectTaxonomyEntry(
        code="OB",
        description="Obstacle",
        category=SERVICE,
        default_grade=4,
        risk_narrative="Immediate flow restriction or blockage",
        recommended_action="Remove obstacle immediately",
        action_priority=48,
        operation_type=OperationType.CLEANING,
    ),
    DefectTaxonomyEntry(
        code="OBI",
        description="Other obstacles",
        category=SERVICE,
        default_grade=5,
        risk_narrative="Service obstacle requiring immediate removal and repair",
        recommended_action="IMS cutting to cut the rebar top and bottom and install a patch repair",
        action_priority=50,
        operation_type=OperationType.PATCHING,
    ),
    DefectTaxonomyEntry(
        code="RI",
        description="Root intrusion",
        category=SERVICE,
        default_grade=3,
        risk_narrative="Progressive blockage and potential structural damage",
        recommended_action="Root removal and sealing",
        action_priority=42,
        operation_type=OperationType.LINING,
    ),
    DefectTaxonomyEntry(
        code="RF",
        description="Roots - fine",
        category=SERVICE,
        default_grade=2,
        risk_narrative="Fine roots trapping debris",
        recommended_action="Root cutting and jetting",
        action_priority=30,
        operation_type=OperationType.CLEANING,
    ),
    DefectTaxonomyEntry(
        code="RM",
        description="Roots - mass",
        category=SERVICE,
        default_grade=4,
        risk_narrative="Root mass restricting flow",
        recommended_action="Root cutting followed by lining to prevent re-entry",
        action_priority=44,
        operation_type=OperationType.LINING,
    ),
    DefectTaxonomyEntry(
        code="SA",
        description="Service connection",
        category=SERVICE,
        default_grade=2,
        risk_narrative="Connection verification required",
        recommended_action="Contractor confirmation and cleanse/resurvey required",
        action_priority=20,
        operation_type=OperationType.CLEANING,
    ),
    DefectTaxonomyEntry(
        code="CXB",
        description="Connection defective, connecting pipe is blocked",
        category=SERVICE,
        default_grade=4,
        risk_narrative="Service defect requiring cleaning to restore flow capacity",
        recommended_action="High pressure water jetting to clear blockage in connecting pipe",
        action_priority=46,
        operation_type=OperationType.CLEANING,
    ),
    DefectTaxonomyEntry(
        code="CUW",
        description="Camera under water",
        category=SERVICE,
        default_grade=1,
        risk_narrative="Survey limited by surcharge; condition unknown below water line",
        recommended_action="Cleanse and resurvey once water levels have dropped",
        action_priority=15,
        operation_type=OperationType.CLEANING,
    ),
]


# =============================================================================
# Sector thresholds
# =============================================================================

DEFAULT_SECTOR_THRESHOLDS = [
    SectorThresholds(sector="construction", standard_name="BS EN 1610:2015", belly_threshold_pct=10),
    SectorThresholds(sector="highways", standard_name="HADDMS", belly_threshold_pct=15),
    SectorThresholds(
        sector="adoption",
        standard_name="OS20x adoption",
        belly_threshold_pct=20,
        min_structural_grade=3,
    ),
    SectorThresholds(sector="utilities", standard_name="WRc/MSCC5", belly_threshold_pct=25),
    SectorThresholds(sector="domestic", standard_name="Trading Standards", belly_threshold_pct=25),
    SectorThresholds(sector="insurance", standard_name="ABI guidelines", belly_threshold_pct=30),
]


# =============================================================================
# SRM scoring
# =============================================================================

_SRM_ROWS = {
    STRUCTURAL: [
        ("No action required", "Pipe observed in acceptable structural and service condition",
         "No action required", True),
        ("Excellent structural condition", "No defects observed", "None", True),
        ("Minor defects", "Some minor wear or joint displacement", "No immediate action", True),
        ("Moderate deterioration", "Isolated fractures, minor infiltration",
         "Medium-term repair or monitoring", True),
        ("Significant deterioration", "Multiple fractures, poor alignment, heavy infiltration",
         "Consider near-term repair", False),
        ("Severe structural failure", "Collapse, deformation, major cracking",
         "Immediate repair or replacement", False),
    ],
    SERVICE: [
        ("No action required", "Pipe observed in acceptable structural and service condition",
         "No action required", True),
        ("No service issues", "Free flowing, no obstructions or deposits", "None", True),
        ("Minor service impacts", "Minor settled deposits or water levels", "Routine monitoring", True),
        ("Moderate service defects", "Partial blockages, 5-20% cross-sectional loss",
         "Desilting or cleaning recommended", True),
        ("Major service defects", "Severe deposits, 20-50% loss, significant flow restriction",
         "Cleaning or partial repair", False),
        ("Blocked or non-functional", "Over 50% flow loss or complete blockage",
         "Immediate action required", False),
    ],
}

DEFAULT_SRM_SCORES = [
    SrmScoreRow(
        category=category,
        grade=grade,
        description=description,
        criteria=criteria,
        action_required=action,
        adoptable=adoptable,
    )
    for category, rows in _SRM_ROWS.items()
    for grade, (description, criteria, action, adoptable) in enumerate(rows)
]


# =============================================================================
# Repair and cleaning method references
# =============================================================================

DEFAULT_REPAIR_METHODS = [
    RepairMethod(
        code="FC",
        suggested_repairs=(
            "Patch repair - first consideration for isolated circumferential fractures",
            "Localised lining where fractures are grouped",
            "Excavate and replace if the pipe is broken",
        ),
        repair_priority="High",
    ),
    RepairMethod(
        code="FL",
        suggested_repairs=(
            "Full length lining - first consideration for longitudinal fractures",
            "Patch repair for short isolated fractures",
        ),
        repair_priority="Medium",
    ),
    RepairMethod(
        code="CR",
        suggested_repairs=(
            "Monitor at next survey cycle",
            "Patch repair where infiltration is present",
        ),
        repair_priority="Low",
    ),
    RepairMethod(
        code="JDL",
        suggested_repairs=(
            "Patch repair - first consideration for large joint displacement",
            "Joint realignment or replacement if patch ineffective",
        ),
        repair_priority="High",
    ),
    RepairMethod(
        code="JDS",
        suggested_repairs=("Monitor at next survey cycle", "Joint sealing where infiltration is present"),
        repair_priority="Low",
    ),
    RepairMethod(
        code="JDM",
        suggested_repairs=(
            "Patch repair - first consideration for major joint displacement",
            "Joint realignment or replacement alternative if patch ineffective",
        ),
        repair_priority="High",
    ),
    RepairMethod(
        code="DEF",
        suggested_repairs=(
            "Structural assessment of ovality before repair selection",
            "Patch repair or localised lining depending on extent",
            "Excavate and replace where deformation exceeds lining tolerance",
        ),
        repair_priority="Medium",
    ),
    RepairMethod(
        code="OJL",
        suggested_repairs=("Patch repair - first consideration for open joints", "Joint sealing"),
        repair_priority="Medium",
    ),
    RepairMethod(
        code="OJM",
        suggested_repairs=(
            "Patch repair - first consideration for construction compliance",
            "Joint replacement alternative if patch ineffective",
        ),
        repair_priority="High",
    ),
    RepairMethod(
        code="BRK",
        suggested_repairs=("Excavate and replace the broken length",),
        repair_priority="Immediate",
    ),
    RepairMethod(
        code="COL",
        suggested_repairs=("Excavate and replace the collapsed length",),
        repair_priority="Immediate",
    ),
]

DEFAULT_CLEANING_METHODS = [
    CleaningMethod(
        code="DER",
        recommended_methods=(
            "High-pressure water jetting",
            "Mechanical removal of coarse debris",
            "Cleanse and resurvey to confirm removal",
        ),
        cleaning_frequency="As required following survey",
    ),
    CleaningMethod(
        code="DES",
        recommended_methods=("Hydraulic jetting of fine settled deposits", "Resurvey after cleaning"),
        cleaning_frequency="Routine maintenance cycle",
    ),
    CleaningMethod(
        code="DEC",
        recommended_methods=("Directional water cutting to remove hard deposits", "Robotic cutting for set concrete"),
        cleaning_frequency="One-off remedial",
    ),
    CleaningMethod(
        code="OB",
        recommended_methods=("Remove obstacle by jetting or robotic cutter", "Resurvey after removal"),
        cleaning_frequency="One-off remedial",
    ),
    CleaningMethod(
        code="OBI",
        recommended_methods=("Robotic cutting of intruding obstacle", "Patch repair after removal"),
        cleaning_frequency="One-off remedial",
    ),
    CleaningMethod(
        code="RI",
        recommended_methods=("Mechanical root cutting", "Chemical root treatment", "Lining to prevent re-entry"),
        cleaning_frequency="Annual",
    ),
    CleaningMethod(
        code="WL",
        recommended_methods=(
            "High-pressure jetting to clear potential downstream obstruction",
            "CCTV survey downstream sections to identify blockage location",
            "Monitor water levels post-cleaning to confirm effectiveness",
        ),
        cleaning_frequency="As required following survey",
    ),
    CleaningMethod(
        code="CXB",
        recommended_methods=("High pressure water jetting of connecting pipe",),
        cleaning_frequency="One-off remedial",
    ),
]


# =============================================================================
# Sector recommendation rules
# =============================================================================

DEFAULT_SECTOR_RULES = [
    SectorRecommendationRule(
        id="construction_jdm_patch",
        sector="construction",
        codes=("JDM",),
        template=(
            "First consideration should be given to a patch repair for joint displacement. "
            "Joint realignment or replacement alternative if patch ineffective"
        ),
        priority=10,
    ),
    SectorRecommendationRule(
        id="construction_ojm_patch",
        sector="construction",
        codes=("OJM",),
        template=(
            "Immediate patch repair required - first consideration for construction compliance. "
            "Joint replacement alternative if patch ineffective"
        ),
        priority=10,
    ),
    SectorRecommendationRule(
        id="construction_obi_rebar",
        sector="construction",
        codes=("OBI",),
        template=(
            "IMS cutting to cut the rebar top and bottom and install a patch repair "
            "or excavate down and pull the rebar out, then patch"
        ),
        priority=10,
        text_contains="rebar",
    ),
    SectorRecommendationRule(
        id="construction_obi_other",
        sector="construction",
        codes=("OBI",),
        template=(
            "Remove obstacle and install patch repair. "
            "Excavation may be required for structural obstructions"
        ),
        priority=20,
        text_absent="rebar",
    ),
    SectorRecommendationRule(
        id="construction_dec_cutting",
        sector="construction",
        codes=("DEC",),
        template="We recommend directional water cutting to remove hard deposit and concrete",
        priority=10,
    ),
    SectorRecommendationRule(
        id="construction_open_joint_patch",
        sector="construction",
        codes=("OJL", "JDL"),
        template="{{ default_action }} - patch repair preferred for construction standards",
        priority=20,
    ),
    SectorRecommendationRule(
        id="utilities_grade3_structural_patch",
        sector="utilities",
        codes=(),
        template=(
            "WRc Drain Repair Book: To install a {{ pipe_size }}mm double layer Patch at "
            "{{ meterage or 'location to be confirmed' }}. {{ patch_option }}"
        ),
        priority=50,
        category=STRUCTURAL,
        grade=3,
    ),
]
