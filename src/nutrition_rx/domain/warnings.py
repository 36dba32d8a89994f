"""Non-fatal findings returned alongside computed results."""

from dataclasses import dataclass
from enum import StrEnum


class WarningCode(StrEnum):
    """Machine-readable warning codes."""

    FORMULA_NOT_FOUND = "formula_not_found"
    MODULE_NOT_FOUND = "module_not_found"
    ZERO_REFERENCE_AMOUNT = "zero_reference_amount"
    BAG_COUNT_MISMATCH = "bag_count_mismatch"
    PUMP_RATE_ABOVE_MAX = "pump_rate_above_max"
    INFUSION_HOURS_ABOVE_MAX = "infusion_hours_above_max"
    PROTEIN_TARGET_UNMET = "protein_target_unmet"
    FORMULA_SCHEDULE_CONFLICT = "formula_schedule_conflict"
    FORMULA_SYSTEM_MISMATCH = "formula_system_mismatch"


@dataclass(frozen=True)
class DataIntegrityWarning:
    """Reference data problem; the engine substituted zero and continued."""

    code: WarningCode
    message: str
    reference_id: str | None = None


@dataclass(frozen=True)
class ValidationWarning:
    """Advisory clinical or logistic check that did not pass."""

    code: WarningCode
    message: str


EngineWarning = DataIntegrityWarning | ValidationWarning
