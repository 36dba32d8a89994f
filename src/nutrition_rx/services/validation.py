"""Advisory checks computed alongside the nutrition summary."""

import logging
from collections import Counter
from dataclasses import dataclass

from nutrition_rx.domain.catalog import SystemType
from nutrition_rx.domain.dispensing import DispensingPlan
from nutrition_rx.domain.nutrition import NutritionSummary
from nutrition_rx.domain.prescription import (
    InfusionMode,
    Patient,
    PrescriptionDraft,
    Route,
)
from nutrition_rx.domain.warnings import ValidationWarning, WarningCode
from nutrition_rx.services.aggregator import OBESITY_BMI_THRESHOLD
from nutrition_rx.services.catalog import CatalogSnapshot
from nutrition_rx.services.dispensing import check_bag_schedule
from nutrition_rx.services.units import infusion_rate

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClinicalLimits:
    """Upper bounds a prescription is checked against."""

    max_pump_rate_ml_h: float = 300.0
    max_infusion_hours: float = 24.0


def validate_draft(
    draft: PrescriptionDraft, catalog: CatalogSnapshot, limits: ClinicalLimits
) -> list[ValidationWarning]:
    """Checks that depend only on the draft and the catalog."""
    warnings: list[ValidationWarning] = []
    if draft.is_active(Route.ENTERAL):
        warnings.extend(_rate_warnings(draft, limits))
        warnings.extend(_schedule_conflicts(draft))
        warnings.extend(_system_mismatches(draft, catalog))
    if draft.is_active(Route.PARENTERAL) and draft.parenteral is not None:
        hours = draft.parenteral.infusion_hours
        if hours is not None and hours > limits.max_infusion_hours:
            warnings.append(
                ValidationWarning(
                    code=WarningCode.INFUSION_HOURS_ABOVE_MAX,
                    message=(
                        f"Parenteral infusion of {hours:g} h exceeds "
                        f"{limits.max_infusion_hours:g} h"
                    ),
                )
            )
    return warnings


def validate_summary(
    summary: NutritionSummary, patient: Patient, plan: DispensingPlan | None
) -> list[ValidationWarning]:
    """Checks on the computed results: protein target and bag schedule."""
    warnings: list[ValidationWarning] = []
    protein_warning = _protein_target_warning(summary, patient)
    if protein_warning is not None:
        warnings.append(protein_warning)
    bag_warning = check_bag_schedule(plan)
    if bag_warning is not None:
        warnings.append(bag_warning)
    return warnings


def _rate_warnings(
    draft: PrescriptionDraft, limits: ClinicalLimits
) -> list[ValidationWarning]:
    warnings = []
    closed = draft.system_type is SystemType.CLOSED
    for line in draft.formula_lines:
        if closed and draft.infusion_mode in {InfusionMode.PUMP, InfusionMode.GRAVITY}:
            hours = line.duration_hours
            if hours is not None and hours > limits.max_infusion_hours:
                warnings.append(
                    ValidationWarning(
                        code=WarningCode.INFUSION_HOURS_ABOVE_MAX,
                        message=(
                            f"Formula {line.formula_id} runs {hours:g} h, above "
                            f"{limits.max_infusion_hours:g} h"
                        ),
                    )
                )
        rate = _pump_rate(draft, line.rate, line.volume_per_administration, closed)
        if rate > limits.max_pump_rate_ml_h:
            warnings.append(
                ValidationWarning(
                    code=WarningCode.PUMP_RATE_ABOVE_MAX,
                    message=(
                        f"Formula {line.formula_id} pump rate {rate:g} ml/h exceeds "
                        f"{limits.max_pump_rate_ml_h:g} ml/h"
                    ),
                )
            )
    return warnings


def _pump_rate(
    draft: PrescriptionDraft,
    rate: float | None,
    volume_per_administration: float,
    closed: bool,
) -> float:
    if draft.infusion_mode is not InfusionMode.PUMP:
        return 0.0
    if closed:
        return rate or 0.0
    return infusion_rate(
        volume_per_administration, draft.step_duration_hours, InfusionMode.PUMP
    )


def _schedule_conflicts(draft: PrescriptionDraft) -> list[ValidationWarning]:
    usage = Counter(
        slot for line in draft.formula_lines for slot in line.schedule.slots
    )
    conflicts = sorted(slot.value for slot, count in usage.items() if count > 1)
    if not conflicts:
        return []
    return [
        ValidationWarning(
            code=WarningCode.FORMULA_SCHEDULE_CONFLICT,
            message=f"More than one formula scheduled at {', '.join(conflicts)}",
        )
    ]


def _system_mismatches(
    draft: PrescriptionDraft, catalog: CatalogSnapshot
) -> list[ValidationWarning]:
    if draft.system_type is None:
        return []
    warnings = []
    for line in draft.formula_lines:
        formula = catalog.formula(line.formula_id)
        if formula is None or formula.system_type.supports(draft.system_type):
            continue
        warnings.append(
            ValidationWarning(
                code=WarningCode.FORMULA_SYSTEM_MISMATCH,
                message=(
                    f"Formula {formula.name} is {formula.system_type.value}-system "
                    f"only, prescribed on a {draft.system_type.value} system"
                ),
            )
        )
    return warnings


def _protein_target_warning(
    summary: NutritionSummary, patient: Patient
) -> ValidationWarning | None:
    target = patient.protein_target_g_per_kg
    if not target or target <= 0 or not patient.weight_kg:
        return None
    use_ideal = summary.bmi is not None and summary.bmi > OBESITY_BMI_THRESHOLD
    achieved = (
        summary.protein_per_kg_ideal_weight if use_ideal else summary.protein_per_kg
    )
    if achieved >= target:
        return None
    basis = "g/kg of ideal weight" if use_ideal else "g/kg"
    _logger.info("Protein target unmet: achieved=%.2f target=%.2f", achieved, target)
    return ValidationWarning(
        code=WarningCode.PROTEIN_TARGET_UNMET,
        message=f"Protein {achieved:.2f} {basis} is below the target of {target:g}",
    )
