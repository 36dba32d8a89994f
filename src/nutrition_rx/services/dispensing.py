"""Pack requisition for closed systems and bottle breakdown for open systems."""

import logging
import math

from nutrition_rx.domain.catalog import SystemType
from nutrition_rx.domain.dispensing import (
    DEFAULT_PACK_SIZE_ML,
    BottleAllocation,
    BottleCount,
    DispensingPlan,
)
from nutrition_rx.domain.prescription import FormulaLine, PrescriptionDraft, Route
from nutrition_rx.domain.warnings import ValidationWarning, WarningCode
from nutrition_rx.services.catalog import CatalogSnapshot
from nutrition_rx.services.routes import non_negative
from nutrition_rx.services.units import administered_volume

BOTTLE_SIZES_ML = (100, 300, 500)

_logger = logging.getLogger(__name__)


def pack_size_for(catalog: CatalogSnapshot, formula_id: str) -> float:
    """First declared presentation of a formula, 1000 ml when there is none."""
    formula = catalog.formula(formula_id)
    if formula is None or not formula.presentations:
        return DEFAULT_PACK_SIZE_ML
    first = non_negative(formula.presentations[0])
    return first or DEFAULT_PACK_SIZE_ML


def packs_required(volume_ml: float, pack_size_ml: float) -> int:
    """Whole packs covering `volume_ml`."""
    if volume_ml <= 0:
        return 0
    return math.ceil(volume_ml / (pack_size_ml or DEFAULT_PACK_SIZE_ML))


def plan_dispensing(
    draft: PrescriptionDraft, catalog: CatalogSnapshot
) -> DispensingPlan | None:
    """Requisition plan for the closed-system formula, None for other drafts.

    Equipment dead volume is requested from the pharmacy but is not part of
    the volume delivered to the patient.
    """
    if draft.system_type is not SystemType.CLOSED:
        return None
    if not draft.is_active(Route.ENTERAL) or not draft.formula_lines:
        return None
    line = draft.formula_lines[0]
    patient_volume = administered_volume(line, draft.system_type, draft.infusion_mode)
    dead_volume = non_negative(draft.equipment_volume_ml)
    to_request = patient_volume + dead_volume
    pack_size = pack_size_for(catalog, line.formula_id)
    return DispensingPlan(
        formula_id=line.formula_id,
        total_volume_for_patient=patient_volume,
        equipment_dead_volume=dead_volume,
        total_volume_to_request=to_request,
        pack_size=pack_size,
        number_of_packs_required=packs_required(to_request, pack_size),
        bag_quantities=dict(draft.bag_quantities),
    )


def check_bag_schedule(plan: DispensingPlan | None) -> ValidationWarning | None:
    """Advisory check that the scheduled bags add up to the required packs."""
    if plan is None or plan.is_fully_scheduled:
        return None
    _logger.info(
        "Bag schedule mismatch: formula_id=%s scheduled=%s required=%s",
        plan.formula_id,
        plan.packs_scheduled,
        plan.number_of_packs_required,
    )
    return ValidationWarning(
        code=WarningCode.BAG_COUNT_MISMATCH,
        message=(
            f"{plan.packs_scheduled} bag(s) scheduled, "
            f"{plan.number_of_packs_required} required"
        ),
    )


def split_into_bottles(volume_ml: float) -> tuple[BottleCount, ...]:
    """Bottles of 100/300/500 ml holding one administration."""
    volume = non_negative(volume_ml)
    if volume == 0:
        return ()
    largest = BOTTLE_SIZES_ML[-1]
    if volume <= largest:
        return (BottleCount(size_ml=_smallest_bottle(volume), quantity=1),)
    full, remainder = divmod(volume, largest)
    bottles = [BottleCount(size_ml=largest, quantity=int(full))]
    if remainder > 0:
        size = _smallest_bottle(remainder)
        if size == largest:
            bottles = [BottleCount(size_ml=largest, quantity=int(full) + 1)]
        else:
            bottles.append(BottleCount(size_ml=size, quantity=1))
    return tuple(bottles)


def plan_open_bottles(draft: PrescriptionDraft) -> list[BottleAllocation]:
    """Bottle allocation per open-system formula line."""
    if draft.system_type is not SystemType.OPEN or not draft.is_active(Route.ENTERAL):
        return []
    return [_allocate(line) for line in draft.formula_lines]


def _allocate(line: FormulaLine) -> BottleAllocation:
    volume = non_negative(line.volume_per_administration)
    return BottleAllocation(
        formula_id=line.formula_id,
        volume_per_administration=volume,
        administrations_per_day=line.schedule.count,
        bottles=split_into_bottles(volume),
    )


def _smallest_bottle(volume_ml: float) -> int:
    for size in BOTTLE_SIZES_ML:
        if volume_ml <= size:
            return size
    return BOTTLE_SIZES_ML[-1]
