"""Daily material and nursing cost of a prescription."""

from nutrition_rx.domain.catalog import SystemType
from nutrition_rx.domain.costs import CostBreakdown, CostConfig
from nutrition_rx.domain.prescription import FormulaLine, PrescriptionDraft, Route
from nutrition_rx.services.catalog import CatalogSnapshot
from nutrition_rx.services.dispensing import pack_size_for, packs_required
from nutrition_rx.services.routes import non_negative
from nutrition_rx.services.units import administered_volume

SECONDS_PER_HOUR = 3600


def formula_administrations(
    draft: PrescriptionDraft, catalog: CatalogSnapshot, index: int, line: FormulaLine
) -> int:
    """Dispensed units of a formula line per day.

    Open and bolus lines count scheduled administrations; closed lines count
    packs, with the equipment dead volume charged to the first line.
    """
    if draft.system_type is not SystemType.CLOSED:
        return line.schedule.count
    volume = administered_volume(line, draft.system_type, draft.infusion_mode)
    if index == 0:
        volume += non_negative(draft.equipment_volume_ml)
    return packs_required(volume, pack_size_for(catalog, line.formula_id))


def compute_costs(
    draft: PrescriptionDraft, catalog: CatalogSnapshot, config: CostConfig
) -> CostBreakdown:
    """Material, nursing and indirect cost for one day of therapy."""
    if draft.routes is None:
        return CostBreakdown()

    times = config.nursing_times
    formula_cost = 0.0
    module_cost = 0.0
    nursing_seconds = 0.0

    if draft.is_active(Route.ENTERAL):
        per_formula_event = times.seconds_per_event(
            draft.system_type, draft.infusion_mode
        )
        for index, line in enumerate(draft.formula_lines):
            administrations = formula_administrations(draft, catalog, index, line)
            nursing_seconds += per_formula_event * administrations
            formula = catalog.formula(line.formula_id)
            if formula is not None:
                formula_cost += non_negative(formula.billing_price) * administrations
        for module_line in draft.module_lines:
            administrations = module_line.schedule.count
            nursing_seconds += times.bolus * administrations
            module = catalog.module(module_line.module_id)
            if module is not None:
                module_cost += non_negative(module.billing_price) * administrations
        if draft.hydration is not None:
            nursing_seconds += times.bolus * draft.hydration.schedule.count

    if draft.is_active(Route.ORAL) and draft.oral is not None:
        for supplement in draft.oral.supplements:
            formula = catalog.formula(supplement.formula_id)
            if formula is not None:
                price = non_negative(formula.billing_price)
                formula_cost += price * supplement.meals.count
        for oral_module in draft.oral.modules:
            module = catalog.module(oral_module.module_id)
            if module is not None:
                price = non_negative(module.billing_price)
                module_cost += price * oral_module.meals.count

    nursing_seconds = non_negative(nursing_seconds)
    hourly_rate = non_negative(config.hourly_rate)
    return CostBreakdown(
        formula_cost=formula_cost,
        module_cost=module_cost,
        nursing_time_seconds=nursing_seconds,
        nursing_cost=nursing_seconds / SECONDS_PER_HOUR * hourly_rate,
        indirect_labor_cost=non_negative(config.indirect_labor_cost),
    )
