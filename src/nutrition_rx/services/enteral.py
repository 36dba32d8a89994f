"""Enteral route calculator."""

from dataclasses import dataclass

from nutrition_rx.domain.nutrition import NutrientTotals, Residue, RouteSubtotal
from nutrition_rx.domain.prescription import Patient, PrescriptionDraft, Route
from nutrition_rx.domain.warnings import DataIntegrityWarning
from nutrition_rx.services.catalog import CatalogSnapshot
from nutrition_rx.services.routes import (
    formula_nutrients,
    formula_residue,
    module_nutrients,
    resolve_formula,
    resolve_module,
)
from nutrition_rx.services.units import administered_volume, bolus_volume


@dataclass(frozen=True)
class EnteralCalculator:
    """Sums formula lines, module lines and free water flushes."""

    def calculate(
        self, draft: PrescriptionDraft, catalog: CatalogSnapshot, patient: Patient
    ) -> RouteSubtotal:
        """Return the enteral contribution for one day."""
        warnings: list[DataIntegrityWarning] = []
        nutrients = NutrientTotals()
        residue = Residue()
        volume = 0.0

        for line in draft.formula_lines:
            line_volume = administered_volume(
                line, draft.system_type, draft.infusion_mode
            )
            formula = resolve_formula(catalog, line.formula_id, warnings)
            if formula is None:
                continue
            volume += line_volume
            nutrients += formula_nutrients(formula, line_volume)
            residue += formula_residue(formula, line_volume)

        for module_line in draft.module_lines:
            module = resolve_module(catalog, module_line.module_id, warnings)
            if module is None:
                continue
            quantity = bolus_volume(
                module_line.quantity_per_administration, module_line.schedule.count
            )
            module_totals, warning = module_nutrients(module, quantity)
            nutrients += module_totals
            if warning is not None:
                warnings.append(warning)

        if draft.hydration is not None:
            water = bolus_volume(
                draft.hydration.volume_per_administration,
                draft.hydration.schedule.count,
            )
            nutrients += NutrientTotals(free_water_ml=water)

        return RouteSubtotal(
            route=Route.ENTERAL,
            nutrients=nutrients,
            residue=residue,
            volume_ml=volume,
            warnings=tuple(warnings),
        )
