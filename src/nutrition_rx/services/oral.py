"""Oral route calculator."""

from dataclasses import dataclass, replace

from nutrition_rx.domain.nutrition import NutrientTotals, Residue, RouteSubtotal
from nutrition_rx.domain.prescription import Patient, PrescriptionDraft, Route
from nutrition_rx.domain.warnings import DataIntegrityWarning
from nutrition_rx.services.catalog import CatalogSnapshot
from nutrition_rx.services.routes import (
    formula_nutrients,
    formula_residue,
    module_nutrients,
    non_negative,
    resolve_formula,
    resolve_module,
)
from nutrition_rx.services.units import bolus_volume


@dataclass(frozen=True)
class OralCalculator:
    """Estimated oral diet plus supplements and modules served with meals."""

    def calculate(
        self, draft: PrescriptionDraft, catalog: CatalogSnapshot, patient: Patient
    ) -> RouteSubtotal:
        """Return the oral contribution for one day."""
        oral = draft.oral
        if oral is None:
            return RouteSubtotal(route=Route.ORAL)

        warnings: list[DataIntegrityWarning] = []
        nutrients = NutrientTotals(
            kcal=non_negative(oral.estimated_kcal),
            protein_g=non_negative(oral.estimated_protein_g),
        )
        residue = Residue()
        volume = 0.0

        for supplement in oral.supplements:
            formula = resolve_formula(catalog, supplement.formula_id, warnings)
            if formula is None:
                continue
            line_volume = bolus_volume(
                supplement.amount_per_administration, supplement.meals.count
            )
            # Oral supplements use label calories per 100 ml, never the density.
            supplement_totals = replace(
                formula_nutrients(formula, line_volume),
                kcal=line_volume / 100 * formula.composition.calories_per_100ml,
            )
            volume += line_volume
            nutrients += supplement_totals
            residue += formula_residue(formula, line_volume)

        for module_line in oral.modules:
            module = resolve_module(catalog, module_line.module_id, warnings)
            if module is None:
                continue
            dose = module_line.quantity_per_administration
            if dose is None:
                dose = module.reference_amount
            quantity = bolus_volume(dose, module_line.meals.count)
            module_totals, warning = module_nutrients(module, quantity)
            nutrients += module_totals
            if warning is not None:
                warnings.append(warning)

        return RouteSubtotal(
            route=Route.ORAL,
            nutrients=nutrients,
            residue=residue,
            volume_ml=volume,
            warnings=tuple(warnings),
        )
