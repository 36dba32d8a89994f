"""Shared contract and helpers for the route calculators."""

import logging
import math
from typing import Protocol

from nutrition_rx.domain.catalog import Formula, Module
from nutrition_rx.domain.nutrition import NutrientTotals, Residue, RouteSubtotal
from nutrition_rx.domain.prescription import Patient, PrescriptionDraft
from nutrition_rx.domain.warnings import DataIntegrityWarning, WarningCode
from nutrition_rx.services.catalog import CatalogSnapshot

_logger = logging.getLogger(__name__)


class RouteCalculator(Protocol):
    """Turns one route of a draft into a nutrition subtotal."""

    def calculate(
        self, draft: PrescriptionDraft, catalog: CatalogSnapshot, patient: Patient
    ) -> RouteSubtotal:
        """Return the route's daily contribution."""


def formula_nutrients(formula: Formula, volume_ml: float) -> NutrientTotals:
    """Nutrients delivered by `volume_ml` of a formula."""
    comp = formula.composition
    factor = volume_ml / 100
    return NutrientTotals(
        kcal=volume_ml * comp.kcal_per_ml,
        protein_g=factor * comp.protein_per_100ml,
        carbs_g=factor * comp.carb_per_100ml,
        fat_g=factor * comp.fat_per_100ml,
        fiber_g=factor * comp.fiber_per_100ml,
        free_water_ml=volume_ml * comp.water_fraction,
        sodium_mg=factor * comp.sodium,
        potassium_mg=factor * comp.potassium,
        calcium_mg=factor * comp.calcium,
        phosphorus_mg=factor * comp.phosphorus,
    )


def formula_residue(formula: Formula, volume_ml: float) -> Residue:
    """Packaging residue for `volume_ml`, scaled from the per-1000 ml figures."""
    factor = volume_ml / 1000
    info = formula.residue
    return Residue(
        plastic=info.plastic * factor,
        paper=info.paper * factor,
        metal=info.metal * factor,
        glass=info.glass * factor,
    )


def module_nutrients(
    module: Module, quantity: float
) -> tuple[NutrientTotals, DataIntegrityWarning | None]:
    """Nutrients for `quantity` units of a module.

    Energy follows the module density; every other nutrient is scaled by
    quantity / reference amount, which is zero when the reference amount is.
    """
    warning = None
    if module.reference_amount:
        ratio = quantity / module.reference_amount
    else:
        ratio = 0.0
        warning = DataIntegrityWarning(
            code=WarningCode.ZERO_REFERENCE_AMOUNT,
            message=f"Module {module.name} has a zero reference amount",
            reference_id=module.id,
        )
        _logger.warning("Zero reference amount: module_id=%s", module.id)
    nutrients = NutrientTotals(
        kcal=quantity * module.density,
        protein_g=ratio * module.protein,
        carbs_g=ratio * module.carbs,
        fat_g=ratio * module.fat,
        fiber_g=ratio * module.fiber,
        free_water_ml=ratio * module.free_water,
        sodium_mg=ratio * module.sodium,
        potassium_mg=ratio * module.potassium,
    )
    return nutrients, warning


def resolve_formula(
    catalog: CatalogSnapshot, formula_id: str, warnings: list[DataIntegrityWarning]
) -> Formula | None:
    """Look up a formula, recording a warning on a miss."""
    formula = catalog.formula(formula_id)
    if formula is None:
        _logger.warning("Catalog miss: formula_id=%s", formula_id)
        warnings.append(
            DataIntegrityWarning(
                code=WarningCode.FORMULA_NOT_FOUND,
                message=f"Formula {formula_id} is not in the catalog",
                reference_id=formula_id,
            )
        )
    return formula


def resolve_module(
    catalog: CatalogSnapshot, module_id: str, warnings: list[DataIntegrityWarning]
) -> Module | None:
    """Look up a module, recording a warning on a miss."""
    module = catalog.module(module_id)
    if module is None:
        _logger.warning("Catalog miss: module_id=%s", module_id)
        warnings.append(
            DataIntegrityWarning(
                code=WarningCode.MODULE_NOT_FOUND,
                message=f"Module {module_id} is not in the catalog",
                reference_id=module_id,
            )
        )
    return module


def non_negative(value: float | None) -> float:
    """Treat missing or negative amounts as zero."""
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)
