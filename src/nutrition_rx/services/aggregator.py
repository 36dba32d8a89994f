"""Merge route subtotals into a daily nutrition summary."""

from collections.abc import Iterable, Mapping

from nutrition_rx.domain.nutrition import (
    NutrientTotals,
    NutritionSummary,
    Residue,
    RouteSubtotal,
)
from nutrition_rx.domain.prescription import Patient, PrescriptionDraft, Route
from nutrition_rx.services.catalog import CatalogSnapshot
from nutrition_rx.services.enteral import EnteralCalculator
from nutrition_rx.services.oral import OralCalculator
from nutrition_rx.services.parenteral import ParenteralCalculator, parenteral_metrics
from nutrition_rx.services.routes import RouteCalculator, non_negative

OBESITY_BMI_THRESHOLD = 30.0

DEFAULT_CALCULATORS: Mapping[Route, RouteCalculator] = {
    Route.ENTERAL: EnteralCalculator(),
    Route.ORAL: OralCalculator(),
    Route.PARENTERAL: ParenteralCalculator(),
}


def route_subtotals(
    draft: PrescriptionDraft,
    catalog: CatalogSnapshot,
    patient: Patient,
    calculators: Mapping[Route, RouteCalculator] = DEFAULT_CALCULATORS,
) -> list[RouteSubtotal]:
    """Run the calculator of every active route, in route order."""
    if draft.routes is None:
        return []
    return [
        calculators[route].calculate(draft, catalog, patient)
        for route in draft.routes.routes
    ]


def summarize(
    subtotals: Iterable[RouteSubtotal], draft: PrescriptionDraft, patient: Patient
) -> NutritionSummary:
    """Sum subtotals and derive per-kilogram metrics."""
    subtotals = list(subtotals)
    totals = NutrientTotals()
    residue = Residue()
    kcal_by_route: dict[Route, float] = {}
    residue_by_route: dict[Route, Residue] = {}
    enteral_volume = 0.0
    warnings = []
    for subtotal in subtotals:
        totals += subtotal.nutrients
        residue += subtotal.residue
        kcal_by_route[subtotal.route] = subtotal.kcal
        residue_by_route[subtotal.route] = subtotal.residue
        if subtotal.route is Route.ENTERAL:
            enteral_volume = subtotal.volume_ml
        warnings.extend(subtotal.warnings)

    weight = non_negative(patient.weight_kg)
    bmi = patient.bmi
    ideal_weight = patient.ideal_weight_kg

    protein_per_ideal_kg = 0.0
    if bmi is not None and bmi > OBESITY_BMI_THRESHOLD and ideal_weight:
        protein_per_ideal_kg = totals.protein_g / ideal_weight

    metrics = None
    if draft.is_active(Route.PARENTERAL) and draft.parenteral is not None:
        metrics = parenteral_metrics(draft.parenteral, patient.weight_kg)

    return NutritionSummary(
        total_kcal=totals.kcal,
        total_protein_g=totals.protein_g,
        total_free_water_ml=totals.free_water_ml,
        totals=totals,
        kcal_by_route=kcal_by_route,
        residue=residue,
        residue_by_route=residue_by_route,
        enteral_volume_ml=enteral_volume,
        kcal_per_kg=_per_kg(totals.kcal, weight),
        protein_per_kg=_per_kg(totals.protein_g, weight),
        free_water_ml_per_kg=_per_kg(totals.free_water_ml, weight),
        protein_per_kg_ideal_weight=protein_per_ideal_kg,
        bmi=bmi,
        ideal_weight_kg=ideal_weight,
        parenteral=metrics,
        warnings=tuple(warnings),
    )


def aggregate(
    draft: PrescriptionDraft,
    catalog: CatalogSnapshot,
    patient: Patient,
    calculators: Mapping[Route, RouteCalculator] = DEFAULT_CALCULATORS,
) -> NutritionSummary:
    """Compute the nutrition summary of a draft against a catalog snapshot."""
    subtotals = route_subtotals(draft, catalog, patient, calculators)
    return summarize(subtotals, draft, patient)


def _per_kg(amount: float, weight: float) -> float:
    if weight <= 0:
        return 0.0
    return amount / weight
