"""Parenteral route calculator and derived metrics."""

from dataclasses import dataclass

from nutrition_rx.domain.nutrition import (
    NutrientTotals,
    ParenteralMetrics,
    RouteSubtotal,
)
from nutrition_rx.domain.prescription import (
    ParenteralRecord,
    Patient,
    PrescriptionDraft,
    Route,
)
from nutrition_rx.services.catalog import CatalogSnapshot
from nutrition_rx.services.routes import non_negative

AMINOACID_KCAL_PER_G = 4.0
LIPID_KCAL_PER_G = 9.0
GLUCOSE_KCAL_PER_G = 3.4
GRAMS_PROTEIN_PER_GRAM_NITROGEN = 6.25


@dataclass(frozen=True)
class ParenteralCalculator:
    """Energy and protein from parenteral substrates."""

    def calculate(
        self, draft: PrescriptionDraft, catalog: CatalogSnapshot, patient: Patient
    ) -> RouteSubtotal:
        """Return the parenteral contribution for one day."""
        record = draft.parenteral
        if record is None:
            return RouteSubtotal(route=Route.PARENTERAL)
        aminoacids = non_negative(record.aminoacids_g)
        lipids = non_negative(record.lipids_g)
        glucose = non_negative(record.glucose_g)
        kcal = (
            aminoacids * AMINOACID_KCAL_PER_G
            + lipids * LIPID_KCAL_PER_G
            + glucose * GLUCOSE_KCAL_PER_G
        )
        return RouteSubtotal(
            route=Route.PARENTERAL,
            nutrients=NutrientTotals(
                kcal=kcal, protein_g=aminoacids, carbs_g=glucose, fat_g=lipids
            ),
        )


def parenteral_metrics(
    record: ParenteralRecord, weight_kg: float | None
) -> ParenteralMetrics:
    """Glucose infusion rate (mg/kg/min) and non-protein kcal per gram of nitrogen."""
    glucose = non_negative(record.glucose_g)
    lipids = non_negative(record.lipids_g)
    aminoacids = non_negative(record.aminoacids_g)
    weight = non_negative(weight_kg)
    minutes = non_negative(record.infusion_hours) * 60

    gir = 0.0
    if weight > 0 and minutes > 0:
        gir = glucose * 1000 / weight / minutes

    npc_ratio = 0.0
    nitrogen_g = aminoacids / GRAMS_PROTEIN_PER_GRAM_NITROGEN
    if nitrogen_g > 0:
        non_protein_kcal = glucose * GLUCOSE_KCAL_PER_G + lipids * LIPID_KCAL_PER_G
        npc_ratio = non_protein_kcal / nitrogen_g

    return ParenteralMetrics(
        glucose_infusion_rate_mg_kg_min=gir,
        non_protein_kcal_per_g_nitrogen=npc_ratio,
    )
