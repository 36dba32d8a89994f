"""Clinical note text for a computed prescription.

The note is rendered from `templates/record_note.j2` with fixed pt-BR number
formatting, so the same inputs always produce byte-identical text.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from nutrition_rx.domain.catalog import SystemType
from nutrition_rx.domain.costs import CostBreakdown
from nutrition_rx.domain.dispensing import DispensingPlan
from nutrition_rx.domain.nutrition import NutritionSummary
from nutrition_rx.domain.prescription import (
    DoseUnit,
    EnteralAccess,
    InfusionMode,
    ParenteralAccess,
    Patient,
    PrescriptionDraft,
    Route,
)
from nutrition_rx.services.catalog import CatalogSnapshot
from nutrition_rx.services.routes import non_negative
from nutrition_rx.services.units import administered_volume, infusion_rate

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
RECORD_TEMPLATE = "record_note.j2"
UNKNOWN = "?"

_PT_BR = str.maketrans({",": ".", ".": ","})

ACCESS_LABELS = {
    EnteralAccess.SNE: "sonda nasoenteral",
    EnteralAccess.SOG: "sonda orogástrica",
    EnteralAccess.SOE: "sonda oroenteral",
    EnteralAccess.GTT: "gastrostomia",
    EnteralAccess.JST: "jejunostomia",
}

PARENTERAL_ACCESS_LABELS = {
    ParenteralAccess.CENTRAL: "central",
    ParenteralAccess.PERIPHERAL: "periférico",
    ParenteralAccess.PICC: "PICC",
}


def _round_half_up(value: float | Decimal, places: int) -> Decimal:
    step = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(step, rounding=ROUND_HALF_UP)


def decimal(value: float | Decimal, places: int) -> str:
    """Format a number with pt-BR separators: 1.234,5.

    Ties round away from zero, so 312.5 prints as 313.
    """
    rounded = _round_half_up(value, places)
    return f"{rounded:,.{places}f}".translate(_PT_BR)


def amount(value: float) -> str:
    """Format a volume or dose, dropping the decimal when it is whole."""
    rounded = _round_half_up(value, 1)
    return decimal(rounded, 0 if rounded == rounded.to_integral_value() else 1)


def build_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    """Jinja environment with the note's number filters registered."""
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )
    env.filters["whole"] = lambda value: decimal(value, 0)
    env.filters["grams"] = lambda value: decimal(value, 1)
    env.filters["money"] = lambda value: decimal(value, 2)
    env.filters["amount"] = amount
    return env


@lru_cache(maxsize=1)
def _default_environment() -> Environment:
    return build_environment()


@dataclass
class RecordTextRenderer:
    """Renders the chart note for a prescription."""

    environment: Environment = field(default_factory=_default_environment)
    template_name: str = RECORD_TEMPLATE

    def render(
        self,
        draft: PrescriptionDraft,
        catalog: CatalogSnapshot,
        patient: Patient,
        summary: NutritionSummary,
        plan: DispensingPlan | None,
        costs: CostBreakdown,
    ) -> str:
        """Return the note text without a trailing newline."""
        template = self.environment.get_template(self.template_name)
        text = template.render(
            enteral=_enteral_context(draft, catalog),
            oral=_oral_context(draft, catalog),
            parenteral=_parenteral_context(draft, summary),
            totals=summary.totals,
            per_kg=_per_kg_context(summary, patient),
            plan=plan,
            costs=costs,
        )
        return text.strip("\n")


def render_record_text(
    draft: PrescriptionDraft,
    catalog: CatalogSnapshot,
    patient: Patient,
    summary: NutritionSummary,
    plan: DispensingPlan | None,
    costs: CostBreakdown,
) -> str:
    """Render the chart note with the packaged template."""
    return RecordTextRenderer().render(draft, catalog, patient, summary, plan, costs)


def _enteral_context(draft: PrescriptionDraft, catalog: CatalogSnapshot) -> dict | None:
    if not draft.is_active(Route.ENTERAL):
        return None
    access = ACCESS_LABELS.get(draft.enteral_access, ACCESS_LABELS[EnteralAccess.SNE])
    mode = draft.infusion_mode
    method = "em bomba" if mode is InfusionMode.PUMP else "em modo gravitacional"
    formulas = []
    for line in draft.formula_lines:
        formula = catalog.formula(line.formula_id)
        if formula is None:
            continue
        item = {
            "name": formula.name,
            "method": method,
            "steps": line.schedule.count,
            "volume": non_negative(line.volume_per_administration),
        }
        if draft.system_type is SystemType.CLOSED and mode is not InfusionMode.BOLUS:
            item.update(
                kind="continuous",
                rate=_rate_text(line.rate, mode),
                hours=amount(line.duration_hours) if line.duration_hours else UNKNOWN,
                volume=administered_volume(line, draft.system_type, mode),
            )
        elif mode is InfusionMode.BOLUS:
            item.update(kind="bolus")
        else:
            step_rate = None
            if draft.step_duration_hours:
                step_rate = infusion_rate(
                    line.volume_per_administration, draft.step_duration_hours, mode
                )
            item.update(kind="steps", rate=_rate_text(step_rate, mode))
        formulas.append(item)

    modules = []
    for module_line in draft.module_lines:
        module = catalog.module(module_line.module_id)
        if module is None:
            continue
        modules.append(
            {
                "name": module.name,
                "quantity": non_negative(module_line.quantity_per_administration),
                "unit": "ml" if module_line.unit is DoseUnit.ML else "g",
                "times": module_line.schedule.count,
            }
        )

    hydration = None
    if draft.hydration is not None and draft.hydration.schedule.count:
        volume = non_negative(draft.hydration.volume_per_administration)
        if volume:
            hydration = {"volume": volume, "times": draft.hydration.schedule.count}

    return {
        "access": access,
        "formulas": formulas,
        "modules": modules,
        "hydration": hydration,
    }


def _oral_context(draft: PrescriptionDraft, catalog: CatalogSnapshot) -> dict | None:
    if not draft.is_active(Route.ORAL) or draft.oral is None:
        return None
    oral = draft.oral
    supplements = []
    for supplement in oral.supplements:
        formula = catalog.formula(supplement.formula_id)
        if formula is None:
            continue
        supplements.append(
            {
                "name": formula.name,
                "amount": non_negative(supplement.amount_per_administration),
                "times": supplement.meals.count,
                "meals": ", ".join(supplement.meals.labels()),
            }
        )
    modules = []
    for oral_module in oral.modules:
        module = catalog.module(oral_module.module_id)
        if module is None:
            continue
        quantity = oral_module.quantity_per_administration
        if quantity is None:
            quantity = module.reference_amount
        modules.append(
            {
                "name": module.name,
                "quantity": non_negative(quantity),
                "unit": oral_module.unit.value,
                "times": oral_module.meals.count,
                "meals": ", ".join(oral_module.meals.labels()),
            }
        )
    return {
        "kcal": non_negative(oral.estimated_kcal),
        "protein": non_negative(oral.estimated_protein_g),
        "supplements": supplements,
        "modules": modules,
    }


def _parenteral_context(
    draft: PrescriptionDraft, summary: NutritionSummary
) -> dict | None:
    record = draft.parenteral
    if not draft.is_active(Route.PARENTERAL) or record is None:
        return None
    metrics = summary.parenteral
    gir = metrics.glucose_infusion_rate_mg_kg_min if metrics else 0.0
    npc = metrics.non_protein_kcal_per_g_nitrogen if metrics else 0.0
    return {
        "access": PARENTERAL_ACCESS_LABELS.get(record.access),
        "aminoacids": non_negative(record.aminoacids_g),
        "lipids": non_negative(record.lipids_g),
        "glucose": non_negative(record.glucose_g),
        "hours": non_negative(record.infusion_hours),
        "gir": decimal(gir, 1) if gir else UNKNOWN,
        "npc": decimal(npc, 0) if npc else UNKNOWN,
    }


def _per_kg_context(summary: NutritionSummary, patient: Patient) -> dict[str, str]:
    weight = non_negative(patient.weight_kg)
    totals = summary.totals

    def per_kg(value: float, places: int) -> str:
        return decimal(value / weight, places) if weight > 0 else UNKNOWN

    protein_ideal = ""
    if summary.protein_per_kg_ideal_weight:
        protein_ideal = decimal(summary.protein_per_kg_ideal_weight, 2)
    return {
        "kcal": per_kg(totals.kcal, 1),
        "protein": per_kg(totals.protein_g, 2),
        "protein_ideal": protein_ideal,
        "carbs": per_kg(totals.carbs_g, 2),
        "fat": per_kg(totals.fat_g, 2),
        "free_water": per_kg(totals.free_water_ml, 1),
    }


def _rate_text(rate: float | None, mode: InfusionMode | None) -> str:
    unit = "ml/h" if mode is InfusionMode.PUMP else "gotas/min"
    if not rate:
        return f"{UNKNOWN} {unit}"
    return f"{amount(rate)} {unit}"
