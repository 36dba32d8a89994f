"""Nutrition subtotals and summaries."""

from dataclasses import dataclass, field
from typing import ClassVar

from nutrition_rx.domain.prescription import Route
from nutrition_rx.domain.warnings import DataIntegrityWarning, ValidationWarning


@dataclass(frozen=True)
class NutrientTotals:
    """Daily nutrient amounts."""

    kcal: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    free_water_ml: float = 0.0
    sodium_mg: float = 0.0
    potassium_mg: float = 0.0
    calcium_mg: float = 0.0
    phosphorus_mg: float = 0.0

    def __add__(self, other: "NutrientTotals") -> "NutrientTotals":
        return NutrientTotals(
            kcal=self.kcal + other.kcal,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
            fiber_g=self.fiber_g + other.fiber_g,
            free_water_ml=self.free_water_ml + other.free_water_ml,
            sodium_mg=self.sodium_mg + other.sodium_mg,
            potassium_mg=self.potassium_mg + other.potassium_mg,
            calcium_mg=self.calcium_mg + other.calcium_mg,
            phosphorus_mg=self.phosphorus_mg + other.phosphorus_mg,
        )


@dataclass(frozen=True)
class Residue:
    """Packaging residue in grams per day."""

    derived_fields: ClassVar[tuple[str, ...]] = ("total",)

    plastic: float = 0.0
    paper: float = 0.0
    metal: float = 0.0
    glass: float = 0.0

    @property
    def total(self) -> float:
        """Total residue mass."""
        return self.plastic + self.paper + self.metal + self.glass

    def __add__(self, other: "Residue") -> "Residue":
        return Residue(
            plastic=self.plastic + other.plastic,
            paper=self.paper + other.paper,
            metal=self.metal + other.metal,
            glass=self.glass + other.glass,
        )


@dataclass(frozen=True)
class RouteSubtotal:
    """Partial nutrition produced by one route calculator."""

    route: Route
    nutrients: NutrientTotals = field(default_factory=NutrientTotals)
    residue: Residue = field(default_factory=Residue)
    volume_ml: float = 0.0
    warnings: tuple[DataIntegrityWarning, ...] = ()

    @property
    def kcal(self) -> float:
        return self.nutrients.kcal

    @property
    def protein_g(self) -> float:
        return self.nutrients.protein_g

    @property
    def free_water_ml(self) -> float:
        return self.nutrients.free_water_ml


@dataclass(frozen=True)
class ParenteralMetrics:
    """Derived parenteral indicators."""

    glucose_infusion_rate_mg_kg_min: float = 0.0
    non_protein_kcal_per_g_nitrogen: float = 0.0


@dataclass(frozen=True)
class NutritionSummary:
    """Daily totals across all active routes."""

    total_kcal: float = 0.0
    total_protein_g: float = 0.0
    total_free_water_ml: float = 0.0
    totals: NutrientTotals = field(default_factory=NutrientTotals)
    kcal_by_route: dict[Route, float] = field(default_factory=dict)
    residue: Residue = field(default_factory=Residue)
    residue_by_route: dict[Route, Residue] = field(default_factory=dict)
    enteral_volume_ml: float = 0.0
    kcal_per_kg: float = 0.0
    protein_per_kg: float = 0.0
    free_water_ml_per_kg: float = 0.0
    protein_per_kg_ideal_weight: float = 0.0
    bmi: float | None = None
    ideal_weight_kg: float | None = None
    parenteral: ParenteralMetrics | None = None
    warnings: tuple[DataIntegrityWarning | ValidationWarning, ...] = ()
