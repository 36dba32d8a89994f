"""Catalog reference data: enteral formulas and modules."""

from dataclasses import dataclass, field
from enum import StrEnum

DEFAULT_WATER_CONTENT_PER_100ML = 80.0


class SystemType(StrEnum):
    """Enteral delivery system."""

    OPEN = "open"
    CLOSED = "closed"
    BOTH = "both"

    def supports(self, system: "SystemType") -> bool:
        """Return True when a formula of this type can run on `system`."""
        return self is SystemType.BOTH or self is system


@dataclass(frozen=True)
class FormulaComposition:
    """Nutrient composition per 100 ml of formula."""

    calories_per_100ml: float
    protein_per_100ml: float
    carb_per_100ml: float = 0.0
    fat_per_100ml: float = 0.0
    fiber_per_100ml: float = 0.0
    sodium: float = 0.0
    potassium: float = 0.0
    calcium: float = 0.0
    phosphorus: float = 0.0
    water_content_per_100ml: float | None = None
    density: float | None = None

    @property
    def kcal_per_ml(self) -> float:
        """Caloric density, falling back to kcal/100ml when none is declared."""
        if self.density is not None:
            return self.density
        return self.calories_per_100ml / 100

    @property
    def water_fraction(self) -> float:
        """Fraction of each ml that is free water."""
        if self.water_content_per_100ml is None:
            return DEFAULT_WATER_CONTENT_PER_100ML / 100
        return self.water_content_per_100ml / 100


@dataclass(frozen=True)
class ResidueInfo:
    """Packaging residue in grams per 1000 ml."""

    plastic: float = 0.0
    paper: float = 0.0
    metal: float = 0.0
    glass: float = 0.0


@dataclass(frozen=True)
class Formula:
    """Enteral or oral formula from the catalog."""

    id: str
    name: str
    manufacturer: str
    system_type: SystemType
    composition: FormulaComposition
    presentations: tuple[float, ...] = ()
    billing_price: float = 0.0
    residue: ResidueInfo = field(default_factory=ResidueInfo)


@dataclass(frozen=True)
class Module:
    """Nutritional module; nutrient values are per reference dose."""

    id: str
    name: str
    density: float
    reference_amount: float
    reference_times_per_day: int = 1
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    sodium: float = 0.0
    potassium: float = 0.0
    fiber: float = 0.0
    free_water: float = 0.0
    billing_price: float = 0.0
