"""Prescription draft records edited at the bedside."""

from dataclasses import dataclass, field
from enum import Enum, StrEnum

from nutrition_rx.domain.catalog import SystemType


class Route(StrEnum):
    """Nutritional therapy route."""

    ENTERAL = "enteral"
    ORAL = "oral"
    PARENTERAL = "parenteral"


class RouteCombination(Enum):
    """Valid sets of active routes; enteral is the only route that combines."""

    ENTERAL_ONLY = (Route.ENTERAL,)
    ENTERAL_PLUS_ORAL = (Route.ENTERAL, Route.ORAL)
    ENTERAL_PLUS_PARENTERAL = (Route.ENTERAL, Route.PARENTERAL)
    ENTERAL_PLUS_BOTH = (Route.ENTERAL, Route.ORAL, Route.PARENTERAL)
    ORAL_ONLY = (Route.ORAL,)
    PARENTERAL_ONLY = (Route.PARENTERAL,)

    @classmethod
    def from_flags(
        cls, *, oral: bool, enteral: bool, parenteral: bool
    ) -> "RouteCombination | None":
        """Build a combination from route flags; None when no route is active."""
        if not (oral or enteral or parenteral):
            return None
        wanted = {
            route
            for route, active in (
                (Route.ENTERAL, enteral),
                (Route.ORAL, oral),
                (Route.PARENTERAL, parenteral),
            )
            if active
        }
        for combination in cls:
            if set(combination.value) == wanted:
                return combination
        raise ValueError(
            "Oral and parenteral routes can only be combined with enteral therapy"
        )

    @property
    def routes(self) -> tuple[Route, ...]:
        """Active routes in calculation order."""
        return self.value

    def includes(self, route: Route) -> bool:
        """Return True when `route` is active in this combination."""
        return route in self.value


class InfusionMode(StrEnum):
    """How an enteral formula is administered."""

    PUMP = "pump"
    GRAVITY = "gravity"
    BOLUS = "bolus"


class EnteralAccess(StrEnum):
    """Enteral tube type."""

    SNE = "SNE"
    SOG = "SOG"
    SOE = "SOE"
    GTT = "GTT"
    JST = "JST"


class ParenteralAccess(StrEnum):
    """Venous access for parenteral nutrition."""

    CENTRAL = "central"
    PERIPHERAL = "peripheral"
    PICC = "picc"


class DoseUnit(StrEnum):
    """Unit of a module dose."""

    ML = "ml"
    G = "g"


class ScheduleSlot(StrEnum):
    """Hourly administration slots."""

    H00 = "00:00"
    H01 = "01:00"
    H02 = "02:00"
    H03 = "03:00"
    H04 = "04:00"
    H05 = "05:00"
    H06 = "06:00"
    H07 = "07:00"
    H08 = "08:00"
    H09 = "09:00"
    H10 = "10:00"
    H11 = "11:00"
    H12 = "12:00"
    H13 = "13:00"
    H14 = "14:00"
    H15 = "15:00"
    H16 = "16:00"
    H17 = "17:00"
    H18 = "18:00"
    H19 = "19:00"
    H20 = "20:00"
    H21 = "21:00"
    H22 = "22:00"
    H23 = "23:00"

    @classmethod
    def from_label(cls, label: str) -> "ScheduleSlot":
        """Parse a slot label such as '9:00' or '09:00'."""
        cleaned = label.strip()
        hour, _, minutes = cleaned.partition(":")
        if hour.isdigit() and minutes in {"", "00"}:
            try:
                return cls(f"{int(hour):02d}:00")
            except ValueError:
                pass
        raise ValueError(f"Unknown schedule slot: {label!r}")


class MealSlot(StrEnum):
    """Oral meal slots."""

    BREAKFAST = "breakfast"
    MID_MORNING = "mid_morning"
    LUNCH = "lunch"
    AFTERNOON = "afternoon"
    DINNER = "dinner"
    SUPPER = "supper"

    @property
    def slot(self) -> ScheduleSlot:
        """Clock slot served by this meal."""
        return _MEAL_TIMES[self]

    @property
    def label(self) -> str:
        """pt-BR meal name."""
        return _MEAL_LABELS[self]


_MEAL_TIMES = {
    MealSlot.BREAKFAST: ScheduleSlot.H06,
    MealSlot.MID_MORNING: ScheduleSlot.H09,
    MealSlot.LUNCH: ScheduleSlot.H12,
    MealSlot.AFTERNOON: ScheduleSlot.H15,
    MealSlot.DINNER: ScheduleSlot.H18,
    MealSlot.SUPPER: ScheduleSlot.H21,
}

_MEAL_LABELS = {
    MealSlot.BREAKFAST: "Desjejum",
    MealSlot.MID_MORNING: "Colação",
    MealSlot.LUNCH: "Almoço",
    MealSlot.AFTERNOON: "Merenda",
    MealSlot.DINNER: "Jantar",
    MealSlot.SUPPER: "Ceia",
}


def _has_other(other: str | None) -> bool:
    return bool(other and other.strip())


@dataclass(frozen=True)
class Schedule:
    """Set of hourly slots plus an optional free-text extra time."""

    slots: frozenset[ScheduleSlot] = frozenset()
    other: str | None = None

    @classmethod
    def of(cls, *labels: str, other: str | None = None) -> "Schedule":
        """Build a schedule from slot labels."""
        return cls(
            slots=frozenset(ScheduleSlot.from_label(label) for label in labels),
            other=other,
        )

    @property
    def count(self) -> int:
        """Number of administrations per day."""
        return len(self.slots) + (1 if _has_other(self.other) else 0)

    def labels(self) -> list[str]:
        """Sorted slot labels, free-text entry last."""
        labels = sorted(slot.value for slot in self.slots)
        if _has_other(self.other):
            labels.append(str(self.other).strip())
        return labels


@dataclass(frozen=True)
class MealSchedule:
    """Set of meal slots plus an optional free-text extra time."""

    meals: frozenset[MealSlot] = frozenset()
    other: str | None = None

    @property
    def count(self) -> int:
        """Number of administrations per day."""
        return len(self.meals) + (1 if _has_other(self.other) else 0)

    def labels(self) -> list[str]:
        """Meal names in serving order, free-text entry last."""
        labels = [meal.label for meal in MealSlot if meal in self.meals]
        if _has_other(self.other):
            labels.append(str(self.other).strip())
        return labels


@dataclass(frozen=True)
class FormulaLine:
    """Enteral formula order.

    Closed pump/gravity lines use `rate` (ml/h or drops/min) and
    `duration_hours`; open and bolus lines use the volume per administration.
    """

    formula_id: str
    volume_per_administration: float = 0.0
    schedule: Schedule = field(default_factory=Schedule)
    rate: float | None = None
    duration_hours: float | None = None


@dataclass(frozen=True)
class ModuleLine:
    """Enteral module order."""

    module_id: str
    quantity_per_administration: float
    unit: DoseUnit = DoseUnit.G
    schedule: Schedule = field(default_factory=Schedule)


@dataclass(frozen=True)
class HydrationLine:
    """Free water flushes."""

    volume_per_administration: float
    schedule: Schedule = field(default_factory=Schedule)


@dataclass(frozen=True)
class OralSupplementLine:
    """Oral nutritional supplement served with meals."""

    formula_id: str
    meals: MealSchedule = field(default_factory=MealSchedule)
    amount_per_administration: float = 200.0


@dataclass(frozen=True)
class OralModuleLine:
    """Module added to oral meals; no quantity means one reference dose."""

    module_id: str
    meals: MealSchedule = field(default_factory=MealSchedule)
    quantity_per_administration: float | None = None
    unit: DoseUnit = DoseUnit.G


@dataclass(frozen=True)
class OralRecord:
    """Oral diet estimate with supplements and modules."""

    estimated_kcal: float = 0.0
    estimated_protein_g: float = 0.0
    supplements: tuple[OralSupplementLine, ...] = ()
    modules: tuple[OralModuleLine, ...] = ()


@dataclass(frozen=True)
class ParenteralRecord:
    """Parenteral substrates in grams per day."""

    aminoacids_g: float = 0.0
    lipids_g: float = 0.0
    glucose_g: float = 0.0
    infusion_hours: float = 24.0
    access: ParenteralAccess | None = None


@dataclass
class PrescriptionDraft:
    """Prescription under edit; the engine only ever reads it."""

    routes: RouteCombination | None = None
    enteral_access: EnteralAccess | None = None
    system_type: SystemType | None = None
    infusion_mode: InfusionMode | None = None
    formula_lines: list[FormulaLine] = field(default_factory=list)
    module_lines: list[ModuleLine] = field(default_factory=list)
    hydration: HydrationLine | None = None
    oral: OralRecord | None = None
    parenteral: ParenteralRecord | None = None
    equipment_volume_ml: float = 0.0
    bag_quantities: dict[ScheduleSlot, int] = field(default_factory=dict)
    step_duration_hours: float | None = None

    def is_active(self, route: Route) -> bool:
        """Return True when `route` takes part in this prescription."""
        return self.routes is not None and self.routes.includes(route)


@dataclass(frozen=True)
class Patient:
    """Anthropometry used for per-kilogram metrics; height in centimetres."""

    weight_kg: float | None = None
    height_cm: float | None = None
    protein_target_g_per_kg: float | None = None

    @property
    def bmi(self) -> float | None:
        """Body mass index, None when weight or height is missing."""
        if not self.weight_kg or not self.height_cm:
            return None
        if self.weight_kg <= 0 or self.height_cm <= 0:
            return None
        height_m = self.height_cm / 100
        return self.weight_kg / (height_m * height_m)

    @property
    def ideal_weight_kg(self) -> float | None:
        """Reference weight at BMI 25."""
        if not self.height_cm or self.height_cm <= 0:
            return None
        height_m = self.height_cm / 100
        return 25 * height_m * height_m
