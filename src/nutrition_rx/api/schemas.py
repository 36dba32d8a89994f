"""Pydantic models for prescription evaluation payloads."""

from pydantic import BaseModel, Field, field_validator, model_validator

from nutrition_rx.domain.catalog import SystemType
from nutrition_rx.domain.prescription import (
    DoseUnit,
    EnteralAccess,
    FormulaLine,
    HydrationLine,
    InfusionMode,
    MealSchedule,
    MealSlot,
    ModuleLine,
    OralModuleLine,
    OralRecord,
    OralSupplementLine,
    ParenteralAccess,
    ParenteralRecord,
    Patient,
    PrescriptionDraft,
    RouteCombination,
    Schedule,
    ScheduleSlot,
)

MAX_MODULE_LINES = 3
MAX_SUPPLEMENT_LINES = 3


class ScheduleIn(BaseModel):
    """Hourly slots such as "06:00" plus an optional free-text time."""

    slots: list[str] = Field(default_factory=list)
    other: str | None = None

    @field_validator("slots")
    @classmethod
    def _known_slots(cls, value: list[str]) -> list[str]:
        return [ScheduleSlot.from_label(label).value for label in value]

    def to_domain(self) -> Schedule:
        return Schedule.of(*self.slots, other=self.other)


class MealScheduleIn(BaseModel):
    """Meal slots plus an optional free-text time."""

    meals: list[MealSlot] = Field(default_factory=list)
    other: str | None = None

    def to_domain(self) -> MealSchedule:
        return MealSchedule(meals=frozenset(self.meals), other=self.other)


class PatientIn(BaseModel):
    """Patient anthropometry; height in centimetres."""

    weight_kg: float | None = None
    height_cm: float | None = None
    protein_target_g_per_kg: float | None = None

    def to_domain(self) -> Patient:
        return Patient(
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            protein_target_g_per_kg=self.protein_target_g_per_kg,
        )


class RouteFlagsIn(BaseModel):
    """Active route flags."""

    oral: bool = False
    enteral: bool = False
    parenteral: bool = False

    @model_validator(mode="after")
    def _valid_combination(self) -> "RouteFlagsIn":
        self.to_domain()
        return self

    def to_domain(self) -> RouteCombination | None:
        return RouteCombination.from_flags(
            oral=self.oral, enteral=self.enteral, parenteral=self.parenteral
        )


class FormulaLineIn(BaseModel):
    formula_id: str
    volume_per_administration: float = 0.0
    schedule: ScheduleIn = Field(default_factory=ScheduleIn)
    rate: float | None = None
    duration_hours: float | None = None

    def to_domain(self) -> FormulaLine:
        return FormulaLine(
            formula_id=self.formula_id,
            volume_per_administration=self.volume_per_administration,
            schedule=self.schedule.to_domain(),
            rate=self.rate,
            duration_hours=self.duration_hours,
        )


class ModuleLineIn(BaseModel):
    module_id: str
    quantity_per_administration: float
    unit: DoseUnit = DoseUnit.G
    schedule: ScheduleIn = Field(default_factory=ScheduleIn)

    def to_domain(self) -> ModuleLine:
        return ModuleLine(
            module_id=self.module_id,
            quantity_per_administration=self.quantity_per_administration,
            unit=self.unit,
            schedule=self.schedule.to_domain(),
        )


class HydrationIn(BaseModel):
    volume_per_administration: float
    schedule: ScheduleIn = Field(default_factory=ScheduleIn)

    def to_domain(self) -> HydrationLine:
        return HydrationLine(
            volume_per_administration=self.volume_per_administration,
            schedule=self.schedule.to_domain(),
        )


class EnteralIn(BaseModel):
    """Enteral therapy fields."""

    access: EnteralAccess | None = None
    system_type: SystemType | None = None
    infusion_mode: InfusionMode | None = None
    formulas: list[FormulaLineIn] = Field(default_factory=list)
    modules: list[ModuleLineIn] = Field(
        default_factory=list, max_length=MAX_MODULE_LINES
    )
    hydration: HydrationIn | None = None
    equipment_volume_ml: float = 0.0
    bag_quantities: dict[str, int] = Field(default_factory=dict)
    step_duration_hours: float | None = None

    @field_validator("system_type")
    @classmethod
    def _single_system(cls, value: SystemType | None) -> SystemType | None:
        if value is SystemType.BOTH:
            raise ValueError("A prescription runs on either an open or a closed system")
        return value

    @field_validator("bag_quantities")
    @classmethod
    def _known_bag_slots(cls, value: dict[str, int]) -> dict[str, int]:
        return {
            ScheduleSlot.from_label(label).value: count
            for label, count in value.items()
        }


class OralSupplementIn(BaseModel):
    formula_id: str
    meals: MealScheduleIn = Field(default_factory=MealScheduleIn)
    amount_per_administration: float | None = None

    def to_domain(self) -> OralSupplementLine:
        if self.amount_per_administration is None:
            return OralSupplementLine(
                formula_id=self.formula_id, meals=self.meals.to_domain()
            )
        return OralSupplementLine(
            formula_id=self.formula_id,
            meals=self.meals.to_domain(),
            amount_per_administration=self.amount_per_administration,
        )


class OralModuleIn(BaseModel):
    module_id: str
    meals: MealScheduleIn = Field(default_factory=MealScheduleIn)
    quantity_per_administration: float | None = None
    unit: DoseUnit = DoseUnit.G

    def to_domain(self) -> OralModuleLine:
        return OralModuleLine(
            module_id=self.module_id,
            meals=self.meals.to_domain(),
            quantity_per_administration=self.quantity_per_administration,
            unit=self.unit,
        )


class OralIn(BaseModel):
    """Oral diet estimate with supplements and modules."""

    estimated_kcal: float = 0.0
    estimated_protein_g: float = 0.0
    supplements: list[OralSupplementIn] = Field(
        default_factory=list, max_length=MAX_SUPPLEMENT_LINES
    )
    modules: list[OralModuleIn] = Field(
        default_factory=list, max_length=MAX_MODULE_LINES
    )

    def to_domain(self) -> OralRecord:
        return OralRecord(
            estimated_kcal=self.estimated_kcal,
            estimated_protein_g=self.estimated_protein_g,
            supplements=tuple(line.to_domain() for line in self.supplements),
            modules=tuple(line.to_domain() for line in self.modules),
        )


class ParenteralIn(BaseModel):
    """Parenteral substrates in grams per day."""

    aminoacids_g: float = 0.0
    lipids_g: float = 0.0
    glucose_g: float = 0.0
    infusion_hours: float = 24.0
    access: ParenteralAccess | None = None

    def to_domain(self) -> ParenteralRecord:
        return ParenteralRecord(
            aminoacids_g=self.aminoacids_g,
            lipids_g=self.lipids_g,
            glucose_g=self.glucose_g,
            infusion_hours=self.infusion_hours,
            access=self.access,
        )


class PrescriptionEvaluationRequest(BaseModel):
    """Draft and patient to evaluate."""

    patient: PatientIn = Field(default_factory=PatientIn)
    routes: RouteFlagsIn = Field(default_factory=RouteFlagsIn)
    enteral: EnteralIn | None = None
    oral: OralIn | None = None
    parenteral: ParenteralIn | None = None

    def to_draft(self) -> PrescriptionDraft:
        """Build the engine draft from the payload."""
        draft = PrescriptionDraft(
            routes=self.routes.to_domain(),
            oral=self.oral.to_domain() if self.oral else None,
            parenteral=self.parenteral.to_domain() if self.parenteral else None,
        )
        enteral = self.enteral
        if enteral is not None:
            draft.enteral_access = enteral.access
            draft.system_type = enteral.system_type
            draft.infusion_mode = enteral.infusion_mode
            draft.formula_lines = [line.to_domain() for line in enteral.formulas]
            draft.module_lines = [line.to_domain() for line in enteral.modules]
            if enteral.hydration is not None:
                draft.hydration = enteral.hydration.to_domain()
            draft.equipment_volume_ml = enteral.equipment_volume_ml
            draft.bag_quantities = {
                ScheduleSlot(label): count
                for label, count in enteral.bag_quantities.items()
            }
            draft.step_duration_hours = enteral.step_duration_hours
        return draft
