"""Cost configuration and results."""

from dataclasses import dataclass, field
from typing import ClassVar

from nutrition_rx.domain.catalog import SystemType
from nutrition_rx.domain.prescription import InfusionMode


@dataclass(frozen=True)
class NursingTimes:
    """Nursing seconds per administration event."""

    open_pump: float = 0.0
    open_gravity: float = 0.0
    closed_pump: float = 0.0
    closed_gravity: float = 0.0
    bolus: float = 0.0

    def seconds_per_event(
        self, system_type: SystemType | None, infusion_mode: InfusionMode | None
    ) -> float:
        """Look up the time for one formula event of the given system and mode.

        Closed packs hang on a pump or a gravity line; anything else on a
        closed system is timed as gravity.
        """
        if system_type is SystemType.CLOSED:
            if infusion_mode is InfusionMode.PUMP:
                return self.closed_pump
            return self.closed_gravity
        if infusion_mode is InfusionMode.PUMP:
            return self.open_pump
        if infusion_mode is InfusionMode.GRAVITY:
            return self.open_gravity
        return self.bolus


@dataclass(frozen=True)
class CostConfig:
    """Rates supplied by the hospital's settings."""

    nursing_times: NursingTimes = field(default_factory=NursingTimes)
    hourly_rate: float = 0.0
    indirect_labor_cost: float = 0.0


@dataclass(frozen=True)
class CostBreakdown:
    """Daily cost of a prescription."""

    derived_fields: ClassVar[tuple[str, ...]] = (
        "material_cost",
        "nursing_time_minutes",
        "total_cost",
    )

    formula_cost: float = 0.0
    module_cost: float = 0.0
    nursing_time_seconds: float = 0.0
    nursing_cost: float = 0.0
    indirect_labor_cost: float = 0.0

    @property
    def material_cost(self) -> float:
        return self.formula_cost + self.module_cost

    @property
    def nursing_time_minutes(self) -> float:
        return self.nursing_time_seconds / 60

    @property
    def total_cost(self) -> float:
        return self.material_cost + self.nursing_cost + self.indirect_labor_cost
