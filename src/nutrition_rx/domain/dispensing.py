"""Dispensing records for pack and bottle requisitions."""

from dataclasses import dataclass, field
from typing import ClassVar

from nutrition_rx.domain.prescription import ScheduleSlot

DEFAULT_PACK_SIZE_ML = 1000.0


@dataclass(frozen=True)
class DispensingPlan:
    """Closed-system pack requisition for one day."""

    derived_fields: ClassVar[tuple[str, ...]] = (
        "packs_scheduled",
        "is_fully_scheduled",
    )

    formula_id: str
    total_volume_for_patient: float
    equipment_dead_volume: float
    total_volume_to_request: float
    pack_size: float
    number_of_packs_required: int
    bag_quantities: dict[ScheduleSlot, int] = field(default_factory=dict)

    @property
    def packs_scheduled(self) -> int:
        """Packs the clinician distributed across delivery slots."""
        return sum(self.bag_quantities.values())

    @property
    def is_fully_scheduled(self) -> bool:
        """True when the scheduled packs match the requirement."""
        return self.packs_scheduled == self.number_of_packs_required


@dataclass(frozen=True)
class BottleCount:
    """Number of bottles of one size."""

    size_ml: int
    quantity: int


@dataclass(frozen=True)
class BottleAllocation:
    """Open-system bottles needed per administration of a formula line."""

    derived_fields: ClassVar[tuple[str, ...]] = ("bottles_per_day",)

    formula_id: str
    volume_per_administration: float
    administrations_per_day: int
    bottles: tuple[BottleCount, ...]

    @property
    def bottles_per_day(self) -> int:
        """Bottles filled over a day."""
        per_administration = sum(bottle.quantity for bottle in self.bottles)
        return per_administration * self.administrations_per_day
