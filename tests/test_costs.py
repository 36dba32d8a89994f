"""Tests for the cost engine."""

import pytest

from nutrition_rx.domain.catalog import SystemType
from nutrition_rx.domain.costs import CostBreakdown, CostConfig, NursingTimes
from nutrition_rx.domain.prescription import (
    FormulaLine,
    HydrationLine,
    InfusionMode,
    MealSchedule,
    MealSlot,
    ModuleLine,
    OralRecord,
    OralSupplementLine,
    PrescriptionDraft,
    RouteCombination,
    Schedule,
)
from nutrition_rx.services.catalog import CatalogSnapshot
from nutrition_rx.services.costs import compute_costs
from tests.conftest import closed_pump_draft

THREE_TIMES = Schedule.of("06:00", "12:00", "18:00")


def test_open_bolus_costs(catalog: CatalogSnapshot, cost_config: CostConfig) -> None:
    draft = PrescriptionDraft(
        routes=RouteCombination.ENTERAL_ONLY,
        system_type=SystemType.OPEN,
        infusion_mode=InfusionMode.BOLUS,
        formula_lines=[
            FormulaLine(
                formula_id="standard-10",
                volume_per_administration=200.0,
                schedule=THREE_TIMES,
            )
        ],
        module_lines=[
            ModuleLine(
                module_id="protein-mod",
                quantity_per_administration=10.0,
                schedule=THREE_TIMES,
            )
        ],
        hydration=HydrationLine(
            volume_per_administration=100.0,
            schedule=Schedule.of("08:00", "14:00", "20:00", "02:00"),
        ),
    )

    costs = compute_costs(draft, catalog, cost_config)

    assert costs.formula_cost == pytest.approx(60.0)
    assert costs.module_cost == pytest.approx(7.5)
    assert costs.nursing_time_seconds == pytest.approx(600.0)
    assert costs.nursing_time_minutes == pytest.approx(10.0)
    assert costs.nursing_cost == pytest.approx(6.0)
    assert costs.total_cost == pytest.approx(83.5)


def test_closed_system_is_billed_per_pack(
    catalog: CatalogSnapshot, cost_config: CostConfig
) -> None:
    costs = compute_costs(closed_pump_draft(), catalog, cost_config)

    assert costs.formula_cost == pytest.approx(85.0)
    assert costs.nursing_time_seconds == pytest.approx(300.0)
    assert costs.nursing_cost == pytest.approx(3.0)
    assert costs.total_cost == pytest.approx(98.0)


def test_dead_volume_can_add_a_pack(
    catalog: CatalogSnapshot, cost_config: CostConfig
) -> None:
    draft = closed_pump_draft()
    draft.equipment_volume_ml = 15.0

    costs = compute_costs(draft, catalog, cost_config)

    assert costs.formula_cost == pytest.approx(170.0)


def test_oral_supplements_are_material_only(
    catalog: CatalogSnapshot, cost_config: CostConfig
) -> None:
    draft = PrescriptionDraft(
        routes=RouteCombination.ORAL_ONLY,
        oral=OralRecord(
            supplements=(
                OralSupplementLine(
                    formula_id="oral-supl",
                    meals=MealSchedule(
                        meals=frozenset({MealSlot.LUNCH, MealSlot.DINNER})
                    ),
                ),
            )
        ),
    )

    costs = compute_costs(draft, catalog, cost_config)

    assert costs.formula_cost == pytest.approx(24.0)
    assert costs.nursing_time_seconds == 0.0
    assert costs.total_cost == pytest.approx(34.0)


def test_no_routes_costs_nothing(
    catalog: CatalogSnapshot, cost_config: CostConfig
) -> None:
    assert compute_costs(PrescriptionDraft(), catalog, cost_config) == CostBreakdown()


def test_missing_catalog_entries_cost_nothing(
    catalog: CatalogSnapshot, cost_config: CostConfig
) -> None:
    costs = compute_costs(closed_pump_draft(formula_id="retired"), catalog, cost_config)

    assert costs.material_cost == 0.0
    assert costs.nursing_time_seconds == pytest.approx(300.0)


def test_nursing_time_lookup() -> None:
    times = NursingTimes(
        open_pump=1, open_gravity=2, closed_pump=3, closed_gravity=4, bolus=5
    )

    assert times.seconds_per_event(SystemType.OPEN, InfusionMode.PUMP) == 1
    assert times.seconds_per_event(SystemType.OPEN, InfusionMode.GRAVITY) == 2
    assert times.seconds_per_event(SystemType.OPEN, InfusionMode.BOLUS) == 5
    assert times.seconds_per_event(SystemType.CLOSED, InfusionMode.PUMP) == 3
    assert times.seconds_per_event(SystemType.CLOSED, InfusionMode.GRAVITY) == 4
    assert times.seconds_per_event(SystemType.CLOSED, InfusionMode.BOLUS) == 4
    assert times.seconds_per_event(None, None) == 5
