"""Tests for prescription draft records."""

import pytest

from nutrition_rx.domain.catalog import SystemType
from nutrition_rx.domain.prescription import (
    MealSchedule,
    MealSlot,
    Patient,
    PrescriptionDraft,
    Route,
    RouteCombination,
    Schedule,
    ScheduleSlot,
)


@pytest.mark.parametrize(
    ("flags", "expected"),
    [
        ({"enteral": True}, RouteCombination.ENTERAL_ONLY),
        ({"enteral": True, "oral": True}, RouteCombination.ENTERAL_PLUS_ORAL),
        (
            {"enteral": True, "parenteral": True},
            RouteCombination.ENTERAL_PLUS_PARENTERAL,
        ),
        (
            {"enteral": True, "oral": True, "parenteral": True},
            RouteCombination.ENTERAL_PLUS_BOTH,
        ),
        ({"oral": True}, RouteCombination.ORAL_ONLY),
        ({"parenteral": True}, RouteCombination.PARENTERAL_ONLY),
    ],
)
def test_route_combination_from_flags(flags, expected) -> None:  # type: ignore[no-untyped-def]
    resolved = {"oral": False, "enteral": False, "parenteral": False, **flags}
    assert RouteCombination.from_flags(**resolved) is expected


def test_route_combination_without_routes_is_none() -> None:
    assert (
        RouteCombination.from_flags(oral=False, enteral=False, parenteral=False) is None
    )


def test_oral_and_parenteral_need_enteral() -> None:
    with pytest.raises(ValueError):
        RouteCombination.from_flags(oral=True, enteral=False, parenteral=True)


def test_draft_route_activity() -> None:
    draft = PrescriptionDraft(routes=RouteCombination.ENTERAL_PLUS_ORAL)

    assert draft.is_active(Route.ENTERAL)
    assert draft.is_active(Route.ORAL)
    assert not draft.is_active(Route.PARENTERAL)
    assert not PrescriptionDraft().is_active(Route.ENTERAL)


def test_schedule_slot_labels() -> None:
    assert ScheduleSlot.from_label("9:00") is ScheduleSlot.H09
    assert ScheduleSlot.from_label(" 21:00 ") is ScheduleSlot.H21
    assert ScheduleSlot.from_label("6") is ScheduleSlot.H06


@pytest.mark.parametrize("label", ["24:00", "09:30", "noon", ""])
def test_schedule_slot_rejects_unknown_labels(label: str) -> None:
    with pytest.raises(ValueError):
        ScheduleSlot.from_label(label)


def test_schedule_other_counts_as_administration() -> None:
    schedule = Schedule.of("06:00", "12:00", other="after dialysis")

    assert schedule.count == 3
    assert schedule.labels() == ["06:00", "12:00", "after dialysis"]
    assert Schedule.of("06:00", other="   ").count == 1


def test_schedule_duplicates_collapse() -> None:
    assert Schedule.of("06:00", "6:00").count == 1


def test_meal_schedule_labels_follow_meal_order() -> None:
    meals = MealSchedule(
        meals=frozenset({MealSlot.SUPPER, MealSlot.BREAKFAST}), other="22h"
    )

    assert meals.count == 3
    assert meals.labels() == ["Desjejum", "Ceia", "22h"]
    assert MealSlot.LUNCH.slot is ScheduleSlot.H12


def test_patient_bmi_and_ideal_weight() -> None:
    patient = Patient(weight_kg=120.0, height_cm=170.0)

    assert patient.bmi == pytest.approx(120 / 1.7**2)
    assert patient.ideal_weight_kg == pytest.approx(72.25)


def test_patient_without_anthropometry() -> None:
    assert Patient().bmi is None
    assert Patient().ideal_weight_kg is None
    assert Patient(weight_kg=0, height_cm=170).bmi is None


def test_system_type_support() -> None:
    assert SystemType.BOTH.supports(SystemType.OPEN)
    assert SystemType.CLOSED.supports(SystemType.CLOSED)
    assert not SystemType.CLOSED.supports(SystemType.OPEN)
