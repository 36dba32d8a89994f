"""Tests for infusion unit conversions."""

import math

import pytest

from nutrition_rx.domain.catalog import SystemType
from nutrition_rx.domain.prescription import FormulaLine, InfusionMode, Schedule
from nutrition_rx.services.units import (
    administered_volume,
    bolus_volume,
    gravity_volume,
    infusion_rate,
    pump_volume,
)


@pytest.mark.parametrize(
    ("rate", "hours"), [(50.0, 20.0), (62.5, 16.0), (1.0, 24.0), (300.0, 0.5)]
)
def test_pump_volume_is_rate_times_duration(rate: float, hours: float) -> None:
    assert pump_volume(rate, hours) == pytest.approx(rate * hours)


@pytest.mark.parametrize(("drops", "hours"), [(40.0, 10.0), (21.0, 24.0), (7.0, 3.0)])
def test_gravity_volume_uses_twenty_drops_per_ml(drops: float, hours: float) -> None:
    assert gravity_volume(drops, hours) == pytest.approx(drops / 20 * 60 * hours)


def test_gravity_volume_example() -> None:
    assert gravity_volume(40, 10) == pytest.approx(1200.0)


@pytest.mark.parametrize("bad", [None, 0, -5.0, math.nan, math.inf])
def test_missing_or_invalid_inputs_give_zero(bad) -> None:  # type: ignore[no-untyped-def]
    assert pump_volume(bad, 10) == 0.0
    assert pump_volume(10, bad) == 0.0
    assert gravity_volume(bad, 10) == 0.0
    assert bolus_volume(bad, 3) == 0.0


def test_bolus_volume_multiplies_by_administrations() -> None:
    assert bolus_volume(200, 3) == 600.0
    assert bolus_volume(200, 0) == 0.0


def test_closed_pump_line_uses_rate_and_duration() -> None:
    line = FormulaLine(formula_id="f", rate=50.0, duration_hours=20.0)

    volume = administered_volume(line, SystemType.CLOSED, InfusionMode.PUMP)

    assert volume == pytest.approx(1000.0)


def test_closed_gravity_line_uses_drops() -> None:
    line = FormulaLine(formula_id="f", rate=40.0, duration_hours=10.0)

    volume = administered_volume(line, SystemType.CLOSED, InfusionMode.GRAVITY)

    assert volume == pytest.approx(1200.0)


def test_open_line_uses_volume_per_administration() -> None:
    line = FormulaLine(
        formula_id="f",
        volume_per_administration=200.0,
        schedule=Schedule.of("06:00", "12:00", "18:00"),
        rate=80.0,
        duration_hours=20.0,
    )

    assert administered_volume(line, SystemType.OPEN, InfusionMode.PUMP) == 600.0
    assert administered_volume(line, SystemType.CLOSED, InfusionMode.BOLUS) == 600.0


def test_infusion_rate_reverses_conversions() -> None:
    assert infusion_rate(1000, 20, InfusionMode.PUMP) == pytest.approx(50.0)
    assert infusion_rate(1200, 10, InfusionMode.GRAVITY) == pytest.approx(40.0)
    assert infusion_rate(1000, 0, InfusionMode.PUMP) == 0.0
    assert infusion_rate(1000, None, InfusionMode.GRAVITY) == 0.0
    assert infusion_rate(1000, 20, InfusionMode.BOLUS) == 0.0
