"""Infusion unit conversions to administered volume per day."""

import math

from nutrition_rx.domain.catalog import SystemType
from nutrition_rx.domain.prescription import FormulaLine, InfusionMode

DROPS_PER_ML = 20
MINUTES_PER_HOUR = 60


def _amount(value: float | None) -> float:
    """Coerce missing, negative or non-finite input to zero."""
    if value is None:
        return 0.0
    number = float(value)
    if not math.isfinite(number) or number <= 0:
        return 0.0
    return number


def pump_volume(rate_ml_per_hour: float | None, duration_hours: float | None) -> float:
    """Volume delivered by a pump running at a fixed ml/h rate."""
    return _amount(rate_ml_per_hour) * _amount(duration_hours)


def gravity_volume(
    drops_per_minute: float | None, duration_hours: float | None
) -> float:
    """Volume delivered by gravity drip, 20 drops per ml."""
    ml_per_minute = _amount(drops_per_minute) / DROPS_PER_ML
    return ml_per_minute * MINUTES_PER_HOUR * _amount(duration_hours)


def bolus_volume(
    amount_per_administration: float | None, administrations: int
) -> float:
    """Volume given as discrete doses."""
    return _amount(amount_per_administration) * max(administrations, 0)


def administered_volume(
    line: FormulaLine,
    system_type: SystemType | None,
    infusion_mode: InfusionMode | None,
) -> float:
    """Return the 24h volume for a formula line under the draft's delivery mode."""
    continuous = system_type is SystemType.CLOSED and infusion_mode in {
        InfusionMode.PUMP,
        InfusionMode.GRAVITY,
    }
    if not continuous:
        return bolus_volume(line.volume_per_administration, line.schedule.count)
    if infusion_mode is InfusionMode.PUMP:
        return pump_volume(line.rate, line.duration_hours)
    return gravity_volume(line.rate, line.duration_hours)


def infusion_rate(
    volume_ml: float | None, hours: float | None, infusion_mode: InfusionMode | None
) -> float:
    """Rate to run `volume_ml` over `hours`: ml/h (pump) or drops/min (gravity)."""
    duration = _amount(hours)
    if duration == 0:
        return 0.0
    ml_per_hour = _amount(volume_ml) / duration
    if infusion_mode is InfusionMode.PUMP:
        return ml_per_hour
    if infusion_mode is InfusionMode.GRAVITY:
        return ml_per_hour * DROPS_PER_ML / MINUTES_PER_HOUR
    return 0.0
