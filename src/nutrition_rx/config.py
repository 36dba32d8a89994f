"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrition_rx.domain.costs import CostConfig, NursingTimes
from nutrition_rx.services.validation import ClinicalLimits

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    formulas_table: str = "formulas"
    modules_table: str = "modules"
    catalog_ttl_seconds: int = 300
    nursing_time_open_pump_seconds: float = 0.0
    nursing_time_open_gravity_seconds: float = 0.0
    nursing_time_closed_pump_seconds: float = 0.0
    nursing_time_closed_gravity_seconds: float = 0.0
    nursing_time_bolus_seconds: float = 0.0
    nursing_hourly_rate: float = 0.0
    indirect_labor_cost: float = 0.0
    max_pump_rate_ml_h: float = 300.0
    max_infusion_hours: float = 24.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def build_cost_config(settings: Settings) -> CostConfig:
    """Cost rates for the engine from flat settings."""
    return CostConfig(
        nursing_times=NursingTimes(
            open_pump=settings.nursing_time_open_pump_seconds,
            open_gravity=settings.nursing_time_open_gravity_seconds,
            closed_pump=settings.nursing_time_closed_pump_seconds,
            closed_gravity=settings.nursing_time_closed_gravity_seconds,
            bolus=settings.nursing_time_bolus_seconds,
        ),
        hourly_rate=settings.nursing_hourly_rate,
        indirect_labor_cost=settings.indirect_labor_cost,
    )


def build_clinical_limits(settings: Settings) -> ClinicalLimits:
    """Clinical bounds for the validation warnings."""
    return ClinicalLimits(
        max_pump_rate_ml_h=settings.max_pump_rate_ml_h,
        max_infusion_hours=settings.max_infusion_hours,
    )
