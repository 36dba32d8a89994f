"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from nutrition_rx.adapters.supabase_catalog_repository import SupabaseCatalogRepository
from nutrition_rx.config import Settings, build_clinical_limits, build_cost_config
from nutrition_rx.services.catalog import CatalogService
from nutrition_rx.services.engine import PrescriptionEngine
from nutrition_rx.services.record_text import RecordTextRenderer


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_service: CatalogService
    prescription_engine: PrescriptionEngine


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_repository = SupabaseCatalogRepository(
        supabase_client,
        formulas_table=resolved_settings.formulas_table,
        modules_table=resolved_settings.modules_table,
    )
    catalog_service = CatalogService(
        repository=catalog_repository,
        ttl_seconds=resolved_settings.catalog_ttl_seconds,
    )
    prescription_engine = PrescriptionEngine(
        catalog_service=catalog_service,
        cost_config=build_cost_config(resolved_settings),
        limits=build_clinical_limits(resolved_settings),
        renderer=RecordTextRenderer(),
    )
    return AppContainer(
        settings=resolved_settings,
        catalog_service=catalog_service,
        prescription_engine=prescription_engine,
    )
