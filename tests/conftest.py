"""Shared test fixtures."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest

from nutrition_rx.config import Settings, build_clinical_limits, build_cost_config
from nutrition_rx.containers import AppContainer
from nutrition_rx.domain.catalog import (
    Formula,
    FormulaComposition,
    Module,
    ResidueInfo,
    SystemType,
)
from nutrition_rx.domain.costs import CostConfig, NursingTimes
from nutrition_rx.domain.prescription import (
    FormulaLine,
    InfusionMode,
    PrescriptionDraft,
    RouteCombination,
)
from nutrition_rx.services.catalog import (
    CatalogRepository,
    CatalogService,
    CatalogSnapshot,
)
from nutrition_rx.services.engine import PrescriptionEngine
from nutrition_rx.services.record_text import RecordTextRenderer

PEPTAMEN = Formula(
    id="peptamen-15",
    name="Peptamen 1.5",
    manufacturer="Nestlé",
    system_type=SystemType.CLOSED,
    composition=FormulaComposition(
        calories_per_100ml=150.0,
        protein_per_100ml=6.7,
        carb_per_100ml=18.8,
        fat_per_100ml=5.5,
        sodium=100.0,
        potassium=180.0,
        calcium=100.0,
        phosphorus=70.0,
        water_content_per_100ml=77.0,
        density=1.5,
    ),
    presentations=(1000.0,),
    billing_price=85.0,
    residue=ResidueInfo(plastic=30.0, paper=5.0),
)

ISOSOURCE = Formula(
    id="isosource-500",
    name="Isosource 1.2",
    manufacturer="Nestlé",
    system_type=SystemType.CLOSED,
    composition=FormulaComposition(calories_per_100ml=120.0, protein_per_100ml=4.5),
    presentations=(500.0, 1000.0),
    billing_price=40.0,
)

STANDARD = Formula(
    id="standard-10",
    name="Standard 1.0",
    manufacturer="Danone",
    system_type=SystemType.OPEN,
    composition=FormulaComposition(
        calories_per_100ml=100.0,
        protein_per_100ml=4.0,
        carb_per_100ml=13.0,
        fat_per_100ml=3.5,
        fiber_per_100ml=1.5,
    ),
    billing_price=20.0,
)

ORAL_SUPPLEMENT = Formula(
    id="oral-supl",
    name="Fortimel Plus",
    manufacturer="Danone",
    system_type=SystemType.BOTH,
    composition=FormulaComposition(
        calories_per_100ml=150.0,
        protein_per_100ml=10.0,
        density=1.2,
    ),
    billing_price=12.0,
    residue=ResidueInfo(plastic=20.0),
)

PROTEIN_MODULE = Module(
    id="protein-mod",
    name="Protein Module",
    density=3.6,
    reference_amount=10.0,
    protein=9.0,
    sodium=20.0,
    billing_price=2.5,
)

ZERO_REFERENCE_MODULE = Module(
    id="broken-mod",
    name="Broken Module",
    density=4.0,
    reference_amount=0.0,
    protein=5.0,
)


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog repository for tests."""

    formulas: list[Formula] = field(default_factory=list)
    modules: list[Module] = field(default_factory=list)
    loads: int = 0

    def list_formulas(self) -> list[Formula]:
        self.loads += 1
        return list(self.formulas)

    def list_modules(self) -> list[Module]:
        return list(self.modules)


def sample_formulas() -> list[Formula]:
    return [PEPTAMEN, ISOSOURCE, STANDARD, ORAL_SUPPLEMENT]


def sample_modules() -> list[Module]:
    return [PROTEIN_MODULE, ZERO_REFERENCE_MODULE]


def closed_pump_draft(
    rate: float = 50.0, hours: float = 20.0, formula_id: str = PEPTAMEN.id
) -> PrescriptionDraft:
    """Scenario A style draft: one closed-system formula on a pump."""
    return PrescriptionDraft(
        routes=RouteCombination.ENTERAL_ONLY,
        system_type=SystemType.CLOSED,
        infusion_mode=InfusionMode.PUMP,
        formula_lines=[
            FormulaLine(formula_id=formula_id, rate=rate, duration_hours=hours)
        ],
    )


@pytest.fixture
def catalog() -> CatalogSnapshot:
    return CatalogSnapshot.from_entries(sample_formulas(), sample_modules())


@pytest.fixture
def cost_config() -> CostConfig:
    return CostConfig(
        nursing_times=NursingTimes(
            open_pump=120.0,
            open_gravity=90.0,
            closed_pump=300.0,
            closed_gravity=240.0,
            bolus=60.0,
        ),
        hourly_rate=36.0,
        indirect_labor_cost=10.0,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        nursing_time_closed_pump_seconds=300.0,
        nursing_hourly_rate=36.0,
        indirect_labor_cost=10.0,
    )


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository(
        formulas=sample_formulas(), modules=sample_modules()
    )


@pytest.fixture
def catalog_service(catalog_repository: InMemoryCatalogRepository) -> CatalogService:
    return CatalogService(repository=catalog_repository)


@pytest.fixture
def container(settings: Settings, catalog_service: CatalogService) -> AppContainer:
    engine = PrescriptionEngine(
        catalog_service=catalog_service,
        cost_config=build_cost_config(settings),
        limits=build_clinical_limits(settings),
        renderer=RecordTextRenderer(),
    )
    return AppContainer(
        settings=settings,
        catalog_service=catalog_service,
        prescription_engine=engine,
    )


@pytest.fixture(autouse=True)
def _propagate_package_logs() -> Iterator[None]:
    """Let caplog see package records even after configure_logging ran."""
    logger = logging.getLogger("nutrition_rx")
    previous = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = previous
