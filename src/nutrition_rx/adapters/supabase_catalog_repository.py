"""Supabase implementation for formula and module reference data."""

import logging
from dataclasses import dataclass

from supabase import Client

from nutrition_rx.domain.catalog import (
    Formula,
    FormulaComposition,
    Module,
    ResidueInfo,
    SystemType,
)
from nutrition_rx.services.catalog import CatalogRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Reads active catalog rows from Supabase tables."""

    client: Client
    formulas_table: str = "formulas"
    modules_table: str = "modules"

    def list_formulas(self) -> list[Formula]:
        """Return all active formulas; unreadable rows are skipped."""
        rows = self._active_rows(self.formulas_table, "formulas")
        formulas = []
        for row in rows:
            try:
                formulas.append(_parse_formula(row))
            except (KeyError, TypeError, ValueError):
                _logger.warning("Skipping malformed formula row: id=%s", row.get("id"))
        return formulas

    def list_modules(self) -> list[Module]:
        """Return all active modules; unreadable rows are skipped."""
        rows = self._active_rows(self.modules_table, "modules")
        modules = []
        for row in rows:
            try:
                modules.append(_parse_module(row))
            except (KeyError, TypeError, ValueError):
                _logger.warning("Skipping malformed module row: id=%s", row.get("id"))
        return modules

    def _active_rows(self, table: str, label: str) -> list[dict[str, object]]:
        response = (
            self.client.table(table).select("*").eq("is_active", True).execute()
        )
        if response.data is None:
            raise RuntimeError(f"Failed to load {label}")
        return list(response.data)


def _parse_formula(row: dict[str, object]) -> Formula:
    """Parse a formula row into a domain model."""
    presentations = row.get("presentations") or []
    return Formula(
        id=str(row["id"]),
        name=str(row["name"]),
        manufacturer=str(row.get("manufacturer") or ""),
        system_type=SystemType(row.get("system_type") or SystemType.BOTH),
        composition=FormulaComposition(
            calories_per_100ml=_number(row, "calories_per_100ml"),
            protein_per_100ml=_number(row, "protein_per_100ml"),
            carb_per_100ml=_number(row, "carb_per_100ml"),
            fat_per_100ml=_number(row, "fat_per_100ml"),
            fiber_per_100ml=_number(row, "fiber_per_100ml"),
            sodium=_number(row, "sodium"),
            potassium=_number(row, "potassium"),
            calcium=_number(row, "calcium"),
            phosphorus=_number(row, "phosphorus"),
            water_content_per_100ml=_optional_number(row, "water_content_per_100ml"),
            density=_optional_number(row, "density"),
        ),
        presentations=tuple(float(size) for size in presentations),
        billing_price=_number(row, "billing_price"),
        residue=ResidueInfo(
            plastic=_number(row, "residue_plastic"),
            paper=_number(row, "residue_paper"),
            metal=_number(row, "residue_metal"),
            glass=_number(row, "residue_glass"),
        ),
    )


def _parse_module(row: dict[str, object]) -> Module:
    """Parse a module row into a domain model."""
    return Module(
        id=str(row["id"]),
        name=str(row["name"]),
        density=_number(row, "density"),
        reference_amount=_number(row, "reference_amount"),
        reference_times_per_day=int(row.get("reference_times_per_day") or 1),
        protein=_number(row, "protein"),
        carbs=_number(row, "carbs"),
        fat=_number(row, "fat"),
        sodium=_number(row, "sodium"),
        potassium=_number(row, "potassium"),
        fiber=_number(row, "fiber"),
        free_water=_number(row, "free_water"),
        billing_price=_number(row, "billing_price"),
    )


def _number(row: dict[str, object], column: str) -> float:
    value = row.get(column)
    return float(value) if value is not None else 0.0


def _optional_number(row: dict[str, object], column: str) -> float | None:
    value = row.get(column)
    return float(value) if value is not None else None
