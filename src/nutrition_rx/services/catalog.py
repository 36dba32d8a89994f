"""Read-only catalog of formulas and modules."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from nutrition_rx.domain.catalog import Formula, Module, SystemType

_logger = logging.getLogger(__name__)


class CatalogRepository(Protocol):
    """Source of catalog reference data."""

    def list_formulas(self) -> list[Formula]:
        """Return all active formulas."""

    def list_modules(self) -> list[Module]:
        """Return all active modules."""


@dataclass(frozen=True)
class CatalogSnapshot:
    """Id-keyed view of the catalog at one point in time.

    Lookups return None on a miss; callers decide how a missing entry
    contributes (the route calculators count it as zero).
    """

    formulas: dict[str, Formula] = field(default_factory=dict)
    modules: dict[str, Module] = field(default_factory=dict)

    @classmethod
    def from_entries(
        cls, formulas: Iterable[Formula] = (), modules: Iterable[Module] = ()
    ) -> "CatalogSnapshot":
        """Index formulas and modules by id; later duplicates win."""
        return cls(
            formulas={formula.id: formula for formula in formulas},
            modules={module.id: module for module in modules},
        )

    def formula(self, formula_id: str) -> Formula | None:
        """Return the formula with this id, if present."""
        return self.formulas.get(formula_id)

    def module(self, module_id: str) -> Module | None:
        """Return the module with this id, if present."""
        return self.modules.get(module_id)

    def formulas_for_system(self, system_type: SystemType) -> list[Formula]:
        """Formulas usable on a delivery system, sorted by name."""
        return sorted(
            (f for f in self.formulas.values() if f.system_type.supports(system_type)),
            key=lambda f: f.name.lower(),
        )

    def search_formulas(self, query: str) -> list[Formula]:
        """Case-insensitive match on name or manufacturer."""
        needle = query.strip().lower()
        matches = [
            f
            for f in self.formulas.values()
            if needle in f.name.lower() or needle in f.manufacturer.lower()
        ]
        return sorted(matches, key=lambda f: f.name.lower())


@dataclass
class CatalogService:
    """Serves catalog snapshots, reloading from the repository after a TTL."""

    repository: CatalogRepository
    ttl_seconds: int = 300
    _snapshot: CatalogSnapshot | None = field(default=None, init=False, repr=False)
    _expires_at: datetime | None = field(default=None, init=False, repr=False)

    def snapshot(self) -> CatalogSnapshot:
        """Return the current snapshot, loading it when missing or expired."""
        if self._snapshot is not None and self._expires_at is not None:
            if datetime.now(tz=UTC) < self._expires_at:
                return self._snapshot
        return self._load()

    def refresh(self) -> CatalogSnapshot:
        """Discard the cached snapshot and load a new one."""
        self._snapshot = None
        self._expires_at = None
        return self._load()

    def list_formulas(
        self, system_type: SystemType | None = None, query: str | None = None
    ) -> list[Formula]:
        """List formulas, optionally filtered by system type and search text."""
        snapshot = self.snapshot()
        formulas = (
            snapshot.search_formulas(query)
            if query
            else sorted(snapshot.formulas.values(), key=lambda f: f.name.lower())
        )
        if system_type is None:
            return formulas
        return [f for f in formulas if f.system_type.supports(system_type)]

    def list_modules(self) -> list[Module]:
        """List modules sorted by name."""
        return sorted(self.snapshot().modules.values(), key=lambda m: m.name.lower())

    def _load(self) -> CatalogSnapshot:
        snapshot = CatalogSnapshot.from_entries(
            self.repository.list_formulas(), self.repository.list_modules()
        )
        self._snapshot = snapshot
        self._expires_at = datetime.now(tz=UTC) + timedelta(seconds=self.ttl_seconds)
        _logger.info(
            "Catalog snapshot loaded: formulas=%s modules=%s",
            len(snapshot.formulas),
            len(snapshot.modules),
        )
        return snapshot
