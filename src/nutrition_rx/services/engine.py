"""Prescription evaluation: one pass from draft to summary, plan, cost and note."""

import logging
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Any

from nutrition_rx.domain.costs import CostBreakdown, CostConfig
from nutrition_rx.domain.dispensing import BottleAllocation, DispensingPlan
from nutrition_rx.domain.nutrition import NutritionSummary
from nutrition_rx.domain.prescription import Patient, PrescriptionDraft
from nutrition_rx.domain.warnings import (
    DataIntegrityWarning,
    EngineWarning,
    ValidationWarning,
)
from nutrition_rx.services.aggregator import aggregate
from nutrition_rx.services.catalog import CatalogService, CatalogSnapshot
from nutrition_rx.services.costs import compute_costs
from nutrition_rx.services.dispensing import plan_dispensing, plan_open_bottles
from nutrition_rx.services.record_text import RecordTextRenderer
from nutrition_rx.services.validation import (
    ClinicalLimits,
    validate_draft,
    validate_summary,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrescriptionEvaluation:
    """Everything derived from one draft."""

    summary: NutritionSummary
    dispensing_plan: DispensingPlan | None
    bottles: tuple[BottleAllocation, ...]
    costs: CostBreakdown
    record_text: str
    warnings: tuple[EngineWarning, ...]

    @property
    def data_integrity_warnings(self) -> list[DataIntegrityWarning]:
        return [w for w in self.warnings if isinstance(w, DataIntegrityWarning)]

    @property
    def validation_warnings(self) -> list[ValidationWarning]:
        return [w for w in self.warnings if isinstance(w, ValidationWarning)]

    def to_record(self) -> dict[str, Any]:
        """Plain, JSON-ready representation."""
        return {
            "summary": to_plain(self.summary),
            "dispensing_plan": to_plain(self.dispensing_plan),
            "bottles": to_plain(self.bottles),
            "costs": to_plain(self.costs),
            "record_text": self.record_text,
            "warnings": [
                {**to_plain(warning), "kind": _warning_kind(warning)}
                for warning in self.warnings
            ],
        }


def evaluate_prescription(
    draft: PrescriptionDraft,
    catalog: CatalogSnapshot,
    patient: Patient,
    cost_config: CostConfig | None = None,
    limits: ClinicalLimits | None = None,
    renderer: RecordTextRenderer | None = None,
) -> PrescriptionEvaluation:
    """Compute summary, dispensing, costs, warnings and note for a draft."""
    cost_config = cost_config or CostConfig()
    limits = limits or ClinicalLimits()
    renderer = renderer or RecordTextRenderer()

    summary = aggregate(draft, catalog, patient)
    plan = plan_dispensing(draft, catalog)
    bottles = tuple(plan_open_bottles(draft))
    costs = compute_costs(draft, catalog, cost_config)
    warnings: list[EngineWarning] = list(summary.warnings)
    warnings.extend(validate_draft(draft, catalog, limits))
    warnings.extend(validate_summary(summary, patient, plan))
    record_text = renderer.render(draft, catalog, patient, summary, plan, costs)
    if warnings:
        _logger.info(
            "Prescription evaluated with warnings: %s",
            ", ".join(warning.code.value for warning in warnings),
        )
    return PrescriptionEvaluation(
        summary=summary,
        dispensing_plan=plan,
        bottles=bottles,
        costs=costs,
        record_text=record_text,
        warnings=tuple(warnings),
    )


@dataclass
class PrescriptionEngine:
    """Evaluates drafts against the current catalog snapshot."""

    catalog_service: CatalogService
    cost_config: CostConfig
    limits: ClinicalLimits
    renderer: RecordTextRenderer

    def evaluate(
        self, draft: PrescriptionDraft, patient: Patient
    ) -> PrescriptionEvaluation:
        """Evaluate a draft, resolving catalog ids against a fresh snapshot."""
        return evaluate_prescription(
            draft,
            self.catalog_service.snapshot(),
            patient,
            cost_config=self.cost_config,
            limits=self.limits,
            renderer=self.renderer,
        )


def to_plain(value: Any) -> Any:
    """Convert engine records to dicts, lists and scalars.

    Properties a record lists in its `derived_fields` class attribute are
    included so callers do not have to recompute them.
    """
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if is_dataclass(value) and not isinstance(value, type):
        record = {f.name: to_plain(getattr(value, f.name)) for f in fields(value)}
        for name in getattr(value, "derived_fields", ()):
            record[name] = to_plain(getattr(value, name))
        return record
    if isinstance(value, dict):
        return {to_plain(key): to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, frozenset, set)):
        return [to_plain(item) for item in value]
    raise TypeError(f"Cannot serialise {type(value).__name__}")


def _warning_kind(warning: EngineWarning) -> str:
    if isinstance(warning, DataIntegrityWarning):
        return "data_integrity"
    return "validation"
