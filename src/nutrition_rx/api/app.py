"""FastAPI application factory."""

import logging
from typing import Any

from fastapi import FastAPI, Request

from nutrition_rx.api.schemas import PrescriptionEvaluationRequest
from nutrition_rx.app_logging import configure_logging
from nutrition_rx.containers import AppContainer
from nutrition_rx.domain.catalog import SystemType
from nutrition_rx.services.engine import to_plain


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI(title="nutrition-rx")
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/catalog/formulas")
    def list_formulas(
        request: Request, system: SystemType | None = None, q: str | None = None
    ) -> list[dict[str, Any]]:
        """List catalog formulas, optionally by system type and search text."""
        state_container: AppContainer = request.app.state.container
        formulas = state_container.catalog_service.list_formulas(
            system_type=system, query=q
        )
        return [to_plain(formula) for formula in formulas]

    @app.get("/catalog/modules")
    def list_modules(request: Request) -> list[dict[str, Any]]:
        """List catalog modules."""
        state_container: AppContainer = request.app.state.container
        modules = state_container.catalog_service.list_modules()
        return [to_plain(module) for module in modules]

    @app.post("/prescriptions/evaluate")
    def evaluate_prescription(
        payload: PrescriptionEvaluationRequest, request: Request
    ) -> dict[str, Any]:
        """Compute summary, dispensing plan, costs and chart note for a draft."""
        state_container: AppContainer = request.app.state.container
        evaluation = state_container.prescription_engine.evaluate(
            payload.to_draft(), payload.patient.to_domain()
        )
        logger.info(
            "Prescription evaluated: kcal=%.0f warnings=%s",
            evaluation.summary.total_kcal,
            len(evaluation.warnings),
        )
        return evaluation.to_record()

    return app
