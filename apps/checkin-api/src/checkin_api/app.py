from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import Response

from devkit.observability import configure_logging, configure_otel, configure_probe_access_log_filter

from checkin_api.middleware import ObservabilityMiddleware
from checkin_api.observability import (
    CompositeApiMetricsCollector,
    InMemoryApiMetricsCollector,
    PrometheusApiMetricsCollector,
)
from checkin_api.routers.checkin import router as checkin_router
from checkin_api.settings import CheckinSettings, load_checkin_settings

logger = logging.getLogger(__name__)


def create_app(settings: CheckinSettings | None = None) -> FastAPI:
    settings = settings or load_checkin_settings()
    configure_logging(settings.LOG_LEVEL)
    configure_otel(service_name=settings.SERVICE_NAME)
    configure_probe_access_log_filter()
    if settings.uses_default_secret:
        logger.warning(
            "checkin_default_secret_in_use",
            extra={"component": "checkin_api", "hint": "set TOKEN_SECRET"},
        )

    app = FastAPI(title="Check-in Validation API", version="0.1.0")
    app.state.checkin_config = settings.to_config()
    app.state.api_metrics = InMemoryApiMetricsCollector()
    app.state.prom_metrics = PrometheusApiMetricsCollector()
    app.state.composite_metrics = CompositeApiMetricsCollector(
        [app.state.api_metrics, app.state.prom_metrics]
    )
    app.add_middleware(ObservabilityMiddleware, collector=app.state.composite_metrics)
    app.include_router(checkin_router)

    @app.get("/healthz")
    async def healthz() -> dict:
        return {"status": "ok"}

    @app.get("/readyz")
    async def readyz() -> dict:
        return {"status": "ready", "sites": len(app.state.checkin_config.sites)}

    @app.get("/metrics")
    async def metrics() -> Response:
        payload = app.state.prom_metrics.render()
        return Response(content=payload, media_type="text/plain; version=0.0.4")

    return app


app = create_app()
