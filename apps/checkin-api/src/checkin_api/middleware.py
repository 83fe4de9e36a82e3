from __future__ import annotations

from time import perf_counter
from uuid import uuid4

from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from checkin_api.observability import ApiMetricCollector, ApiRequestMetric, set_trace_id

TRACE_HEADER = "x-trace-id"
UNMATCHED_ROUTE = "unmatched"


def route_label(request: Request) -> str:
    """Metric label for a request: the matched route template, never the raw URL."""
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, collector: ApiMetricCollector) -> None:
        super().__init__(app)
        self._collector = collector
        self._tracer = trace.get_tracer("checkin-api")

    async def dispatch(self, request: Request, call_next) -> Response:
        trace_id = request.headers.get(TRACE_HEADER) or uuid4().hex
        set_trace_id(trace_id)
        started = perf_counter()
        status_code = 500
        with self._tracer.start_as_current_span(f"{request.method} checkin-api") as span:
            span.set_attribute("trace.id", trace_id)
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                route = route_label(request)
                span.set_attribute("http.route", route)
                span.set_attribute("http.status_code", status_code)
                self._record(request.method, route, status_code, started, trace_id)

        response.headers[TRACE_HEADER] = trace_id
        return response

    def _record(self, method: str, route: str, status_code: int, started: float, trace_id: str) -> None:
        self._collector.observe(
            ApiRequestMetric(
                method=method,
                route=route,
                status_code=status_code,
                duration_ms=(perf_counter() - started) * 1000.0,
                trace_id=trace_id,
            )
        )
