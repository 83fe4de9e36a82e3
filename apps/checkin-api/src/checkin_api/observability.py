from __future__ import annotations

from collections import Counter as OutcomeCounter
from contextvars import ContextVar
from dataclasses import asdict, dataclass
from typing import Protocol

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

from checkin_api.checkin import KNOWN_OUTCOMES

_trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")

def set_trace_id(trace_id: str) -> None:
    _trace_id_ctx.set(trace_id)

def get_trace_id() -> str:
    return _trace_id_ctx.get()

@dataclass(frozen=True)
class ApiRequestMetric:
    method: str
    route: str
    status_code: int
    duration_ms: float
    trace_id: str

class ApiMetricCollector(Protocol):
    def observe(self, metric: ApiRequestMetric) -> None: ...

    def observe_decision(self, outcome: str) -> None: ...

class InMemoryApiMetricsCollector(ApiMetricCollector):
    def __init__(self) -> None:
        self._metrics: list[ApiRequestMetric] = []
        self._outcomes: OutcomeCounter[str] = OutcomeCounter()

    def observe(self, metric: ApiRequestMetric) -> None:
        self._metrics.append(metric)

    def observe_decision(self, outcome: str) -> None:
        self._outcomes[outcome] += 1

    def snapshot(self) -> list[dict]:
        return [asdict(item) for item in self._metrics]

    def decision_counts(self) -> dict[str, int]:
        return dict(self._outcomes)

class PrometheusApiMetricsCollector(ApiMetricCollector):
    """Metrics in a private registry so each app instance renders its own counts."""

    def __init__(self, outcomes: tuple[str, ...] = KNOWN_OUTCOMES) -> None:
        self._registry = CollectorRegistry()
        self._requests = Counter(
            "checkin_http_requests_total",
            "Check-in API HTTP requests by route",
            labelnames=("method", "route", "status_code"),
            registry=self._registry,
        )
        self._latency = Histogram(
            "checkin_http_request_duration_ms",
            "Check-in API request latency in milliseconds",
            labelnames=("method", "route"),
            buckets=(1, 5, 10, 25, 50, 100, 250, 500, 1000),
            registry=self._registry,
        )
        self._decisions = Counter(
            "checkin_decisions_total",
            "Check-in decisions by outcome",
            labelnames=("outcome",),
            registry=self._registry,
        )
        # every outcome is exported from startup, at zero until it happens
        for outcome in outcomes:
            self._decisions.labels(outcome)

    def observe(self, metric: ApiRequestMetric) -> None:
        self._requests.labels(metric.method, metric.route, str(metric.status_code)).inc()
        self._latency.labels(metric.method, metric.route).observe(metric.duration_ms)

    def observe_decision(self, outcome: str) -> None:
        self._decisions.labels(outcome).inc()

    def render(self) -> str:
        return generate_latest(self._registry).decode("utf-8")

class CompositeApiMetricsCollector(ApiMetricCollector):
    def __init__(self, collectors: list[ApiMetricCollector]) -> None:
        self._collectors = collectors

    def observe(self, metric: ApiRequestMetric) -> None:
        for collector in self._collectors:
            collector.observe(metric)

    def observe_decision(self, outcome: str) -> None:
        for collector in self._collectors:
            collector.observe_decision(outcome)
