from __future__ import annotations

from collections.abc import Callable
import time

from fastapi import Request

from checkin_api.checkin import CheckinConfig
from checkin_api.observability import ApiMetricCollector


def current_time_ms() -> int:
    return time.time_ns() // 1_000_000


def get_checkin_config(request: Request) -> CheckinConfig:
    return request.app.state.checkin_config


def get_metrics_collector(request: Request) -> ApiMetricCollector:
    return request.app.state.composite_metrics


def get_clock() -> Callable[[], int]:
    return current_time_ms
