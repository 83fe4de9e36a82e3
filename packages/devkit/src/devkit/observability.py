from __future__ import annotations

import logging
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False
_logging_configured = False
_probe_filter_configured = False

_ACCESS_ARG_COUNT = 5


def _strip_path(path: str) -> str:
    path = path.partition("?")[0]
    return path.rstrip("/") or "/"


def _access_path_and_status(record: logging.LogRecord) -> tuple[str, int] | None:
    # uvicorn.access args: (client, method, path, http_version, status)
    args: Any = record.args
    if not isinstance(args, tuple) or len(args) < _ACCESS_ARG_COUNT or not isinstance(args[2], str):
        return None
    try:
        return args[2], int(args[4])
    except (TypeError, ValueError):
        return None


class _ProbeAccessLogFilter(logging.Filter):
    """Drops successful probe hits from the access log; every other line passes."""

    def __init__(self, ignored_paths: tuple[str, ...]) -> None:
        super().__init__()
        self._ignored_paths = frozenset(_strip_path(path) for path in ignored_paths)

    def filter(self, record: logging.LogRecord) -> bool:
        access = _access_path_and_status(record)
        if access is None:
            return True
        path, status = access
        return status != 200 or _strip_path(path) not in self._ignored_paths


def configure_logging(level: str = "INFO") -> None:
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    _logging_configured = True


def configure_otel(service_name: str) -> None:
    global _configured
    if _configured:
        return
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    trace.set_tracer_provider(provider)
    _configured = True


def configure_probe_access_log_filter(ignored_paths: tuple[str, ...] = ("/healthz", "/readyz")) -> None:
    global _probe_filter_configured
    if _probe_filter_configured:
        return
    logging.getLogger("uvicorn.access").addFilter(_ProbeAccessLogFilter(ignored_paths=ignored_paths))
    _probe_filter_configured = True
