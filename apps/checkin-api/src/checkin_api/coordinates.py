"""Request body parsing and coordinate alias resolution."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import json
import math
from typing import Any

from geo_engine.models import GeoPoint

LATITUDE_FIELDS = ("lat", "latitude")
LONGITUDE_FIELDS = ("lng", "lon", "longitude")


@dataclass(frozen=True)
class BodyParseResult:
    body: dict[str, Any] | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_json_body(raw: bytes | str | None) -> BodyParseResult:
    """Parse a request body into a JSON object without raising.

    An empty body is treated as ``{}``. Anything that is not valid JSON, or is
    valid JSON but not an object, is reported through ``error``.
    """
    if not raw:
        return BodyParseResult(body={})
    try:
        parsed = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        return BodyParseResult(body=None, error=str(exc))
    if not isinstance(parsed, dict):
        return BodyParseResult(body=None, error=f"expected JSON object, got {type(parsed).__name__}")
    return BodyParseResult(body=parsed)


def resolve_coordinate(body: Mapping[str, Any], fields: tuple[str, ...]) -> float | None:
    """Return the first non-null alias in ``fields`` as a finite float.

    Later aliases are not consulted once a non-null value is found, even if
    that value is not numeric.
    """
    for field in fields:
        value = body.get(field)
        if value is not None:
            return _to_finite_float(value)
    return None


def extract_coordinates(body: Mapping[str, Any]) -> GeoPoint | None:
    lat = resolve_coordinate(body, LATITUDE_FIELDS)
    lng = resolve_coordinate(body, LONGITUDE_FIELDS)
    if lat is None or lng is None:
        return None
    return GeoPoint(lat=lat, lng=lng)


def _to_finite_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip())
        else:
            return None
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None
