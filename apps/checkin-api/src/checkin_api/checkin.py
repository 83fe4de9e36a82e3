from __future__ import annotations

from dataclasses import dataclass

from geo_engine.distance import round_meters
from geo_engine.geofence import evaluate_geofence
from geo_engine.models import Site
from shared.security import BAD_PAYLOAD, BAD_SIGNATURE, EXPIRED, TokenVerificationError, verify_checkin_token

from checkin_api.coordinates import extract_coordinates, parse_json_body

MISSING_TOKEN = "missing_token"
USE_POST = "use_post"
BAD_JSON = "bad_json"
MISSING_COORDS = "missing_coords"
SERVER_ERROR = "server_error"

ACCEPTED = "accepted"
OUTSIDE_RADIUS = "outside_radius"
KNOWN_OUTCOMES = (
    ACCEPTED,
    OUTSIDE_RADIUS,
    MISSING_TOKEN,
    BAD_SIGNATURE,
    BAD_PAYLOAD,
    EXPIRED,
    USE_POST,
    BAD_JSON,
    MISSING_COORDS,
    SERVER_ERROR,
)

SUBMIT_METHOD = "POST"


@dataclass(frozen=True)
class CheckinConfig:
    secret: bytes
    sites: tuple[Site, ...]
    radius_meters: int

    def __post_init__(self) -> None:
        if not self.sites:
            raise ValueError("at least one site is required")
        if self.radius_meters < 0:
            raise ValueError("radius_meters must be >= 0")


@dataclass(frozen=True)
class CheckinRequest:
    method: str
    token: str | None
    body: bytes | None = None


@dataclass(frozen=True)
class Decision:
    ok: bool
    reason: str | None = None
    site: str | None = None
    distance_m: int | None = None
    radius_m: int | None = None

    @classmethod
    def failure(cls, reason: str) -> Decision:
        return cls(ok=False, reason=reason)

    @property
    def outcome(self) -> str:
        if self.reason:
            return self.reason
        return ACCEPTED if self.ok else OUTSIDE_RADIUS


def evaluate_checkin(request: CheckinRequest, config: CheckinConfig, now_ms: int) -> Decision:
    """Run the check-in gates in order; the first failing gate decides."""
    if not request.token:
        return Decision.failure(MISSING_TOKEN)
    try:
        verify_checkin_token(request.token, config.secret, now_ms)
    except TokenVerificationError as exc:
        return Decision.failure(exc.reason)

    if request.method.upper() != SUBMIT_METHOD:
        return Decision.failure(USE_POST)

    parsed = parse_json_body(request.body)
    if not parsed.ok:
        return Decision.failure(BAD_JSON)
    point = extract_coordinates(parsed.body)
    if point is None:
        return Decision.failure(MISSING_COORDS)

    result = evaluate_geofence(point, config.sites, config.radius_meters)
    return Decision(
        ok=result.within,
        site=result.site.name,
        distance_m=round_meters(result.distance_meters),
        radius_m=config.radius_meters,
    )
