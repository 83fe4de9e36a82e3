import base64
import json
import math

import pytest

from checkin_api.checkin import CheckinConfig, CheckinRequest, Decision, evaluate_checkin
from geo_engine.distance import EARTH_RADIUS_METERS
from geo_engine.models import Site
from shared.security import sign_payload

SECRET = b"core-secret"
NOW_MS = 1_760_000_000_000
GAIRA = Site(name="SEDE GAIRA KM7", lat=11.18957, lng=-74.21414)
CONFIG = CheckinConfig(
    secret=SECRET,
    sites=(
        GAIRA,
        Site(name="RELLENO SANITARIO", lat=11.256635, lng=-74.157481),
        Site(name="REBOMBEO", lat=11.18702, lng=-74.2173),
    ),
    radius_meters=200,
)


def _token(expiry_ms: int = NOW_MS + 60_000, secret: bytes = SECRET) -> str:
    payload = str(expiry_ms)
    raw = f"{payload}.{sign_payload(secret, payload)}".encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _post(body: object, token: str | None = None) -> CheckinRequest:
    raw = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
    return CheckinRequest(method="POST", token=token if token is not None else _token(), body=raw)


def test_exact_site_location_is_accepted() -> None:
    decision = evaluate_checkin(_post({"lat": 11.18957, "lng": -74.21414}), CONFIG, NOW_MS)
    assert decision == Decision(ok=True, site="SEDE GAIRA KM7", distance_m=0, radius_m=200)
    assert decision.outcome == "accepted"


def test_far_location_is_rejected_without_reason() -> None:
    decision = evaluate_checkin(_post({"lat": 4.711, "lon": -74.0721}), CONFIG, NOW_MS)
    assert decision.ok is False
    assert decision.reason is None
    assert decision.site is not None
    assert decision.distance_m > 200
    assert decision.radius_m == 200
    assert decision.outcome == "outside_radius"


def test_one_meter_past_radius_is_rejected() -> None:
    lat = GAIRA.lat - math.degrees(201 / EARTH_RADIUS_METERS)
    decision = evaluate_checkin(_post({"lat": lat, "lng": GAIRA.lng}), CONFIG, NOW_MS)
    assert decision.ok is False
    assert decision.site == "SEDE GAIRA KM7"
    assert decision.distance_m == 201


@pytest.mark.parametrize(
    ("request_", "reason"),
    [
        (CheckinRequest(method="POST", token=None, body=b"{}"), "missing_token"),
        (CheckinRequest(method="POST", token="", body=b"{}"), "missing_token"),
        (CheckinRequest(method="POST", token=_token(secret=b"other"), body=b"{}"), "bad_sig"),
        (CheckinRequest(method="POST", token=_token(NOW_MS - 1), body=b"{}"), "expired"),
        (CheckinRequest(method="POST", token="%%%", body=b"{}"), "bad_payload"),
        (CheckinRequest(method="GET", token=_token(), body=None), "use_post"),
        (CheckinRequest(method="POST", token=_token(), body=b"not json"), "bad_json"),
        (CheckinRequest(method="POST", token=_token(), body=b"{}"), "missing_coords"),
        (CheckinRequest(method="POST", token=_token(), body=None), "missing_coords"),
    ],
)
def test_failure_reasons(request_: CheckinRequest, reason: str) -> None:
    decision = evaluate_checkin(request_, CONFIG, NOW_MS)
    assert decision == Decision.failure(reason)
    assert decision.outcome == reason


def test_token_is_checked_before_method() -> None:
    decision = evaluate_checkin(CheckinRequest(method="GET", token=_token(NOW_MS - 1)), CONFIG, NOW_MS)
    assert decision.reason == "expired"


def test_method_is_checked_before_body() -> None:
    decision = evaluate_checkin(CheckinRequest(method="PUT", token=_token(), body=b"not json"), CONFIG, NOW_MS)
    assert decision.reason == "use_post"


def test_lowercase_post_is_accepted() -> None:
    request_ = CheckinRequest(method="post", token=_token(), body=b'{"lat": 11.18957, "lng": -74.21414}')
    assert evaluate_checkin(request_, CONFIG, NOW_MS).ok is True


def test_expiry_equal_to_now_is_accepted() -> None:
    decision = evaluate_checkin(_post({"lat": 11.18957, "lng": -74.21414}, token=_token(NOW_MS)), CONFIG, NOW_MS)
    assert decision.ok is True


def test_config_requires_sites_and_non_negative_radius() -> None:
    with pytest.raises(ValueError):
        CheckinConfig(secret=SECRET, sites=(), radius_meters=200)
    with pytest.raises(ValueError):
        CheckinConfig(secret=SECRET, sites=(GAIRA,), radius_meters=-1)


def test_deeply_nested_body_is_bad_json() -> None:
    raw = b'{"lat": ' + b"[" * 200_000 + b"]" * 200_000 + b"}"
    decision = evaluate_checkin(_post(raw), CONFIG, NOW_MS)
    assert decision == Decision.failure("bad_json")
