from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import math
import re

BAD_SIGNATURE = "bad_sig"
BAD_PAYLOAD = "bad_payload"
EXPIRED = "expired"

_EXPIRY_PATTERN = re.compile(r"[+-]?[0-9]+")


class TokenVerificationError(ValueError):
    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason


def sign_payload(secret: bytes, payload: str) -> str:
    return hmac.new(secret, payload.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_checkin_token(token: str, secret: bytes, now_ms: int) -> int:
    """Verify a check-in token and return its expiry in epoch milliseconds.

    The token is ``base64url(payload + "." + hex_hmac_sha256(payload))`` where
    ``payload`` is the decimal expiry. Raises :class:`TokenVerificationError`
    whose ``reason`` is ``bad_payload``, ``bad_sig`` or ``expired``.
    """
    decoded = _decode_token(token)
    segments = decoded.split(".")
    if len(segments) != 2:
        raise TokenVerificationError(BAD_PAYLOAD, "token must have exactly two segments")
    payload, signature = segments

    expected = sign_payload(secret, payload)
    if not hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8")):
        raise TokenVerificationError(BAD_SIGNATURE, "invalid token signature")

    expiry_ms = _parse_expiry(payload)
    if now_ms > expiry_ms:
        raise TokenVerificationError(EXPIRED, "token expired")
    return expiry_ms


def _parse_expiry(payload: str) -> int:
    if not _EXPIRY_PATTERN.fullmatch(payload):
        raise TokenVerificationError(BAD_PAYLOAD, "token expiry is not an integer")
    # expiries beyond float64 range are not finite timestamps
    if not math.isfinite(float(payload)):
        raise TokenVerificationError(BAD_PAYLOAD, "token expiry is not finite")
    try:
        return int(payload)
    except ValueError as exc:
        raise TokenVerificationError(BAD_PAYLOAD, "token expiry is too long") from exc


def _decode_token(token: str) -> str:
    padding = "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode((token + padding).encode("ascii"))
        return raw.decode("utf-8")
    except (UnicodeError, binascii.Error, ValueError) as exc:
        raise TokenVerificationError(BAD_PAYLOAD, "token is not valid base64url text") from exc
