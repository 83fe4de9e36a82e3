from shared.security.checkin_token import (
    BAD_PAYLOAD,
    BAD_SIGNATURE,
    EXPIRED,
    TokenVerificationError,
    sign_payload,
    verify_checkin_token,
)

__all__ = [
    "BAD_PAYLOAD",
    "BAD_SIGNATURE",
    "EXPIRED",
    "TokenVerificationError",
    "sign_payload",
    "verify_checkin_token",
]
