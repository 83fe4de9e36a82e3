from __future__ import annotations

from pydantic import BaseModel, Field

from checkin_api.checkin import Decision


class CheckinDecisionResponse(BaseModel):
    """Wire shape of a decision; ``sede``/``radio_m`` keys are kept for existing clients."""

    ok: bool
    reason: str | None = None
    site: str | None = Field(default=None, serialization_alias="sede")
    distance_m: int | None = None
    radius_m: int | None = Field(default=None, serialization_alias="radio_m")

    @classmethod
    def from_decision(cls, decision: Decision) -> CheckinDecisionResponse:
        return cls(
            ok=decision.ok,
            reason=decision.reason,
            site=decision.site,
            distance_m=decision.distance_m,
            radius_m=decision.radius_m,
        )

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)
