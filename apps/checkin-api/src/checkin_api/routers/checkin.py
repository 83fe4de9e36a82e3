from __future__ import annotations

from collections.abc import Callable
import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from checkin_api.checkin import SERVER_ERROR, CheckinConfig, CheckinRequest, Decision, evaluate_checkin
from checkin_api.dependencies import get_checkin_config, get_clock, get_metrics_collector
from checkin_api.observability import ApiMetricCollector, get_trace_id
from checkin_api.schemas.checkin import CheckinDecisionResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["checkin"])

ACCEPTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]
NO_STORE_HEADERS = {"cache-control": "no-store"}


@router.api_route("/v1/checkin/validate", methods=ACCEPTED_METHODS)
@router.api_route("/.netlify/functions/validate", methods=ACCEPTED_METHODS, include_in_schema=False)
async def validate_checkin(
    request: Request,
    token: str | None = Query(default=None),
    config: CheckinConfig = Depends(get_checkin_config),
    clock: Callable[[], int] = Depends(get_clock),
    collector: ApiMetricCollector = Depends(get_metrics_collector),
) -> JSONResponse:
    try:
        body = await request.body()
        decision = evaluate_checkin(
            CheckinRequest(method=request.method, token=token, body=body),
            config,
            now_ms=clock(),
        )
    except Exception:
        logger.exception("checkin_failed", extra={"component": "checkin_api", "trace_id": get_trace_id()})
        decision = Decision.failure(SERVER_ERROR)

    collector.observe_decision(decision.outcome)
    logger.info(
        "checkin_decision",
        extra={
            "component": "checkin_api",
            "outcome": decision.outcome,
            "site": decision.site,
            "distance_m": decision.distance_m,
            "trace_id": get_trace_id(),
        },
    )
    # failures travel in the body; the status is always 200
    return JSONResponse(
        status_code=200,
        content=CheckinDecisionResponse.from_decision(decision).to_wire(),
        headers=NO_STORE_HEADERS,
    )
