"""Weight/threshold configuration checks and status classification endpoints."""

from __future__ import annotations

import math

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from targetplan.api.dependencies import get_pacing_service
from targetplan.api.payloads import ThresholdRulePayload, to_rule
from targetplan.services.pacing_service import PacingService

router = APIRouter(tags=["rules"])


class WeightsPayload(BaseModel):
    weights: list[float]


class RatePayload(BaseModel):
    rate: float
    thresholds: ThresholdRulePayload | None = None


@router.get("/rules/defaults")
def get_rule_defaults(service: PacingService = Depends(get_pacing_service)) -> dict[str, object]:
    return service.defaults()


@router.post("/rules/weights/validate")
def post_validate_weights(
    payload: WeightsPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    weights = service.resolve_weights(payload.weights)
    return {"valid": True, "actual_sum": math.fsum(weights)}


@router.post("/rules/thresholds/validate")
def post_validate_thresholds(
    payload: ThresholdRulePayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    rule = service.resolve_thresholds(payload.to_rule())
    return {"valid": True, "thresholds": service.serialize_thresholds(rule)}


@router.post("/status/achievement")
def post_achievement_status(
    payload: RatePayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    return {
        "rate": payload.rate,
        "status": service.achievement_status(rate=payload.rate, thresholds=to_rule(payload.thresholds)),
    }


@router.post("/status/growth")
def post_growth_status(
    payload: RatePayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    return {
        "rate": payload.rate,
        "status": service.growth_status(rate=payload.rate, thresholds=to_rule(payload.thresholds)),
    }
