"""Allocation and time rollup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from targetplan.api.dependencies import get_pacing_service
from targetplan.domain import allocation
from targetplan.domain.types import ProgressMode, RoundingMode
from targetplan.services.pacing_service import PacingService

router = APIRouter(tags=["allocations"])


class MonthlyAllocationPayload(BaseModel):
    annual_total: float
    weights: list[float] | None = None
    rounding: RoundingMode | None = None


class FutureTargetsPayload(BaseModel):
    annual_target: float
    ytd_actual: float
    current_month: int
    mode: ProgressMode = ProgressMode.LINEAR
    weights: list[float] | None = None
    baseline_actuals: list[float | None] | None = None


class PlannedActualsPayload(BaseModel):
    annual_target: float
    actuals: list[float | None]
    mode: ProgressMode = ProgressMode.LINEAR
    weights: list[float] | None = None
    baseline_actuals: list[float | None] | None = None


class MonthlySeriesPayload(BaseModel):
    monthly: list[float | None] = Field(min_length=12, max_length=12)


class YtdPayload(BaseModel):
    monthly: list[float | None] = Field(min_length=12, max_length=12)
    month: int


@router.post("/allocations/monthly")
def post_monthly_allocation(
    payload: MonthlyAllocationPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    return service.allocate(
        annual_total=payload.annual_total,
        weights=payload.weights,
        rounding=payload.rounding,
    )


@router.post("/allocations/future-targets")
def post_future_targets(
    payload: FutureTargetsPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    monthly = service.future_targets(
        annual_target=payload.annual_target,
        ytd_actual=payload.ytd_actual,
        current_month=payload.current_month,
        mode=payload.mode,
        weights=payload.weights,
        baseline_actuals=payload.baseline_actuals,
    )
    return {"mode": payload.mode.value, "monthly": monthly}


@router.post("/allocations/planned-actuals")
def post_planned_actuals(
    payload: PlannedActualsPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    monthly = service.planned_actuals(
        annual_target=payload.annual_target,
        actuals=payload.actuals,
        mode=payload.mode,
        weights=payload.weights,
        baseline_actuals=payload.baseline_actuals,
    )
    return {"mode": payload.mode.value, "monthly": monthly}


@router.post("/allocations/baseline-weights")
def post_baseline_weights(payload: MonthlySeriesPayload) -> dict[str, object]:
    weights = allocation.calculate_baseline_weights(payload.monthly)
    return {"weights": weights, "quarterly_weights": allocation.quarterly_weights(weights)}


@router.post("/rollups/quarterly")
def post_quarterly_rollup(payload: MonthlySeriesPayload) -> dict[str, object]:
    return {"quarterly": allocation.monthly_to_quarterly(payload.monthly)}


@router.post("/rollups/ytd")
def post_ytd_rollup(payload: YtdPayload) -> dict[str, object]:
    return {
        "month": allocation.clamp_month(payload.month),
        "ytd": allocation.monthly_to_ytd(payload.monthly, payload.month),
    }
