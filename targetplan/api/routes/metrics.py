"""Growth, cumulative achievement and headquarters target metric endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from targetplan.api.dependencies import get_pacing_service
from targetplan.api.payloads import ThresholdRulePayload, to_rule
from targetplan.domain.metrics import PeriodValues
from targetplan.domain.types import ProductCode
from targetplan.services.pacing_service import PacingService

router = APIRouter(prefix="/metrics", tags=["metrics"])


class PeriodValuesPayload(BaseModel):
    month: float | None = None
    quarter: float | None = None
    ytd: float | None = None

    def to_values(self) -> PeriodValues:
        return PeriodValues(month=self.month, quarter=self.quarter, ytd=self.ytd)


class GrowthMetricsPayload(BaseModel):
    current: PeriodValuesPayload
    baseline: PeriodValuesPayload


class HqTargetRecordPayload(BaseModel):
    product: ProductCode
    annual_target: float


class HqTargetsPayload(BaseModel):
    records: list[HqTargetRecordPayload]


class HqGapPayload(BaseModel):
    actual: float
    hq_target: float
    thresholds: ThresholdRulePayload | None = None


class CumulativeAchievementPayload(BaseModel):
    monthly_actuals: list[float | None]
    annual_target: float
    weights: list[float] | None = None
    use_weights: bool = False
    thresholds: ThresholdRulePayload | None = None


@router.post("/growth")
def post_growth_metrics(
    payload: GrowthMetricsPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    return service.growth_metrics(current=payload.current.to_values(), baseline=payload.baseline.to_values())


@router.post("/cumulative-achievement")
def post_cumulative_achievement(
    payload: CumulativeAchievementPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    months = service.cumulative_achievement(
        monthly_actuals=payload.monthly_actuals,
        annual_target=payload.annual_target,
        weights=payload.weights,
        use_weights=payload.use_weights,
        thresholds=to_rule(payload.thresholds),
    )
    return {"annual_target": payload.annual_target, "months": months}


@router.post("/hq-targets")
def post_hq_targets(
    payload: HqTargetsPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    return service.hq_targets([(record.product, record.annual_target) for record in payload.records])


@router.post("/hq-gap")
def post_hq_gap(
    payload: HqGapPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    return service.hq_gap(
        actual=payload.actual,
        hq_target=payload.hq_target,
        thresholds=to_rule(payload.thresholds),
    )
