"""Quarterly proportion report and export endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel, Field

from targetplan.api.dependencies import get_pacing_service
from targetplan.api.payloads import ThresholdRulePayload, to_rule
from targetplan.domain.types import RoundingMode
from targetplan.services.pacing_service import PacingService, QuarterlyProportionInput

router = APIRouter(tags=["reports"])


class QuarterlyProportionPayload(BaseModel):
    annual_target: float
    baseline_actuals: list[float | None] = Field(min_length=12, max_length=12)
    current_actuals: list[float | None] = Field(min_length=12, max_length=12)
    weights: list[float] | None = None
    thresholds: ThresholdRulePayload | None = None
    rounding: RoundingMode | None = None

    def to_input(self) -> QuarterlyProportionInput:
        return QuarterlyProportionInput(
            annual_target=self.annual_target,
            baseline_actuals=self.baseline_actuals,
            current_actuals=self.current_actuals,
            weights=self.weights,
            thresholds=to_rule(self.thresholds),
            rounding=self.rounding,
        )


@router.post("/reports/quarterly-proportion")
def post_quarterly_proportion_report(
    payload: QuarterlyProportionPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    return service.quarterly_proportion_report(payload.to_input())


@router.post("/exports/quarterly-proportion")
def export_quarterly_proportion(
    payload: QuarterlyProportionPayload,
    format: str = Query(default="xlsx"),
    service: PacingService = Depends(get_pacing_service),
) -> Response:
    exported = service.export_quarterly_proportion(payload.to_input(), format)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
