"""Time progress endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from targetplan.api.dependencies import get_pacing_service
from targetplan.services.pacing_service import PacingService

router = APIRouter(tags=["progress"])


class ProgressPayload(BaseModel):
    month: int
    weights: list[float] | None = None
    baseline_actuals: list[float | None] | None = None


@router.post("/progress")
def post_progress(
    payload: ProgressPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    return service.time_progress(
        month=payload.month,
        weights=payload.weights,
        baseline_actuals=payload.baseline_actuals,
    )
