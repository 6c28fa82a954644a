"""Request models shared by several routers."""

from __future__ import annotations

from pydantic import BaseModel, Field

from targetplan.domain.types import ThresholdBand, ThresholdRule


class ThresholdBandPayload(BaseModel):
    good_min: float
    warning_min: float


class ThresholdRulePayload(BaseModel):
    rule_id: str = Field(default="THRESHOLD_GLOBAL_DEFAULT", min_length=1)
    scope: str = Field(default="global", min_length=1)
    achievement: ThresholdBandPayload
    growth: ThresholdBandPayload
    notes: str | None = None

    def to_rule(self) -> ThresholdRule:
        return ThresholdRule(
            rule_id=self.rule_id,
            scope=self.scope,
            achievement=ThresholdBand(
                good_min=self.achievement.good_min,
                warning_min=self.achievement.warning_min,
            ),
            growth=ThresholdBand(
                good_min=self.growth.good_min,
                warning_min=self.growth.warning_min,
            ),
            notes=self.notes,
        )


def to_rule(payload: ThresholdRulePayload | None) -> ThresholdRule | None:
    return payload.to_rule() if payload is not None else None
