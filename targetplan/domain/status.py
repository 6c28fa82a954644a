"""Four-tier status classification of achievement and growth ratios."""

from __future__ import annotations

from targetplan.domain.types import DEFAULT_THRESHOLD_RULE, StatusTier, ThresholdBand


def get_achievement_status(
    rate: float,
    band: ThresholdBand = DEFAULT_THRESHOLD_RULE.achievement,
) -> StatusTier:
    # Evaluated top-down: good_min sits above 1.0 and warning_min below it.
    if rate >= band.good_min:
        return StatusTier.GOOD
    if rate >= 1:
        return StatusTier.NORMAL
    if rate >= band.warning_min:
        return StatusTier.WARNING
    return StatusTier.DANGER


def get_growth_status(
    rate: float,
    band: ThresholdBand = DEFAULT_THRESHOLD_RULE.growth,
) -> StatusTier:
    if rate >= band.good_min:
        return StatusTier.GOOD
    if rate >= band.warning_min:
        return StatusTier.NORMAL
    if rate >= 0:
        return StatusTier.WARNING
    return StatusTier.DANGER
