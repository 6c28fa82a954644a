"""Validators for operator-editable configuration and reference data."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from targetplan.domain.errors import InvalidThresholdError, InvalidWeightsError, ThresholdViolation
from targetplan.domain.types import MONTHS_PER_YEAR, ThresholdRule

WEIGHT_SUM_TOLERANCE = 1e-6


def validate_weights(weights: Sequence[float], tolerance: float = WEIGHT_SUM_TOLERANCE) -> None:
    """Reject a monthly weight vector that is not 12 non-negative shares summing to 1."""

    actual_sum = math.fsum(weights)
    if len(weights) != MONTHS_PER_YEAR:
        raise InvalidWeightsError(
            InvalidWeightsError.LENGTH,
            f"expected {MONTHS_PER_YEAR} monthly weights, got {len(weights)}",
            actual_sum=actual_sum,
        )

    negative = [index + 1 for index, weight in enumerate(weights) if weight < 0]
    if negative:
        raise InvalidWeightsError(
            InvalidWeightsError.NEGATIVE,
            f"weights must be non-negative, months {negative} are negative",
            actual_sum=actual_sum,
        )

    if not abs(actual_sum - 1.0) <= tolerance:
        raise InvalidWeightsError(
            InvalidWeightsError.SUM_NOT_ONE,
            f"weights must sum to 1, sum={actual_sum}",
            actual_sum=actual_sum,
        )


def validate_thresholds(rule: ThresholdRule) -> None:
    """Reject threshold breakpoints that would make the status tiers overlap."""

    achievement = rule.achievement
    growth = rule.growth
    for name, value in (
        ("achievement.good_min", achievement.good_min),
        ("achievement.warning_min", achievement.warning_min),
        ("growth.good_min", growth.good_min),
        ("growth.warning_min", growth.warning_min),
    ):
        if not math.isfinite(value):
            raise InvalidThresholdError(
                ThresholdViolation.THRESHOLD_NOT_FINITE,
                f"{name} must be a finite number, got {value}",
            )

    if not achievement.good_min > 1:
        raise InvalidThresholdError(
            ThresholdViolation.ACHIEVEMENT_GOOD_MIN_NOT_ABOVE_ONE,
            f"achievement.good_min must be > 1, got {achievement.good_min}",
        )
    if not achievement.warning_min < 1:
        raise InvalidThresholdError(
            ThresholdViolation.ACHIEVEMENT_WARNING_MIN_NOT_BELOW_ONE,
            f"achievement.warning_min must be < 1, got {achievement.warning_min}",
        )
    if not achievement.warning_min >= 0:
        raise InvalidThresholdError(
            ThresholdViolation.ACHIEVEMENT_WARNING_MIN_NEGATIVE,
            f"achievement.warning_min must be >= 0, got {achievement.warning_min}",
        )
    if not growth.good_min > growth.warning_min:
        raise InvalidThresholdError(
            ThresholdViolation.GROWTH_GOOD_MIN_NOT_ABOVE_WARNING_MIN,
            f"growth.good_min must be > growth.warning_min, got {growth.good_min} <= {growth.warning_min}",
        )


@dataclass(frozen=True, slots=True)
class OrganizationIdCheck:
    valid: bool
    missing: tuple[str, ...]
    extra: tuple[str, ...]

    def report(self, source: str) -> str:
        if self.valid:
            return f"{source}: organization ids match the reference list."

        issues: list[str] = []
        if self.missing:
            issues.append(f"missing: {', '.join(self.missing)}")
        if self.extra:
            issues.append(f"extra: {', '.join(self.extra)}")
        return f"{source}: organization id check failed\n  " + "\n  ".join(issues)


def validate_organization_ids(data_org_ids: Iterable[str], standard_org_ids: Iterable[str]) -> OrganizationIdCheck:
    """Compare organization ids found in a dataset against the reference list."""

    data = list(data_org_ids)
    standard = list(standard_org_ids)
    data_set = set(data)
    standard_set = set(standard)

    missing = tuple(org_id for org_id in dict.fromkeys(standard) if org_id not in data_set)
    extra = tuple(org_id for org_id in dict.fromkeys(data) if org_id not in standard_set)
    return OrganizationIdCheck(valid=not missing and not extra, missing=missing, extra=extra)
