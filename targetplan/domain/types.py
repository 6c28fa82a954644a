"""Value types shared by the target pacing engine."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

MONTHS_PER_YEAR = 12
MONTHS_PER_QUARTER = 3
QUARTERS_PER_YEAR = 4

WeightVector = Sequence[float]
# One value per calendar month; None marks a month not yet observed.
MonthlySeries = Sequence[float | None]


class RoundingMode(str, enum.Enum):
    NONE = "none"
    TWO_DECIMALS = "2dp"
    INTEGER = "integer"


class ProgressMode(str, enum.Enum):
    LINEAR = "linear"
    WEIGHTED = "weighted"
    BASELINE_ACTUAL = "baseline_actual"


class StatusTier(str, enum.Enum):
    GOOD = "good"
    NORMAL = "normal"
    WARNING = "warning"
    DANGER = "danger"


class GroupCode(str, enum.Enum):
    LOCAL = "local"
    REMOTE = "remote"
    ALL = "all"


class ProductCode(str, enum.Enum):
    AUTO = "auto"
    PROPERTY = "property"
    LIFE = "life"
    HEALTH = "health"
    TOTAL = "total"


@dataclass(frozen=True, slots=True)
class FactRow:
    """One organization/product value ready for dimensional aggregation."""

    org_id: str
    group: GroupCode
    product: ProductCode
    value: float

    def __post_init__(self) -> None:
        if self.group == GroupCode.ALL:
            raise ValueError("FactRow.group cannot be the reserved 'all' rollup code.")
        if self.product == ProductCode.TOTAL:
            raise ValueError("FactRow.product cannot be the reserved 'total' rollup code.")


@dataclass(frozen=True, slots=True)
class ThresholdBand:
    good_min: float
    warning_min: float


@dataclass(frozen=True, slots=True)
class ThresholdRule:
    """Breakpoints used to classify achievement and growth ratios."""

    achievement: ThresholdBand
    growth: ThresholdBand
    rule_id: str = "THRESHOLD_GLOBAL_DEFAULT"
    scope: str = "global"
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class ProgressPair:
    year: float
    quarter: float


DEFAULT_MONTHLY_WEIGHTS: tuple[float, ...] = (
    0.070,
    0.073,
    0.092,
    0.088,
    0.094,
    0.099,
    0.066,
    0.066,
    0.068,
    0.083,
    0.083,
    0.118,
)

DEFAULT_THRESHOLD_RULE = ThresholdRule(
    achievement=ThresholdBand(good_min=1.05, warning_min=0.95),
    growth=ThresholdBand(good_min=0.12, warning_min=0.05),
    notes=(
        "achievement >=105% good, 100-105% normal, 95-100% warning, <95% danger; "
        "growth >=12% good, 5-12% normal, 0-5% warning, <0% danger"
    ),
)
