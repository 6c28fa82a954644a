"""Achievement and growth ratios with explicit null reasons."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from targetplan.domain.types import MONTHS_PER_YEAR, MonthlySeries, ProductCode, WeightVector

DIVISION_BY_ZERO = "division_by_zero"
NO_CURRENT_DATA = "no_current_data"
NO_BASELINE_DATA = "no_baseline_data"


@dataclass(frozen=True, slots=True)
class Ratio:
    value: float | None
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class PeriodValues:
    month: float | None
    quarter: float | None
    ytd: float | None


@dataclass(frozen=True, slots=True)
class GrowthMetrics:
    growth_month_rate: float | None
    growth_quarter_rate: float | None
    growth_ytd_rate: float | None
    inc_month: float | None
    inc_quarter: float | None
    inc_ytd: float | None
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class CumulativeAchievement:
    month: int
    cumulative_actual: float
    cumulative_target: float
    rate: float | None


def safe_divide(numerator: float, denominator: float) -> Ratio:
    if denominator == 0:
        return Ratio(value=None, reason=DIVISION_BY_ZERO)
    return Ratio(value=numerator / denominator)


def achievement_rate(actual: float, target: float) -> Ratio:
    return safe_divide(actual, target)


def growth_rate(current: float | None, baseline: float | None) -> Ratio:
    if current is None:
        return Ratio(value=None, reason=NO_CURRENT_DATA)
    if baseline is None:
        return Ratio(value=None, reason=NO_BASELINE_DATA)
    return safe_divide(current - baseline, baseline)


def increment(current: float | None, baseline: float | None) -> float | None:
    if current is None or baseline is None:
        return None
    return current - baseline


def calculate_growth_metrics(current: PeriodValues, baseline: PeriodValues) -> GrowthMetrics:
    """Year-over-year growth rates and increments for month, quarter and YTD."""

    month = growth_rate(current.month, baseline.month)
    quarter = growth_rate(current.quarter, baseline.quarter)
    ytd = growth_rate(current.ytd, baseline.ytd)
    return GrowthMetrics(
        growth_month_rate=month.value,
        growth_quarter_rate=quarter.value,
        growth_ytd_rate=ytd.value,
        inc_month=increment(current.month, baseline.month),
        inc_quarter=increment(current.quarter, baseline.quarter),
        inc_ytd=increment(current.ytd, baseline.ytd),
        reason=month.reason or quarter.reason or ytd.reason,
    )


def predict_cumulative_achievement(
    monthly_actuals: MonthlySeries,
    annual_target: float,
    weights: WeightVector | None = None,
) -> list[CumulativeAchievement]:
    """Month-by-month cumulative actual against the cumulative share of a target.

    The cumulative target follows the weight profile when one is given and linear
    time otherwise. Missing months add nothing to the cumulative actual.
    """

    result: list[CumulativeAchievement] = []
    cumulative_actual = 0.0
    cumulative_weight = 0.0
    for index in range(MONTHS_PER_YEAR):
        value = monthly_actuals[index] if index < len(monthly_actuals) else None
        cumulative_actual += value or 0.0

        if weights is not None:
            cumulative_weight += weights[index] if index < len(weights) else 0.0
            progress = cumulative_weight
        else:
            progress = (index + 1) / MONTHS_PER_YEAR

        cumulative_target = annual_target * progress
        result.append(
            CumulativeAchievement(
                month=index + 1,
                cumulative_actual=cumulative_actual,
                cumulative_target=cumulative_target,
                rate=safe_divide(cumulative_actual, cumulative_target).value,
            )
        )
    return result


def shares(values: Sequence[float]) -> list[float | None]:
    total = sum(values)
    return [safe_divide(value, total).value for value in values]


def hq_gap(actual: float, hq_target: float) -> float:
    """Surplus (positive) or shortfall (negative) against the headquarters target."""

    return actual - hq_target


def aggregate_hq_targets_by_product(records: Iterable[tuple[ProductCode, float]]) -> dict[ProductCode, float]:
    """Headquarters annual targets keyed by product, with a derived ``total``.

    Health is not part of the headquarters assessment and is skipped. A later record
    for the same product replaces an earlier one. Any supplied ``total`` is ignored
    in favour of the sum of the products.
    """

    targets: dict[ProductCode, float] = {}
    for product, annual_target in records:
        if product in (ProductCode.HEALTH, ProductCode.TOTAL):
            continue
        targets[product] = annual_target
    targets[ProductCode.TOTAL] = sum(targets.values())
    return targets
