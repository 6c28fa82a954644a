"""Annual-to-monthly allocation and monthly time rollups."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext

from targetplan.domain.types import (
    MONTHS_PER_QUARTER,
    MONTHS_PER_YEAR,
    QUARTERS_PER_YEAR,
    MonthlySeries,
    ProgressMode,
    RoundingMode,
    WeightVector,
)

logger = logging.getLogger(__name__)

Q0 = Decimal("1")
Q2 = Decimal("0.01")

_QUANTUM = {
    RoundingMode.TWO_DECIMALS: Q2,
    RoundingMode.INTEGER: Q0,
}


def clamp_month(month: int) -> int:
    return max(1, min(MONTHS_PER_YEAR, int(month)))


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(value))


def _round(value: Decimal, mode: RoundingMode) -> Decimal:
    return value.quantize(_QUANTUM[mode], rounding=ROUND_HALF_UP)


def _value(entry: float | None) -> float:
    return 0.0 if entry is None else entry


def allocate_annual_to_monthly(
    annual_total: float,
    weights: WeightVector,
    rounding: RoundingMode = RoundingMode.NONE,
) -> list[float]:
    """Spread an annual total over twelve months by weight.

    With a rounding mode other than ``NONE`` each month is rounded on its own and the
    whole residual against the rounded annual total is booked into December, so the
    months always add up to the rounded annual total exactly.
    """

    raw = [annual_total * weight for weight in weights]
    if rounding is RoundingMode.NONE:
        return raw

    annual = _to_decimal(annual_total)
    values = [_to_decimal(value) for value in raw]
    with localcontext() as ctx:
        # Wide enough to hold twelve months of the largest value at cent precision.
        ctx.prec = max(ctx.prec, max(value.adjusted() for value in [annual, *values]) + 6)
        rounded = [_round(value, rounding) for value in values]
        residual = _round(annual, rounding) - sum(rounded, Decimal("0"))
        rounded[-1] = _round(rounded[-1] + residual, rounding)
    return [float(value) for value in rounded]


def calculate_baseline_weights(actuals: MonthlySeries) -> list[float]:
    """Share of each month in a realized year, nulls counting as zero."""

    if len(actuals) != MONTHS_PER_YEAR:
        return [0.0] * MONTHS_PER_YEAR

    year_total = sum(_value(entry) for entry in actuals)
    if year_total == 0:
        return [0.0] * MONTHS_PER_YEAR
    return [0.0 if entry is None else entry / year_total for entry in actuals]


def quarterly_weights(weights: WeightVector) -> list[float]:
    return monthly_to_quarterly(weights)


def monthly_to_quarterly(monthly: MonthlySeries) -> list[float]:
    """Fold months into the four calendar quarters."""

    return [
        sum(_value(entry) for entry in monthly[quarter * MONTHS_PER_QUARTER : (quarter + 1) * MONTHS_PER_QUARTER])
        for quarter in range(QUARTERS_PER_YEAR)
    ]


def monthly_to_ytd(monthly: MonthlySeries, month: int) -> float:
    """Year-to-date total through ``month`` (1-indexed, clamped to 1..12)."""

    return sum(_value(entry) for entry in monthly[: clamp_month(month)])


def _linear_shares(count: int) -> list[float]:
    return [1 / count] * count


def calculate_future_targets(
    annual_target: float,
    ytd_actual: float,
    current_month: int,
    mode: ProgressMode,
    weights: WeightVector | None = None,
    baseline_actuals: MonthlySeries | None = None,
) -> list[float]:
    """Re-spread the part of the annual target not yet achieved over the future months.

    Elapsed months carry the YTD average as a placeholder. The remaining gap goes to
    months after ``current_month`` in proportion to the chosen progress convention.
    """

    current_month = clamp_month(current_month)
    remaining = max(0.0, annual_target - ytd_actual)
    elapsed_placeholder = ytd_actual / current_month

    if remaining <= 0 or current_month >= MONTHS_PER_YEAR:
        return [elapsed_placeholder if index < current_month else 0.0 for index in range(MONTHS_PER_YEAR)]

    future_count = MONTHS_PER_YEAR - current_month
    if mode is ProgressMode.LINEAR:
        shares = _linear_shares(future_count)
    elif mode is ProgressMode.WEIGHTED:
        future_weights = list((weights or [])[current_month:MONTHS_PER_YEAR])
        total_weight = sum(future_weights)
        if total_weight == 0 or len(future_weights) != future_count:
            logger.warning("Future months carry no weight; falling back to linear allocation.")
            shares = _linear_shares(future_count)
        else:
            shares = [weight / total_weight for weight in future_weights]
    else:
        future_actuals = [_value(entry) for entry in (baseline_actuals or [])[current_month:MONTHS_PER_YEAR]]
        total_actual = sum(future_actuals)
        if total_actual == 0 or len(future_actuals) != future_count:
            logger.warning("Baseline actuals missing for future months; falling back to linear allocation.")
            shares = _linear_shares(future_count)
        else:
            shares = [value / total_actual for value in future_actuals]

    result = [elapsed_placeholder] * current_month
    result.extend(remaining * share for share in shares)
    return result


def _gap_shares(
    future_months: list[int],
    mode: ProgressMode,
    weights: WeightVector | None,
    baseline_actuals: MonthlySeries | None,
) -> dict[int, float] | None:
    if mode is ProgressMode.LINEAR:
        return {month: 1 / len(future_months) for month in future_months}

    if mode is ProgressMode.WEIGHTED:
        basis = {month: weights[month - 1] or 0.0 for month in future_months}
    else:
        basis = {month: _value(baseline_actuals[month - 1]) for month in future_months}

    basis_total = sum(basis.values())
    if basis_total == 0:
        logger.error("Cannot allocate remaining gap: %s basis for future months sums to 0.", mode.value)
        return None
    return {month: value / basis_total for month, value in basis.items()}


def generate_planned_actuals(
    annual_target: float,
    actuals: MonthlySeries,
    mode: ProgressMode,
    weights: WeightVector | None = None,
    baseline_actuals: MonthlySeries | None = None,
) -> list[float | None]:
    """Complete observed monthly actuals with a plan for the unobserved months.

    Observed months keep their value. The gap between the annual target and the
    observed total is spread over the unobserved months by ``mode``.
    """

    if mode is ProgressMode.WEIGHTED and (weights is None or len(weights) != MONTHS_PER_YEAR):
        logger.warning("Weighted planned actuals need %d monthly weights.", MONTHS_PER_YEAR)
        return [None] * MONTHS_PER_YEAR
    if mode is ProgressMode.BASELINE_ACTUAL and (
        baseline_actuals is None or len(baseline_actuals) != MONTHS_PER_YEAR
    ):
        logger.warning("Baseline planned actuals need %d months of baseline actuals.", MONTHS_PER_YEAR)
        return [None] * MONTHS_PER_YEAR

    observed = {
        index + 1: entry for index, entry in enumerate(actuals[:MONTHS_PER_YEAR]) if entry is not None
    }
    remaining_gap = annual_target - sum(observed.values())
    future_months = [month for month in range(1, MONTHS_PER_YEAR + 1) if month not in observed]

    result: list[float | None] = [observed.get(month) for month in range(1, MONTHS_PER_YEAR + 1)]
    if not future_months or remaining_gap <= 0:
        return result

    shares = _gap_shares(future_months, mode, weights, baseline_actuals)
    if shares is None:
        return result

    for month, share in shares.items():
        result[month - 1] = remaining_gap * share
    return result
