"""Time progress under the linear, weighted and baseline-actual conventions.

Every function takes a 1-indexed calendar month and clamps it to 1..12. Degenerate
inputs resolve to a progress of 0 instead of raising.
"""

from __future__ import annotations

from targetplan.domain.allocation import clamp_month
from targetplan.domain.types import (
    MONTHS_PER_QUARTER,
    MONTHS_PER_YEAR,
    MonthlySeries,
    ProgressMode,
    ProgressPair,
    WeightVector,
)


def month_to_quarter(month: int) -> int:
    return (clamp_month(month) - 1) // MONTHS_PER_QUARTER + 1


def _quarter_start_index(month: int) -> int:
    return (month_to_quarter(month) - 1) * MONTHS_PER_QUARTER


def linear_progress_year(month: int) -> float:
    return clamp_month(month) / MONTHS_PER_YEAR


def linear_progress_quarter(month: int) -> float:
    month = clamp_month(month)
    position = month - _quarter_start_index(month)
    return position / MONTHS_PER_QUARTER


def weighted_progress_year(weights: WeightVector, month: int) -> float:
    """Cumulative share of the annual weight elapsed through ``month``."""

    return sum(weights[: clamp_month(month)])


def weighted_progress_quarter(weights: WeightVector, month: int) -> float:
    """Elapsed share of the current quarter's weight; 0 when the quarter has none."""

    month = clamp_month(month)
    start = _quarter_start_index(month)
    quarter_weights = weights[start : start + MONTHS_PER_QUARTER]
    quarter_total = sum(quarter_weights)
    if quarter_total == 0:
        return 0.0
    elapsed = sum(quarter_weights[: month - start])
    return elapsed / quarter_total


def baseline_actual_progress_year(actuals: MonthlySeries, month: int) -> float:
    """This month's share of the realized baseline year total."""

    if len(actuals) != MONTHS_PER_YEAR:
        return 0.0

    month = clamp_month(month)
    current = actuals[month - 1]
    year_total = sum(entry for entry in actuals if entry is not None)
    if year_total == 0 or current is None:
        return 0.0
    return current / year_total


def baseline_actual_progress_quarter(actuals: MonthlySeries, month: int) -> float:
    """This month's share of its realized baseline quarter total."""

    if len(actuals) != MONTHS_PER_YEAR:
        return 0.0

    month = clamp_month(month)
    current = actuals[month - 1]
    if current is None:
        return 0.0

    start = _quarter_start_index(month)
    quarter_total = sum(entry or 0.0 for entry in actuals[start : start + MONTHS_PER_QUARTER])
    if quarter_total == 0:
        return 0.0
    return current / quarter_total


def time_progress(
    mode: ProgressMode,
    month: int,
    weights: WeightVector | None = None,
    baseline_actuals: MonthlySeries | None = None,
) -> ProgressPair:
    if mode is ProgressMode.LINEAR:
        return ProgressPair(year=linear_progress_year(month), quarter=linear_progress_quarter(month))
    if mode is ProgressMode.WEIGHTED:
        weights = weights or ()
        return ProgressPair(
            year=weighted_progress_year(weights, month),
            quarter=weighted_progress_quarter(weights, month),
        )
    baseline_actuals = baseline_actuals or ()
    return ProgressPair(
        year=baseline_actual_progress_year(baseline_actuals, month),
        quarter=baseline_actual_progress_quarter(baseline_actuals, month),
    )
