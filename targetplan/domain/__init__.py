"""Pure target pacing core: allocation, rollups, progress and status rules."""

from targetplan.domain.aggregation import aggregate_to_group_and_all, build_fact_rows
from targetplan.domain.allocation import (
    allocate_annual_to_monthly,
    calculate_baseline_weights,
    calculate_future_targets,
    generate_planned_actuals,
    monthly_to_quarterly,
    monthly_to_ytd,
    quarterly_weights,
)
from targetplan.domain.errors import (
    ConfigurationError,
    InvalidThresholdError,
    InvalidWeightsError,
    ThresholdViolation,
    UnknownOrganizationError,
)
from targetplan.domain.progress import (
    baseline_actual_progress_quarter,
    baseline_actual_progress_year,
    linear_progress_quarter,
    linear_progress_year,
    month_to_quarter,
    time_progress,
    weighted_progress_quarter,
    weighted_progress_year,
)
from targetplan.domain.status import get_achievement_status, get_growth_status
from targetplan.domain.types import (
    DEFAULT_MONTHLY_WEIGHTS,
    DEFAULT_THRESHOLD_RULE,
    FactRow,
    GroupCode,
    ProductCode,
    ProgressMode,
    RoundingMode,
    StatusTier,
    ThresholdBand,
    ThresholdRule,
)
from targetplan.domain.validation import validate_organization_ids, validate_thresholds, validate_weights

__all__ = [
    "DEFAULT_MONTHLY_WEIGHTS",
    "DEFAULT_THRESHOLD_RULE",
    "ConfigurationError",
    "FactRow",
    "GroupCode",
    "InvalidThresholdError",
    "InvalidWeightsError",
    "ProductCode",
    "ProgressMode",
    "RoundingMode",
    "StatusTier",
    "ThresholdBand",
    "ThresholdRule",
    "ThresholdViolation",
    "UnknownOrganizationError",
    "aggregate_to_group_and_all",
    "allocate_annual_to_monthly",
    "baseline_actual_progress_quarter",
    "baseline_actual_progress_year",
    "build_fact_rows",
    "calculate_baseline_weights",
    "calculate_future_targets",
    "generate_planned_actuals",
    "get_achievement_status",
    "get_growth_status",
    "linear_progress_quarter",
    "linear_progress_year",
    "month_to_quarter",
    "monthly_to_quarterly",
    "monthly_to_ytd",
    "quarterly_weights",
    "time_progress",
    "validate_organization_ids",
    "validate_thresholds",
    "validate_weights",
    "weighted_progress_quarter",
    "weighted_progress_year",
]
