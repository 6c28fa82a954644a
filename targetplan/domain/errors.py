"""Configuration errors raised by the validators."""

from __future__ import annotations

import enum


class ThresholdViolation(str, enum.Enum):
    """Stable codes identifying which threshold constraint failed."""

    THRESHOLD_NOT_FINITE = "threshold_not_finite"
    ACHIEVEMENT_GOOD_MIN_NOT_ABOVE_ONE = "achievement_good_min_not_above_one"
    ACHIEVEMENT_WARNING_MIN_NOT_BELOW_ONE = "achievement_warning_min_not_below_one"
    ACHIEVEMENT_WARNING_MIN_NEGATIVE = "achievement_warning_min_negative"
    GROWTH_GOOD_MIN_NOT_ABOVE_WARNING_MIN = "growth_good_min_not_above_warning_min"


class ConfigurationError(ValueError):
    """Base class for operator-supplied configuration that must be rejected.

    ``str(error)`` always starts with ``code`` followed by ``:`` so that callers
    splitting the message on the first colon recover the same code.
    """

    code: str

    def __init__(self, code: str, detail: str) -> None:
        self.code = code
        self.detail = detail
        super().__init__(f"{code}: {detail}")


class InvalidWeightsError(ConfigurationError):
    LENGTH = "weights_length"
    NEGATIVE = "weights_negative"
    SUM_NOT_ONE = "weights_sum_not_one"

    def __init__(self, code: str, detail: str, *, actual_sum: float) -> None:
        self.actual_sum = actual_sum
        super().__init__(code, detail)


class InvalidThresholdError(ConfigurationError):
    def __init__(self, violation: ThresholdViolation, detail: str) -> None:
        self.violation = violation
        super().__init__(violation.value, detail)


class UnknownOrganizationError(LookupError):
    def __init__(self, org_ids: list[str]) -> None:
        self.org_ids = org_ids
        super().__init__(f"Unknown organization ids: {', '.join(org_ids)}")
