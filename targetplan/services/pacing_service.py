"""Application service composing the pacing core for the HTTP layer."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from io import BytesIO

from fastapi import HTTPException, status

from targetplan.core.config import Settings, get_settings
from targetplan.domain import aggregation, allocation, metrics, progress, validation
from targetplan.domain.errors import ConfigurationError, InvalidWeightsError, UnknownOrganizationError
from targetplan.domain.status import get_achievement_status, get_growth_status
from targetplan.domain.types import (
    MONTHS_PER_QUARTER,
    QUARTERS_PER_YEAR,
    FactRow,
    GroupCode,
    MonthlySeries,
    ProductCode,
    ProgressMode,
    RoundingMode,
    ThresholdBand,
    ThresholdRule,
)

logger = logging.getLogger(__name__)

QUARTER_LABELS = ("Q1", "Q2", "Q3", "Q4")
EXPORT_FIELDS = (
    "quarter",
    "target",
    "target_share",
    "baseline_actual",
    "baseline_share",
    "current_actual",
    "growth_rate",
    "growth_status",
)


@dataclass(slots=True)
class QuarterlyProportionInput:
    annual_target: float
    baseline_actuals: list[float | None]
    current_actuals: list[float | None]
    weights: list[float] | None = None
    thresholds: ThresholdRule | None = None
    rounding: RoundingMode | None = None


@dataclass(slots=True)
class QuarterlyProportionRow:
    quarter: str
    target: float
    target_share: float | None
    baseline_actual: float
    baseline_share: float | None
    current_actual: float | None
    growth_rate: float | None
    growth_status: str | None


@dataclass(slots=True)
class ExportFilePayload:
    media_type: str
    filename: str
    content: bytes


def _unprocessable(detail: object) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


def _require_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise _unprocessable({"code": "amount_not_finite", "message": f"{name} must be a finite number."})


def _observed_quarter_total(monthly: MonthlySeries, quarter_index: int) -> float | None:
    months = monthly[quarter_index * MONTHS_PER_QUARTER : (quarter_index + 1) * MONTHS_PER_QUARTER]
    observed = [value for value in months if value is not None]
    if not observed:
        return None
    return sum(observed)


class PacingService:
    """Service applying configured defaults and rejecting invalid configuration."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    # ---------- Configuration ----------
    @staticmethod
    def serialize_configuration_error(error: ConfigurationError) -> dict[str, object]:
        payload: dict[str, object] = {"code": error.code, "message": str(error)}
        if isinstance(error, InvalidWeightsError):
            payload["actual_sum"] = error.actual_sum
        return payload

    def _reject(self, error: ConfigurationError) -> HTTPException:
        logger.warning("Rejected configuration: %s", error)
        return _unprocessable(self.serialize_configuration_error(error))

    def resolve_weights(self, weights: Sequence[float] | None = None) -> list[float]:
        candidate = list(weights) if weights is not None else list(self.settings.default_monthly_weights)
        try:
            validation.validate_weights(candidate, tolerance=self.settings.weight_sum_tolerance)
        except InvalidWeightsError as exc:
            raise self._reject(exc) from exc
        return candidate

    def default_thresholds(self) -> ThresholdRule:
        return ThresholdRule(
            achievement=ThresholdBand(
                good_min=self.settings.achievement_good_min,
                warning_min=self.settings.achievement_warning_min,
            ),
            growth=ThresholdBand(
                good_min=self.settings.growth_good_min,
                warning_min=self.settings.growth_warning_min,
            ),
        )

    def resolve_thresholds(self, rule: ThresholdRule | None = None) -> ThresholdRule:
        candidate = rule or self.default_thresholds()
        try:
            validation.validate_thresholds(candidate)
        except ConfigurationError as exc:
            raise self._reject(exc) from exc
        return candidate

    @staticmethod
    def serialize_thresholds(rule: ThresholdRule) -> dict[str, object]:
        return {
            "rule_id": rule.rule_id,
            "scope": rule.scope,
            "achievement": {
                "good_min": rule.achievement.good_min,
                "warning_min": rule.achievement.warning_min,
            },
            "growth": {
                "good_min": rule.growth.good_min,
                "warning_min": rule.growth.warning_min,
            },
            "notes": rule.notes,
        }

    def defaults(self) -> dict[str, object]:
        weights = self.resolve_weights()
        return {
            "weights": weights,
            "quarterly_weights": allocation.quarterly_weights(weights),
            "rounding": self.settings.default_rounding.value,
            "weight_sum_tolerance": self.settings.weight_sum_tolerance,
            "thresholds": self.serialize_thresholds(self.resolve_thresholds()),
        }

    # ---------- Allocation ----------
    def allocate(
        self,
        *,
        annual_total: float,
        weights: Sequence[float] | None = None,
        rounding: RoundingMode | None = None,
    ) -> dict[str, object]:
        _require_finite("annual_total", annual_total)
        resolved = self.resolve_weights(weights)
        mode = rounding or self.settings.default_rounding
        monthly = allocation.allocate_annual_to_monthly(annual_total, resolved, mode)
        return {
            "annual_total": annual_total,
            "rounding": mode.value,
            "monthly": monthly,
            "quarterly": allocation.monthly_to_quarterly(monthly),
            "total": sum(monthly),
        }

    def future_targets(
        self,
        *,
        annual_target: float,
        ytd_actual: float,
        current_month: int,
        mode: ProgressMode,
        weights: Sequence[float] | None = None,
        baseline_actuals: MonthlySeries | None = None,
    ) -> list[float]:
        resolved = self.resolve_weights(weights) if mode is ProgressMode.WEIGHTED else None
        return allocation.calculate_future_targets(
            annual_target,
            ytd_actual,
            current_month,
            mode,
            weights=resolved,
            baseline_actuals=baseline_actuals,
        )

    def planned_actuals(
        self,
        *,
        annual_target: float,
        actuals: MonthlySeries,
        mode: ProgressMode,
        weights: Sequence[float] | None = None,
        baseline_actuals: MonthlySeries | None = None,
    ) -> list[float | None]:
        resolved = self.resolve_weights(weights) if mode is ProgressMode.WEIGHTED else None
        return allocation.generate_planned_actuals(
            annual_target,
            actuals,
            mode,
            weights=resolved,
            baseline_actuals=baseline_actuals,
        )

    # ---------- Progress ----------
    def time_progress(
        self,
        *,
        month: int,
        weights: Sequence[float] | None = None,
        baseline_actuals: MonthlySeries | None = None,
    ) -> dict[str, object]:
        resolved = self.resolve_weights(weights)
        output: dict[str, object] = {
            "month": allocation.clamp_month(month),
            "quarter": progress.month_to_quarter(month),
        }
        for mode in ProgressMode:
            pair = progress.time_progress(mode, month, weights=resolved, baseline_actuals=baseline_actuals)
            output[mode.value] = {"year": pair.year, "quarter": pair.quarter}
        return output

    # ---------- Aggregation ----------
    @staticmethod
    def aggregate(rows: Iterable[FactRow]) -> list[dict[str, object]]:
        totals = aggregation.aggregate_to_group_and_all(rows)
        return [
            {"group": group.value, "product": product.value, "value": value}
            for (group, product), value in sorted(totals.items(), key=lambda item: (item[0][0].value, item[0][1].value))
        ]

    @staticmethod
    def validate_organizations(
        *,
        data_org_ids: Sequence[str],
        standard_org_ids: Sequence[str],
        source: str,
    ) -> dict[str, object]:
        check = validation.validate_organization_ids(data_org_ids, standard_org_ids)
        return {
            "valid": check.valid,
            "missing": list(check.missing),
            "extra": list(check.extra),
            "report": check.report(source),
        }

    @staticmethod
    def fact_rows(
        records: Iterable[tuple[str, ProductCode, float]],
        org_groups: Mapping[str, GroupCode],
    ) -> list[FactRow]:
        try:
            return aggregation.build_fact_rows(records, org_groups)
        except UnknownOrganizationError as exc:
            raise _unprocessable({"code": "unknown_organization", "org_ids": exc.org_ids}) from exc

    # ---------- Status ----------
    def achievement_status(self, *, rate: float, thresholds: ThresholdRule | None = None) -> str:
        rule = self.resolve_thresholds(thresholds)
        return get_achievement_status(rate, rule.achievement).value

    def growth_status(self, *, rate: float, thresholds: ThresholdRule | None = None) -> str:
        rule = self.resolve_thresholds(thresholds)
        return get_growth_status(rate, rule.growth).value

    # ---------- Metrics ----------
    @staticmethod
    def growth_metrics(*, current: metrics.PeriodValues, baseline: metrics.PeriodValues) -> dict[str, object]:
        result = metrics.calculate_growth_metrics(current, baseline)
        return {
            "growth_month_rate": result.growth_month_rate,
            "growth_quarter_rate": result.growth_quarter_rate,
            "growth_ytd_rate": result.growth_ytd_rate,
            "inc_month": result.inc_month,
            "inc_quarter": result.inc_quarter,
            "inc_ytd": result.inc_ytd,
            "reason": result.reason,
        }

    @staticmethod
    def hq_targets(records: Iterable[tuple[ProductCode, float]]) -> dict[str, object]:
        targets = metrics.aggregate_hq_targets_by_product(records)
        return {"targets": {product.value: value for product, value in targets.items()}}

    def hq_gap(
        self,
        *,
        actual: float,
        hq_target: float,
        thresholds: ThresholdRule | None = None,
    ) -> dict[str, object]:
        rule = self.resolve_thresholds(thresholds)
        rate = metrics.achievement_rate(actual, hq_target)
        return {
            "actual": actual,
            "hq_target": hq_target,
            "gap": metrics.hq_gap(actual, hq_target),
            "achievement_rate": rate.value,
            "reason": rate.reason,
            "status": get_achievement_status(rate.value, rule.achievement).value if rate.value is not None else None,
        }

    def cumulative_achievement(
        self,
        *,
        monthly_actuals: MonthlySeries,
        annual_target: float,
        weights: Sequence[float] | None = None,
        use_weights: bool = False,
        thresholds: ThresholdRule | None = None,
    ) -> list[dict[str, object]]:
        resolved = self.resolve_weights(weights) if use_weights or weights is not None else None
        rule = self.resolve_thresholds(thresholds)
        return [
            {
                "month": point.month,
                "cumulative_actual": point.cumulative_actual,
                "cumulative_target": point.cumulative_target,
                "rate": point.rate,
                "status": get_achievement_status(point.rate, rule.achievement).value if point.rate is not None else None,
            }
            for point in metrics.predict_cumulative_achievement(monthly_actuals, annual_target, resolved)
        ]

    # ---------- Reports ----------
    def quarterly_proportion_rows(self, data: QuarterlyProportionInput) -> list[QuarterlyProportionRow]:
        _require_finite("annual_target", data.annual_target)
        weights = self.resolve_weights(data.weights)
        rule = self.resolve_thresholds(data.thresholds)
        monthly_target = allocation.allocate_annual_to_monthly(
            data.annual_target,
            weights,
            data.rounding or self.settings.default_rounding,
        )
        quarterly_target = allocation.monthly_to_quarterly(monthly_target)
        quarterly_baseline = allocation.monthly_to_quarterly(data.baseline_actuals)
        target_shares = metrics.shares(quarterly_target)
        baseline_shares = metrics.shares(quarterly_baseline)

        rows: list[QuarterlyProportionRow] = []
        for index in range(QUARTERS_PER_YEAR):
            current = _observed_quarter_total(data.current_actuals, index)
            growth = metrics.growth_rate(current, quarterly_baseline[index]).value
            rows.append(
                QuarterlyProportionRow(
                    quarter=QUARTER_LABELS[index],
                    target=quarterly_target[index],
                    target_share=target_shares[index],
                    baseline_actual=quarterly_baseline[index],
                    baseline_share=baseline_shares[index],
                    current_actual=current,
                    growth_rate=growth,
                    growth_status=get_growth_status(growth, rule.growth).value if growth is not None else None,
                )
            )
        return rows

    def quarterly_proportion_report(self, data: QuarterlyProportionInput) -> dict[str, object]:
        rows = self.quarterly_proportion_rows(data)
        return {
            "annual_target": data.annual_target,
            "baseline_total": sum(row.baseline_actual for row in rows),
            "quarters": [self.serialize_quarter_row(row) for row in rows],
        }

    @staticmethod
    def serialize_quarter_row(row: QuarterlyProportionRow) -> dict[str, object]:
        return {
            "quarter": row.quarter,
            "target": row.target,
            "target_share": row.target_share,
            "baseline_actual": row.baseline_actual,
            "baseline_share": row.baseline_share,
            "current_actual": row.current_actual,
            "growth_rate": row.growth_rate,
            "growth_status": row.growth_status,
        }

    # ---------- Exports ----------
    def export_quarterly_proportion(self, data: QuarterlyProportionInput, format_name: str) -> ExportFilePayload:
        normalized_format = format_name.strip().lower()
        if normalized_format not in {"csv", "xlsx"}:
            raise _unprocessable("format must be one of: csv, xlsx.")

        rows = [self.serialize_quarter_row(row) for row in self.quarterly_proportion_rows(data)]
        flattened = [{field: "" if row[field] is None else str(row[field]) for field in EXPORT_FIELDS} for row in rows]

        base_filename = "quarterly-proportion"
        if normalized_format == "csv":
            import csv
            import io

            sio = io.StringIO()
            writer = csv.DictWriter(sio, fieldnames=list(EXPORT_FIELDS))
            writer.writeheader()
            writer.writerows(flattened)
            return ExportFilePayload(
                media_type="text/csv; charset=utf-8",
                filename=f"{base_filename}.csv",
                content=sio.getvalue().encode("utf-8"),
            )

        # XLSX
        from openpyxl import Workbook

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "quarterly_proportion"
        sheet.append(list(EXPORT_FIELDS))
        for row in rows:
            sheet.append([row[field] for field in EXPORT_FIELDS])
        sheet.append([])
        sheet.append(["annual_target", data.annual_target])
        sheet.append(["baseline_total", sum(row["baseline_actual"] for row in rows)])

        output = BytesIO()
        workbook.save(output)
        return ExportFilePayload(
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            filename=f"{base_filename}.xlsx",
            content=output.getvalue(),
        )
