from __future__ import annotations

from io import BytesIO

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from targetplan.core.config import Settings, get_settings

MONTHLY_SERIES = [100.0, 120.0, 150.0, 200.0, 220.0, 250.0, 280.0, 300.0, 320.0, 350.0, 380.0, 400.0]


def _report_payload() -> dict[str, object]:
    return {
        "annual_target": 1000,
        "baseline_actuals": MONTHLY_SERIES,
        "current_actuals": [110.0, 132.0, 165.0] + [None] * 9,
    }


def test_monthly_allocation_with_default_weights(client: TestClient) -> None:
    response = client.post("/api/v1/allocations/monthly", json={"annual_total": 10000, "rounding": "integer"})

    assert response.status_code == 200
    body = response.json()
    assert body["rounding"] == "integer"
    assert body["monthly"][0] == 700
    assert body["total"] == 10000
    assert body["quarterly"] == [2350, 2810, 2000, 2840]


def test_monthly_allocation_rejects_weights_off_by_more_than_tolerance(client: TestClient) -> None:
    weights = [1 / 12] * 11 + [1 / 12 + 1e-5]

    response = client.post("/api/v1/allocations/monthly", json={"annual_total": 100, "weights": weights})

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["code"] == "weights_sum_not_one"
    assert detail["actual_sum"] == pytest.approx(1.00001)
    assert detail["message"].split(":")[0] == "weights_sum_not_one"


def test_monthly_allocation_rejects_short_weight_vector(client: TestClient) -> None:
    response = client.post("/api/v1/allocations/monthly", json={"annual_total": 100, "weights": [1.0]})

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "weights_length"


def test_future_targets_endpoint(client: TestClient) -> None:
    response = client.post(
        "/api/v1/allocations/future-targets",
        json={"annual_target": 10000, "ytd_actual": 2500, "current_month": 3},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["mode"] == "linear"
    assert sum(body["monthly"]) == pytest.approx(10000)


def test_planned_actuals_endpoint_keeps_observed_months(client: TestClient) -> None:
    response = client.post(
        "/api/v1/allocations/planned-actuals",
        json={"annual_target": 120000, "actuals": [5000.0] + [None] * 11, "mode": "weighted"},
    )

    assert response.status_code == 200
    monthly = response.json()["monthly"]
    assert monthly[0] == 5000
    assert sum(monthly) == pytest.approx(120000)


def test_baseline_weights_and_rollups(client: TestClient) -> None:
    weights = client.post("/api/v1/allocations/baseline-weights", json={"monthly": MONTHLY_SERIES}).json()
    quarterly = client.post("/api/v1/rollups/quarterly", json={"monthly": MONTHLY_SERIES}).json()
    ytd = client.post("/api/v1/rollups/ytd", json={"monthly": MONTHLY_SERIES, "month": 14}).json()

    assert sum(weights["weights"]) == pytest.approx(1.0)
    assert weights["quarterly_weights"][0] == pytest.approx(370 / 3070)
    assert quarterly == {"quarterly": [370, 670, 900, 1130]}
    assert ytd == {"month": 12, "ytd": 3070}


def test_progress_endpoint_reports_every_mode(client: TestClient) -> None:
    response = client.post("/api/v1/progress", json={"month": 6, "baseline_actuals": MONTHLY_SERIES})

    assert response.status_code == 200
    body = response.json()
    assert body["month"] == 6
    assert body["quarter"] == 2
    assert body["linear"] == {"year": 0.5, "quarter": 1.0}
    assert body["weighted"]["year"] == pytest.approx(0.516)
    assert body["baseline_actual"]["quarter"] == pytest.approx(250 / 670)


def test_rule_defaults(client: TestClient) -> None:
    response = client.get("/api/v1/rules/defaults")

    assert response.status_code == 200
    body = response.json()
    assert len(body["weights"]) == 12
    assert body["rounding"] == "none"
    assert body["thresholds"]["achievement"] == {"good_min": 1.05, "warning_min": 0.95}
    assert body["thresholds"]["growth"] == {"good_min": 0.12, "warning_min": 0.05}


def test_weights_validate_endpoint(client: TestClient) -> None:
    ok = client.post("/api/v1/rules/weights/validate", json={"weights": [1 / 12] * 12})
    negative = client.post("/api/v1/rules/weights/validate", json={"weights": [0.1] * 10 + [0.05, -0.05]})

    assert ok.status_code == 200
    assert ok.json()["valid"] is True
    assert negative.status_code == 422
    assert negative.json()["detail"]["code"] == "weights_negative"


def test_thresholds_validate_endpoint(client: TestClient) -> None:
    valid = client.post(
        "/api/v1/rules/thresholds/validate",
        json={"achievement": {"good_min": 1.1, "warning_min": 0.9}, "growth": {"good_min": 0.2, "warning_min": 0.1}},
    )
    invalid = client.post(
        "/api/v1/rules/thresholds/validate",
        json={"achievement": {"good_min": 1.1, "warning_min": 0.9}, "growth": {"good_min": 0.1, "warning_min": 0.2}},
    )

    assert valid.status_code == 200
    assert valid.json()["thresholds"]["rule_id"] == "THRESHOLD_GLOBAL_DEFAULT"
    assert invalid.status_code == 422
    assert invalid.json()["detail"]["code"] == "growth_good_min_not_above_warning_min"


def test_status_endpoints(client: TestClient) -> None:
    good = client.post("/api/v1/status/achievement", json={"rate": 1.06})
    danger = client.post("/api/v1/status/achievement", json={"rate": 0.94})
    growth = client.post("/api/v1/status/growth", json={"rate": -0.2})
    custom = client.post(
        "/api/v1/status/achievement",
        json={
            "rate": 1.06,
            "thresholds": {
                "achievement": {"good_min": 1.1, "warning_min": 0.9},
                "growth": {"good_min": 0.12, "warning_min": 0.05},
            },
        },
    )

    assert good.json() == {"rate": 1.06, "status": "good"}
    assert danger.json()["status"] == "danger"
    assert growth.json()["status"] == "danger"
    assert custom.json()["status"] == "normal"


def test_group_product_aggregation(client: TestClient) -> None:
    response = client.post(
        "/api/v1/aggregations/group-product",
        json={"org_groups": {"A": "local"}, "records": [{"org_id": "A", "product": "auto", "value": 100}]},
    )

    assert response.status_code == 200
    assert response.json()["items"] == [
        {"group": "all", "product": "auto", "value": 100},
        {"group": "all", "product": "total", "value": 100},
        {"group": "local", "product": "auto", "value": 100},
        {"group": "local", "product": "total", "value": 100},
    ]


def test_group_product_aggregation_rejects_unknown_and_reserved_codes(client: TestClient) -> None:
    unknown = client.post(
        "/api/v1/aggregations/group-product",
        json={"org_groups": {"A": "local"}, "records": [{"org_id": "Z", "product": "auto", "value": 1}]},
    )
    reserved_product = client.post(
        "/api/v1/aggregations/group-product",
        json={"org_groups": {"A": "local"}, "records": [{"org_id": "A", "product": "total", "value": 1}]},
    )
    reserved_group = client.post(
        "/api/v1/aggregations/group-product",
        json={"org_groups": {"A": "all"}, "records": []},
    )

    assert unknown.status_code == 422
    assert unknown.json()["detail"] == {"code": "unknown_organization", "org_ids": ["Z"]}
    assert reserved_product.status_code == 422
    assert reserved_group.status_code == 422


def test_organization_validation_endpoint(client: TestClient) -> None:
    response = client.post(
        "/api/v1/organizations/validate",
        json={"data_org_ids": ["A", "C"], "standard_org_ids": ["A", "B"], "source": "targets.csv"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert body["missing"] == ["B"]
    assert body["extra"] == ["C"]


def test_growth_metrics_endpoint(client: TestClient) -> None:
    response = client.post(
        "/api/v1/metrics/growth",
        json={"current": {"month": 110, "quarter": 330}, "baseline": {"month": 100, "quarter": 300, "ytd": 1000}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["growth_month_rate"] == pytest.approx(0.1)
    assert body["growth_ytd_rate"] is None
    assert body["reason"] == "no_current_data"


def test_cumulative_achievement_endpoint(client: TestClient) -> None:
    response = client.post(
        "/api/v1/metrics/cumulative-achievement",
        json={"monthly_actuals": [100.0] * 12, "annual_target": 1200},
    )

    assert response.status_code == 200
    months = response.json()["months"]
    assert len(months) == 12
    assert months[-1]["rate"] == pytest.approx(1.0)
    assert months[-1]["status"] == "normal"


def test_quarterly_proportion_report(client: TestClient) -> None:
    response = client.post("/api/v1/reports/quarterly-proportion", json=_report_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["baseline_total"] == 3070
    first, second = body["quarters"][0], body["quarters"][1]
    assert first["quarter"] == "Q1"
    assert first["target"] == pytest.approx(235)
    assert first["baseline_share"] == pytest.approx(370 / 3070)
    assert first["current_actual"] == 407
    assert first["growth_rate"] == pytest.approx(0.1)
    assert first["growth_status"] == "normal"
    assert second["current_actual"] is None
    assert second["growth_status"] is None


def test_quarterly_proportion_csv_export(client: TestClient) -> None:
    response = client.post("/api/v1/exports/quarterly-proportion", params={"format": "csv"}, json=_report_payload())

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="quarterly-proportion.csv"' in response.headers["content-disposition"]
    lines = response.content.decode("utf-8").splitlines()
    assert lines[0].startswith("quarter,target,target_share")
    assert len(lines) == 5


def test_quarterly_proportion_xlsx_export(client: TestClient) -> None:
    response = client.post("/api/v1/exports/quarterly-proportion", params={"format": "xlsx"}, json=_report_payload())

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    sheet = load_workbook(BytesIO(response.content))["quarterly_proportion"]
    assert sheet["A1"].value == "quarter"
    assert sheet["A2"].value == "Q1"
    assert sheet["A7"].value == "annual_target"
    assert sheet["B7"].value == 1000


def test_export_rejects_unknown_format(client: TestClient) -> None:
    response = client.post("/api/v1/exports/quarterly-proportion", params={"format": "pdf"}, json=_report_payload())

    assert response.status_code == 422
    assert response.json()["detail"] == "format must be one of: csv, xlsx."


def test_invalid_operator_weights_are_rejected(app: FastAPI, client: TestClient) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(default_monthly_weights=[0.05] * 12)

    response = client.get("/api/v1/rules/defaults")

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "weights_sum_not_one"
    assert response.json()["detail"]["actual_sum"] == pytest.approx(0.6)


def test_invalid_operator_thresholds_are_rejected(app: FastAPI, client: TestClient) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(achievement_good_min=1.0)

    response = client.post("/api/v1/status/achievement", json={"rate": 1.2})

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "achievement_good_min_not_above_one"


def test_thresholds_validate_rejects_nan_breakpoints(client: TestClient) -> None:
    # NaN is not strict JSON, so the body is sent as written.
    response = client.post(
        "/api/v1/rules/thresholds/validate",
        content='{"achievement": {"good_min": NaN, "warning_min": 0.95}, "growth": {"good_min": 0.12, "warning_min": 0.05}}',
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "threshold_not_finite"


def test_monthly_allocation_of_very_large_total(client: TestClient) -> None:
    response = client.post("/api/v1/allocations/monthly", json={"annual_total": 1e29, "rounding": "integer"})

    assert response.status_code == 200
    assert response.json()["total"] == pytest.approx(1e29, rel=1e-12)


def test_monthly_allocation_rejects_non_finite_total(client: TestClient) -> None:
    response = client.post(
        "/api/v1/allocations/monthly",
        content='{"annual_total": Infinity, "rounding": "integer"}',
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "amount_not_finite"


def test_monthly_series_payloads_require_twelve_months(client: TestClient) -> None:
    short = MONTHLY_SERIES[:11]

    quarterly = client.post("/api/v1/rollups/quarterly", json={"monthly": short})
    ytd = client.post("/api/v1/rollups/ytd", json={"monthly": short, "month": 3})
    report = client.post(
        "/api/v1/reports/quarterly-proportion",
        json={**_report_payload(), "baseline_actuals": short},
    )

    assert quarterly.status_code == 422
    assert ytd.status_code == 422
    assert report.status_code == 422


def test_hq_targets_endpoint(client: TestClient) -> None:
    response = client.post(
        "/api/v1/metrics/hq-targets",
        json={
            "records": [
                {"product": "auto", "annual_target": 600},
                {"product": "health", "annual_target": 80},
                {"product": "life", "annual_target": 100},
            ]
        },
    )

    assert response.status_code == 200
    assert response.json() == {"targets": {"auto": 600, "life": 100, "total": 700}}


def test_hq_gap_endpoint(client: TestClient) -> None:
    behind = client.post("/api/v1/metrics/hq-gap", json={"actual": 900, "hq_target": 1000})
    no_target = client.post("/api/v1/metrics/hq-gap", json={"actual": 900, "hq_target": 0})

    assert behind.status_code == 200
    assert behind.json()["gap"] == -100
    assert behind.json()["achievement_rate"] == pytest.approx(0.9)
    assert behind.json()["status"] == "danger"
    assert no_target.json()["achievement_rate"] is None
    assert no_target.json()["reason"] == "division_by_zero"
    assert no_target.json()["status"] is None
