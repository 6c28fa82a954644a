from __future__ import annotations

import pytest

from targetplan.domain.aggregation import aggregate_to_group_and_all, build_fact_rows
from targetplan.domain.errors import UnknownOrganizationError
from targetplan.domain.types import FactRow, GroupCode, ProductCode


def _row(org_id: str, group: GroupCode, product: ProductCode, value: float) -> FactRow:
    return FactRow(org_id=org_id, group=group, product=product, value=value)


def test_single_row_lands_in_four_buckets() -> None:
    totals = aggregate_to_group_and_all([_row("A", GroupCode.LOCAL, ProductCode.AUTO, 100)])

    assert totals == {
        (GroupCode.LOCAL, ProductCode.AUTO): 100,
        (GroupCode.ALL, ProductCode.AUTO): 100,
        (GroupCode.LOCAL, ProductCode.TOTAL): 100,
        (GroupCode.ALL, ProductCode.TOTAL): 100,
    }


def test_margins_are_consistent() -> None:
    rows = [
        _row("A", GroupCode.LOCAL, ProductCode.AUTO, 100),
        _row("B", GroupCode.LOCAL, ProductCode.LIFE, 40),
        _row("C", GroupCode.REMOTE, ProductCode.AUTO, 60),
        _row("D", GroupCode.REMOTE, ProductCode.HEALTH, 25),
    ]

    totals = aggregate_to_group_and_all(rows)

    assert totals[(GroupCode.ALL, ProductCode.AUTO)] == 160
    assert totals[(GroupCode.LOCAL, ProductCode.TOTAL)] == 140
    assert totals[(GroupCode.REMOTE, ProductCode.TOTAL)] == 85
    assert totals[(GroupCode.ALL, ProductCode.TOTAL)] == 225
    assert (GroupCode.LOCAL, ProductCode.HEALTH) not in totals


def test_duplicate_rows_are_summed() -> None:
    row = _row("A", GroupCode.REMOTE, ProductCode.PROPERTY, 12.5)

    totals = aggregate_to_group_and_all([row, row])

    assert totals[(GroupCode.REMOTE, ProductCode.PROPERTY)] == 25
    assert totals[(GroupCode.ALL, ProductCode.TOTAL)] == 25


def test_aggregation_is_order_independent() -> None:
    rows = [
        _row("A", GroupCode.LOCAL, ProductCode.AUTO, 1),
        _row("B", GroupCode.REMOTE, ProductCode.AUTO, 2),
        _row("C", GroupCode.LOCAL, ProductCode.LIFE, 4),
    ]

    assert aggregate_to_group_and_all(rows) == aggregate_to_group_and_all(list(reversed(rows)))


def test_empty_input_yields_empty_result() -> None:
    assert aggregate_to_group_and_all([]) == {}


@pytest.mark.parametrize(
    ("group", "product"),
    [(GroupCode.ALL, ProductCode.AUTO), (GroupCode.LOCAL, ProductCode.TOTAL)],
)
def test_fact_rows_reject_rollup_codes(group: GroupCode, product: ProductCode) -> None:
    with pytest.raises(ValueError):
        FactRow(org_id="A", group=group, product=product, value=1)


def test_build_fact_rows_attaches_groups() -> None:
    rows = build_fact_rows(
        [("A", ProductCode.AUTO, 10.0), ("B", ProductCode.LIFE, 5.0)],
        {"A": GroupCode.LOCAL, "B": GroupCode.REMOTE},
    )

    assert rows == [
        FactRow(org_id="A", group=GroupCode.LOCAL, product=ProductCode.AUTO, value=10.0),
        FactRow(org_id="B", group=GroupCode.REMOTE, product=ProductCode.LIFE, value=5.0),
    ]


def test_build_fact_rows_lists_every_unknown_organization() -> None:
    records = [
        ("A", ProductCode.AUTO, 10.0),
        ("X", ProductCode.AUTO, 1.0),
        ("Y", ProductCode.LIFE, 2.0),
        ("X", ProductCode.LIFE, 3.0),
    ]

    with pytest.raises(UnknownOrganizationError) as exc_info:
        build_fact_rows(records, {"A": GroupCode.LOCAL})

    assert exc_info.value.org_ids == ["X", "Y"]


@pytest.mark.parametrize(("group", "product"), [("all", "auto"), ("local", "total")])
def test_fact_rows_reject_rollup_codes_given_as_strings(group: str, product: str) -> None:
    with pytest.raises(ValueError):
        FactRow(org_id="A", group=group, product=product, value=1)  # type: ignore[arg-type]
