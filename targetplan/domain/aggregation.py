"""Group/product cross-tabulation of organization fact rows."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from targetplan.domain.errors import UnknownOrganizationError
from targetplan.domain.types import FactRow, GroupCode, ProductCode

AggregateKey = tuple[GroupCode, ProductCode]


def aggregate_to_group_and_all(rows: Iterable[FactRow]) -> dict[AggregateKey, float]:
    """Sum fact rows by (group, product) including the 'all' and 'total' margins.

    Every row lands in four buckets, so the result is the full cross-tab with its
    marginal totals. Duplicate rows are summed.
    """

    totals: dict[AggregateKey, float] = {}
    for row in rows:
        for key in (
            (row.group, row.product),
            (GroupCode.ALL, row.product),
            (row.group, ProductCode.TOTAL),
            (GroupCode.ALL, ProductCode.TOTAL),
        ):
            totals[key] = totals.get(key, 0.0) + row.value
    return totals


def build_fact_rows(
    records: Iterable[tuple[str, ProductCode, float]],
    org_groups: Mapping[str, GroupCode],
) -> list[FactRow]:
    """Attach each organization's group to ``(org_id, product, value)`` records."""

    rows: list[FactRow] = []
    unknown: list[str] = []
    for org_id, product, value in records:
        group = org_groups.get(org_id)
        if group is None:
            if org_id not in unknown:
                unknown.append(org_id)
            continue
        rows.append(FactRow(org_id=org_id, group=group, product=product, value=value))

    if unknown:
        raise UnknownOrganizationError(unknown)
    return rows
