"""Dimensional aggregation and organization reference endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from targetplan.api.dependencies import get_pacing_service
from targetplan.domain.types import GroupCode, ProductCode
from targetplan.services.pacing_service import PacingService

router = APIRouter(tags=["aggregations"])


class FactRecordPayload(BaseModel):
    org_id: str = Field(min_length=1)
    product: ProductCode
    value: float

    @field_validator("product")
    @classmethod
    def reject_rollup_product(cls, value: ProductCode) -> ProductCode:
        if value is ProductCode.TOTAL:
            raise ValueError("product 'total' is reserved for rollups.")
        return value


class GroupProductPayload(BaseModel):
    org_groups: dict[str, GroupCode]
    records: list[FactRecordPayload]

    @field_validator("org_groups")
    @classmethod
    def reject_rollup_group(cls, value: dict[str, GroupCode]) -> dict[str, GroupCode]:
        reserved = sorted(org_id for org_id, group in value.items() if group is GroupCode.ALL)
        if reserved:
            raise ValueError(f"group 'all' is reserved for rollups (organizations: {', '.join(reserved)}).")
        return value


class OrganizationCheckPayload(BaseModel):
    data_org_ids: list[str]
    standard_org_ids: list[str]
    source: str = Field(default="dataset", min_length=1)


@router.post("/aggregations/group-product")
def post_group_product_aggregation(
    payload: GroupProductPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    rows = service.fact_rows(
        [(record.org_id, record.product, record.value) for record in payload.records],
        payload.org_groups,
    )
    return {"items": service.aggregate(rows)}


@router.post("/organizations/validate")
def post_validate_organizations(
    payload: OrganizationCheckPayload,
    service: PacingService = Depends(get_pacing_service),
) -> dict[str, object]:
    return service.validate_organizations(
        data_org_ids=payload.data_org_ids,
        standard_org_ids=payload.standard_org_ids,
        source=payload.source,
    )
