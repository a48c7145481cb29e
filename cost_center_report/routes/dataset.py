from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from cost_center_report.application import get_report_service
from cost_center_report.core.errors import ReportError
from cost_center_report.core.filters import (
    FilterOptions,
    HasResourcesFilter,
    ResourceTypeFilter,
    SortOrder,
)
from cost_center_report.routes.errors import to_http_error

router = APIRouter(prefix="/dataset", tags=["dataset"])


@router.get("")
async def get_dataset() -> dict:
    service = get_report_service()
    try:
        return service.overview()
    except ReportError as exc:
        raise to_http_error(exc) from exc


@router.delete("")
async def clear_dataset() -> dict:
    service = get_report_service()
    service.clear_dataset()
    return {"cleared": True}


@router.get("/cost-centers")
async def list_cost_centers(
    search: str = Query(default=""),
    resource_type: ResourceTypeFilter = Query(default="all"),
    has_resources: HasResourcesFilter = Query(default="all"),
    sort_by: SortOrder = Query(default="name"),
) -> dict:
    options = FilterOptions(
        search=search,
        resource_type=resource_type,
        has_resources=has_resources,
        sort_by=sort_by,
    )
    service = get_report_service()
    try:
        return service.list_cost_centers(options)
    except ReportError as exc:
        raise to_http_error(exc) from exc


@router.get("/cost-centers/{center_id}")
async def get_cost_center(center_id: str) -> dict:
    service = get_report_service()
    try:
        detail = service.get_cost_center(center_id)
    except ReportError as exc:
        raise to_http_error(exc) from exc
    if detail is None:
        raise HTTPException(status_code=404, detail="cost center not found")
    return detail
