from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Query
from fastapi.responses import Response

from cost_center_report.application import get_report_service
from cost_center_report.core.errors import ReportError
from cost_center_report.routes.errors import to_http_error

router = APIRouter(prefix="/dataset", tags=["export"])


@router.get("/export")
async def export_report(format: Literal["json", "csv"] = Query(default="json")) -> Response:
    service = get_report_service()
    try:
        payload, filename, media_type = service.export(format)
    except ReportError as exc:
        raise to_http_error(exc) from exc
    return Response(
        content=payload,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
