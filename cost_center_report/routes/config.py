from __future__ import annotations

import asyncio

from fastapi import APIRouter

from cost_center_report.application import get_report_service
from cost_center_report.core.errors import ReportError
from cost_center_report.routes.errors import to_http_error

router = APIRouter(tags=["config"])


@router.get("/config")
async def get_config() -> dict:
    service = get_report_service()
    return service.get_config_status()


@router.put("/config")
async def save_config(payload: dict) -> dict:
    """Persist API credentials; with ``fetch`` set, immediately load data with them."""
    token = str(payload.get("token") or "")
    enterprise = str(payload.get("enterprise") or "")
    service = get_report_service()
    try:
        if payload.get("fetch"):
            data = await asyncio.to_thread(service.save_config_and_fetch, token, enterprise)
            return {**service.get_config_status(), "summary": data.summary.model_dump(by_alias=True)}
        service.save_config(token, enterprise)
    except ReportError as exc:
        raise to_http_error(exc) from exc
    return service.get_config_status()


@router.delete("/config")
async def clear_config() -> dict:
    service = get_report_service()
    service.clear_config()
    return service.get_config_status()


@router.post("/dataset/fetch")
async def fetch_dataset() -> dict:
    service = get_report_service()
    try:
        data = await asyncio.to_thread(service.fetch_remote)
    except ReportError as exc:
        raise to_http_error(exc) from exc
    return {"source": "api", "summary": data.summary.model_dump(by_alias=True)}
