from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, File, HTTPException, UploadFile

from cost_center_report.application import get_report_service
from cost_center_report.core.errors import ReportError
from cost_center_report.routes.errors import to_http_error

router = APIRouter(prefix="/dataset", tags=["upload"])


def _is_json_upload(upload: UploadFile) -> bool:
    return upload.content_type == "application/json" or (upload.filename or "").lower().endswith(".json")


@router.post("/upload")
async def upload_file(files: list[UploadFile] = File(...)) -> dict:
    """Replace the current dataset with the first JSON document among the uploads."""
    if not files:
        raise HTTPException(status_code=400, detail="At least one file must be provided")

    upload = next((item for item in files if _is_json_upload(item)), None)
    try:
        if upload is None:
            raise HTTPException(status_code=400, detail="Please drop a JSON file")

        content = await upload.read()
        safe_name = Path(upload.filename or "upload.json").name
        service = get_report_service()
        try:
            data = service.load_upload(safe_name, content)
        except ReportError as exc:
            raise to_http_error(exc) from exc
    finally:
        for item in files:
            await item.close()

    return {"filename": safe_name, "summary": data.summary.model_dump(by_alias=True)}


@router.post("/example")
async def load_example() -> dict:
    service = get_report_service()
    try:
        data = service.load_example()
    except ReportError as exc:
        raise to_http_error(exc) from exc
    return {"summary": data.summary.model_dump(by_alias=True)}
