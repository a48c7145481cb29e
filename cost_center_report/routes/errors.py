from __future__ import annotations

from fastapi import HTTPException

from cost_center_report.core.errors import (
    ConfigurationError,
    DatasetNotLoaded,
    NetworkError,
    ParseError,
    ReportError,
    StaleResponseError,
    ValidationError,
)


def to_http_error(exc: ReportError) -> HTTPException:
    """Translate a report error into the HTTP response the client sees."""

    if isinstance(exc, ValidationError):
        return HTTPException(status_code=422, detail={"message": exc.message, "index": exc.index})
    if isinstance(exc, ParseError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NetworkError):
        return HTTPException(status_code=502, detail={"kind": exc.kind, "message": exc.message})
    if isinstance(exc, ConfigurationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, DatasetNotLoaded):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, StaleResponseError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
