"""Domain entities for the currently loaded report dataset."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from cost_center_report.core.schema import ParsedData


@dataclass(slots=True)
class DatasetState:
    """The single dataset the report views are computed from."""

    data: ParsedData | None = None
    source: str | None = None
    filename: str | None = None
    loaded_at: datetime | None = None
    request_token: int = 0
