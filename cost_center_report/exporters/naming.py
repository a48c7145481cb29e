from __future__ import annotations

from datetime import datetime, timezone

EXPORT_FORMATS = {
    "json": "application/json",
    "csv": "text/csv",
}


def report_filename(fmt: str, when: datetime | None = None) -> str:
    when = when or datetime.now(timezone.utc)
    return f"cost-center-report-{when.date().isoformat()}.{fmt}"
