from __future__ import annotations

import json
from datetime import datetime, timezone

from cost_center_report.core.aggregate import resource_counts
from cost_center_report.core.schema import ParsedData


def build_json_report(data: ParsedData, generated_at: datetime | None = None) -> bytes:
    """Render every cost center with its resource counts inside a timestamped envelope."""

    generated_at = generated_at or datetime.now(timezone.utc)
    report = {
        "generatedAt": generated_at.isoformat(),
        "summary": data.summary.model_dump(by_alias=True),
        "costCenters": [
            {
                **(center.source_record or center.model_dump(mode="json")),
                "resourceCounts": resource_counts(center).model_dump(),
            }
            for center in data.cost_centers
        ],
    }
    return json.dumps(report, indent=2, ensure_ascii=False).encode("utf-8")
