from __future__ import annotations

import csv

import pandas as pd

from cost_center_report.core.aggregate import resource_counts
from cost_center_report.core.schema import ParsedData

CSV_COLUMNS = [
    "Cost Center Name",
    "Cost Center ID",
    "State",
    "Total Resources",
    "Organizations",
    "Repositories",
    "Members",
]


def build_csv_report(data: ParsedData) -> bytes:
    records = []
    for center in data.cost_centers:
        counts = resource_counts(center)
        records.append({
            "Cost Center Name": center.name,
            "Cost Center ID": center.id,
            "State": center.state,
            "Total Resources": len(center.resources),
            "Organizations": counts.orgs,
            "Repositories": counts.repos,
            "Members": counts.members,
        })
    df = pd.DataFrame(records, columns=CSV_COLUMNS)
    # Header cells are strings too, so QUOTE_NONNUMERIC quotes them as well.
    text = df.to_csv(index=False, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    return text.encode("utf-8")
