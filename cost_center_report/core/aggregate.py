from __future__ import annotations

from typing import Iterable, Sequence

from cost_center_report.core.schema import (
    STATE_ACTIVE,
    STATE_DELETED,
    CostCenter,
    ParsedData,
    Resource,
    ResourceCounts,
    Summary,
)

_COUNTER_BY_TYPE = {
    "Org": "total_organizations",
    "Repo": "total_repositories",
    "User": "total_members",
}


def partition(centers: Iterable[CostCenter]) -> tuple[list[CostCenter], list[CostCenter]]:
    centers = list(centers)
    active = [center for center in centers if center.state == STATE_ACTIVE]
    deleted = [center for center in centers if center.state == STATE_DELETED]
    return active, deleted


def resource_counts(center: CostCenter) -> ResourceCounts:
    counts = ResourceCounts()
    for resource in center.resources:
        if resource.type == "Org":
            counts.orgs += 1
        elif resource.type == "Repo":
            counts.repos += 1
        elif resource.type == "User":
            counts.members += 1
    return counts


def resources_by_type(center: CostCenter) -> dict[str, list[Resource]]:
    grouped: dict[str, list[Resource]] = {"orgs": [], "repos": [], "users": []}
    for resource in center.resources:
        if resource.type == "Org":
            grouped["orgs"].append(resource)
        elif resource.type == "Repo":
            grouped["repos"].append(resource)
        elif resource.type == "User":
            grouped["users"].append(resource)
    return grouped


def summarize(centers: Sequence[CostCenter]) -> Summary:
    """Count cost centers by state and resources of active centers by type."""

    active, deleted = partition(centers)
    totals = {name: 0 for name in _COUNTER_BY_TYPE.values()}
    unclassified_resources = 0
    for center in active:
        for resource in center.resources:
            counter = _COUNTER_BY_TYPE.get(resource.type)
            if counter is None:
                unclassified_resources += 1
            else:
                totals[counter] += 1

    return Summary(
        total_active=len(active),
        total_deleted=len(deleted),
        unclassified_cost_centers=len(centers) - len(active) - len(deleted),
        unclassified_resources=unclassified_resources,
        **totals,
    )


def build_parsed_data(centers: Sequence[CostCenter]) -> ParsedData:
    active, deleted = partition(centers)
    return ParsedData(
        cost_centers=tuple(centers),
        active_cost_centers=tuple(active),
        deleted_cost_centers=tuple(deleted),
        summary=summarize(centers),
    )
