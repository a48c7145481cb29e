from __future__ import annotations

import unicodedata
from typing import Iterable, Literal

from pydantic import BaseModel

from cost_center_report.core.aggregate import resource_counts
from cost_center_report.core.schema import CostCenter

ResourceTypeFilter = Literal["all", "Org", "Repo", "User"]
HasResourcesFilter = Literal["all", "with-resources", "empty"]
SortOrder = Literal["name", "total-resources", "orgs", "repos", "users"]


class FilterOptions(BaseModel):
    search: str = ""
    resource_type: ResourceTypeFilter = "all"
    has_resources: HasResourcesFilter = "all"
    sort_by: SortOrder = "name"


DEFAULT_OPTIONS = FilterOptions()


def collation_key(value: str) -> tuple[str, str]:
    """Approximate a locale-aware ordering: accents and case only break ties."""

    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), value


def matches_search(center: CostCenter, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    if needle in center.name.lower() or needle in center.id.lower():
        return True
    return any(needle in resource.name.lower() for resource in center.resources)


def matches_resource_type(center: CostCenter, resource_type: str) -> bool:
    if resource_type == "all":
        return True
    return any(resource.type == resource_type for resource in center.resources)


def matches_has_resources(center: CostCenter, has_resources: str) -> bool:
    if has_resources == "with-resources":
        return len(center.resources) > 0
    if has_resources == "empty":
        return len(center.resources) == 0
    return True


def _sort_key(sort_by: str):
    if sort_by == "total-resources":
        return lambda center: -len(center.resources)
    if sort_by == "orgs":
        return lambda center: -resource_counts(center).orgs
    if sort_by == "repos":
        return lambda center: -resource_counts(center).repos
    if sort_by == "users":
        return lambda center: -resource_counts(center).members
    return lambda center: collation_key(center.name)


def filter_and_sort(centers: Iterable[CostCenter], options: FilterOptions = DEFAULT_OPTIONS) -> list[CostCenter]:
    """Apply search, resource-type and emptiness filters, then sort.

    Returns a new list; the source sequence is left untouched. The sort is
    stable so ties keep their source order.
    """

    filtered = [
        center
        for center in centers
        if matches_search(center, options.search)
        and matches_resource_type(center, options.resource_type)
        and matches_has_resources(center, options.has_resources)
    ]
    return sorted(filtered, key=_sort_key(options.sort_by))


def has_active_filters(options: FilterOptions) -> bool:
    return options != DEFAULT_OPTIONS
