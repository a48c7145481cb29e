from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

STATE_ACTIVE = "active"
STATE_DELETED = "deleted"


class Resource(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    name: str


class CostCenter(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    state: str
    resources: tuple[Resource, ...] = ()
    # document record as received, extra fields and original id types included
    source_record: dict[str, Any] = Field(default_factory=dict, exclude=True, repr=False)


class ResourceCounts(BaseModel):
    orgs: int = 0
    repos: int = 0
    members: int = 0


class Summary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_active: int = Field(0, alias="totalActive")
    total_deleted: int = Field(0, alias="totalDeleted")
    total_organizations: int = Field(0, alias="totalOrganizations")
    total_repositories: int = Field(0, alias="totalRepositories")
    total_members: int = Field(0, alias="totalMembers")
    unclassified_cost_centers: int = Field(0, alias="unclassifiedCostCenters")
    unclassified_resources: int = Field(0, alias="unclassifiedResources")


class ParsedData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    cost_centers: tuple[CostCenter, ...] = Field(default=(), alias="costCenters")
    active_cost_centers: tuple[CostCenter, ...] = Field(default=(), alias="activeCostCenters")
    deleted_cost_centers: tuple[CostCenter, ...] = Field(default=(), alias="deletedCostCenters")
    summary: Summary = Field(default_factory=Summary)


class APIConfig(BaseModel):
    token: str
    enterprise: str
