from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import PitrWindowDescriptor


class PitrRestoreRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_time: str = Field(..., alias="targetTime")
    create_new_cluster: bool = Field(True, alias="createNewCluster")
    new_cluster_name: Optional[str] = Field(
        None,
        alias="newClusterName",
        min_length=3,
        max_length=50,
        pattern=r"^[a-z][a-z0-9-]*$",
    )
    node_regions: Optional[List[str]] = Field(None, alias="nodeRegions", min_length=1, max_length=3)
    node_size: Optional[str] = Field(
        None,
        alias="nodeSize",
        pattern=r"^(cx[2345]3|ccx[123456]3|cpx[123]1|cpx[345]1|cax[123]1)$",
    )
    postgres_version: Optional[str] = Field(None, alias="postgresVersion", pattern=r"^(14|15|16|17)$")

    @field_validator("node_regions")
    @classmethod
    def ensure_node_count(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is not None and len(value) not in (1, 3):
            raise ValueError("Must specify exactly 1 node (single) or 3 nodes (HA)")
        return value

    @field_validator("create_new_cluster")
    @classmethod
    def ensure_new_cluster(cls, value: bool) -> bool:
        if not value:
            raise ValueError("PITR currently supports only restore to a new cluster")
        return value


class RestoreBuildRequest(BaseModel):
    window: PitrWindowDescriptor
    restore: PitrRestoreRequest
