"""Request/response schemas for the node group API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from NodeGroup_GUI.models.node_group import NodeGroupInput


class NodeGroupPayload(BaseModel):
    """POST body: a partial group record.

    Wrongly typed fields are read as missing so the store reports them with
    its own validation messages.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    name: str | None = None
    description: str | None = None
    node_ids: list[str] | None = Field(default=None, alias="nodeIds")
    enabled: bool | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str | None:
        # 假值（0、false、""）视为没有 id，按创建处理
        if not v:
            return None
        return v if isinstance(v, str) else str(v)

    @field_validator("name", "description", mode="before")
    @classmethod
    def _string_or_none(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None

    @field_validator("node_ids", mode="before")
    @classmethod
    def _node_id_list(cls, v: Any) -> list[str] | None:
        if not isinstance(v, list):
            return None
        return [n for n in v if isinstance(n, str)]

    @field_validator("enabled", mode="before")
    @classmethod
    def _strict_bool(cls, v: Any) -> bool | None:
        return v if isinstance(v, bool) else None

    def to_input(self) -> NodeGroupInput:
        return NodeGroupInput(
            id=self.id,
            name=self.name,
            description=self.description,
            node_ids=self.node_ids,
            enabled=self.enabled,
        )


class NodeGroupListResponse(BaseModel):
    """Group list response; records are returned exactly as stored."""

    success: bool = True
    message: str | None = None
    data: list[Any]


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


class HealthResponse(BaseModel):
    status: str
    version: str
