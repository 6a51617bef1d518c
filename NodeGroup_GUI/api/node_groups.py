"""Node group CRUD routes."""

from fastapi import APIRouter, Query, Request

from NodeGroup_GUI.exceptions import (
    InfrastructureError,
    MethodNotSupportedError,
    NodeGroupError,
    ValidationError,
)
from NodeGroup_GUI.logger import logger
from NodeGroup_GUI.node_group_store import node_group_store
from NodeGroup_GUI.schemas import NodeGroupListResponse, NodeGroupPayload

router = APIRouter()

NODE_GROUPS_PATH = "/api/node-groups"


@router.get(
    NODE_GROUPS_PATH,
    response_model=NodeGroupListResponse,
    response_model_exclude_none=True,
)
async def list_node_groups() -> NodeGroupListResponse:
    """获取所有节点分组."""
    try:
        groups = await node_group_store.list_groups()
    except NodeGroupError:
        raise
    except Exception as e:
        logger.exception("Failed to list node groups")
        raise InfrastructureError(str(e)) from e
    return NodeGroupListResponse(data=groups)


@router.post(NODE_GROUPS_PATH, response_model=NodeGroupListResponse)
async def save_node_group(request: Request) -> NodeGroupListResponse:
    """创建或更新节点分组（请求体带 id 时为更新）."""
    try:
        body = await request.json()
    except ValueError as e:
        raise InfrastructureError(f"malformed request body: {e}") from e

    if not isinstance(body, dict):
        raise ValidationError("request body must be a JSON object")

    payload = NodeGroupPayload.model_validate(body)
    try:
        action, groups = await node_group_store.upsert_group(payload.to_input())
    except NodeGroupError:
        raise
    except Exception as e:
        logger.exception("Failed to save node group")
        raise InfrastructureError(str(e)) from e
    return NodeGroupListResponse(message=action, data=groups)


@router.delete(NODE_GROUPS_PATH, response_model=NodeGroupListResponse)
async def delete_node_group(
    group_id: str | None = Query(default=None, alias="id"),
) -> NodeGroupListResponse:
    """删除节点分组."""
    try:
        groups = await node_group_store.delete_group(group_id)
    except NodeGroupError:
        raise
    except Exception as e:
        logger.exception(f"Failed to delete node group {group_id}")
        raise InfrastructureError(str(e)) from e
    return NodeGroupListResponse(message="deleted", data=groups)


@router.api_route(NODE_GROUPS_PATH, methods=["PUT", "PATCH", "HEAD", "OPTIONS"])
async def unsupported_method(request: Request) -> None:
    raise MethodNotSupportedError(request.method)
