"""Client-side mirror of the server's node group list.

The authoritative list is only ever replaced wholesale by a server response.
Optimistic edits made before a response arrives are kept in a separate
pending layer that the next authoritative response discards.
"""

import copy
from dataclasses import dataclass
from typing import Any, Literal

import httpx

from NodeGroup_GUI.exceptions import NodeGroupClientError
from NodeGroup_GUI.logger import logger

NODE_GROUPS_PATH = "/api/node-groups"

GroupDict = dict[str, Any]


@dataclass
class PendingChange:
    kind: Literal["add", "update", "remove"]
    group_id: str
    payload: GroupDict | None = None


class NodeGroupClientCache:
    """节点分组客户端缓存."""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._items: list[GroupDict] = []
        self._pending: list[PendingChange] = []
        self.is_loading = False

    async def __aenter__(self) -> "NodeGroupClientCache":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ===== 视图 =====

    @property
    def items(self) -> list[GroupDict]:
        """Authoritative list with pending optimistic changes applied."""
        items = copy.deepcopy(self._items)
        for change in self._pending:
            index = next(
                (i for i, g in enumerate(items) if g.get("id") == change.group_id),
                None,
            )
            if change.kind == "add" and change.payload is not None:
                items.append(copy.deepcopy(change.payload))
            elif change.kind == "update" and index is not None and change.payload:
                items[index] = {**items[index], **change.payload}
            elif change.kind == "remove" and index is not None:
                items.pop(index)
        return items

    @property
    def authoritative_items(self) -> list[GroupDict]:
        return copy.deepcopy(self._items)

    @property
    def has_pending_changes(self) -> bool:
        return bool(self._pending)

    @property
    def active_items(self) -> list[GroupDict]:
        return [g for g in self.items if g.get("enabled") is not False]

    def get_group_by_id(self, group_id: str) -> GroupDict | None:
        return next((g for g in self.items if g.get("id") == group_id), None)

    def get_groups_by_node_id(self, node_id: str) -> list[GroupDict]:
        return [g for g in self.items if node_id in (g.get("nodeIds") or [])]

    # ===== 本地状态 =====

    def set_items(self, items: list[GroupDict] | None) -> None:
        """Replace the authoritative list and drop pending changes."""
        self._items = copy.deepcopy(items) if items else []
        self._pending.clear()

    def add(self, group: GroupDict) -> None:
        self._pending.append(
            PendingChange("add", str(group.get("id", "")), copy.deepcopy(group))
        )

    def update(self, group_id: str, updates: GroupDict) -> None:
        self._pending.append(PendingChange("update", group_id, copy.deepcopy(updates)))

    def remove(self, group_id: str) -> None:
        self._pending.append(PendingChange("remove", group_id))

    # ===== 远程操作 =====

    async def fetch_groups(self) -> list[GroupDict]:
        """从服务端获取分组列表."""
        self.is_loading = True
        try:
            result = await self._request("GET", NODE_GROUPS_PATH)
        except NodeGroupClientError as e:
            logger.error(f"Failed to fetch node groups: {e}")
            raise
        finally:
            self.is_loading = False
        self.set_items(result.get("data"))
        return self.items

    async def save_group(self, group: GroupDict) -> dict[str, Any]:
        """保存分组（创建或更新），返回服务端响应."""
        try:
            result = await self._request("POST", NODE_GROUPS_PATH, json=group)
        except NodeGroupClientError as e:
            logger.error(f"Failed to save node group: {e}")
            raise
        self.set_items(result.get("data"))
        return result

    async def delete_group(self, group_id: str) -> dict[str, Any]:
        try:
            result = await self._request(
                "DELETE", NODE_GROUPS_PATH, params={"id": group_id}
            )
        except NodeGroupClientError as e:
            logger.error(f"Failed to delete node group {group_id}: {e}")
            raise
        self.set_items(result.get("data"))
        return result

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise NodeGroupClientError(f"request failed: {e}") from e

        try:
            result = response.json()
        except ValueError:
            result = None

        message = result.get("message") if isinstance(result, dict) else None
        if response.is_error:
            raise NodeGroupClientError(
                message or f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )
        if not isinstance(result, dict) or not result.get("success"):
            raise NodeGroupClientError(
                message or "request failed", status_code=response.status_code
            )
        return result
