"""Node group store.

All groups live in one list serialized under a single storage key. Every
mutation reads the whole list, changes only the target entry and writes the
whole list back; other entries are written exactly as they were read. The
read-modify-write cycle is serialized by a per-store lock, so concurrent
requests handled by one process cannot overwrite each other.
"""

import asyncio
from typing import Any, Literal

from NodeGroup_GUI.config import settings
from NodeGroup_GUI.exceptions import NotFoundError, ValidationError
from NodeGroup_GUI.logger import logger
from NodeGroup_GUI.models.node_group import (
    NodeGroup,
    NodeGroupInput,
    advance_timestamp,
    format_timestamp,
    generate_group_id,
    utcnow,
)
from NodeGroup_GUI.storage import KeyValueStorage, create_storage

UpsertAction = Literal["created", "updated"]

# 存储中的原始记录（保留未知字段）
GroupRecord = dict[str, Any]


def _record_id(entry: Any) -> Any:
    return entry.get("id") if isinstance(entry, dict) else None


def _record_name(entry: Any) -> str | None:
    name = entry.get("name") if isinstance(entry, dict) else None
    return name.strip() if isinstance(name, str) else None


def _find_index(records: list[Any], group_id: str) -> int | None:
    return next(
        (i for i, entry in enumerate(records) if _record_id(entry) == group_id), None
    )


class NodeGroupStore:
    """节点分组存储."""

    def __init__(self, storage: KeyValueStorage, key: str):
        self._storage = storage
        self._key = key
        self._write_lock = asyncio.Lock()

    async def list_groups(self) -> list[Any]:
        """获取全部分组（按存储原样返回）."""
        return await self._load()

    async def get_group(self, group_id: str) -> NodeGroup | None:
        records = await self._load()
        index = _find_index(records, group_id)
        return None if index is None else NodeGroup.from_dict(records[index])

    async def upsert_group(
        self, data: NodeGroupInput
    ) -> tuple[UpsertAction, list[Any]]:
        """创建或更新分组.

        Args:
            data: 分组数据；带 ``id`` 时为更新，否则为创建

        Returns:
            tuple: ("created" | "updated", 更新后的完整分组列表)

        Raises:
            ValidationError: 名称为空、节点为空或名称重复
            NotFoundError: 更新的分组不存在
        """
        name = data.name.strip() if isinstance(data.name, str) else ""
        if not name:
            raise ValidationError("name required")
        if not data.node_ids:
            raise ValidationError("at least one node required")

        description = (data.description or "").strip()
        enabled = data.enabled is not False
        node_ids = list(data.node_ids)

        async with self._write_lock:
            records = await self._load()
            now = utcnow()

            if data.is_update:
                index = _find_index(records, data.id)
                if index is None:
                    logger.warning(f"Node group not found for update: id={data.id}")
                    raise NotFoundError(data.id)
                if any(
                    i != index and _record_name(entry) == name
                    for i, entry in enumerate(records)
                ):
                    logger.warning(f"Duplicate node group name on update: {name}")
                    raise ValidationError("duplicate name")

                stored = records[index]
                records[index] = {
                    **stored,
                    "name": name,
                    "description": description,
                    "nodeIds": node_ids,
                    "enabled": enabled,
                    "updatedAt": advance_timestamp(
                        now, stored.get("createdAt"), stored.get("updatedAt")
                    ),
                }
                group_id = data.id
                action: UpsertAction = "updated"
            else:
                if any(_record_name(entry) == name for entry in records):
                    logger.warning(f"Duplicate node group name on create: {name}")
                    raise ValidationError("duplicate name")

                timestamp = format_timestamp(now)
                group = NodeGroup(
                    id=generate_group_id(),
                    name=name,
                    description=description,
                    node_ids=node_ids,
                    enabled=enabled,
                    created_at=timestamp,
                    updated_at=timestamp,
                )
                records.append(group.to_dict())
                group_id = group.id
                action = "created"

            await self._save(records)

        logger.info(f"{action.capitalize()} node group: {name} (id={group_id})")
        return action, records

    async def delete_group(self, group_id: str | None) -> list[Any]:
        """删除分组.

        Returns:
            list: 删除后剩余的分组列表
        """
        if not group_id:
            raise ValidationError("id required")

        async with self._write_lock:
            records = await self._load()
            index = _find_index(records, group_id)
            if index is None:
                logger.warning(f"Node group not found for deletion: id={group_id}")
                raise NotFoundError(group_id)

            removed = records.pop(index)
            await self._save(records)

        logger.info(f"Deleted node group: {removed.get('name')} (id={group_id})")
        return records

    async def _load(self) -> list[Any]:
        raw = await self._storage.get(self._key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning(
                f"Ignoring malformed node group data under {self._key}: "
                f"expected list, got {type(raw).__name__}"
            )
            return []
        logger.debug(f"Loaded {len(raw)} node groups")
        return raw

    async def _save(self, records: list[Any]) -> None:
        await self._storage.put(self._key, records)
        logger.debug(f"Saved {len(records)} node groups")


def create_node_group_store() -> NodeGroupStore:
    return NodeGroupStore(create_storage(settings), settings.node_groups_key)


# 全局实例
node_group_store = create_node_group_store()
