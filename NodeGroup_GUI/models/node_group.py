"""Node group data models."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import uuid4

GROUP_ID_PREFIX = "group-"

_TIMESTAMP_STEP = timedelta(milliseconds=1)


def generate_group_id() -> str:
    """生成分组 ID."""
    return f"{GROUP_ID_PREFIX}{uuid4().hex}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. ``2026-01-01T08:00:00.000Z``."""
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: object) -> datetime | None:
    """Parse a stored timestamp; ``None`` when absent or unreadable."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def advance_timestamp(now: datetime, *previous: object) -> str:
    """Format ``now``, bumped so it is strictly later than every readable ``previous``."""
    now = now.replace(microsecond=now.microsecond // 1000 * 1000)
    for value in previous:
        parsed = parse_timestamp(value)
        if parsed is not None and now <= parsed:
            now = parsed.replace(microsecond=parsed.microsecond // 1000 * 1000)
            now += _TIMESTAMP_STEP
    return format_timestamp(now)


@dataclass
class NodeGroup:
    """节点分组定义.

    Timestamps are kept in their stored textual form.
    """

    id: str = field(default_factory=generate_group_id)

    # 基础信息
    name: str = ""
    description: str = ""
    node_ids: list[str] = field(default_factory=list)  # 分组内的节点 ID（有序）
    enabled: bool = True

    # 元数据
    created_at: str = field(default_factory=lambda: format_timestamp(utcnow()))
    updated_at: str = ""

    def __post_init__(self) -> None:
        if not self.updated_at:
            self.updated_at = self.created_at

    def to_dict(self) -> dict:
        """转换为可序列化的字典（与 HTTP 接口字段一致）."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "nodeIds": list(self.node_ids),
            "enabled": self.enabled,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NodeGroup":
        """从字典创建实例（只读取，不生成 id 或时间戳）."""
        node_ids = data.get("nodeIds")
        created_at = data.get("createdAt")
        updated_at = data.get("updatedAt")
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            description=data.get("description") or "",
            node_ids=[n for n in node_ids if isinstance(n, str)]
            if isinstance(node_ids, list)
            else [],
            enabled=data.get("enabled") is not False,
            created_at=created_at if isinstance(created_at, str) else "",
            updated_at=updated_at if isinstance(updated_at, str) else "",
        )


@dataclass
class NodeGroupInput:
    """Partial group record accepted by create/update.

    ``id`` absent means create; present means update of that record.
    """

    id: str | None = None
    name: str | None = None
    description: str | None = None
    node_ids: list[str] | None = None
    enabled: bool | None = None

    @property
    def is_update(self) -> bool:
        return bool(self.id)
