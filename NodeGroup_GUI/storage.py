"""Key-value storage adapters.

Features:
- 统一的 async get/put 接口
- 内存 / JSON 文件 / Redis 三种后端
- JSON 文件原子写入（临时文件 + rename）
"""

import asyncio
import copy
import json
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from NodeGroup_GUI.exceptions import ConfigurationError, StorageError
from NodeGroup_GUI.logger import logger

if TYPE_CHECKING:
    from NodeGroup_GUI.config import Settings

STORAGE_BACKENDS = ("memory", "file", "redis")


class KeyValueStorage(Protocol):
    """Minimal backend contract: whole values stored under string keys."""

    async def get(self, key: str) -> Any | None: ...

    async def put(self, key: str, value: Any) -> None: ...


class MemoryStorage:
    """进程内存储（测试和单进程部署使用）."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Any | None:
        value = self._data.get(key)
        return copy.deepcopy(value)

    async def put(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonFileStorage:
    """One JSON file per key inside ``directory``."""

    def __init__(self, directory: Path):
        self._directory = Path(directory).expanduser()

    def _path_for(self, key: str) -> Path:
        safe_key = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self._directory / f"{safe_key}.json"

    async def get(self, key: str) -> Any | None:
        return await asyncio.to_thread(self._read, key)

    async def put(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._write, key, value)

    def _read(self, key: str) -> Any | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"failed to read {path.name}: {e}") from e

    def _write(self, key: str, value: Any) -> None:
        path = self._path_for(key)
        temp_path = path.with_suffix(".tmp")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2, ensure_ascii=False)
            temp_path.replace(path)
            logger.debug(f"Saved key {key} to {path}")
        except (OSError, TypeError) as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StorageError(f"failed to write {path.name}: {e}") from e


class RedisStorage:
    """Redis backend; values are stored as JSON strings."""

    def __init__(self, client: Any):
        self._client = client

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RedisStorage":
        import redis.asyncio as redis

        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password or None,
            decode_responses=True,
        )
        return cls(client)

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(key)
        except Exception as e:
            raise StorageError(f"redis get failed: {e}") from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"corrupt value under {key}: {e}") from e

    async def put(self, key: str, value: Any) -> None:
        try:
            await self._client.set(key, json.dumps(value, ensure_ascii=False))
        except Exception as e:
            raise StorageError(f"redis set failed: {e}") from e


def create_storage(settings: "Settings") -> KeyValueStorage:
    """根据配置选择存储后端."""
    backend = settings.storage_backend.lower()
    if backend == "memory":
        storage: KeyValueStorage = MemoryStorage()
    elif backend == "file":
        storage = JsonFileStorage(settings.data_dir)
    elif backend == "redis":
        storage = RedisStorage.from_settings(settings)
    else:
        raise ConfigurationError(
            f"unknown storage backend {settings.storage_backend!r}, "
            f"expected one of {', '.join(STORAGE_BACKENDS)}"
        )
    logger.info(f"Using {backend} storage backend")
    return storage
