"""Service configuration loaded from environment variables and ``.env``."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NODEGROUP_", env_file=".env", extra="ignore"
    )

    # 存储后端: memory | file | redis
    storage_backend: str = "file"
    data_dir: Path = Path.home() / ".config" / "nodegroup"
    node_groups_key: str = "misub_node_groups_v1"

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str = ""

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000


settings = Settings()
