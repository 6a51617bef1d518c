"""Command line entry point: ``python -m NodeGroup_GUI``."""

import argparse
from pathlib import Path

import uvicorn

from NodeGroup_GUI.config import settings
from NodeGroup_GUI.storage import STORAGE_BACKENDS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nodegroup-gui",
        description="启动节点分组管理服务",
    )
    parser.add_argument("--host", default=settings.host, help="监听地址")
    parser.add_argument(
        "--port", "-p", type=int, default=settings.port, help="服务器端口"
    )
    parser.add_argument(
        "--storage",
        choices=STORAGE_BACKENDS,
        default=settings.storage_backend,
        help="存储后端",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=settings.data_dir,
        help="file 后端的数据目录",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="日志级别")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    # 必须在导入 app 之前更新配置，存储实例在导入时创建
    settings.storage_backend = args.storage
    settings.data_dir = args.data_dir
    settings.log_level = args.log_level

    from NodeGroup_GUI.api import create_app
    from NodeGroup_GUI.logger import configure_logger

    configure_logger(args.log_level)
    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
