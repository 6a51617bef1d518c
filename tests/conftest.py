"""Shared pytest configuration."""

import os

# 测试期间默认使用内存存储，避免写入用户目录
os.environ.setdefault("NODEGROUP_STORAGE_BACKEND", "memory")
