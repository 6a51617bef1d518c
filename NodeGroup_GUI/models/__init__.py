"""Data models for NodeGroup-GUI."""

from NodeGroup_GUI.models.node_group import (
    NodeGroup,
    NodeGroupInput,
    generate_group_id,
)

__all__ = [
    "NodeGroup",
    "NodeGroupInput",
    "generate_group_id",
]
