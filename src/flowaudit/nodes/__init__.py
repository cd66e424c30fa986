"""Node type capability registry."""

from flowaudit.nodes.catalog import build_default_registry, node_type
from flowaudit.nodes.registry import NodeCapability, NodeTypeMetadata, NodeTypeRegistry


__all__ = [
    "NodeCapability",
    "NodeTypeMetadata",
    "NodeTypeRegistry",
    "build_default_registry",
    "node_type",
]
