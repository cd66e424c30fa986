"""Nodes risk: risky official nodes plus community and custom node types."""

from __future__ import annotations
from flowaudit.audit import constants
from flowaudit.audit.categories.base import AuditContext, RiskCategory, build_sections
from flowaudit.audit.indexing import iter_node_refs
from flowaudit.models import CommunityNodeLocation, CustomNodeLocation, RiskSection
from flowaudit.nodes.registry import NodeCapability


def analyze(context: AuditContext) -> list[RiskSection]:
    """Report risky nodes in workflows and installed third-party node types."""
    official = [
        ref.to_location()
        for ref in iter_node_refs(context.snapshot.corpus)
        if context.has_capability(ref.node.type, NodeCapability.RISKY.value)
    ]
    community = [
        CommunityNodeLocation(node_type=entry.name, package_url=entry.package_url)
        for entry in context.registry.iter_tagged(NodeCapability.COMMUNITY)
    ]
    custom = [
        CustomNodeLocation(node_type=entry.name, file_path=entry.source_path)
        for entry in context.registry.iter_tagged(NodeCapability.CUSTOM)
    ]
    return build_sections(
        [
            (constants.OFFICIAL_RISKY_NODES, official),
            (constants.COMMUNITY_NODES, community),
            (constants.CUSTOM_NODES, custom),
        ]
    )


CATEGORY = RiskCategory(
    name=constants.NODES,
    analyze=analyze,
    description="Node types that widen what a workflow can do",
)


__all__ = ["CATEGORY", "analyze"]
