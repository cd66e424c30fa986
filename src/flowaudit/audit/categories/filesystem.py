"""Filesystem risk: nodes that touch the host filesystem."""

from __future__ import annotations
from flowaudit.audit import constants
from flowaudit.audit.categories.base import AuditContext, RiskCategory, build_sections
from flowaudit.audit.indexing import iter_node_refs
from flowaudit.models import RiskSection
from flowaudit.nodes.registry import NodeCapability


def analyze(context: AuditContext) -> list[RiskSection]:
    """Report every node whose type is tagged as filesystem-interacting."""
    locations = [
        ref.to_location()
        for ref in iter_node_refs(context.snapshot.corpus)
        if context.has_capability(ref.node.type, NodeCapability.FILESYSTEM.value)
    ]
    return build_sections([(constants.FILESYSTEM_INTERACTION_NODES, locations)])


CATEGORY = RiskCategory(
    name=constants.FILESYSTEM,
    analyze=analyze,
    description="Nodes that read or write the host filesystem",
)


__all__ = ["CATEGORY", "analyze"]
