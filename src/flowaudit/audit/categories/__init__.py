"""Built-in risk categories."""

from __future__ import annotations
from flowaudit.audit.categories import (
    credentials,
    database,
    filesystem,
    instance,
    nodes,
)
from flowaudit.audit.categories.base import (
    Analyzer,
    AuditContext,
    CategoryRegistry,
    RiskCategory,
    build_section,
    build_sections,
)


BUILTIN_CATEGORIES: tuple[RiskCategory, ...] = (
    credentials.CATEGORY,
    database.CATEGORY,
    nodes.CATEGORY,
    instance.CATEGORY,
    filesystem.CATEGORY,
)
"""Built-in categories in their fixed registration order."""


def build_default_categories() -> CategoryRegistry:
    """Return a registry holding the built-in categories."""
    registry = CategoryRegistry()
    for category in BUILTIN_CATEGORIES:
        registry.add(category)
    return registry


__all__ = [
    "Analyzer",
    "AuditContext",
    "BUILTIN_CATEGORIES",
    "CategoryRegistry",
    "RiskCategory",
    "build_default_categories",
    "build_section",
    "build_sections",
]
