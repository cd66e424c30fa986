"""Shared contract for risk category analyzers."""

from __future__ import annotations
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from flowaudit.audit.constants import ALL_CATEGORIES, SectionCopy
from flowaudit.audit.errors import UnknownCategoryError
from flowaudit.audit.indexing import AuditSnapshot, WarningSink
from flowaudit.models import Location, RiskSection
from flowaudit.sources.base import NodeTypeClassifier, SettingsProvider


@dataclass(frozen=True, slots=True)
class AuditContext:
    """Read-only inputs handed to a category analyzer."""

    category: str
    snapshot: AuditSnapshot
    registry: NodeTypeClassifier
    settings: SettingsProvider
    now: datetime
    days_abandoned_workflow: int
    warnings: WarningSink

    @property
    def abandonment_threshold(self) -> datetime:
        """Return the oldest stop time still counted as a recent execution."""
        return self.now - timedelta(days=self.days_abandoned_workflow)

    def has_capability(self, node_type: str, capability: str) -> bool:
        """Return whether the registry tags ``node_type`` with ``capability``."""
        return capability in self.registry.classify(node_type)


Analyzer = Callable[[AuditContext], list[RiskSection]]


def build_section(
    copy: SectionCopy, locations: Iterable[Location]
) -> RiskSection | None:
    """Return a section for ``locations``, or ``None`` when there are none."""
    collected = list(locations)
    if not collected:
        return None
    return RiskSection(
        title=copy.title,
        description=copy.description,
        recommendation=copy.recommendation,
        location=collected,
    )


def build_sections(
    entries: Iterable[tuple[SectionCopy, Iterable[Location]]],
) -> list[RiskSection]:
    """Build sections in declared order, eliding empty ones."""
    sections: list[RiskSection] = []
    for copy, locations in entries:
        section = build_section(copy, locations)
        if section is not None:
            sections.append(section)
    return sections


@dataclass(frozen=True, slots=True)
class RiskCategory:
    """A named group of detection rules."""

    name: str
    analyze: Analyzer
    description: str = ""


class CategoryRegistry:
    """Ordered registry of risk categories."""

    def __init__(self) -> None:
        """Initialize an empty category registry."""
        self._categories: dict[str, RiskCategory] = {}

    def add(self, category: RiskCategory) -> RiskCategory:
        """Register ``category`` after those already registered."""
        name = category.name.strip().lower()
        if not name or name == ALL_CATEGORIES:
            msg = f"Invalid risk category name: {category.name!r}"
            raise ValueError(msg)
        if name in self._categories:
            msg = f"Risk category {name!r} is already registered."
            raise ValueError(msg)
        self._categories[name] = category
        return category

    def register(
        self, name: str, *, description: str = ""
    ) -> Callable[[Analyzer], Analyzer]:
        """Register the decorated analyzer under ``name``."""

        def decorator(func: Analyzer) -> Analyzer:
            self.add(RiskCategory(name=name, analyze=func, description=description))
            return func

        return decorator

    def get(self, name: str) -> RiskCategory | None:
        """Return the category registered as ``name``."""
        return self._categories.get(name.strip().lower())

    def names(self) -> tuple[str, ...]:
        """Return category names in registration order."""
        return tuple(self._categories)

    def list_categories(self) -> list[RiskCategory]:
        """Return categories in registration order."""
        return list(self._categories.values())

    def select(self, categories: str | Iterable[str] | None) -> list[RiskCategory]:
        """Resolve a caller selection into categories in registration order.

        ``None``, an empty selection or ``"all"`` select every category.

        Raises:
            UnknownCategoryError: If any requested name is not registered.
        """
        if categories is None:
            return self.list_categories()
        requested: Sequence[str] = (
            [categories] if isinstance(categories, str) else list(categories)
        )
        normalized = [str(item).strip().lower() for item in requested]
        if not normalized:
            return self.list_categories()
        for original, name in zip(requested, normalized, strict=True):
            if name != ALL_CATEGORIES and name not in self._categories:
                raise UnknownCategoryError(str(original))
        if ALL_CATEGORIES in normalized:
            return self.list_categories()
        wanted = set(normalized)
        return [
            category
            for name, category in self._categories.items()
            if name in wanted
        ]


__all__ = [
    "Analyzer",
    "AuditContext",
    "CategoryRegistry",
    "RiskCategory",
    "build_section",
    "build_sections",
]
