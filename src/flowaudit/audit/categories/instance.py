"""Instance risk: unprotected webhooks and insecure instance settings."""

from __future__ import annotations
import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from flowaudit.audit import constants
from flowaudit.audit.categories.base import AuditContext, RiskCategory, build_sections
from flowaudit.models import NodeLocation, RiskSection, SettingLocation
from flowaudit.nodes.registry import NodeCapability


NO_AUTHENTICATION = "none"


@dataclass(frozen=True, slots=True)
class SettingRule:
    """A setting whose configured value can weaken the instance."""

    key: str
    is_risky: Callable[[Any], bool]


SETTING_RULES: tuple[SettingRule, ...] = (
    SettingRule("PUBLIC_API_ENABLED", lambda value: value is True),
    SettingRule("EXECUTIONS_DATA_PRUNE", lambda value: value is False),
    SettingRule("BLOCK_FILE_ACCESS_TO_INTERNAL_PATHS", lambda value: value is False),
    SettingRule("EXCLUDED_NODE_TYPES", lambda value: not value),
)


def _render_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value)
    except TypeError:
        return str(value)


def _unprotected_webhooks(context: AuditContext) -> list[NodeLocation]:
    locations: list[NodeLocation] = []
    for graph in context.snapshot.corpus:
        if not graph.workflow.active:
            continue
        for ref in graph.iter_refs():
            if not context.has_capability(ref.node.type, NodeCapability.WEBHOOK.value):
                continue
            authentication = ref.node.parameters.get("authentication")
            if authentication not in (None, "", NO_AUTHENTICATION):
                continue
            validated = any(
                context.has_capability(child.type, NodeCapability.VALIDATION.value)
                for child in graph.children_of(ref.node)
            )
            if not validated:
                locations.append(ref.to_location())
    return locations


def _insecure_settings(context: AuditContext) -> list[SettingLocation]:
    locations: list[SettingLocation] = []
    for rule in SETTING_RULES:
        value = context.settings.get(rule.key)
        if value is None:
            continue
        if rule.is_risky(value):
            locations.append(SettingLocation(key=rule.key, value=_render_value(value)))
    return locations


def analyze(context: AuditContext) -> list[RiskSection]:
    """Report webhooks open to the world and weak instance settings."""
    return build_sections(
        [
            (constants.UNPROTECTED_WEBHOOKS, _unprotected_webhooks(context)),
            (constants.INSECURE_SETTINGS, _insecure_settings(context)),
        ]
    )


CATEGORY = RiskCategory(
    name=constants.INSTANCE,
    analyze=analyze,
    description="Exposure of the instance itself",
)


__all__ = ["CATEGORY", "SETTING_RULES", "SettingRule", "analyze"]
