"""Database risk: SQL nodes whose queries may be injectable."""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any
from flowaudit.audit import constants
from flowaudit.audit.categories.base import AuditContext, RiskCategory, build_sections
from flowaudit.audit.errors import DataIntegrityError
from flowaudit.audit.indexing import NodeRef, iter_node_refs
from flowaudit.models import NodeLocation, RiskSection
from flowaudit.nodes.registry import NodeCapability


EXECUTE_QUERY_OPERATION = "executeQuery"


def is_expression(value: object) -> bool:
    """Return whether a parameter value is evaluated as an expression."""
    return isinstance(value, str) and (value.startswith("=") or "{{" in value)


def _query_params(ref: NodeRef) -> Any:
    additional = ref.node.parameters.get("additionalFields")
    if additional is None:
        return None
    if not isinstance(additional, Mapping):
        msg = "Parameter additionalFields must be a mapping"
        raise DataIntegrityError(msg)
    return additional.get("queryParams")


def analyze(context: AuditContext) -> list[RiskSection]:
    """Report SQL nodes with expression queries or missing query parameters."""
    expressions_in_queries: list[NodeLocation] = []
    expressions_in_query_params: list[NodeLocation] = []
    unused_query_params: list[NodeLocation] = []

    for ref in iter_node_refs(context.snapshot.corpus):
        tags = context.registry.classify(ref.node.type)
        if NodeCapability.SQL.value not in tags:
            continue
        parameters = ref.node.parameters
        if parameters.get("operation") != EXECUTE_QUERY_OPERATION:
            continue
        query = parameters.get("query")
        if not isinstance(query, str):
            continue

        if NodeCapability.SQL_QUERY_PARAMS.value in tags:
            try:
                query_params = _query_params(ref)
            except DataIntegrityError as exc:
                context.warnings.warn(
                    entity_kind="node",
                    entity_id=ref.node.id,
                    workflow_id=ref.workflow.id,
                    message=str(exc),
                )
                continue
        else:
            query_params = None

        location = ref.to_location()
        if is_expression(query):
            expressions_in_queries.append(location)
        if NodeCapability.SQL_QUERY_PARAMS.value not in tags:
            continue
        if query_params in (None, ""):
            unused_query_params.append(location)
        elif is_expression(query_params):
            expressions_in_query_params.append(location)

    return build_sections(
        [
            (constants.EXPRESSIONS_IN_QUERIES, expressions_in_queries),
            (constants.EXPRESSIONS_IN_QUERY_PARAMS, expressions_in_query_params),
            (constants.UNUSED_QUERY_PARAMS, unused_query_params),
        ]
    )


CATEGORY = RiskCategory(
    name=constants.DATABASE,
    analyze=analyze,
    description="SQL nodes exposed to query injection",
)


__all__ = ["CATEGORY", "EXECUTE_QUERY_OPERATION", "analyze", "is_expression"]
