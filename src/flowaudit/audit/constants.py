"""Risk category names and section copy."""

from __future__ import annotations
from dataclasses import dataclass


CREDENTIALS = "credentials"
DATABASE = "database"
NODES = "nodes"
INSTANCE = "instance"
FILESYSTEM = "filesystem"

RISK_CATEGORIES: tuple[str, ...] = (CREDENTIALS, DATABASE, NODES, INSTANCE, FILESYSTEM)
"""Registration order of the built-in categories; reports follow this order."""

ALL_CATEGORIES = "all"
"""Selection sentinel meaning every registered category."""


@dataclass(frozen=True, slots=True)
class SectionCopy:
    """Human-readable text attached to a risk section."""

    title: str
    description: str
    recommendation: str


CREDS_NOT_IN_ANY_USE = SectionCopy(
    title="Credentials not used in any workflow",
    description=(
        "These credentials are not referenced by any node in any workflow. "
        "Unused credentials widen the blast radius of a leak for no benefit."
    ),
    recommendation="Consider deleting these credentials if you no longer need them.",
)
CREDS_NOT_IN_ACTIVE_USE = SectionCopy(
    title="Credentials not used in any active workflow",
    description=(
        "These credentials are only referenced by inactive workflows, "
        "so nothing currently running depends on them."
    ),
    recommendation=(
        "Consider deleting these credentials, or activate the workflows that use them."
    ),
)
CREDS_NOT_RECENTLY_EXECUTED = SectionCopy(
    title="Credentials not used in recently executed workflows",
    description=(
        "None of the workflows referencing these credentials finished an "
        "execution within the configured abandonment window."
    ),
    recommendation=(
        "Consider deleting these credentials if the workflows using them are abandoned."
    ),
)

EXPRESSIONS_IN_QUERIES = SectionCopy(
    title='Expressions in "Execute Query" fields in SQL nodes',
    description=(
        "These SQL nodes build their query from an expression, which can allow "
        "SQL injection when the expression includes untrusted input."
    ),
    recommendation=(
        "Use a static query and pass dynamic values through query parameters instead."
    ),
)
EXPRESSIONS_IN_QUERY_PARAMS = SectionCopy(
    title='Expressions in "Query Parameters" fields in SQL nodes',
    description=(
        "These SQL nodes compute their query parameters from an expression. "
        "Review that the expression cannot inject additional SQL."
    ),
    recommendation="Validate the data feeding the query parameter expressions.",
)
UNUSED_QUERY_PARAMS = SectionCopy(
    title='Unused "Query Parameters" fields in SQL nodes',
    description=(
        "These SQL nodes support query parameters but do not set any, so "
        "dynamic values are likely interpolated into the query itself."
    ),
    recommendation="Pass dynamic values through the query parameters field.",
)

OFFICIAL_RISKY_NODES = SectionCopy(
    title="Official risky nodes",
    description=(
        "These nodes can run arbitrary code, execute shell commands or reach "
        "arbitrary hosts. They are useful but widen what a compromised "
        "workflow can do."
    ),
    recommendation=(
        "Review each node and exclude the node types you do not need on this instance."
    ),
)
COMMUNITY_NODES = SectionCopy(
    title="Community nodes",
    description=(
        "These node types come from community packages that are not reviewed "
        "by the instance maintainers."
    ),
    recommendation="Only install community packages from sources you trust.",
)
CUSTOM_NODES = SectionCopy(
    title="Custom nodes",
    description="These node types are loaded from local source files.",
    recommendation="Review the source of custom node types before loading them.",
)

UNPROTECTED_WEBHOOKS = SectionCopy(
    title="Unprotected webhooks in instance",
    description=(
        "These webhook nodes in active workflows accept requests without "
        "authentication and pass them on without any validation step."
    ),
    recommendation=(
        "Enable authentication on the webhook or validate the payload in the next node."
    ),
)
INSECURE_SETTINGS = SectionCopy(
    title="Insecure instance settings",
    description="These instance settings are configured to a less secure value.",
    recommendation="Review each setting and tighten it unless the risk is accepted.",
)

FILESYSTEM_INTERACTION_NODES = SectionCopy(
    title="Nodes that interact with the filesystem",
    description=(
        "These nodes read from or write to the filesystem of the host "
        "running the workflows."
    ),
    recommendation=(
        "Restrict filesystem access to dedicated directories, or exclude these "
        "node types if workflows do not need them."
    ),
)


__all__ = [
    "ALL_CATEGORIES",
    "COMMUNITY_NODES",
    "CREDENTIALS",
    "CREDS_NOT_IN_ACTIVE_USE",
    "CREDS_NOT_IN_ANY_USE",
    "CREDS_NOT_RECENTLY_EXECUTED",
    "CUSTOM_NODES",
    "DATABASE",
    "EXPRESSIONS_IN_QUERIES",
    "EXPRESSIONS_IN_QUERY_PARAMS",
    "FILESYSTEM",
    "FILESYSTEM_INTERACTION_NODES",
    "INSECURE_SETTINGS",
    "INSTANCE",
    "NODES",
    "OFFICIAL_RISKY_NODES",
    "RISK_CATEGORIES",
    "SectionCopy",
    "UNPROTECTED_WEBHOOKS",
    "UNUSED_QUERY_PARAMS",
]
