"""Built-in node type catalog."""

from __future__ import annotations
from flowaudit.nodes.registry import NodeCapability, NodeTypeMetadata, NodeTypeRegistry


BASE_NODE_PREFIX = "nodes-base."
EXPORTED_NODE_PREFIX = "n8n-nodes-base."
"""Prefix carried by built-in node types in exported workflow documents."""

_FILESYSTEM = {NodeCapability.FILESYSTEM}
_SQL = {NodeCapability.SQL}
_SQL_WITH_PARAMS = {NodeCapability.SQL, NodeCapability.SQL_QUERY_PARAMS}
_RISKY = {NodeCapability.RISKY}
_RISKY_VALIDATION = {NodeCapability.RISKY, NodeCapability.VALIDATION}
_VALIDATION = {NodeCapability.VALIDATION}
_WEBHOOK = {NodeCapability.WEBHOOK}

_BUILTIN_NODE_TYPES: tuple[tuple[str, str, set[NodeCapability]], ...] = (
    ("manualTrigger", "Starts the workflow on manual execution", set()),
    ("scheduleTrigger", "Starts the workflow on a schedule", set()),
    ("webhook", "Starts the workflow on an incoming HTTP request", _WEBHOOK),
    ("noOp", "Passes items through unchanged", set()),
    ("set", "Sets values on items", set()),
    ("slack", "Sends messages to Slack", set()),
    ("if", "Routes items on a condition", _VALIDATION),
    ("switch", "Routes items across several outputs", _VALIDATION),
    ("code", "Runs custom JavaScript or Python code", _RISKY_VALIDATION),
    ("function", "Runs custom code once for all items", _RISKY_VALIDATION),
    ("functionItem", "Runs custom code once per item", _RISKY_VALIDATION),
    ("executeCommand", "Runs shell commands on the host", _RISKY),
    ("httpRequest", "Makes arbitrary HTTP requests", _RISKY),
    ("ssh", "Runs commands over SSH", _RISKY),
    ("ftp", "Transfers files over FTP or SFTP", _RISKY),
    ("readPdf", "Reads PDF files", _FILESYSTEM),
    ("readBinaryFile", "Reads a file from disk", _FILESYSTEM),
    ("readBinaryFiles", "Reads files matching a pattern from disk", _FILESYSTEM),
    ("spreadsheetFile", "Reads and writes spreadsheet files", _FILESYSTEM),
    ("writeBinaryFile", "Writes a file to disk", _FILESYSTEM),
    ("postgres", "Queries a Postgres database", _SQL_WITH_PARAMS),
    ("crateDb", "Queries a CrateDB database", _SQL_WITH_PARAMS),
    ("questDb", "Queries a QuestDB database", _SQL_WITH_PARAMS),
    ("timescaleDb", "Queries a TimescaleDB database", _SQL_WITH_PARAMS),
    ("mySql", "Queries a MySQL database", _SQL),
    ("microsoftSql", "Queries a Microsoft SQL database", _SQL),
    ("snowflake", "Queries a Snowflake warehouse", _SQL),
)


def builtin_node_types() -> list[NodeTypeMetadata]:
    """Return metadata for every built-in node type under both prefixes."""
    return [
        NodeTypeMetadata(
            name=f"{prefix}{name}",
            description=description,
            tags=frozenset(tags),
        )
        for prefix in (BASE_NODE_PREFIX, EXPORTED_NODE_PREFIX)
        for name, description, tags in _BUILTIN_NODE_TYPES
    ]


def build_default_registry() -> NodeTypeRegistry:
    """Return a registry populated with the built-in node types."""
    registry = NodeTypeRegistry()
    registry.register_many(builtin_node_types())
    return registry


def node_type(name: str) -> str:
    """Return the fully qualified identifier of a built-in node type."""
    return f"{BASE_NODE_PREFIX}{name}"


__all__ = [
    "BASE_NODE_PREFIX",
    "EXPORTED_NODE_PREFIX",
    "build_default_registry",
    "builtin_node_types",
    "node_type",
]
