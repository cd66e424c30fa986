"""Capability registry for workflow node types."""

from __future__ import annotations
from collections.abc import Iterable
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class NodeCapability(str, Enum):
    """Capability tags the audit rules look for."""

    FILESYSTEM = "filesystem"
    SQL = "sql"
    SQL_QUERY_PARAMS = "sql-query-params"
    RISKY = "risky"
    WEBHOOK = "webhook"
    VALIDATION = "validation"
    COMMUNITY = "community"
    CUSTOM = "custom"


class NodeTypeMetadata(BaseModel):
    """Metadata describing a node type known to the instance.

    Attributes:
        name: Type identifier referenced by workflow nodes
        description: Human-readable description of the node type
        tags: Capability tags attached to the type
        package_url: Where a community package was installed from
        source_path: Local file a custom node type was loaded from
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    """Type identifier referenced by workflow nodes."""
    description: str = ""
    """Human-readable description of the node type."""
    tags: frozenset[str] = Field(default_factory=frozenset)
    """Capability tags attached to the type."""
    package_url: str | None = None
    """Where a community package was installed from."""
    source_path: str | None = None
    """Local file a custom node type was loaded from."""

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: object) -> frozenset[str]:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, Iterable):
            msg = "Node type tags must be an iterable of strings."
            raise ValueError(msg)
        return frozenset(
            tag.value if isinstance(tag, NodeCapability) else str(tag).strip().lower()
            for tag in value
        )


class NodeTypeRegistry:
    """Registry classifying node type identifiers into capability tags."""

    def __init__(self) -> None:
        """Initialize an empty node type registry."""
        self._metadata: dict[str, NodeTypeMetadata] = {}

    def register(self, metadata: NodeTypeMetadata) -> NodeTypeMetadata:
        """Register or replace the metadata for a node type.

        Args:
            metadata: Node type metadata including capability tags

        Returns:
            The registered metadata instance
        """
        self._metadata[metadata.name] = metadata
        return metadata

    def register_many(self, entries: Iterable[NodeTypeMetadata]) -> None:
        """Register several node types preserving their order."""
        for entry in entries:
            self.register(entry)

    def get_metadata(self, name: str) -> NodeTypeMetadata | None:
        """Return the metadata for ``name`` or ``None`` when unknown."""
        return self._metadata.get(name)

    def classify(self, node_type: str) -> frozenset[str]:
        """Return the capability tags for ``node_type``.

        Unknown node types carry no capabilities.
        """
        metadata = self._metadata.get(node_type)
        if metadata is None:
            return frozenset()
        return metadata.tags

    def has_capability(self, node_type: str, capability: NodeCapability) -> bool:
        """Return whether ``node_type`` is tagged with ``capability``."""
        return capability.value in self.classify(node_type)

    def iter_tagged(self, tag: NodeCapability | str) -> Iterable[NodeTypeMetadata]:
        """Yield registered node types carrying ``tag`` in registration order."""
        value = tag.value if isinstance(tag, NodeCapability) else tag
        for metadata in self._metadata.values():
            if value in metadata.tags:
                yield metadata

    def list_metadata(self) -> list[NodeTypeMetadata]:
        """Return metadata for all registered node types."""
        return list(self._metadata.values())


__all__ = ["NodeCapability", "NodeTypeMetadata", "NodeTypeRegistry"]
