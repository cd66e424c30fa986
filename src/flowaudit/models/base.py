"""Shared primitives for audit snapshot models."""

from __future__ import annotations
from datetime import UTC, datetime
from typing import Annotated, Any
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    """Return the current UTC timestamp."""
    return datetime.now(tz=UTC)


def _coerce_identifier(value: Any) -> Any:
    """Accept integer identifiers exported by numeric primary keys."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so comparisons never mix offsets."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


Identifier = Annotated[str, BeforeValidator(_coerce_identifier)]
"""Entity identifier normalised to a string."""

UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
"""Timezone-aware UTC timestamp."""


class SnapshotModel(BaseModel):
    """Immutable base for entities read during a single audit run.

    Field names are snake_case; camelCase aliases are accepted so exported
    workflow and execution documents validate without translation.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )


__all__ = ["Identifier", "SnapshotModel", "UtcDatetime", "_utcnow", "ensure_utc"]
