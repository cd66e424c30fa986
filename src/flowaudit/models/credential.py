"""Stored credential metadata."""

from __future__ import annotations
from pydantic import Field
from flowaudit.models.base import Identifier, SnapshotModel, UtcDatetime, _utcnow


class Credential(SnapshotModel):
    """Credential record as listed by the credential directory.

    ``data`` carries the encrypted payload verbatim. It is never decrypted,
    is hidden from ``repr`` and is excluded from every serialised form.
    """

    id: Identifier = Field(min_length=1)
    name: str = Field(min_length=1)
    type: str = ""
    data: str = Field(default="", repr=False, exclude=True)
    created_at: UtcDatetime = Field(default_factory=_utcnow)
    updated_at: UtcDatetime = Field(default_factory=_utcnow)

    def redact(self) -> dict[str, str]:
        """Return identifying metadata suitable for logs."""
        return {"id": self.id, "name": self.name, "type": self.type}


__all__ = ["Credential"]
