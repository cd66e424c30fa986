"""Error types raised by the audit engine."""

from __future__ import annotations


class AuditError(RuntimeError):
    """Base error type for audit runs."""


class UnknownCategoryError(AuditError, ValueError):
    """Raised when a caller requests a risk category that is not registered."""

    def __init__(self, category: str) -> None:
        """Record the offending category name."""
        self.category = category
        super().__init__(f"Unknown risk category: {category!r}")


class CollaboratorFetchError(AuditError):
    """Raised when a collaborator fails to supply audit data."""

    def __init__(self, collaborator: str, cause: BaseException) -> None:
        """Record which collaborator failed."""
        self.collaborator = collaborator
        super().__init__(f"Failed to fetch {collaborator} for audit: {cause}")


class AuditTimeoutError(AuditError, TimeoutError):
    """Raised when an audit run exceeds its deadline."""

    def __init__(self, timeout: float) -> None:
        """Record the deadline that was exceeded."""
        self.timeout = timeout
        super().__init__(f"Security audit did not finish within {timeout:g} seconds")


class DataIntegrityError(AuditError):
    """Raised for a malformed entity; callers skip it and record a warning."""


__all__ = [
    "AuditError",
    "AuditTimeoutError",
    "CollaboratorFetchError",
    "DataIntegrityError",
    "UnknownCategoryError",
]
