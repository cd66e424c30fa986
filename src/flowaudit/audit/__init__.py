"""Workflow security audit engine."""

from flowaudit.audit.categories import (
    AuditContext,
    CategoryRegistry,
    RiskCategory,
    build_default_categories,
)
from flowaudit.audit.constants import ALL_CATEGORIES, RISK_CATEGORIES
from flowaudit.audit.errors import (
    AuditError,
    AuditTimeoutError,
    CollaboratorFetchError,
    DataIntegrityError,
    UnknownCategoryError,
)
from flowaudit.audit.orchestrator import Auditor, run_audit


__all__ = [
    "ALL_CATEGORIES",
    "AuditContext",
    "AuditError",
    "AuditTimeoutError",
    "Auditor",
    "CategoryRegistry",
    "CollaboratorFetchError",
    "DataIntegrityError",
    "RISK_CATEGORIES",
    "RiskCategory",
    "UnknownCategoryError",
    "build_default_categories",
    "run_audit",
]
