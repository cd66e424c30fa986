"""Static security audit for automation workflows, credentials and executions."""

from flowaudit.audit import (
    ALL_CATEGORIES,
    AuditError,
    AuditTimeoutError,
    Auditor,
    CollaboratorFetchError,
    UnknownCategoryError,
    run_audit,
)
from flowaudit.models import AuditResult, RiskReport, RiskSection


__all__ = [
    "ALL_CATEGORIES",
    "AuditError",
    "AuditResult",
    "AuditTimeoutError",
    "Auditor",
    "CollaboratorFetchError",
    "RiskReport",
    "RiskSection",
    "UnknownCategoryError",
    "run_audit",
]
