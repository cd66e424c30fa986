"""Credentials risk: stored credentials nothing actually needs."""

from __future__ import annotations
import logging
from flowaudit.audit import constants
from flowaudit.audit.categories.base import AuditContext, RiskCategory, build_sections
from flowaudit.models import Credential, CredentialLocation, RiskSection


logger = logging.getLogger(__name__)


def _location(credential: Credential) -> CredentialLocation:
    return CredentialLocation(id=credential.id, name=credential.name)


def analyze(context: AuditContext) -> list[RiskSection]:
    """Report unused, inactive and abandoned credentials.

    The three sections are mutually exclusive: a credential lands in the
    first section whose rule it matches.
    """
    snapshot = context.snapshot
    usage = snapshot.credential_usage
    known = {credential.id: credential for credential in snapshot.credentials}

    not_in_any_use = [
        credential
        for credential in snapshot.credentials
        if credential.id not in usage or not usage[credential.id].references
    ]
    reported = {credential.id for credential in not_in_any_use}

    not_in_active_use: list[Credential] = []
    referenced: list[tuple[Credential, tuple[str, ...]]] = []
    for credential_id, entry in usage.items():
        credential = known.get(credential_id)
        if credential is None:
            logger.debug(
                "Ignoring reference to unknown credential %s from %d node(s)",
                credential_id,
                len(entry.references),
            )
            continue
        if credential_id in reported:
            continue
        if not entry.in_active_workflow:
            not_in_active_use.append(credential)
            reported.add(credential_id)
            continue
        referenced.append((credential, entry.workflow_ids))

    threshold = context.abandonment_threshold
    not_recently_executed = [
        credential
        for credential, workflow_ids in referenced
        if not snapshot.executions.executed_since(workflow_ids, threshold)
    ]

    return build_sections(
        [
            (constants.CREDS_NOT_IN_ANY_USE, map(_location, not_in_any_use)),
            (constants.CREDS_NOT_IN_ACTIVE_USE, map(_location, not_in_active_use)),
            (
                constants.CREDS_NOT_RECENTLY_EXECUTED,
                map(_location, not_recently_executed),
            ),
        ]
    )


CATEGORY = RiskCategory(
    name=constants.CREDENTIALS,
    analyze=analyze,
    description="Credentials that are unused, inactive or abandoned",
)


__all__ = ["CATEGORY", "analyze"]
