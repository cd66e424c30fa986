"""Audit orchestrator: selects categories, fans out analyzers, fans results in."""

from __future__ import annotations
import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TypeVar
from flowaudit.audit.categories import (
    AuditContext,
    CategoryRegistry,
    RiskCategory,
    build_default_categories,
)
from flowaudit.audit.errors import AuditTimeoutError, CollaboratorFetchError
from flowaudit.audit.indexing import AuditSnapshot, WarningSink
from flowaudit.config import get_settings
from flowaudit.models import AuditResult, AuditWarning, RiskReport, RiskSection
from flowaudit.models.base import ensure_utc
from flowaudit.nodes import build_default_registry
from flowaudit.sources.base import (
    CredentialSource,
    ExecutionSource,
    NodeTypeClassifier,
    SettingsProvider,
    WorkflowSource,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    """Return the current UTC timestamp."""
    return datetime.now(tz=UTC)


@dataclass(slots=True)
class _CategoryOutcome:
    """Result slot written once by the task that owns a category."""

    sections: list[RiskSection]
    warnings: list[AuditWarning]


async def _fetch(collaborator: str, call: Callable[[], Awaitable[T]]) -> T:
    """Await a collaborator call, wrapping failures with its name."""
    try:
        return await call()
    except Exception as exc:
        logger.error("Audit aborted: fetching %s failed: %s", collaborator, exc)
        raise CollaboratorFetchError(collaborator, exc) from exc


class Auditor:
    """Runs risk categories against collaborator data.

    An auditor holds no per-run state, so one instance may serve any number of
    sequential or concurrent runs.
    """

    def __init__(
        self,
        *,
        workflows: WorkflowSource,
        credentials: CredentialSource,
        executions: ExecutionSource,
        registry: NodeTypeClassifier | None = None,
        settings: SettingsProvider | None = None,
        categories: CategoryRegistry | None = None,
        clock: Clock = _utcnow,
    ) -> None:
        """Wire the auditor to its collaborators."""
        self._workflows = workflows
        self._credentials = credentials
        self._executions = executions
        self._registry = registry or build_default_registry()
        self._settings = settings if settings is not None else get_settings()
        self._categories = categories or build_default_categories()
        self._clock = clock

    @property
    def categories(self) -> CategoryRegistry:
        """Expose the category registry used by this auditor."""
        return self._categories

    async def run(
        self,
        categories: str | Iterable[str] | None = None,
        *,
        days_abandoned_workflow: int | None = None,
        timeout: float | None = None,
    ) -> AuditResult:
        """Audit the selected categories and return their reports.

        Args:
            categories: Category names, ``"all"`` or ``None`` for every category
            days_abandoned_workflow: Overrides the configured abandonment window
            timeout: Deadline in seconds; falls back to the configured value and
                ``0`` disables it

        Raises:
            UnknownCategoryError: A requested category is not registered.
            CollaboratorFetchError: A collaborator failed to supply data.
            AuditTimeoutError: The run exceeded its deadline.
        """
        selected = self._categories.select(categories)
        days = self._resolve_days(days_abandoned_workflow)
        deadline = self._resolve_timeout(timeout)
        names = [category.name for category in selected]
        logger.info("Running security audit for categories: %s", ", ".join(names))

        try:
            async with asyncio.timeout(deadline):
                snapshot = await self._fetch_snapshot()
                outcomes = await self._analyze(selected, snapshot, days)
        except TimeoutError as exc:
            logger.error("Security audit exceeded its %ss deadline", deadline)
            raise AuditTimeoutError(deadline or 0.0) from exc

        result = AuditResult(warnings=list(snapshot.warnings))
        for category in selected:
            outcome = outcomes[category.name]
            result.warnings.extend(outcome.warnings)
            if outcome.sections:
                result.reports.append(
                    RiskReport(risk=category.name, sections=outcome.sections)
                )
        logger.info(
            "Security audit finished with %d report(s) and %d warning(s)",
            len(result.reports),
            len(result.warnings),
        )
        return result

    def _resolve_days(self, override: int | None) -> int:
        days = override
        if days is None:
            days = int(self._settings.get("DAYS_ABANDONED_WORKFLOW", 90))
        if days <= 0:
            msg = "days_abandoned_workflow must be greater than zero."
            raise ValueError(msg)
        return days

    def _resolve_timeout(self, override: float | None) -> float | None:
        timeout = override
        if timeout is None:
            timeout = float(self._settings.get("AUDIT_TIMEOUT_SECONDS", 0) or 0)
        if timeout < 0:
            msg = "timeout must not be negative."
            raise ValueError(msg)
        return timeout or None

    async def _fetch_snapshot(self) -> AuditSnapshot:
        workflows = await _fetch("workflows", self._workflows.fetch_workflows)
        credentials = await _fetch("credentials", self._credentials.fetch_credentials)
        executions = await _fetch("executions", self._executions.fetch_executions)
        logger.debug(
            "Fetched %d workflow(s), %d credential(s), %d execution(s)",
            len(workflows),
            len(credentials),
            len(executions),
        )
        return AuditSnapshot.build(
            workflows=workflows,
            credentials=credentials,
            executions=executions,
        )

    async def _analyze(
        self,
        selected: list[RiskCategory],
        snapshot: AuditSnapshot,
        days: int,
    ) -> dict[str, _CategoryOutcome]:
        now = ensure_utc(self._clock())
        tasks = {
            category.name: asyncio.create_task(
                asyncio.to_thread(self._run_category, category, snapshot, now, days),
                name=f"audit:{category.name}",
            )
            for category in selected
        }
        try:
            await asyncio.gather(*tasks.values())
        except BaseException:
            for task in tasks.values():
                task.cancel()
            raise
        return {name: task.result() for name, task in tasks.items()}

    def _run_category(
        self,
        category: RiskCategory,
        snapshot: AuditSnapshot,
        now: datetime,
        days: int,
    ) -> _CategoryOutcome:
        sink = WarningSink(category.name)
        context = AuditContext(
            category=category.name,
            snapshot=snapshot,
            registry=self._registry,
            settings=self._settings,
            now=now,
            days_abandoned_workflow=days,
            warnings=sink,
        )
        sections = category.analyze(context)
        logger.debug(
            "Category %s produced %d section(s)", category.name, len(sections)
        )
        return _CategoryOutcome(sections=list(sections), warnings=sink.items)


async def run_audit(
    categories: str | Iterable[str] | None = None,
    *,
    workflows: WorkflowSource,
    credentials: CredentialSource,
    executions: ExecutionSource,
    registry: NodeTypeClassifier | None = None,
    settings: SettingsProvider | None = None,
    clock: Clock = _utcnow,
    days_abandoned_workflow: int | None = None,
    timeout: float | None = None,
) -> AuditResult:
    """Run a security audit over the supplied collaborators."""
    auditor = Auditor(
        workflows=workflows,
        credentials=credentials,
        executions=executions,
        registry=registry,
        settings=settings,
        clock=clock,
    )
    return await auditor.run(
        categories,
        days_abandoned_workflow=days_abandoned_workflow,
        timeout=timeout,
    )


__all__ = ["Auditor", "Clock", "run_audit"]
