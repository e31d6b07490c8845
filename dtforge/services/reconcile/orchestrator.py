"""
Batch orchestration over many Targets.

Targets are reconciled strictly one after another, in input order, and the
batch always runs to the end: a Target that fails is recorded, never raised.
"""

import logging
from collections.abc import Sequence

from dtforge.config import Settings
from dtforge.services.reconcile.branch import DEFAULT_BASE_BRANCHES
from dtforge.services.reconcile.exceptions import DuplicateTargetError
from dtforge.services.reconcile.policy import CallPolicy, CancellationToken
from dtforge.services.reconcile.repository import RepositoryReconciler
from dtforge.services.reconcile.types import (
    BatchReport,
    HostingClient,
    OutcomeStatus,
    ReconciliationOutcome,
    Target,
)

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """Runs the RepositoryReconciler over every Target and reports once."""

    def __init__(
        self,
        client: HostingClient,
        policy: CallPolicy | None = None,
        base_branches: tuple[str, ...] | list[str] = DEFAULT_BASE_BRANCHES,
        license_template: str | None = None,
    ):
        self.client = client
        self.policy = policy or CallPolicy()
        self.reconciler = RepositoryReconciler(
            client, self.policy, base_branches, license_template
        )

    @classmethod
    def from_settings(
        cls,
        client: HostingClient,
        config: Settings,
        cancel: CancellationToken | None = None,
    ) -> "BatchOrchestrator":
        return cls(
            client,
            CallPolicy.from_settings(config, cancel),
            base_branches=config.base_branches,
            license_template=config.repository_license_template,
        )

    @property
    def cancel(self) -> CancellationToken:
        return self.policy.cancel

    async def run(self, targets: Sequence[Target]) -> BatchReport:
        """
        Reconcile all targets sequentially.

        Raises:
            DuplicateTargetError: If a repository name appears twice
        """
        seen: set[str] = set()
        for target in targets:
            if target.repository_name in seen:
                raise DuplicateTargetError(target.repository_name)
            seen.add(target.repository_name)

        logger.info(f"=== Reconciling {len(targets)} repositories ===")
        outcomes: list[ReconciliationOutcome] = []
        cancelled = False

        for index, target in enumerate(targets):
            if self.policy.cancel.cancelled:
                cancelled = True
                outcomes.extend(self._cancelled(t) for t in targets[index:])
                break

            logger.info(f"Reconciling {target.repository_name} (branch: {target.branch})")
            try:
                outcome = await self.reconciler.reconcile(target)
            except Exception as e:
                logger.exception(f"Unexpected error reconciling {target.repository_name}")
                outcome = ReconciliationOutcome(
                    repository_name=target.repository_name,
                    status=OutcomeStatus.FAILED,
                    branch=target.branch,
                    url=self.client.repository_url(target.repository_name),
                    reason=f"Unexpected error: {e}",
                )
            outcomes.append(outcome)

        report = BatchReport.from_outcomes(
            outcomes, cancelled=cancelled or self.policy.cancel.cancelled
        )
        logger.info(f"=== {report.summary} ===")
        return report

    def _cancelled(self, target: Target) -> ReconciliationOutcome:
        return ReconciliationOutcome(
            repository_name=target.repository_name,
            status=OutcomeStatus.FAILED,
            branch=target.branch,
            url=self.client.repository_url(target.repository_name),
            reason="Cancelled before processing",
        )
