"""
Repository reconciliation for a single Target.

RepoCheck -> BranchCheck -> FileUpsertLoop -> Done. Failures in the first
two steps end the Target as FAILED; file failures are collected and the
loop keeps going.
"""

import logging

from dtforge.services.github.exceptions import AlreadyExists, AuthError, HostingError, NotFound
from dtforge.services.reconcile.branch import DEFAULT_BASE_BRANCHES, BranchReconciler
from dtforge.services.reconcile.exceptions import ConcurrentModification, NoBaseBranch
from dtforge.services.reconcile.policy import CallPolicy
from dtforge.services.reconcile.types import (
    FileFailure,
    HostingClient,
    OutcomeStatus,
    ReconciliationOutcome,
    Target,
    UpsertAction,
)
from dtforge.services.reconcile.upserter import FileUpserter

logger = logging.getLogger(__name__)

# Files GitHub seeds on the default branch of an auto-initialised repository
AUTO_INIT_PATHS: frozenset[str] = frozenset({"README.md"})
LICENSE_PATH = "LICENSE"


class RepositoryReconciler:
    """Reconciles one Target against the hosting account."""

    def __init__(
        self,
        client: HostingClient,
        policy: CallPolicy,
        base_branches: tuple[str, ...] | list[str] = DEFAULT_BASE_BRANCHES,
        license_template: str | None = None,
    ):
        self.client = client
        self.policy = policy
        self.license_template = license_template or None
        self.branches = BranchReconciler(client, policy, base_branches)
        self.upserter = FileUpserter(client, policy)

    async def reconcile(self, target: Target) -> ReconciliationOutcome:
        name = target.repository_name
        url = self.client.repository_url(name)

        # RepoCheck
        try:
            repository_created = await self._ensure_repository(target)
        except (HostingError, AuthError) as e:
            logger.error(f"✗ Repository check failed for {name}: {e.message}")
            return self._failed(target, url, f"Repository check failed: {e.message}")

        # BranchCheck
        try:
            branch, branch_created = await self._ensure_branch(target)
        except NoBaseBranch as e:
            logger.error(f"✗ {e.message}")
            return self._failed(target, url, e.message)
        except (HostingError, AuthError) as e:
            logger.error(f"✗ Branch check failed for {name}: {e.message}")
            return self._failed(target, url, f"Branch check failed: {e.message}")

        # FileUpsertLoop
        failures: list[FileFailure] = []
        written = 0
        unchanged = 0
        seeded = self._seeded_paths() if repository_created else frozenset()

        for index, entry in enumerate(target.files):
            if self.policy.cancel.cancelled:
                failures.extend(FileFailure(f.path, "cancelled") for f in target.files[index:])
                break
            try:
                action = await self.upserter.upsert(
                    name,
                    branch,
                    entry,
                    probe_first=not repository_created or entry.path in seeded,
                )
            except ConcurrentModification as e:
                logger.warning(f"  ✗ {entry.path}: {e.message}")
                failures.append(FileFailure(entry.path, e.message))
            except NotFound as e:
                # The repository or branch vanished under us; nothing else can land
                logger.error(f"✗ {name}@{branch} disappeared while writing {entry.path}")
                return self._failed(target, url, e.message, branch=branch)
            except (HostingError, AuthError) as e:
                logger.warning(f"  ✗ {entry.path}: {e.message}")
                failures.append(FileFailure(entry.path, e.message))
            else:
                if action == UpsertAction.UNCHANGED:
                    unchanged += 1
                else:
                    written += 1

        # Done
        if failures:
            status = OutcomeStatus.PARTIAL_FAILURE
        elif not repository_created and not branch_created and written == 0:
            status = OutcomeStatus.ALREADY_PRESENT
        else:
            status = OutcomeStatus.CREATED

        logger.info(
            f"✓ {name}@{branch}: {status.value} "
            f"({written} written, {unchanged} unchanged, {len(failures)} failed)"
        )
        return ReconciliationOutcome(
            repository_name=name,
            status=status,
            branch=branch,
            url=url,
            failures=tuple(failures),
            repository_created=repository_created,
            branch_created=branch_created,
            files_written=written,
            files_unchanged=unchanged,
        )

    async def _ensure_repository(self, target: Target) -> bool:
        """Return True if the repository was created by this run."""
        name = target.repository_name
        if await self.policy.read(lambda: self.client.repository_exists(name)):
            logger.info(f"Repository {name} already exists")
            return False

        try:
            await self.policy.write(
                lambda: self.client.create_repository(
                    name,
                    target.description,
                    target.visibility,
                    self.license_template,
                )
            )
        except AlreadyExists:
            logger.info(f"Repository {name} was created concurrently; continuing")
            return False
        return True

    def _seeded_paths(self) -> frozenset[str]:
        """Paths that exist right after this run created the repository."""
        if self.license_template:
            return AUTO_INIT_PATHS | {LICENSE_PATH}
        return AUTO_INIT_PATHS

    async def _ensure_branch(self, target: Target) -> tuple[str, bool]:
        """Return (branch name, created) for the branch files are written to."""
        name = target.repository_name
        if target.branch is None:
            repo = await self.policy.read(lambda: self.client.get_repository(name))
            logger.info(f"Using default branch {repo.default_branch} of {name}")
            return repo.default_branch, False

        created = await self.branches.ensure_branch(name, target.branch)
        return target.branch, created

    def _failed(
        self,
        target: Target,
        url: str,
        reason: str,
        branch: str | None = None,
    ) -> ReconciliationOutcome:
        return ReconciliationOutcome(
            repository_name=target.repository_name,
            status=OutcomeStatus.FAILED,
            branch=branch or target.branch,
            url=url,
            reason=reason,
        )
