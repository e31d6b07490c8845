"""Branch reconciliation: make sure a named branch exists on a repository."""

import logging

from dtforge.services.github.exceptions import AlreadyExists, NotFound
from dtforge.services.github.types import RemoteRef
from dtforge.services.reconcile.exceptions import NoBaseBranch
from dtforge.services.reconcile.policy import CallPolicy
from dtforge.services.reconcile.types import HostingClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_BRANCHES: tuple[str, ...] = ("main", "master")


class BranchReconciler:
    """
    Ensures a branch exists, creating it from the first candidate base that does.

    Only existence is reconciled, never branch content. Errors other than
    NotFound/AlreadyExists propagate unchanged; retries come from the
    orchestrator's CallPolicy.
    """

    def __init__(
        self,
        client: HostingClient,
        policy: CallPolicy,
        base_branches: tuple[str, ...] | list[str] = DEFAULT_BASE_BRANCHES,
    ):
        self.client = client
        self.policy = policy
        self.base_branches = tuple(base_branches)

    async def ensure_branch(
        self,
        repo: str,
        branch: str,
        base_branches: tuple[str, ...] | list[str] | None = None,
    ) -> bool:
        """
        Ensure `branch` exists on `repo`.

        Returns:
            True if the branch was created by this call, False if it already existed

        Raises:
            NoBaseBranch: If no candidate base branch exists
        """
        try:
            await self.policy.read(lambda: self.client.get_branch_ref(repo, branch))
            logger.debug(f"Branch {branch} already exists on {repo}")
            return False
        except NotFound:
            pass

        candidates = tuple(base_branches) if base_branches is not None else self.base_branches
        base = await self.resolve_base(repo, candidates)

        try:
            await self.policy.write(
                lambda: self.client.create_branch_ref(repo, branch, base.sha)
            )
        except AlreadyExists:
            logger.info(f"Branch {branch} already exists on {repo}")
            return False

        logger.info(f"Created branch {branch} on {repo} from {base.branch}")
        return True

    async def resolve_base(self, repo: str, candidates: tuple[str, ...]) -> RemoteRef:
        """Return the ref of the first candidate base branch that exists."""
        for candidate in candidates:
            try:
                return await self.policy.read(
                    lambda candidate=candidate: self.client.get_branch_ref(repo, candidate)
                )
            except NotFound:
                logger.debug(f"Base branch {candidate} not found on {repo}")
        raise NoBaseBranch(repo, list(candidates))
