"""
Reconciliation engine package.

Makes declared repositories, branches and files exist on the hosting account.
Usage: `from dtforge.services.reconcile import BatchOrchestrator, build_target`

Module structure:
- orchestrator.py: BatchOrchestrator, sequential run over all Targets
- repository.py: RepositoryReconciler, one Target end to end
- branch.py: BranchReconciler, ensure-branch with base fallback
- upserter.py: FileUpserter, per-file create/update/no-op
- policy.py: Write pacing, transient retry and cancellation
- target_builder.py: Targets from local directory trees
- types.py: Targets, outcomes and the batch report
- exceptions.py: Reconciliation errors
"""

from dtforge.services.reconcile.branch import DEFAULT_BASE_BRANCHES, BranchReconciler
from dtforge.services.reconcile.exceptions import (
    ConcurrentModification,
    DuplicatePathError,
    DuplicateTargetError,
    NoBaseBranch,
    ReconciliationError,
)
from dtforge.services.reconcile.orchestrator import BatchOrchestrator
from dtforge.services.reconcile.policy import (
    CallPolicy,
    CancellationToken,
    RetryPolicy,
    WritePacer,
)
from dtforge.services.reconcile.repository import RepositoryReconciler
from dtforge.services.reconcile.target_builder import build_target, collect_files
from dtforge.services.reconcile.types import (
    BatchReport,
    FileEntry,
    FileFailure,
    HostingClient,
    OutcomeStatus,
    ReconciliationOutcome,
    Target,
    UpsertAction,
)
from dtforge.services.reconcile.upserter import FileUpserter

__all__ = [
    # Engine
    "BatchOrchestrator",
    "RepositoryReconciler",
    "BranchReconciler",
    "FileUpserter",
    "DEFAULT_BASE_BRANCHES",
    # Policy
    "CallPolicy",
    "CancellationToken",
    "RetryPolicy",
    "WritePacer",
    # Targets
    "build_target",
    "collect_files",
    # Types
    "BatchReport",
    "FileEntry",
    "FileFailure",
    "HostingClient",
    "OutcomeStatus",
    "ReconciliationOutcome",
    "Target",
    "UpsertAction",
    # Exceptions
    "ConcurrentModification",
    "DuplicatePathError",
    "DuplicateTargetError",
    "NoBaseBranch",
    "ReconciliationError",
]
