"""
Data types for the reconciliation engine.

Targets are built by the caller before a run and never change during it.
Outcomes are recorded once per Target and collected into a BatchReport.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from dtforge.services.github.types import RemoteFileHandle, RemoteRef, RepoRef
from dtforge.services.reconcile.exceptions import DuplicatePathError


class HostingClient(Protocol):
    """Capability set the reconcilers need from the hosting API."""

    def repository_url(self, name: str) -> str: ...

    async def repository_exists(self, name: str) -> bool: ...

    async def get_repository(self, name: str) -> RepoRef: ...

    async def create_repository(
        self,
        name: str,
        description: str,
        visibility: str = "public",
        license_template: str | None = None,
    ) -> RepoRef: ...

    async def get_branch_ref(self, repo: str, branch: str) -> RemoteRef: ...

    async def create_branch_ref(self, repo: str, branch: str, from_sha: str) -> None: ...

    async def get_file_handle(self, repo: str, path: str, branch: str) -> RemoteFileHandle: ...

    async def put_file(
        self,
        repo: str,
        path: str,
        content: bytes,
        branch: str,
        prior: RemoteFileHandle | None = None,
        message: str | None = None,
    ) -> None: ...


@dataclass(frozen=True)
class FileEntry:
    """One file to place in a repository: repo-relative POSIX path and raw bytes."""

    path: str
    content: bytes


@dataclass(frozen=True)
class Target:
    """A repository, branch and file set to reconcile.

    branch=None reconciles onto the repository's default branch.
    """

    repository_name: str
    branch: str | None
    files: tuple[FileEntry, ...] = ()
    description: str = ""
    visibility: str = "public"

    def __post_init__(self) -> None:
        files = tuple(self.files)
        object.__setattr__(self, "files", files)
        seen: set[str] = set()
        for entry in files:
            if entry.path in seen:
                raise DuplicatePathError(self.repository_name, entry.path)
            seen.add(entry.path)


class UpsertAction(str, Enum):
    """What a single file upsert did."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class OutcomeStatus(str, Enum):
    """Per-Target reconciliation result."""

    CREATED = "created"
    ALREADY_PRESENT = "already_present"
    PARTIAL_FAILURE = "partial_failure"
    FAILED = "failed"


@dataclass(frozen=True)
class FileFailure:
    """A file that could not be reconciled, and why."""

    path: str
    reason: str


@dataclass(frozen=True)
class ReconciliationOutcome:
    """Result of reconciling one Target."""

    repository_name: str
    status: OutcomeStatus
    branch: str | None = None
    url: str | None = None
    reason: str | None = None  # Set for FAILED
    failures: tuple[FileFailure, ...] = ()  # Set for PARTIAL_FAILURE
    repository_created: bool = False
    branch_created: bool = False
    files_written: int = 0
    files_unchanged: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status in (OutcomeStatus.CREATED, OutcomeStatus.ALREADY_PRESENT)


@dataclass(frozen=True)
class BatchReport:
    """Ordered outcomes of one batch run, in input Target order."""

    outcomes: tuple[ReconciliationOutcome, ...] = field(default_factory=tuple)
    cancelled: bool = False

    @classmethod
    def from_outcomes(
        cls, outcomes: Sequence[ReconciliationOutcome], cancelled: bool = False
    ) -> "BatchReport":
        return cls(outcomes=tuple(outcomes), cancelled=cancelled)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def successful(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def errors(self) -> int:
        return sum(
            1
            for o in self.outcomes
            if o.status == OutcomeStatus.FAILED
            or (o.status == OutcomeStatus.PARTIAL_FAILURE and o.failures)
        )

    @property
    def success(self) -> bool:
        """True only if every Target ended Created or AlreadyPresent."""
        return all(o.succeeded for o in self.outcomes)

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def summary(self) -> str:
        return (
            f"Processed {self.total} repositories: "
            f"{self.successful} successful, {self.errors} errors"
        )
