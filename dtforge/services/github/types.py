"""Data types for GitHub hosting responses."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RepoRef:
    """A repository on the hosting account."""

    name: str
    full_name: str
    url: str  # html_url
    default_branch: str


@dataclass(frozen=True)
class RemoteRef:
    """A branch ref and the commit it points at."""

    branch: str
    sha: str


@dataclass(frozen=True)
class RemoteFileHandle:
    """Content handle returned by a file probe.

    content_hash is the git blob SHA. It is required for an update and goes
    stale as soon as any write to the file succeeds.
    """

    path: str
    content_hash: str
    size: int | None = None
