"""
File upsert: create-if-absent, update-if-different, no-op if identical.

Two entry strategies:
- optimistic create (repository created in this run): write without a
  handle, fall back to probe + update on a version conflict
- probe first (repository pre-existed): read the handle, skip identical
  content, then create or update

Either way a version conflict triggers exactly one re-probe and one retry.
A second conflict is a ConcurrentModification and is never looped on.
"""

import logging

from dtforge.services.github.exceptions import NotFound, VersionConflict
from dtforge.services.github.helpers import git_blob_sha
from dtforge.services.github.types import RemoteFileHandle
from dtforge.services.reconcile.exceptions import ConcurrentModification
from dtforge.services.reconcile.policy import CallPolicy
from dtforge.services.reconcile.types import FileEntry, HostingClient, UpsertAction

logger = logging.getLogger(__name__)


class FileUpserter:
    """Writes one FileEntry to a branch with the fewest calls that stay safe."""

    def __init__(self, client: HostingClient, policy: CallPolicy):
        self.client = client
        self.policy = policy

    async def upsert(
        self,
        repo: str,
        branch: str,
        entry: FileEntry,
        probe_first: bool = True,
    ) -> UpsertAction:
        """
        Reconcile one file.

        Raises:
            ConcurrentModification: The retry after re-probing conflicted too
            NotFound: The repository or branch is gone (fatal to the Target)
            TransportError: Retries exhausted
        """
        desired_hash = git_blob_sha(entry.content)

        handle: RemoteFileHandle | None = None
        if probe_first:
            handle = await self._probe(repo, branch, entry.path)
            if handle is not None and handle.content_hash == desired_hash:
                logger.debug(f"{repo}@{branch}:{entry.path} already up to date")
                return UpsertAction.UNCHANGED

        try:
            return await self._write(repo, branch, entry, handle)
        except VersionConflict as e:
            logger.debug(f"Version conflict on {entry.path}, re-probing: {e.message}")

        handle = await self._probe(repo, branch, entry.path)
        if handle is not None and handle.content_hash == desired_hash:
            logger.debug(f"{repo}@{branch}:{entry.path} already up to date")
            return UpsertAction.UNCHANGED

        try:
            return await self._write(repo, branch, entry, handle)
        except VersionConflict as e:
            raise ConcurrentModification(entry.path, e.message) from e

    async def _probe(self, repo: str, branch: str, path: str) -> RemoteFileHandle | None:
        try:
            return await self.policy.read(
                lambda: self.client.get_file_handle(repo, path, branch)
            )
        except NotFound:
            return None

    async def _write(
        self,
        repo: str,
        branch: str,
        entry: FileEntry,
        handle: RemoteFileHandle | None,
    ) -> UpsertAction:
        await self.policy.write(
            lambda: self.client.put_file(repo, entry.path, entry.content, branch, prior=handle)
        )
        if handle is None:
            logger.info(f"  + {entry.path}")
            return UpsertAction.CREATED
        logger.info(f"  ~ {entry.path} (updated)")
        return UpsertAction.UPDATED
