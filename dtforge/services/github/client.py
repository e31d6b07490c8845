"""
GitHub hosting client.

Thin capability surface over the GitHub REST API used by the reconcilers:
repository existence/creation, branch refs and single-file content writes.
Every call is one request, fallible, and safe to retry; errors come out as
the variants in exceptions.py.
"""

import base64
import logging
from typing import Any
from urllib.parse import quote

import httpx

from dtforge.services.github.credentials import CredentialProvider
from dtforge.services.github.exceptions import (
    AlreadyExists,
    NotFound,
    TransportError,
    VersionConflict,
)
from dtforge.services.github.helpers import raise_for_hosting_status
from dtforge.services.github.http_client import get_hosting_http_client
from dtforge.services.github.types import RemoteFileHandle, RemoteRef, RepoRef

logger = logging.getLogger(__name__)


class GitHubHostingClient:
    """Hosting operations against one owner account."""

    API_VERSION = "2022-11-28"

    def __init__(
        self,
        credentials: CredentialProvider,
        owner: str,
        *,
        owner_is_org: bool = False,
        base_url: str = "https://api.github.com",
        web_url: str = "https://github.com",
    ):
        self.credentials = credentials
        self.owner = owner
        self.owner_is_org = owner_is_org
        self.base_url = base_url.rstrip("/")
        self.web_url = web_url.rstrip("/")

    def repository_url(self, name: str) -> str:
        """Browser URL of a repository under the owner."""
        return f"{self.web_url}/{self.owner}/{name}"

    def _repo_path(self, repo: str) -> str:
        return f"{self.base_url}/repos/{self.owner}/{repo}"

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        token = await self.credentials.get_token()
        headers = {
            "Authorization": f"Bearer {token.value}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.API_VERSION,
        }
        client = get_hosting_http_client()
        try:
            response = await client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {url} timed out", retryable=True) from e
        except httpx.TransportError as e:
            raise TransportError(f"{method} {url} failed: {e}", retryable=True) from e

        if response.status_code == 401:
            invalidate = getattr(self.credentials, "invalidate", None)
            if invalidate is not None:
                invalidate()
        return response

    # ─────────────────────────────────────────────────────────────────────
    # Repositories
    # ─────────────────────────────────────────────────────────────────────

    async def repository_exists(self, name: str) -> bool:
        """Return True if the repository exists under the owner."""
        response = await self._request("GET", self._repo_path(name))
        if response.status_code == 404:
            return False
        raise_for_hosting_status(response, f"{self.owner}/{name}")
        return True

    async def get_repository(self, name: str) -> RepoRef:
        """Fetch repository metadata (used for the default branch)."""
        response = await self._request("GET", self._repo_path(name))
        raise_for_hosting_status(response, f"{self.owner}/{name}")
        return self._normalize_repo(response.json())

    async def create_repository(
        self,
        name: str,
        description: str,
        visibility: str = "public",
        license_template: str | None = None,
    ) -> RepoRef:
        """
        Create a repository under the owner.

        The repository is auto-initialised so it has a commit to branch from.

        Raises:
            AlreadyExists: If the name is taken on the account
        """
        if self.owner_is_org:
            url = f"{self.base_url}/orgs/{self.owner}/repos"
        else:
            url = f"{self.base_url}/user/repos"

        payload: dict[str, Any] = {
            "name": name,
            "description": description,
            "private": visibility != "public",
            "auto_init": True,
        }
        if license_template:
            payload["license_template"] = license_template

        response = await self._request("POST", url, json=payload)
        raise_for_hosting_status(
            response,
            f"{self.owner}/{name}",
            conflict=AlreadyExists,
            conflict_marker="already exists",
        )
        logger.info(f"Created repository {self.owner}/{name}")
        return self._normalize_repo(response.json())

    def _normalize_repo(self, data: dict[str, Any]) -> RepoRef:
        return RepoRef(
            name=data["name"],
            full_name=data.get("full_name", f"{self.owner}/{data['name']}"),
            url=data.get("html_url") or self.repository_url(data["name"]),
            default_branch=data.get("default_branch") or "main",
        )

    # ─────────────────────────────────────────────────────────────────────
    # Branch refs
    # ─────────────────────────────────────────────────────────────────────

    async def get_branch_ref(self, repo: str, branch: str) -> RemoteRef:
        """
        Resolve a branch to its head commit.

        Raises:
            NotFound: Branch missing, or the repository has no commits yet
        """
        response = await self._request(
            "GET", f"{self._repo_path(repo)}/git/ref/heads/{quote(branch, safe='')}"
        )
        # 409: "Git Repository is empty", nothing to resolve against
        raise_for_hosting_status(
            response, f"{self.owner}/{repo}@{branch}", conflict=NotFound
        )
        data = response.json()
        return RemoteRef(branch=branch, sha=data["object"]["sha"])

    async def create_branch_ref(self, repo: str, branch: str, from_sha: str) -> None:
        """
        Create refs/heads/{branch} pointing at from_sha.

        Raises:
            AlreadyExists: If the branch already exists
        """
        response = await self._request(
            "POST",
            f"{self._repo_path(repo)}/git/refs",
            json={"ref": f"refs/heads/{branch}", "sha": from_sha},
        )
        raise_for_hosting_status(
            response,
            f"{self.owner}/{repo}@{branch}",
            conflict=AlreadyExists,
            conflict_marker="already exists",
        )

    # ─────────────────────────────────────────────────────────────────────
    # File contents
    # ─────────────────────────────────────────────────────────────────────

    async def get_file_handle(self, repo: str, path: str, branch: str) -> RemoteFileHandle:
        """
        Probe a file's current content handle on a branch.

        Raises:
            NotFound: If the file does not exist on the branch
        """
        resource = f"{self.owner}/{repo}@{branch}:{path}"
        response = await self._request(
            "GET",
            f"{self._repo_path(repo)}/contents/{quote(path)}",
            params={"ref": branch},
        )
        raise_for_hosting_status(response, resource)

        data = response.json()
        if not isinstance(data, dict) or data.get("type", "file") != "file":
            raise TransportError(f"{resource} is not a file", 200, retryable=False)
        return RemoteFileHandle(path=path, content_hash=data["sha"], size=data.get("size"))

    async def put_file(
        self,
        repo: str,
        path: str,
        content: bytes,
        branch: str,
        prior: RemoteFileHandle | None = None,
        message: str | None = None,
    ) -> None:
        """
        Create or update one file in a single commit.

        Without `prior` the host treats the write as a create; with it, as an
        update of that exact version.

        Raises:
            VersionConflict: File exists but no handle was given, or the handle is stale
            NotFound: Repository or branch missing
        """
        if message is None:
            message = f"Update {path}" if prior else f"Add {path}"

        payload: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": branch,
        }
        if prior is not None:
            payload["sha"] = prior.content_hash

        response = await self._request(
            "PUT", f"{self._repo_path(repo)}/contents/{quote(path)}", json=payload
        )
        raise_for_hosting_status(
            response, f"{self.owner}/{repo}@{branch}:{path}", conflict=VersionConflict
        )
