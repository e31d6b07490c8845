"""
GitHub hosting package.

Re-exports the public client, credential providers, types and errors.
Usage: `from dtforge.services.github import GitHubHostingClient, build_hosting_client`

Module structure:
- client.py: GitHubHostingClient, the capability surface used by reconcilers
- credentials.py: Bearer token providers
- helpers.py: Error classification and blob hashing
- http_client.py: Shared httpx client lifecycle
- types.py: Repository, ref and file handle types
- exceptions.py: Closed set of hosting errors
"""

from dtforge.config import Settings
from dtforge.services.github.client import GitHubHostingClient
from dtforge.services.github.credentials import (
    ConnectorTokenProvider,
    CredentialProvider,
    StaticTokenProvider,
    Token,
    build_credential_provider,
)
from dtforge.services.github.exceptions import (
    AlreadyExists,
    AuthError,
    HostingError,
    NotFound,
    TransportError,
    VersionConflict,
)
from dtforge.services.github.helpers import git_blob_sha
from dtforge.services.github.http_client import close_hosting_http_client
from dtforge.services.github.types import RemoteFileHandle, RemoteRef, RepoRef


def build_hosting_client(config: Settings) -> GitHubHostingClient:
    """Build a hosting client from settings.

    Raises:
        AuthError: If no credential source is configured
    """
    return GitHubHostingClient(
        build_credential_provider(config),
        config.github_owner,
        owner_is_org=config.github_owner_is_org,
        base_url=config.github_api_url,
        web_url=config.github_web_url,
    )


__all__ = [
    # Client
    "GitHubHostingClient",
    "build_hosting_client",
    "close_hosting_http_client",
    # Credentials
    "CredentialProvider",
    "ConnectorTokenProvider",
    "StaticTokenProvider",
    "Token",
    "build_credential_provider",
    # Errors
    "AlreadyExists",
    "AuthError",
    "HostingError",
    "NotFound",
    "TransportError",
    "VersionConflict",
    # Types
    "RemoteFileHandle",
    "RemoteRef",
    "RepoRef",
    # Utilities
    "git_blob_sha",
]
