"""
Bearer token acquisition for the hosting client.

Providers are owned by whoever builds the hosting client and injected into
it. A refreshing provider caches its token until expiry and serialises
refreshes, so callers near expiry trigger a single fetch.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

import httpx

from dtforge.config import Settings
from dtforge.services.github.exceptions import AuthError
from dtforge.services.github.http_client import get_hosting_http_client

logger = logging.getLogger(__name__)

# Refresh slightly before the advertised expiry
EXPIRY_MARGIN = timedelta(seconds=30)


@dataclass(frozen=True)
class Token:
    """A bearer token with an optional expiry."""

    value: str
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(UTC)
        return now >= self.expires_at - EXPIRY_MARGIN


class CredentialProvider(Protocol):
    """Capability that yields a valid bearer token or raises AuthError."""

    async def get_token(self) -> Token: ...


class StaticTokenProvider:
    """Serves a fixed token (personal access token, CI secret)."""

    def __init__(self, token: str):
        if not token:
            raise AuthError("Empty GitHub token")
        self._token = Token(value=token)

    async def get_token(self) -> Token:
        return self._token


class RefreshingTokenProvider(ABC):
    """Base for providers that fetch expiring tokens from somewhere else."""

    def __init__(self) -> None:
        self._token: Token | None = None
        self._lock = asyncio.Lock()

    async def get_token(self) -> Token:
        token = self._token
        if token is not None and not token.is_expired():
            return token

        async with self._lock:
            # Another caller may have refreshed while we waited
            token = self._token
            if token is not None and not token.is_expired():
                return token
            logger.info("Refreshing GitHub access token")
            self._token = await self._fetch()
            return self._token

    def invalidate(self) -> None:
        """Drop the cached token so the next call refreshes."""
        self._token = None

    @abstractmethod
    async def _fetch(self) -> Token:
        """Fetch a fresh token or raise AuthError."""


class ConnectorTokenProvider(RefreshingTokenProvider):
    """Resolves the GitHub token through a connection-broker endpoint."""

    def __init__(
        self,
        hostname: str,
        identity: str,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__()
        self.hostname = hostname
        self._identity = identity
        self._http_client = http_client

    async def _fetch(self) -> Token:
        client = self._http_client or get_hosting_http_client()
        try:
            response = await client.get(
                f"https://{self.hostname}/api/v2/connection",
                params={"include_secrets": "true", "connector_names": "github"},
                headers={
                    "Accept": "application/json",
                    "X_REPLIT_TOKEN": self._identity,
                },
            )
        except httpx.HTTPError as e:
            raise AuthError(f"Credential connector unreachable: {e}") from e

        if response.status_code != 200:
            raise AuthError(f"Credential connector returned {response.status_code}")

        try:
            items = response.json().get("items") or []
            connection_settings: dict[str, Any] = (items[0].get("settings") or {}) if items else {}
            oauth = connection_settings.get("oauth") or {}
            access_token = connection_settings.get("access_token") or (
                (oauth.get("credentials") or {}).get("access_token")
            )
        except (ValueError, AttributeError, TypeError) as e:
            raise AuthError(f"Credential connector returned a malformed response: {e}") from e

        if not access_token:
            raise AuthError("GitHub not connected")

        return Token(
            value=access_token,
            expires_at=_parse_expiry(connection_settings.get("expires_at")),
        )


def _parse_expiry(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring unparseable token expiry: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def build_credential_provider(config: Settings) -> CredentialProvider:
    """Pick the configured credential source: static token first, then the connector."""
    if config.github_token:
        return StaticTokenProvider(config.github_token)

    if config.connector_enabled:
        if config.connector_identity:
            identity = f"repl {config.connector_identity}"
        else:
            identity = f"depl {config.connector_renewal}"
        return ConnectorTokenProvider(config.connector_hostname, identity)

    raise AuthError("GitHub not connected: set GITHUB_TOKEN or the connector settings")
