"""
GitHub API helper utilities.

Classifies error responses into the closed set of hosting errors and
provides the content hashing used to compare local files with remote blobs.
"""

import hashlib
import logging

import httpx

from dtforge.services.github.exceptions import HostingError, NotFound, TransportError

logger = logging.getLogger(__name__)


class RateLimitInfo:
    """Rate limit information from GitHub API response."""

    def __init__(self, response: httpx.Response) -> None:
        self.remaining = response.headers.get("X-RateLimit-Remaining")
        self.reset = response.headers.get("X-RateLimit-Reset")
        self.retry_after = response.headers.get("Retry-After")

    @property
    def reset_timestamp(self) -> int | None:
        """Get reset timestamp as integer, or None if not available."""
        return int(self.reset) if self.reset else None

    @property
    def is_exhausted(self) -> bool:
        """Check if the primary or secondary rate limit was hit."""
        if self.retry_after is not None:
            return True
        return self.remaining is not None and int(self.remaining) == 0


def error_detail(response: httpx.Response) -> str:
    """Best-effort human readable message from a GitHub error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if not isinstance(body, dict):
        return ""
    message = str(body.get("message", ""))
    errors = body.get("errors")
    if isinstance(errors, list):
        extra = [e.get("message", "") for e in errors if isinstance(e, dict) and e.get("message")]
        if extra:
            message = f"{message} ({'; '.join(extra)})"
    return message


def raise_for_hosting_status(
    response: httpx.Response,
    resource: str,
    conflict: type[HostingError] | None = None,
    conflict_marker: str | None = None,
) -> None:
    """
    Raise the hosting error matching a non-success response.

    Args:
        response: The HTTP response from GitHub API
        resource: Resource description for error context (e.g. "owner/repo@main:README.md")
        conflict: Error type that 409/422 responses map to for this endpoint
        conflict_marker: If set, only map to `conflict` when the error body contains it

    Raises:
        NotFound: 404
        The `conflict` type: 409/422 when the endpoint declares one
        TransportError: everything else (retryable for 5xx, 429 and rate limits)
    """
    if response.is_success:
        return

    status_code = response.status_code
    detail = error_detail(response)

    if status_code == 404:
        raise NotFound(f"{resource} not found")

    if status_code in (409, 422) and conflict is not None:
        if conflict_marker is None or conflict_marker in detail.lower():
            raise conflict(f"{resource}: {detail or status_code}")

    if status_code == 401:
        raise TransportError("Invalid or expired GitHub token", 401, retryable=False)

    if status_code in (403, 429):
        rate_info = RateLimitInfo(response)
        if status_code == 429 or rate_info.is_exhausted:
            raise TransportError(
                "GitHub API rate limit exceeded",
                status_code,
                retryable=True,
                rate_limit_reset=rate_info.reset_timestamp,
            )
        raise TransportError(f"GitHub API forbidden: {detail}", 403, retryable=False)

    if status_code >= 500:
        raise TransportError(f"GitHub API error: {status_code}", status_code, retryable=True)

    logger.debug(f"Unclassified GitHub response for {resource}: {status_code} {detail!r}")
    raise TransportError(
        f"GitHub API error: {status_code} {detail}".strip(), status_code, retryable=False
    )


def git_blob_sha(content: bytes) -> str:
    """Compute the git blob SHA-1 for content, as GitHub reports it for files."""
    header = f"blob {len(content)}\0".encode()
    return hashlib.sha1(header + content).hexdigest()
