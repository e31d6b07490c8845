"""Exceptions for the GitHub hosting client.

Every HTTP status is classified once, at the client boundary, into one of
these variants. Callers match on the type and never inspect status codes.
"""


class HostingError(Exception):
    """Base error from the hosting API."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class NotFound(HostingError):
    """Repository, ref or file does not exist."""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class AlreadyExists(HostingError):
    """A create call raced with an existing resource."""

    def __init__(self, message: str):
        super().__init__(message, status_code=422)


class VersionConflict(HostingError):
    """A content write was rejected because the content handle is missing or stale."""

    def __init__(self, message: str, status_code: int = 409):
        super().__init__(message, status_code=status_code)


class TransportError(HostingError):
    """Network failure, timeout, 5xx or any other unclassified response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retryable: bool = True,
        rate_limit_reset: int | None = None,
    ):
        self.retryable = retryable
        self.rate_limit_reset = rate_limit_reset  # Unix timestamp when rate limit resets
        super().__init__(message, status_code=status_code)


class AuthError(Exception):
    """No bearer token could be obtained."""

    def __init__(self, message: str = "GitHub not connected"):
        self.message = message
        super().__init__(message)
