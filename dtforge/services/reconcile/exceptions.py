"""Exceptions raised by the reconciliation engine."""


class ReconciliationError(Exception):
    """Base error for reconciliation failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NoBaseBranch(ReconciliationError):
    """None of the candidate base branches exist, so the branch cannot be created."""

    def __init__(self, repository: str, candidates: list[str]):
        self.repository = repository
        self.candidates = candidates
        super().__init__(
            f"No base branch found in {repository} (tried: {', '.join(candidates) or 'none'})"
        )


class ConcurrentModification(ReconciliationError):
    """A file write conflicted again after re-probing its content handle."""

    def __init__(self, path: str, detail: str = ""):
        self.path = path
        message = f"Concurrent modification of {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class DuplicatePathError(ReconciliationError, ValueError):
    """A Target lists the same file path twice."""

    def __init__(self, repository: str, path: str):
        self.repository = repository
        self.path = path
        super().__init__(f"Duplicate path {path!r} in target {repository}")


class DuplicateTargetError(ReconciliationError, ValueError):
    """A batch lists the same repository twice."""

    def __init__(self, repository: str):
        self.repository = repository
        super().__init__(f"Repository {repository!r} appears more than once in the batch")

