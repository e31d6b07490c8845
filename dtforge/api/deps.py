"""Shared FastAPI dependencies."""

from collections.abc import Callable

from dtforge.config import settings
from dtforge.core.exceptions import UpstreamAuthError
from dtforge.services.github import AuthError, build_hosting_client
from dtforge.services.reconcile import BatchOrchestrator

OrchestratorFactory = Callable[[], BatchOrchestrator]


def build_batch_orchestrator() -> BatchOrchestrator:
    """Fresh orchestrator for the configured owner account; no state survives a batch."""
    try:
        client = build_hosting_client(settings)
    except AuthError as e:
        raise UpstreamAuthError(e.message) from e
    return BatchOrchestrator.from_settings(client, settings)


def get_orchestrator_factory() -> OrchestratorFactory:
    """
    Orchestrator factory for routes that run a batch.

    Credentials are resolved when the route calls the factory, after its own
    lookups, so missing credentials never mask a 404.
    """
    return build_batch_orchestrator
