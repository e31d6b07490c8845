"""API test fixtures: ASGI client with the database and hosting client overridden.

The database session is a mock; tests patch the domain ops the route under
test calls. The orchestrator runs against the in-memory hosting client.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from dtforge.services.reconcile import BatchOrchestrator


@pytest.fixture
def db_session():
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
async def api_client(db_session, fake_client, policy):
    """HTTP client with get_db and the batch orchestrator overridden."""
    from dtforge.api.deps import get_orchestrator_factory
    from dtforge.core.database import get_db
    from dtforge.main import app

    async def override_db():
        yield db_session

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_orchestrator_factory] = lambda: lambda: BatchOrchestrator(
        fake_client, policy
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
