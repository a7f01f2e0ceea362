"""API test fixtures — FastAPI app over ASGITransport with the upstream client overridden.

Invariants:
    - get_upstream_client dependency returns the MockUpstream-backed EmployeeClient
    - Overrides cleared after every test

Design Decisions:
    - Lifespan not run (ASGITransport skips it): the override replaces the singleton
"""

import pytest
from httpx import ASGITransport, AsyncClient

from employee_api.infrastructure.upstream_client import get_upstream_client
from employee_api.main import app


@pytest.fixture
async def client(employee_client):
    """FastAPI test client whose upstream is the scripted MockUpstream."""
    app.dependency_overrides[get_upstream_client] = lambda: employee_client

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
