"""Root conftest — shared test configuration and upstream fixtures."""

import os

# Settings require an upstream; tests never reach a real one
os.environ.setdefault("UPSTREAM_BASE_URL", "http://upstream.test")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402

from employee_api.infrastructure.upstream_client import EmployeeClient  # noqa: E402
from tests.infrastructure.mock_upstream import MockUpstream  # noqa: E402


@pytest.fixture
def upstream():
    """Scripted upstream employee service. Configure with upstream.on(...)."""
    return MockUpstream()


@pytest.fixture
def backoff_sleeps(monkeypatch):
    """Record backoff delays (ms) instead of sleeping."""
    recorded = []

    async def _fake_sleep(self, delay_ms):
        recorded.append(delay_ms)

    monkeypatch.setattr(EmployeeClient, "_sleep", _fake_sleep)
    return recorded


@pytest.fixture
async def employee_client(upstream, backoff_sleeps):
    """EmployeeClient wired to the MockUpstream transport, default retry policy."""
    client = EmployeeClient("http://upstream.test", transport=upstream.transport())
    yield client
    await client.aclose()
