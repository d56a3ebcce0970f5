"""Pytest fixtures and shared test configuration.

Fixtures:
    - client_config: Client configuration pointing at a fake host
    - mock_session_id: Consistent session ID for tests
    - fake_agent: Scripted agent backend installed on the API
    - async_client: HTTPX client for API testing
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient

from streamchat.api import app
from streamchat.api.chat import get_chat_service
from streamchat.streaming.config import ClientConfig
from tests.helpers import FakeAgentService

TEST_BASE_URL = "http://test"


@pytest.fixture
def client_config() -> ClientConfig:
    """Return client configuration aimed at the in-process test host.

    Returns:
        ClientConfig with a short timeout and partial-text retention off.
    """
    return ClientConfig(api_base_url=TEST_BASE_URL, timeout=5.0, keep_partial_on_error=False)


@pytest.fixture
def mock_session_id() -> str:
    """Generate consistent session ID for testing.

    Returns:
        Predictable session ID for test assertions.
    """
    return "session-test-12345"


@pytest.fixture
def fake_agent() -> Generator[FakeAgentService]:
    """Install a scripted agent backend on the API for the test duration.

    Yields:
        The FakeAgentService; tests may change its deltas or failure point.
    """
    agent = FakeAgentService(["Hel", "lo", " world"])
    app.dependency_overrides[get_chat_service] = lambda: agent
    yield agent
    app.dependency_overrides.pop(get_chat_service, None)


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=TEST_BASE_URL) as client:
        yield client
