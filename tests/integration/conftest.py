"""Integration fixtures: real RequestEngine, HTTP mocked with respx."""

import pytest
import respx

from github_wrapper.models import Credentials
from github_wrapper.request_engine import RequestEngine

API_BASE = "https://api.github.com"


@pytest.fixture
def api():
    """Mock router for the public API; unmatched requests fail the test."""
    with respx.mock(base_url=API_BASE, assert_all_called=False) as router:
        yield router


@pytest.fixture
async def engine():
    engine = RequestEngine(Credentials(token="test-token"))
    yield engine
    await engine.aclose()
