import pytest
import os
import httpx
from dotenv import load_dotenv

from citesearch.config import get_settings
from citesearch.retrieval.fetch import Fetcher
from citesearch.retrieval.registry import BackendDescriptor

@pytest.fixture(scope="session", autouse=True)
def _load_env():
    # Load .env once per session to avoid side-effects on import time
    load_dotenv()

def _truthy(v: str | None) -> bool:
    return v is not None and v.strip().lower() not in ("", "0", "false", "no")

@pytest.fixture(scope="session")
def allow_integration(_load_env) -> bool:
    return _truthy(os.getenv("RUN_INTEGRATION_TESTS"))

@pytest.fixture
def settings(monkeypatch):
    """
    The shared Settings singleton. Modules read it at call time, so tests
    override individual values with monkeypatch and get them restored afterwards.
    """
    s = get_settings()
    monkeypatch.setattr(s, "GROQ_API_KEY", "test-key")
    return s

class FixedOrder:
    """Stands in for random.Random: keeps the backend order as given."""

    def shuffle(self, items):
        pass

@pytest.fixture
def fixed_order():
    return FixedOrder()

@pytest.fixture
def mock_fetcher():
    """
    Returns a factory building a real Fetcher on top of httpx.MockTransport,
    so every test exercises the same error mapping as production.
    """
    def factory(handler):
        return Fetcher(transport=httpx.MockTransport(handler))
    return factory

@pytest.fixture
def backends():
    return [
        BackendDescriptor(name="mirror-a", base_url="https://mirror-a.test", engines=("google",)),
        BackendDescriptor(name="mirror-b", base_url="https://mirror-b.test", engines=("google",)),
        BackendDescriptor(name="mirror-c", base_url="https://mirror-c.test", engines=("google",)),
    ]

def searx_item(url, title, content="", **extra):
    item = {"url": url, "title": title, "content": content, "engine": "google"}
    item.update(extra)
    return item

@pytest.fixture
def make_searx_item():
    return searx_item
