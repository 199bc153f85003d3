"""Shared test fixtures for all test modules."""

from collections.abc import Callable
from pathlib import Path

import pytest

try:
    import httpx
except ImportError:
    httpx = None

TESTDATA_DIR = Path(__file__).parent / "testdata"


@pytest.fixture
def load_testdata() -> Callable[[str], bytes]:
    """Factory fixture reading a line-protocol file from tests/testdata.

    Usage:
        def test_something(load_testdata):
            body = load_testdata("single_metric")
    """

    def _load(name: str) -> bytes:
        content = (TESTDATA_DIR / f"{name}.txt").read_bytes()
        assert content, f"expected {name}.txt to have content"
        return content

    return _load


# === ASGI Test Fixtures ===


@pytest.fixture
def asgi_scope():
    """Factory fixture for creating ASGI scope dicts.

    Used in tests to create scope dicts with customizable method/path.
    """
    from lineframes.adapters.frameworks.asgi import Scope

    def _scope(method: str = "GET", path: str = "/frames", query: bytes = b"") -> Scope:
        return {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query,
            "headers": [],
        }

    return _scope


@pytest.fixture
def asgi_send_capture():
    """Fixture that returns a send callable and a responses list for capture.

    Returns a tuple of (send_func, responses_list) for recording ASGI messages.
    """

    responses: list[dict[str, object]] = []

    async def send(message: dict[str, object]) -> None:
        """Capture ASGI messages."""
        responses.append(message)

    return send, responses


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Returns a callable that accepts an ASGI app and yields a client
    with ASGITransport configured.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(converter, frame_storage)
            async with asgi_test_client(app) as client:
                response = await client.post("/push", content=b"...")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client


# === Shared Storage Fixtures ===


@pytest.fixture
def frame_storage():
    """Fixture providing an empty frame storage."""
    from lineframes.adapters.storage.in_memory import InMemoryFrameStorage

    return InMemoryFrameStorage()


@pytest.fixture
async def asgi_client_with_storage(frame_storage, asgi_test_client):
    """Fixture combining a default converter, storage and ASGI test client.

    Returns a tuple of (client, frame_storage).

    Usage:
        async def test_something(asgi_client_with_storage):
            client, frame_storage = asgi_client_with_storage
            response = await client.get("/frames")
    """
    from lineframes.adapters.frameworks.asgi import create_asgi_app
    from lineframes.core.converter import GroupingConverter

    app = create_asgi_app(GroupingConverter(), frame_storage)
    async with asgi_test_client(app) as client:
        yield client, frame_storage
