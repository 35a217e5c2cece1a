"""API test fixtures."""

from collections.abc import AsyncGenerator, Callable, Iterator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from partsync.api.main import app


@pytest.fixture
def override() -> Iterator[Callable[[Callable[..., Any], Any], None]]:
    """Register a dependency override; all are removed after the test."""
    registered: list[Callable[..., Any]] = []

    def _override(dependency: Callable[..., Any], value: Any) -> None:
        app.dependency_overrides[dependency] = lambda: value
        registered.append(dependency)

    yield _override

    for dependency in registered:
        app.dependency_overrides.pop(dependency, None)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def as_role() -> Callable[..., dict[str, str]]:
    """Identity headers set by the upstream auth gateway."""

    def _headers(role: str, user_id: str = "alice") -> dict[str, str]:
        return {"X-User-Id": user_id, "X-User-Name": user_id.title(), "X-User-Role": role}

    return _headers
