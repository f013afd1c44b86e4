"""Failure envelope for unhandled errors."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from schoolhub.api.v1.dependencies import get_role_service
from tests.factories import make_user


async def _boom(client: AsyncClient, login_as, override):
    service = AsyncMock()
    service.list_roles.side_effect = RuntimeError("connection reset by peer")
    override(get_role_service, service)
    return await client.get("/api/v1/roles", headers=login_as(make_user("roles:read")))


async def test_500_hides_error_text_in_production(client: AsyncClient, login_as, override) -> None:
    response = await _boom(client, login_as, override)
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}


async def test_500_includes_error_text_in_development(
    client: AsyncClient, login_as, override, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        "schoolhub.core.exception_handlers.get_settings",
        lambda: SimpleNamespace(expose_error_details=True),
    )
    response = await _boom(client, login_as, override)
    assert response.status_code == 500
    assert response.json()["error"] == "connection reset by peer"


async def test_unknown_route_uses_failure_envelope(client: AsyncClient) -> None:
    response = await client.get("/api/v1/nope")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}
