"""Route guards: authentication, the tenant gate and AnyOf permission semantics."""

from unittest.mock import AsyncMock

from httpx import AsyncClient

from schoolhub.api.v1.dependencies import get_leave_service, get_role_service
from schoolhub.application.dtos.leave import LeaveStats
from schoolhub.application.rbac_manifest import catalog_names
from schoolhub.middleware import drain_pending_audit_writes
from tests.factories import TENANT_A, TENANT_B, make_user


async def test_missing_token_returns_401(client: AsyncClient, auth_service) -> None:
    response = await client.get("/api/v1/roles")
    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "message": "Access token required",
        "error": "AUTHENTICATION_ERROR",
    }


async def test_unknown_token_returns_401(client: AsyncClient, auth_service) -> None:
    response = await client.get("/api/v1/roles", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


async def test_missing_permission_returns_403_with_required(
    client: AsyncClient, login_as, override, audit_sink: list
) -> None:
    service = AsyncMock()
    override(get_role_service, service)
    user = make_user("students:read")

    response = await client.get("/api/v1/roles", headers=login_as(user))

    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "PERMISSION_DENIED"
    assert body["message"] == "Insufficient permissions"
    assert body["required"] == ["roles:read"]
    service.list_roles.assert_not_awaited()

    # Denied requests are still attributed to the caller.
    await drain_pending_audit_writes()
    [entry] = audit_sink
    assert entry.status == "FAILURE"
    assert entry.user_id == user.id
    assert entry.error_message == "Insufficient permissions"


async def test_other_tenant_header_is_denied_regardless_of_permissions(
    client: AsyncClient, login_as, override
) -> None:
    service = AsyncMock()
    override(get_role_service, service)
    user = make_user(*catalog_names(), tenant_id=TENANT_A, roles=("Super Admin",))
    headers = {**login_as(user), "X-Tenant-ID": TENANT_B}

    response = await client.get("/api/v1/roles", headers=headers)

    assert response.status_code == 403
    assert response.json()["error"] == "TENANT_MISMATCH"
    assert response.json()["message"] == "Access denied - tenant isolation"
    service.list_roles.assert_not_awaited()


async def test_own_tenant_header_is_allowed(client: AsyncClient, login_as, override) -> None:
    service = AsyncMock()
    service.list_roles.return_value = []
    override(get_role_service, service)
    user = make_user("roles:read", tenant_id=TENANT_A)

    response = await client.get("/api/v1/roles", headers={**login_as(user), "X-Tenant-ID": TENANT_A})

    assert response.status_code == 200
    assert response.json() == []
    service.list_roles.assert_awaited_once_with(TENANT_A)


async def test_any_of_permissions_grants_access(client: AsyncClient, login_as, override) -> None:
    """Leave routes accept leave:read or leave:manage; either alone is enough."""
    service = AsyncMock()
    service.stats.return_value = LeaveStats(total=0, pending=0, approved=0, rejected=0, emergency=0)
    override(get_leave_service, service)

    for permission in ("leave:read", "leave:manage"):
        user = make_user(permission, user_id=f"user-{permission}")
        response = await client.get("/api/v1/leave/stats", headers=login_as(user))
        assert response.status_code == 200, permission

    response = await client.get("/api/v1/leave/stats", headers=login_as(make_user("grades:read")))
    assert response.status_code == 403
    assert response.json()["required"] == ["leave:read", "leave:manage"]
