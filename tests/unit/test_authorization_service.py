"""Unit tests for AuthorizationService (permission resolution, policy checks, tenant gate)."""

from unittest.mock import AsyncMock

import pytest

from schoolhub.application.services.authorization_service import AuthorizationService
from schoolhub.domain.exceptions import AuthorizationException, TenantMismatchException
from schoolhub.domain.policies import AnyOf, Require


async def test_permissions_are_resolved_on_every_call() -> None:
    """No cache: a role change is visible to the next resolution."""
    resolver = AsyncMock()
    resolver.get_user_permissions.return_value = {"roles:read"}
    svc = AuthorizationService(resolver)
    assert await svc.get_user_permissions("u1", "t1") == frozenset({"roles:read"})
    resolver.get_user_permissions.return_value = set()
    assert await svc.get_user_permissions("u1", "t1") == frozenset()
    assert resolver.get_user_permissions.await_count == 2
    resolver.get_user_permissions.assert_awaited_with("u1", "t1")


def test_require_granted_raises_with_required_names() -> None:
    with pytest.raises(AuthorizationException) as exc_info:
        AuthorizationService.require_granted(
            frozenset({"leave:create"}), AnyOf("leave:read", "leave:manage")
        )
    assert exc_info.value.details["required"] == ["leave:read", "leave:manage"]


def test_require_granted_any_of_passes() -> None:
    AuthorizationService.require_granted(
        frozenset({"leave:manage"}), AnyOf("leave:read", "leave:manage")
    )


def test_require_granted_single_permission() -> None:
    AuthorizationService.require_granted(frozenset({"roles:read"}), Require("roles:read"))
    with pytest.raises(AuthorizationException):
        AuthorizationService.require_granted(frozenset(), Require("roles:read"))


def test_ensure_same_tenant_denies_other_tenant() -> None:
    with pytest.raises(TenantMismatchException):
        AuthorizationService.ensure_same_tenant("tenant-a", "tenant-b")


def test_ensure_same_tenant_allows_own_or_absent() -> None:
    AuthorizationService.ensure_same_tenant("tenant-a", "tenant-a")
    AuthorizationService.ensure_same_tenant("tenant-a", None)
