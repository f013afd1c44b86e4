"""RBAC seeding and role administration against Postgres. Each test is rolled back."""

import pytest
from sqlalchemy import func, select

from schoolhub.application.rbac_manifest import DEFAULT_ROLES, PERMISSION_CATALOG, SUPER_ADMIN
from schoolhub.application.services.role_service import RoleService
from schoolhub.domain.exceptions import RoleInUseException, SystemRoleProtectedException
from schoolhub.infrastructure.persistence.models import Permission, Role, RolePermission
from schoolhub.infrastructure.persistence.repositories import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
    UserRoleRepository,
)
from schoolhub.infrastructure.services import PermissionResolver
from schoolhub.infrastructure.services.rbac_seeder import RbacSeeder
from tests.integration.helpers import add_tenant, add_user

pytestmark = pytest.mark.requires_db


def _role_service(db) -> RoleService:
    return RoleService(
        role_repo=RoleRepository(db),
        permission_repo=PermissionRepository(db),
        role_permission_repo=RolePermissionRepository(db),
        user_role_repo=UserRoleRepository(db),
        user_repo=UserRepository(db),
    )


async def _count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


async def test_seeding_twice_creates_nothing_new(db_session) -> None:
    tenant = await add_tenant(db_session, "greenfield.example.com")

    first = await RbacSeeder(db_session).seed([tenant.id])
    counts = (
        await _count(db_session, Permission),
        await _count(db_session, Role),
        await _count(db_session, RolePermission),
    )
    second = await RbacSeeder(db_session).seed([tenant.id])

    assert first.ok and second.ok
    assert first.roles_created == len(DEFAULT_ROLES)
    assert second.permissions_created == 0
    assert second.permissions_existing == len(PERMISSION_CATALOG)
    assert second.roles_created == 0
    assert second.roles_existing == len(DEFAULT_ROLES)
    assert second.role_permissions_added == 0
    assert counts == (
        await _count(db_session, Permission),
        await _count(db_session, Role),
        await _count(db_session, RolePermission),
    )


async def test_super_admin_holds_every_permission(db_session) -> None:
    tenant = await add_tenant(db_session, "hillside.example.com")
    admin = await add_user(db_session, tenant.id, "head@hillside.example.com")
    await RbacSeeder(db_session).seed([tenant.id])
    role = await RoleRepository(db_session).get_by_name_and_tenant(SUPER_ADMIN, tenant.id)
    await UserRoleRepository(db_session).assign(admin.id, role.id, tenant.id)

    granted = await PermissionResolver(db_session).get_user_permissions(admin.id, tenant.id)

    assert granted == {spec.name for spec in PERMISSION_CATALOG}


async def test_roles_do_not_leak_across_tenants(db_session) -> None:
    tenant_a = await add_tenant(db_session, "a.example.com")
    tenant_b = await add_tenant(db_session, "b.example.com")
    user = await add_user(db_session, tenant_a.id, "teacher@a.example.com")
    await RbacSeeder(db_session).seed([tenant_a.id, tenant_b.id])
    role_a = await RoleRepository(db_session).get_by_name_and_tenant("Teacher", tenant_a.id)
    await UserRoleRepository(db_session).assign(user.id, role_a.id, tenant_a.id)

    resolver = PermissionResolver(db_session)
    assert "grades:update" in await resolver.get_user_permissions(user.id, tenant_a.id)
    assert await resolver.get_user_permissions(user.id, tenant_b.id) == set()
    assert await RoleRepository(db_session).get_by_id_and_tenant(role_a.id, tenant_b.id) is None


async def test_update_role_replaces_permission_set(db_session) -> None:
    tenant = await add_tenant(db_session, "riverside.example.com")
    await RbacSeeder(db_session).seed()
    ids = await PermissionRepository(db_session).get_ids_by_names(
        ["grades:read", "grades:update", "exams:read"]
    )
    service = _role_service(db_session)
    role = await service.create_role(
        tenant.id, "Exam Officer", permission_ids=[ids["grades:read"], ids["grades:update"]]
    )

    updated = await service.update_role(
        tenant.id, role.id, permission_ids=[ids["grades:update"], ids["exams:read"]]
    )
    assert sorted(p.name for p in updated.permissions) == ["exams:read", "grades:update"]

    cleared = await service.update_role(tenant.id, role.id, permission_ids=[])
    assert cleared.permissions == ()


async def test_role_in_use_cannot_be_deleted(db_session) -> None:
    tenant = await add_tenant(db_session, "lakeview.example.com")
    users = [await add_user(db_session, tenant.id, f"staff{i}@lakeview.example.com") for i in range(2)]
    service = _role_service(db_session)
    role = await service.create_role(tenant.id, "Coach")
    for user in users:
        await service.assign_role_to_user(tenant.id, user.id, role.id)

    with pytest.raises(RoleInUseException) as exc_info:
        await service.delete_role(tenant.id, role.id)
    assert exc_info.value.details["userCount"] == 2

    for user in users:
        await service.remove_role_from_user(tenant.id, user.id, role.id)
    await service.delete_role(tenant.id, role.id)
    assert await RoleRepository(db_session).get_by_id_and_tenant(role.id, tenant.id) is None


async def test_seeded_system_role_is_protected(db_session) -> None:
    tenant = await add_tenant(db_session, "summit.example.com")
    await RbacSeeder(db_session).seed([tenant.id])
    role = await RoleRepository(db_session).get_by_name_and_tenant(SUPER_ADMIN, tenant.id)

    with pytest.raises(SystemRoleProtectedException):
        await _role_service(db_session).delete_role(tenant.id, role.id)


async def test_seeding_leaves_tenant_role_named_like_system_role_alone(db_session) -> None:
    tenant = await add_tenant(db_session, "meadow.example.com")
    await RbacSeeder(db_session).seed()
    custom = await _role_service(db_session).create_role(tenant.id, SUPER_ADMIN)

    report = await RbacSeeder(db_session).seed([tenant.id])

    assert f"system_role_clash:{tenant.id}:{SUPER_ADMIN}" in report.failures
    stored = await RoleRepository(db_session).get_by_id_and_tenant(custom.id, tenant.id)
    assert stored.is_system is False
    assert stored.permissions == ()
