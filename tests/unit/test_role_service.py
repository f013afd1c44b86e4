"""Unit tests for RoleService (conflicts, system-role protection, permission replacement)."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from schoolhub.application.dtos.role import PermissionResult, RoleResult
from schoolhub.application.services.role_service import RoleService
from schoolhub.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    RoleInUseException,
    SystemRoleProtectedException,
    ValidationException,
)

TENANT = "tenant-a"


def _role(role_id: str = "role-1", name: str = "Coach", is_system: bool = False) -> RoleResult:
    return RoleResult(
        id=role_id,
        tenant_id=TENANT,
        name=name,
        description=None,
        is_system=is_system,
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


def _service(known_permission_ids: set[str] | None = None) -> tuple[RoleService, SimpleNamespace]:
    repos = SimpleNamespace(
        role=AsyncMock(),
        permission=AsyncMock(),
        role_permission=AsyncMock(),
        user_role=AsyncMock(),
        user=AsyncMock(),
    )
    known = known_permission_ids or set()
    repos.permission.get_existing_ids.side_effect = lambda ids: {i for i in ids if i in known}
    svc = RoleService(
        role_repo=repos.role,
        permission_repo=repos.permission,
        role_permission_repo=repos.role_permission,
        user_role_repo=repos.user_role,
        user_repo=repos.user,
    )
    return svc, repos


async def test_create_role_conflict_on_existing_name() -> None:
    svc, repos = _service()
    repos.role.get_by_name_and_tenant.return_value = _role(name="Coach")
    with pytest.raises(ConflictException) as exc_info:
        await svc.create_role(TENANT, "Coach")
    assert exc_info.value.message == "Role with this name already exists in this tenant"
    repos.role.create_role.assert_not_awaited()


async def test_create_role_maps_integrity_error_to_conflict() -> None:
    """A concurrent insert of the same name surfaces as a conflict, not a 500."""
    svc, repos = _service()
    repos.role.get_by_name_and_tenant.return_value = None
    repos.role.create_role.side_effect = IntegrityError("insert", {}, Exception("duplicate"))
    with pytest.raises(ConflictException):
        await svc.create_role(TENANT, "Coach")


async def test_create_role_rejects_unknown_permission_ids() -> None:
    svc, repos = _service(known_permission_ids={"p1"})
    repos.role.get_by_name_and_tenant.return_value = None
    with pytest.raises(ValidationException) as exc_info:
        await svc.create_role(TENANT, "Coach", permission_ids=["p1", "nope"])
    assert exc_info.value.details["invalidPermissionIds"] == ["nope"]
    repos.role.create_role.assert_not_awaited()


async def test_create_role_assigns_deduplicated_permissions() -> None:
    svc, repos = _service(known_permission_ids={"p1", "p2"})
    repos.role.get_by_name_and_tenant.return_value = None
    repos.role.create_role.return_value = _role()
    repos.role.get_by_id_and_tenant.return_value = _role()
    await svc.create_role(TENANT, "  Coach  ", permission_ids=["p1", "p2", "p1"])
    repos.role.create_role.assert_awaited_once_with(TENANT, "Coach", None)
    repos.role_permission.add.assert_awaited_once_with("role-1", ["p1", "p2"])


async def test_update_system_role_is_refused() -> None:
    svc, repos = _service()
    repos.role.get_entity_for_update.return_value = SimpleNamespace(
        id="role-1", name="School Admin", is_system=True
    )
    with pytest.raises(SystemRoleProtectedException) as exc_info:
        await svc.update_role(TENANT, "role-1", name="Renamed")
    assert exc_info.value.message == "Cannot modify system roles"
    repos.role_permission.add.assert_not_awaited()


async def test_update_missing_role_is_not_found() -> None:
    svc, repos = _service()
    repos.role.get_entity_for_update.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await svc.update_role(TENANT, "missing", name="X")


async def test_update_role_replaces_permissions_by_set_difference() -> None:
    """Only the difference is written: unchanged pairs are neither removed nor re-added."""
    svc, repos = _service(known_permission_ids={"p1", "p2", "p3"})
    entity = SimpleNamespace(id="role-1", name="Coach", description=None, is_system=False)
    repos.role.get_entity_for_update.return_value = entity
    repos.role_permission.get_permission_ids.return_value = {"p1", "p2"}
    repos.role_permission.remove.return_value = 1
    repos.role_permission.add.return_value = 1
    repos.role.get_by_id_and_tenant.return_value = RoleResult(
        id="role-1",
        tenant_id=TENANT,
        name="Coach",
        description=None,
        is_system=False,
        created_at=None,
        permissions=(
            PermissionResult("p2", "grades:read", "grades", "read", None),
            PermissionResult("p3", "grades:update", "grades", "update", None),
        ),
    )

    updated = await svc.update_role(TENANT, "role-1", permission_ids=["p2", "p3"])

    repos.role_permission.remove.assert_awaited_once_with("role-1", {"p1"})
    repos.role_permission.add.assert_awaited_once_with("role-1", {"p3"})
    repos.role.save.assert_awaited_once_with(entity)
    assert [p.id for p in updated.permissions] == ["p2", "p3"]


async def test_update_role_with_empty_list_clears_permissions() -> None:
    svc, repos = _service()
    entity = SimpleNamespace(id="role-1", name="Coach", description=None, is_system=False)
    repos.role.get_entity_for_update.return_value = entity
    repos.role_permission.get_permission_ids.return_value = {"p1"}
    repos.role.get_by_id_and_tenant.return_value = _role()
    await svc.update_role(TENANT, "role-1", permission_ids=[])
    repos.role_permission.remove.assert_awaited_once_with("role-1", {"p1"})
    repos.role_permission.add.assert_awaited_once_with("role-1", set())


async def test_update_role_without_permission_ids_keeps_set() -> None:
    svc, repos = _service()
    entity = SimpleNamespace(id="role-1", name="Coach", description=None, is_system=False)
    repos.role.get_entity_for_update.return_value = entity
    repos.role.get_by_id_and_tenant.return_value = _role()
    await svc.update_role(TENANT, "role-1", description="Sports staff")
    assert entity.description == "Sports staff"
    repos.role_permission.get_permission_ids.assert_not_awaited()


async def test_update_role_rename_conflict() -> None:
    svc, repos = _service()
    repos.role.get_entity_for_update.return_value = SimpleNamespace(
        id="role-1", name="Coach", description=None, is_system=False
    )
    repos.role.get_by_name_and_tenant.return_value = _role(role_id="role-2", name="Librarian")
    with pytest.raises(ConflictException):
        await svc.update_role(TENANT, "role-1", name="Librarian")


async def test_update_role_rename_race_maps_integrity_error_to_conflict() -> None:
    """A concurrent rename to the same name fails at flush and surfaces as a conflict."""
    svc, repos = _service()
    repos.role.get_entity_for_update.return_value = SimpleNamespace(
        id="role-1", name="Coach", description=None, is_system=False
    )
    repos.role.get_by_name_and_tenant.return_value = None
    repos.role.save.side_effect = IntegrityError("update", {}, Exception("duplicate"))
    with pytest.raises(ConflictException) as exc_info:
        await svc.update_role(TENANT, "role-1", name="Librarian", permission_ids=["p1"])
    assert exc_info.value.details == {"name": "Librarian"}
    repos.role_permission.add.assert_not_awaited()


async def test_delete_role_in_use_reports_user_count() -> None:
    svc, repos = _service()
    repos.role.get_entity_for_update.return_value = SimpleNamespace(id="role-1", is_system=False)
    repos.user_role.count_for_role.return_value = 4
    with pytest.raises(RoleInUseException) as exc_info:
        await svc.delete_role(TENANT, "role-1")
    assert exc_info.value.details["userCount"] == 4
    repos.role.delete.assert_not_awaited()


async def test_delete_system_role_is_refused() -> None:
    svc, repos = _service()
    repos.role.get_entity_for_update.return_value = SimpleNamespace(id="role-1", is_system=True)
    with pytest.raises(SystemRoleProtectedException) as exc_info:
        await svc.delete_role(TENANT, "role-1")
    assert exc_info.value.message == "Cannot delete system roles"


async def test_delete_unused_role() -> None:
    svc, repos = _service()
    entity = SimpleNamespace(id="role-1", is_system=False)
    repos.role.get_entity_for_update.return_value = entity
    repos.user_role.count_for_role.return_value = 0
    await svc.delete_role(TENANT, "role-1")
    repos.role.delete.assert_awaited_once_with(entity)


async def test_assign_role_requires_user_in_tenant() -> None:
    svc, repos = _service()
    repos.user.exists_in_tenant.return_value = False
    with pytest.raises(ResourceNotFoundException):
        await svc.assign_role_to_user(TENANT, "user-x", "role-1")
    repos.user_role.assign.assert_not_awaited()


async def test_assign_role_from_other_tenant_is_not_found() -> None:
    svc, repos = _service()
    repos.user.exists_in_tenant.return_value = True
    repos.role.get_by_id_and_tenant.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await svc.assign_role_to_user(TENANT, "user-1", "foreign-role")


async def test_list_permissions_groups_by_resource() -> None:
    svc, repos = _service()
    repos.permission.list_all.return_value = [
        PermissionResult("p1", "grades:read", "grades", "read", None),
        PermissionResult("p2", "grades:update", "grades", "update", None),
        PermissionResult("p3", "roles:read", "roles", "read", None),
    ]
    permissions, grouped = await svc.list_permissions()
    assert len(permissions) == 3
    assert [p.id for p in grouped["grades"]] == ["p1", "p2"]
    assert [p.id for p in grouped["roles"]] == ["p3"]
