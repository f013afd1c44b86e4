"""Unit tests for RbacSeeder (failure isolation, system-role sync, report counts)."""

from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import SQLAlchemyError

from schoolhub.application.rbac_manifest import PermissionSpec, RoleSpec
from schoolhub.infrastructure.services.rbac_seeder import RbacSeeder


def _seeder(**kwargs) -> RbacSeeder:
    db = MagicMock()
    # SAVEPOINT context manager must not swallow errors raised inside it
    db.begin_nested.return_value.__aexit__.return_value = False
    seeder = RbacSeeder(db, **kwargs)
    seeder.permission_repo = AsyncMock()
    seeder.role_repo = AsyncMock()
    seeder.role_permission_repo = AsyncMock()
    return seeder


async def test_failed_permission_upsert_is_recorded_and_batch_continues() -> None:
    seeder = _seeder(
        permissions=[
            PermissionSpec("grades", "read", "Read grades"),
            PermissionSpec("grades", "update", "Update grades"),
            PermissionSpec("exams", "read", "Read exams"),
        ],
        roles=[],
    )
    seeder.permission_repo.ensure.side_effect = [
        ("p1", True),
        SQLAlchemyError("boom"),
        ("p3", False),
    ]
    report = await seeder.seed()
    assert seeder.permission_repo.ensure.await_count == 3
    assert report.permissions_created == 1
    assert report.permissions_existing == 1
    assert report.failures == ["permission:grades:update"]
    assert not report.ok


async def test_refresh_descriptions_is_passed_through() -> None:
    seeder = _seeder(
        refresh_descriptions=True,
        permissions=[PermissionSpec("grades", "read", "Read grades")],
        roles=[],
    )
    seeder.permission_repo.ensure.return_value = ("p1", False)
    await seeder.seed_catalog()
    seeder.permission_repo.ensure.assert_awaited_once_with(
        "grades", "read", "Read grades", refresh_description=True
    )


async def test_existing_custom_role_keeps_its_permissions() -> None:
    """Non-system defaults get their bundle only when first created."""
    seeder = _seeder(
        permissions=[],
        roles=[RoleSpec("Teacher", "Staff", ("grades:read",))],
    )
    seeder.role_repo.ensure.return_value = ("role-t", False, False)
    await seeder.seed(["tenant-a"])
    seeder.role_permission_repo.add.assert_not_awaited()
    assert seeder.report.roles_existing == 1


async def test_system_role_is_resynced_every_run() -> None:
    seeder = _seeder(
        permissions=[],
        roles=[RoleSpec("School Admin", "Admin", ("grades:read", "exams:read"), is_system=True)],
    )
    seeder.role_repo.ensure.return_value = ("role-a", False, True)
    seeder.permission_repo.get_ids_by_names.return_value = {"grades:read": "p1", "exams:read": "p2"}
    seeder.role_permission_repo.add.return_value = 1
    await seeder.seed(["tenant-a"])
    seeder.role_permission_repo.add.assert_awaited_once()
    role_id, ids = seeder.role_permission_repo.add.await_args.args
    assert role_id == "role-a"
    assert sorted(ids) == ["p1", "p2"]
    assert seeder.report.role_permissions_added == 1


async def test_tenant_role_with_system_role_name_is_not_escalated() -> None:
    seeder = _seeder(
        permissions=[],
        roles=[RoleSpec("School Admin", "Admin", ("grades:read",), is_system=True)],
    )
    seeder.role_repo.ensure.return_value = ("custom-role", False, False)
    report = await seeder.seed(["tenant-a"])
    seeder.role_permission_repo.add.assert_not_awaited()
    seeder.permission_repo.get_ids_by_names.assert_not_awaited()
    assert report.failures == ["system_role_clash:tenant-a:School Admin"]
    assert not report.ok


async def test_unknown_permission_names_are_skipped() -> None:
    seeder = _seeder(permissions=[], roles=[])
    seeder.permission_repo.get_ids_by_names.return_value = {"grades:read": "p1"}
    seeder.role_permission_repo.add.return_value = 1
    added = await seeder.assign_permissions_to_role("role-1", ["grades:read", "ghost:read"])
    assert added == 1
    assert seeder.report.unresolved_permissions == ["ghost:read"]
    assert seeder.report.ok


async def test_failed_role_upsert_skips_its_permissions() -> None:
    seeder = _seeder(
        permissions=[],
        roles=[
            RoleSpec("Teacher", "Staff", ("grades:read",)),
            RoleSpec("Parent", "Guardian", ("leave:create",)),
        ],
    )
    seeder.role_repo.ensure.side_effect = [SQLAlchemyError("boom"), ("role-p", True, False)]
    seeder.permission_repo.get_ids_by_names.return_value = {"leave:create": "p9"}
    seeder.role_permission_repo.add.return_value = 1
    report = await seeder.seed(["tenant-a"])
    assert report.failures == ["role:tenant-a:Teacher"]
    assert report.roles_created == 1
    role_id, ids = seeder.role_permission_repo.add.await_args.args
    assert role_id == "role-p"
    assert list(ids) == ["p9"]
