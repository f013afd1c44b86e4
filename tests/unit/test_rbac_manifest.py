"""Tests for the declarative permission catalog and default roles."""

from schoolhub.application.rbac_manifest import (
    DEFAULT_ROLES,
    PERMISSION_CATALOG,
    catalog_names,
    expand_role_permissions,
)


def test_catalog_names_are_unique_resource_action_pairs() -> None:
    names = catalog_names()
    assert len(names) == len(set(names))
    for spec in PERMISSION_CATALOG:
        assert spec.name == f"{spec.resource}:{spec.action}"


def test_route_permissions_exist_in_catalog() -> None:
    names = set(catalog_names())
    for required in (
        "roles:read",
        "roles:create",
        "roles:update",
        "roles:delete",
        "roles:assign",
        "permissions:read",
        "audit-logs:read",
        "attendance:manage",
        "notifications:manage",
        "parents:create",
        "leave:manage",
        "library:circulation",
    ):
        assert required in names, required


def test_default_role_permissions_are_all_in_catalog() -> None:
    names = set(catalog_names())
    for role in DEFAULT_ROLES:
        unknown = set(expand_role_permissions(role)) - names
        assert not unknown, f"{role.name}: {unknown}"


def test_admin_roles_expand_to_explicit_full_catalog() -> None:
    """Admin roles hold every permission explicitly; no wildcard reaches the database."""
    system = [r for r in DEFAULT_ROLES if r.is_system]
    assert {r.name for r in system} == {"Super Admin", "School Admin"}
    for role in system:
        expanded = expand_role_permissions(role)
        assert expanded == catalog_names()
        assert not any("*" in name for name in expanded)


def test_parent_can_file_but_not_review_leave() -> None:
    parent = next(r for r in DEFAULT_ROLES if r.name == "Parent")
    expanded = expand_role_permissions(parent)
    assert "leave:create" in expanded
    assert "leave:update" not in expanded
