"""Declarative RBAC manifest: the permission catalog and the default roles.

This is the only place permissions and default role bundles are defined.
RbacSeeder consumes it idempotently; route guards reference the same names.
"""

from __future__ import annotations

from dataclasses import dataclass

CRUD_ACTIONS: tuple[str, ...] = ("read", "create", "update", "delete")

# Marker for a role that receives every catalog permission (expanded to explicit names at seed time).
ALL_PERMISSIONS = "__all__"


@dataclass(frozen=True)
class PermissionSpec:
    resource: str
    action: str
    description: str

    @property
    def name(self) -> str:
        return f"{self.resource}:{self.action}"


@dataclass(frozen=True)
class RoleSpec:
    name: str
    description: str
    permissions: tuple[str, ...]
    is_system: bool = False


def _resource(
    resource: str,
    label: str,
    actions: tuple[str, ...] = CRUD_ACTIONS + ("manage",),
    extra: dict[str, str] | None = None,
) -> list[PermissionSpec]:
    specs = [
        PermissionSpec(
            resource,
            action,
            f"Full control of {label}" if action == "manage" else f"{action.capitalize()} {label}",
        )
        for action in actions
    ]
    for action, description in (extra or {}).items():
        specs.append(PermissionSpec(resource, action, description))
    return specs


PERMISSION_CATALOG: tuple[PermissionSpec, ...] = tuple(
    [
        *_resource("users", "users"),
        *_resource(
            "roles",
            "roles",
            actions=CRUD_ACTIONS,
            extra={"assign": "Assign and revoke user roles"},
        ),
        *_resource("permissions", "permissions", actions=("read",)),
        *_resource("students", "students"),
        *_resource("teachers", "teachers"),
        *_resource("parents", "parents"),
        *_resource("classes", "classes"),
        *_resource("subjects", "subjects"),
        *_resource("attendance", "attendance records"),
        *_resource("grades", "grades"),
        *_resource("exams", "exams"),
        *_resource("fees", "fees and billing"),
        *_resource(
            "library",
            "library items",
            extra={
                "circulation": "Issue and return library items",
                "reports": "View library reports",
            },
        ),
        *_resource("transport", "transport routes and vehicles"),
        *_resource("leave", "leave requests"),
        *_resource("notifications", "notifications", actions=("read", "manage")),
        *_resource("audit-logs", "audit logs", actions=("read",)),
        *_resource("settings", "school settings", actions=("read", "update")),
    ]
)

SUPER_ADMIN = "Super Admin"
SCHOOL_ADMIN = "School Admin"

DEFAULT_ROLES: tuple[RoleSpec, ...] = (
    RoleSpec(
        name=SUPER_ADMIN,
        description="Full system access with all permissions",
        permissions=(ALL_PERMISSIONS,),
        is_system=True,
    ),
    RoleSpec(
        name=SCHOOL_ADMIN,
        description="Administers one school: users, roles, academics and operations",
        permissions=(ALL_PERMISSIONS,),
        is_system=True,
    ),
    RoleSpec(
        name="Teacher",
        description="Teaching staff: attendance, grades and leave review",
        permissions=(
            "students:read",
            "classes:read",
            "subjects:read",
            "parents:read",
            "attendance:read",
            "attendance:create",
            "attendance:update",
            "attendance:manage",
            "grades:read",
            "grades:create",
            "grades:update",
            "exams:read",
            "leave:read",
            "leave:update",
            "library:read",
            "library:circulation",
            "notifications:read",
        ),
    ),
    RoleSpec(
        name="Librarian",
        description="Manages the library catalog and circulation",
        permissions=(
            "library:read",
            "library:create",
            "library:update",
            "library:delete",
            "library:manage",
            "library:circulation",
            "library:reports",
            "students:read",
            "notifications:read",
        ),
    ),
    RoleSpec(
        name="Parent",
        description="Parent or guardian: follows their children and files leave requests",
        permissions=(
            "students:read",
            "attendance:read",
            "grades:read",
            "leave:read",
            "leave:create",
            "notifications:read",
        ),
    ),
    RoleSpec(
        name="Student",
        description="Student self-service access",
        permissions=(
            "attendance:read",
            "grades:read",
            "library:read",
            "notifications:read",
        ),
    ),
)


def catalog_names() -> list[str]:
    return [spec.name for spec in PERMISSION_CATALOG]


def expand_role_permissions(role: RoleSpec) -> list[str]:
    """Return the explicit permission names a role should hold."""
    if ALL_PERMISSIONS in role.permissions:
        return catalog_names()
    return list(dict.fromkeys(role.permissions))
