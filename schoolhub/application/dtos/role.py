"""DTOs for role and permission administration."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PermissionResult:
    id: str
    name: str
    resource: str
    action: str
    description: str | None


@dataclass(frozen=True)
class RoleMember:
    """A user holding a role (as shown in the role listing)."""

    id: str
    first_name: str
    last_name: str
    email: str


@dataclass(frozen=True)
class RoleResult:
    """Role read-model with its permissions and members."""

    id: str
    tenant_id: str
    name: str
    description: str | None
    is_system: bool
    created_at: datetime | None
    permissions: tuple[PermissionResult, ...] = ()
    users: tuple[RoleMember, ...] = ()

    @property
    def user_count(self) -> int:
        return len(self.users)


@dataclass(frozen=True)
class UserRoleResult:
    user_id: str
    role_id: str
    role_name: str
    tenant_id: str
    assigned_by: str | None
    assigned_at: datetime | None
