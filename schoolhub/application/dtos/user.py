"""DTOs for users and the authenticated caller."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UserResult:
    """User read-model. No password."""

    id: str
    tenant_id: str
    email: str
    first_name: str
    last_name: str
    status: str

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class AuthenticatedUser:
    """The caller of a request: identity, tenant, role names and effective permissions.

    Built once per request by get_current_user; permissions are the union
    over every role the user holds in the tenant.
    """

    id: str
    tenant_id: str
    email: str
    name: str
    roles: tuple[str, ...] = ()
    permissions: frozenset[str] = field(default_factory=frozenset)

    def has_permission(self, name: str) -> bool:
        return name in self.permissions
