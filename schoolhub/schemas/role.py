"""Role and user-role API schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from schoolhub.schemas.common import ApiModel
from schoolhub.schemas.permission import PermissionResponse


class RoleCreateRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    permission_ids: list[str] = Field(default_factory=list, max_length=500)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value.strip()


class RoleUpdateRequest(ApiModel):
    """Partial update. permissionIds, when present, replaces the whole set."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    permission_ids: list[str] | None = Field(default=None, max_length=500)


class RoleMemberResponse(ApiModel):
    id: str
    first_name: str
    last_name: str
    email: str


class RoleResponse(ApiModel):
    id: str
    tenant_id: str
    name: str
    description: str | None
    is_system: bool
    created_at: datetime | None = None
    permissions: list[PermissionResponse] = []
    users: list[RoleMemberResponse] = []
    user_count: int = 0


class UserRoleAssignRequest(ApiModel):
    role_id: str = Field(..., min_length=1)


class UserRoleResponse(ApiModel):
    user_id: str
    role_id: str
    role_name: str
    tenant_id: str
    assigned_by: str | None
    assigned_at: datetime | None
