"""Resolves a user's effective permission set from the database."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from schoolhub.infrastructure.persistence.models.role import Role


class PermissionResolver:
    """Union of permission names over every role the user holds in the tenant."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user_permissions(self, user_id: str, tenant_id: str) -> set[str]:
        query = (
            select(Permission.name)
            .select_from(UserRole)
            .join(Role, Role.id == UserRole.role_id)
            .join(RolePermission, RolePermission.role_id == UserRole.role_id)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(
                UserRole.user_id == user_id,
                UserRole.tenant_id == tenant_id,
                Role.tenant_id == tenant_id,
            )
            .distinct()
        )
        result = await self.db.execute(query)
        return {row[0] for row in result.fetchall()}
