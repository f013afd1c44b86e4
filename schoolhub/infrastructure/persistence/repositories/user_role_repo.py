"""User-role join repository (tenant-scoped)."""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.application.dtos.role import UserRoleResult
from schoolhub.infrastructure.persistence.models.permission import UserRole
from schoolhub.infrastructure.persistence.models.role import Role
from schoolhub.shared.utils.generators import generate_cuid


class UserRoleRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_role_names(self, user_id: str, tenant_id: str) -> list[str]:
        result = await self.db.execute(
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id, UserRole.tenant_id == tenant_id)
            .order_by(Role.name)
        )
        return list(result.scalars().all())

    async def list_for_user(self, user_id: str, tenant_id: str) -> list[UserRoleResult]:
        result = await self.db.execute(
            select(UserRole, Role.name)
            .join(Role, Role.id == UserRole.role_id)
            .where(UserRole.user_id == user_id, UserRole.tenant_id == tenant_id)
            .order_by(Role.name)
        )
        return [
            UserRoleResult(
                user_id=ur.user_id,
                role_id=ur.role_id,
                role_name=role_name,
                tenant_id=ur.tenant_id,
                assigned_by=ur.assigned_by,
                assigned_at=ur.assigned_at,
            )
            for ur, role_name in result.all()
        ]

    async def count_for_role(self, role_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(UserRole).where(UserRole.role_id == role_id)
        )
        return int(result.scalar_one())

    async def assign(
        self,
        user_id: str,
        role_id: str,
        tenant_id: str,
        assigned_by: str | None = None,
    ) -> bool:
        """Upsert the (user_id, role_id) pair. Return True if it was newly created."""
        stmt = (
            insert(UserRole)
            .values(
                id=generate_cuid(),
                user_id=user_id,
                role_id=role_id,
                tenant_id=tenant_id,
                assigned_by=assigned_by,
            )
            .on_conflict_do_nothing(index_elements=["user_id", "role_id"])
            .returning(UserRole.id)
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def remove(self, user_id: str, role_id: str, tenant_id: str) -> bool:
        result = await self.db.execute(
            delete(UserRole).where(
                UserRole.user_id == user_id,
                UserRole.role_id == role_id,
                UserRole.tenant_id == tenant_id,
            )
        )
        return bool(result.rowcount)
