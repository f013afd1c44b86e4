"""Role-permission join repository. Adds are idempotent (re-adding a pair is a no-op)."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.infrastructure.persistence.models.permission import RolePermission
from schoolhub.shared.utils.generators import generate_cuid


class RolePermissionRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_permission_ids(self, role_id: str) -> set[str]:
        result = await self.db.execute(
            select(RolePermission.permission_id).where(RolePermission.role_id == role_id)
        )
        return set(result.scalars().all())

    async def add(self, role_id: str, permission_ids: Iterable[str]) -> int:
        """Upsert (role_id, permission_id) pairs. Return how many were new."""
        rows = [
            {"id": generate_cuid(), "role_id": role_id, "permission_id": pid}
            for pid in dict.fromkeys(permission_ids)
        ]
        if not rows:
            return 0
        stmt = (
            insert(RolePermission)
            .values(rows)
            .on_conflict_do_nothing(
                index_elements=["role_id", "permission_id"]
            )
            .returning(RolePermission.id)
        )
        result = await self.db.execute(stmt)
        return len(result.all())

    async def remove(self, role_id: str, permission_ids: Iterable[str]) -> int:
        ids = set(permission_ids)
        if not ids:
            return 0
        result = await self.db.execute(
            delete(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id.in_(ids),
            )
        )
        return result.rowcount or 0
