"""Permission catalog repository. Permissions are global (no tenant filter)."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import literal_column, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.application.dtos.role import PermissionResult
from schoolhub.infrastructure.persistence.models.permission import Permission
from schoolhub.infrastructure.persistence.repositories.base import BaseRepository
from schoolhub.shared.utils.generators import generate_cuid


def permission_name(resource: str, action: str) -> str:
    """Canonical permission name used in every authorization check."""
    return f"{resource}:{action}"


def _permission_to_result(p: Permission) -> PermissionResult:
    return PermissionResult(
        id=p.id,
        name=p.name,
        resource=p.resource,
        action=p.action,
        description=p.description,
    )


class PermissionRepository(BaseRepository[Permission]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def list_all(self) -> list[PermissionResult]:
        """Return the whole catalog ordered by resource, then action."""
        result = await self.db.execute(
            select(Permission).order_by(Permission.resource, Permission.action)
        )
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def get_existing_ids(self, permission_ids: Iterable[str]) -> set[str]:
        """Return the subset of permission_ids that exist."""
        ids = set(permission_ids)
        if not ids:
            return set()
        result = await self.db.execute(select(Permission.id).where(Permission.id.in_(ids)))
        return set(result.scalars().all())

    async def get_ids_by_names(self, names: Iterable[str]) -> dict[str, str]:
        """Return {name: id} for the names that exist; unknown names are absent."""
        wanted = set(names)
        if not wanted:
            return {}
        result = await self.db.execute(
            select(Permission.name, Permission.id).where(Permission.name.in_(wanted))
        )
        return {name: pid for name, pid in result.all()}

    async def ensure(
        self,
        resource: str,
        action: str,
        description: str | None,
        *,
        refresh_description: bool = False,
    ) -> tuple[str, bool]:
        """Upsert a permission keyed by name. Return (id, inserted).

        An existing row is left untouched unless refresh_description is set,
        in which case only its description is overwritten.
        """
        name = permission_name(resource, action)
        stmt = insert(Permission).values(
            id=generate_cuid(),
            name=name,
            resource=resource,
            action=action,
            description=description,
        )
        if refresh_description:
            stmt = stmt.on_conflict_do_update(
                index_elements=["name"],
                set_={"description": stmt.excluded.description},
            )
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=["name"])
        # xmax = 0 only for rows inserted by this statement
        stmt = stmt.returning(Permission.id, literal_column("(xmax = 0)").label("inserted"))
        row = (await self.db.execute(stmt)).first()
        if row is not None:
            return (row.id, bool(row.inserted))
        existing = await self.db.execute(select(Permission.id).where(Permission.name == name))
        return (existing.scalar_one(), False)
