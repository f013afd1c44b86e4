"""Role repository. Read methods return RoleResult (DTO); entity getters return ORM for writes."""

from __future__ import annotations

from sqlalchemy import literal_column, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from schoolhub.application.dtos.role import PermissionResult, RoleMember, RoleResult
from schoolhub.infrastructure.persistence.models.permission import UserRole
from schoolhub.infrastructure.persistence.models.role import Role
from schoolhub.infrastructure.persistence.repositories.base import BaseRepository
from schoolhub.shared.utils.generators import generate_cuid


def _role_to_result(r: Role, *, with_relations: bool = True) -> RoleResult:
    """Map ORM Role to RoleResult. Relations must be eagerly loaded when with_relations."""
    if not with_relations:
        return RoleResult(
            id=r.id,
            tenant_id=r.tenant_id,
            name=r.name,
            description=r.description,
            is_system=r.is_system,
            created_at=r.created_at,
        )
    return RoleResult(
        id=r.id,
        tenant_id=r.tenant_id,
        name=r.name,
        description=r.description,
        is_system=r.is_system,
        created_at=r.created_at,
        permissions=tuple(
            PermissionResult(
                id=p.id,
                name=p.name,
                resource=p.resource,
                action=p.action,
                description=p.description,
            )
            for p in r.permissions
        ),
        users=tuple(
            RoleMember(
                id=ur.user.id,
                first_name=ur.user.first_name,
                last_name=ur.user.last_name,
                email=ur.user.email,
            )
            for ur in r.user_roles
        ),
    )


class RoleRepository(BaseRepository[Role]):
    """Role repository. Every query is filtered by tenant_id."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    def _detail_query(self, tenant_id: str):
        return (
            select(Role)
            .where(Role.tenant_id == tenant_id)
            .options(
                selectinload(Role.permissions),
                selectinload(Role.user_roles).selectinload(UserRole.user),
            )
            .execution_options(populate_existing=True)
        )

    async def list_by_tenant(self, tenant_id: str) -> list[RoleResult]:
        """All roles of the tenant ordered by name, with permissions and members."""
        result = await self.db.execute(self._detail_query(tenant_id).order_by(Role.name))
        return [_role_to_result(r) for r in result.scalars().all()]

    async def get_by_id_and_tenant(self, role_id: str, tenant_id: str) -> RoleResult | None:
        result = await self.db.execute(self._detail_query(tenant_id).where(Role.id == role_id))
        role = result.scalar_one_or_none()
        return _role_to_result(role) if role else None

    async def get_by_name_and_tenant(self, name: str, tenant_id: str) -> RoleResult | None:
        result = await self.db.execute(
            select(Role).where(Role.tenant_id == tenant_id, Role.name == name)
        )
        role = result.scalar_one_or_none()
        return _role_to_result(role, with_relations=False) if role else None

    async def get_entity_for_update(self, role_id: str, tenant_id: str) -> Role | None:
        """Return the ORM role with its row locked (SELECT ... FOR UPDATE) until commit."""
        result = await self.db.execute(
            select(Role)
            .where(Role.id == role_id, Role.tenant_id == tenant_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def create_role(
        self,
        tenant_id: str,
        name: str,
        description: str | None = None,
        *,
        is_system: bool = False,
    ) -> RoleResult:
        role = Role(
            tenant_id=tenant_id,
            name=name,
            description=description,
            is_system=is_system,
        )
        created = await self.create(role)
        return _role_to_result(created, with_relations=False)

    async def ensure(
        self,
        tenant_id: str,
        name: str,
        description: str | None,
        *,
        is_system: bool = False,
    ) -> tuple[str, bool, bool]:
        """Upsert a role keyed by (tenant_id, name). Return (id, inserted, stored is_system).

        Existing rows are untouched; their stored is_system is reported as found.
        """
        stmt = (
            insert(Role)
            .values(
                id=generate_cuid(),
                tenant_id=tenant_id,
                name=name,
                description=description,
                is_system=is_system,
            )
            .on_conflict_do_nothing(index_elements=["tenant_id", "name"])
            .returning(Role.id, Role.is_system, literal_column("(xmax = 0)").label("inserted"))
        )
        row = (await self.db.execute(stmt)).first()
        if row is not None:
            return (row.id, bool(row.inserted), row.is_system)
        existing = (
            await self.db.execute(
                select(Role.id, Role.is_system).where(
                    Role.tenant_id == tenant_id, Role.name == name
                )
            )
        ).one()
        return (existing.id, False, existing.is_system)
