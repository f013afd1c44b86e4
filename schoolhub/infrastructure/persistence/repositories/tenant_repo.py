"""Tenant repository (read-only; tenants are provisioned outside the API)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.infrastructure.persistence.models.tenant import Tenant
from schoolhub.infrastructure.persistence.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Tenant)

    async def get_by_domain(self, domain: str) -> Tenant | None:
        result = await self.db.execute(
            select(Tenant).where(Tenant.domain == domain.strip().lower())
        )
        return result.scalar_one_or_none()
