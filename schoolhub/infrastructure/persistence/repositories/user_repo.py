"""User repository. Read methods return UserResult; get_entity_* returns ORM for auth."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.application.dtos.user import UserResult
from schoolhub.infrastructure.persistence.models.user import User
from schoolhub.infrastructure.persistence.repositories.base import BaseRepository


def _user_to_result(u: User) -> UserResult:
    return UserResult(
        id=u.id,
        tenant_id=u.tenant_id,
        email=u.email,
        first_name=u.first_name,
        last_name=u.last_name,
        status=u.status,
    )


class UserRepository(BaseRepository[User]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_id_and_tenant(self, user_id: str, tenant_id: str) -> UserResult | None:
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.tenant_id == tenant_id)
        )
        user = result.scalar_one_or_none()
        return _user_to_result(user) if user else None

    async def get_entity_by_email_and_tenant(self, email: str, tenant_id: str) -> User | None:
        """Return the ORM user (with password hash) for login. Email match is case-insensitive."""
        result = await self.db.execute(
            select(User).where(
                func.lower(User.email) == email.strip().lower(),
                User.tenant_id == tenant_id,
            )
        )
        return result.scalar_one_or_none()

    async def exists_in_tenant(self, user_id: str, tenant_id: str) -> bool:
        result = await self.db.execute(
            select(User.id).where(User.id == user_id, User.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none() is not None
