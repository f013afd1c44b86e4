"""Notification repository. Recipient-scoped reads; inserts run in a SAVEPOINT."""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.application.dtos.notification import (
    NotificationCreate,
    NotificationResult,
    NotificationStats,
)
from schoolhub.infrastructure.persistence.models.notification import Notification
from schoolhub.shared.enums import NotificationPriority
from schoolhub.shared.utils.datetime import utc_now


def _notification_to_result(n: Notification) -> NotificationResult:
    return NotificationResult(
        id=n.id,
        tenant_id=n.tenant_id,
        user_id=n.user_id,
        type=n.type,
        title=n.title,
        message=n.message,
        data=n.data,
        priority=n.priority,
        is_read=n.is_read,
        read_at=n.read_at,
        created_at=n.created_at,
    )


class NotificationRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, payload: NotificationCreate) -> NotificationResult:
        """Insert one notification inside its own SAVEPOINT.

        A failure rolls back only the savepoint, leaving the caller's
        transaction usable; the exception still propagates.
        """
        row = Notification(
            tenant_id=payload.tenant_id,
            user_id=payload.user_id,
            type=payload.type,
            title=payload.title,
            message=payload.message,
            data=payload.data,
            priority=payload.priority,
            is_read=False,
        )
        async with self.db.begin_nested():
            self.db.add(row)
            await self.db.flush()
        await self.db.refresh(row)
        return _notification_to_result(row)

    def _recipient(self, tenant_id: str, user_id: str) -> list[Any]:
        return [Notification.tenant_id == tenant_id, Notification.user_id == user_id]

    async def list_for_user(
        self,
        tenant_id: str,
        user_id: str,
        *,
        is_read: bool | None = None,
        type: str | None = None,
        priority: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[NotificationResult], int]:
        conditions = self._recipient(tenant_id, user_id)
        if is_read is not None:
            conditions.append(Notification.is_read.is_(is_read))
        if type:
            conditions.append(Notification.type == type)
        if priority:
            conditions.append(Notification.priority == priority)
        total = (
            await self.db.execute(
                select(func.count()).select_from(Notification).where(*conditions)
            )
        ).scalar_one()
        result = await self.db.execute(
            select(Notification)
            .where(*conditions)
            .order_by(Notification.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return ([_notification_to_result(n) for n in result.scalars().all()], int(total))

    async def count_unread(self, tenant_id: str, user_id: str) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Notification)
            .where(*self._recipient(tenant_id, user_id), Notification.is_read.is_(False))
        )
        return int(result.scalar_one())

    async def mark_read(
        self, notification_id: str, tenant_id: str, user_id: str
    ) -> NotificationResult | None:
        result = await self.db.execute(
            select(Notification).where(
                Notification.id == notification_id, *self._recipient(tenant_id, user_id)
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        if not row.is_read:
            row.is_read = True
            row.read_at = utc_now()
            await self.db.flush()
        return _notification_to_result(row)

    async def mark_all_read(self, tenant_id: str, user_id: str) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(*self._recipient(tenant_id, user_id), Notification.is_read.is_(False))
            .values(is_read=True, read_at=utc_now())
        )
        return result.rowcount or 0

    async def delete(self, notification_id: str, tenant_id: str, user_id: str) -> bool:
        result = await self.db.execute(
            delete(Notification).where(
                Notification.id == notification_id, *self._recipient(tenant_id, user_id)
            )
        )
        return bool(result.rowcount)

    async def stats(self, tenant_id: str, user_id: str) -> NotificationStats:
        recipient = self._recipient(tenant_id, user_id)
        total = (
            await self.db.execute(
                select(func.count()).select_from(Notification).where(*recipient)
            )
        ).scalar_one()
        unread = await self.count_unread(tenant_id, user_id)
        high_priority = (
            await self.db.execute(
                select(func.count())
                .select_from(Notification)
                .where(
                    *recipient,
                    Notification.is_read.is_(False),
                    Notification.priority == NotificationPriority.HIGH.value,
                )
            )
        ).scalar_one()
        by_type = await self.db.execute(
            select(Notification.type, func.count())
            .where(*recipient)
            .group_by(Notification.type)
        )
        return NotificationStats(
            total=int(total),
            unread=unread,
            high_priority=int(high_priority),
            by_type={t: int(n) for t, n in by_type.all()},
        )
