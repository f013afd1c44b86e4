"""Audit log repository. Append-only: create, list, get and statistics. No update/delete."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogFilter,
    AuditLogResult,
    AuditLogStats,
    CountByKey,
)
from schoolhub.infrastructure.persistence.models.audit_log import AuditLog
from schoolhub.shared.enums import AuditStatus
from schoolhub.shared.utils.generators import generate_cuid

TOP_N = 10


def _orm_to_result(row: AuditLog) -> AuditLogResult:
    """Map ORM to application DTO."""
    return AuditLogResult(
        id=row.id,
        tenant_id=row.tenant_id,
        user_id=row.user_id,
        user_email=row.user_email,
        user_name=row.user_name,
        user_roles=list(row.user_roles or []),
        action=row.action,
        resource=row.resource,
        resource_id=row.resource_id,
        details=row.details,
        ip_address=row.ip_address,
        user_agent=row.user_agent,
        request_id=row.request_id,
        timestamp=row.timestamp,
        status=row.status,
        error_message=row.error_message,
    )


def _conditions(filters: AuditLogFilter) -> list[Any]:
    conditions: list[Any] = [AuditLog.tenant_id == filters.tenant_id]
    if filters.user_id:
        conditions.append(AuditLog.user_id == filters.user_id)
    if filters.action:
        conditions.append(AuditLog.action.ilike(f"%{filters.action}%"))
    if filters.resource:
        conditions.append(AuditLog.resource.ilike(f"%{filters.resource}%"))
    if filters.status:
        conditions.append(AuditLog.status == filters.status)
    if filters.start is not None:
        conditions.append(AuditLog.timestamp >= filters.start)
    if filters.end is not None:
        conditions.append(AuditLog.timestamp <= filters.end)
    return conditions


class AuditLogRepository:
    """Append-only audit log repository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one audit log entry; return created record."""
        row = AuditLog(
            id=generate_cuid(),
            tenant_id=entry.tenant_id,
            user_id=entry.user_id,
            user_email=entry.user_email,
            user_name=entry.user_name,
            user_roles=list(entry.user_roles),
            action=entry.action,
            resource=entry.resource,
            resource_id=entry.resource_id,
            details=entry.details,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
            request_id=entry.request_id,
            status=entry.status,
            error_message=entry.error_message,
        )
        if entry.timestamp is not None:
            row.timestamp = entry.timestamp
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return _orm_to_result(row)

    async def list(
        self, filters: AuditLogFilter, *, skip: int = 0, limit: int = 50
    ) -> tuple[list[AuditLogResult], int]:
        """Return (page of entries newest first, total matching)."""
        conditions = _conditions(filters)
        total = (
            await self.db.execute(
                select(func.count()).select_from(AuditLog).where(*conditions)
            )
        ).scalar_one()
        result = await self.db.execute(
            select(AuditLog)
            .where(*conditions)
            .order_by(AuditLog.timestamp.desc())
            .offset(skip)
            .limit(limit)
        )
        return ([_orm_to_result(r) for r in result.scalars().all()], int(total))

    async def get_by_id_and_tenant(self, log_id: str, tenant_id: str) -> AuditLogResult | None:
        result = await self.db.execute(
            select(AuditLog).where(AuditLog.id == log_id, AuditLog.tenant_id == tenant_id)
        )
        row = result.scalar_one_or_none()
        return _orm_to_result(row) if row else None

    async def _top(self, column: Any, tenant_id: str) -> list[CountByKey]:
        count = func.count().label("count")
        result = await self.db.execute(
            select(column, count)
            .where(AuditLog.tenant_id == tenant_id)
            .group_by(column)
            .order_by(count.desc(), column)
            .limit(TOP_N)
        )
        return [CountByKey(key=key, count=int(n)) for key, n in result.all()]

    async def stats(self, tenant_id: str) -> AuditLogStats:
        """Totals per status plus the ten most frequent actions and resources."""
        result = await self.db.execute(
            select(AuditLog.status, func.count())
            .where(AuditLog.tenant_id == tenant_id)
            .group_by(AuditLog.status)
        )
        by_status = {status: int(n) for status, n in result.all()}
        return AuditLogStats(
            total_logs=sum(by_status.values()),
            success_logs=by_status.get(AuditStatus.SUCCESS.value, 0),
            failure_logs=by_status.get(AuditStatus.FAILURE.value, 0),
            pending_logs=by_status.get(AuditStatus.PENDING.value, 0),
            top_actions=await self._top(AuditLog.action, tenant_id),
            top_resources=await self._top(AuditLog.resource, tenant_id),
        )
