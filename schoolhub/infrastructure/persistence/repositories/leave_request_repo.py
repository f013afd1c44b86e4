"""Leave request repository. Reads return LeaveRequestResult; get_entity_* returns ORM for writes."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.application.dtos.leave import (
    LeaveRequestCreate,
    LeaveRequestFilter,
    LeaveRequestResult,
    LeaveStats,
)
from schoolhub.infrastructure.persistence.models.leave_request import LeaveRequest
from schoolhub.infrastructure.persistence.repositories.base import BaseRepository
from schoolhub.shared.enums import LeaveStatus


def leave_to_result(r: LeaveRequest) -> LeaveRequestResult:
    """Map ORM LeaveRequest (student eagerly loaded) to its DTO."""
    return LeaveRequestResult(
        id=r.id,
        tenant_id=r.tenant_id,
        student_id=r.student_id,
        student_name=r.student.full_name if r.student is not None else "",
        requested_by=r.requested_by,
        leave_type=r.leave_type,
        start_date=r.start_date,
        end_date=r.end_date,
        reason=r.reason,
        description=r.description,
        supporting_docs=r.supporting_docs,
        is_emergency=r.is_emergency,
        status=r.status,
        approved_by=r.approved_by,
        approved_at=r.approved_at,
        rejected_reason=r.rejected_reason,
        created_at=r.created_at,
    )


def _conditions(filters: LeaveRequestFilter) -> list[Any]:
    conditions: list[Any] = [LeaveRequest.tenant_id == filters.tenant_id]
    if filters.status:
        conditions.append(LeaveRequest.status == filters.status)
    if filters.student_id:
        conditions.append(LeaveRequest.student_id == filters.student_id)
    if filters.leave_type:
        conditions.append(LeaveRequest.leave_type == filters.leave_type)
    # Overlap with [start_date, end_date]
    if filters.start_date is not None:
        conditions.append(LeaveRequest.end_date >= filters.start_date)
    if filters.end_date is not None:
        conditions.append(LeaveRequest.start_date <= filters.end_date)
    return conditions


class LeaveRequestRepository(BaseRepository[LeaveRequest]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, LeaveRequest)

    async def create_request(
        self, tenant_id: str, requested_by: str, payload: LeaveRequestCreate
    ) -> LeaveRequestResult:
        row = LeaveRequest(
            tenant_id=tenant_id,
            requested_by=requested_by,
            student_id=payload.student_id,
            leave_type=payload.leave_type,
            start_date=payload.start_date,
            end_date=payload.end_date,
            reason=payload.reason,
            description=payload.description,
            supporting_docs=payload.supporting_docs,
            is_emergency=payload.is_emergency,
            status=LeaveStatus.PENDING.value,
        )
        await self.create(row)
        # Re-select so the student relationship is loaded for the DTO
        entity = await self.get_entity_by_id_and_tenant(row.id, tenant_id)
        return leave_to_result(entity or row)

    async def get_entity_by_id_and_tenant(
        self, leave_id: str, tenant_id: str, *, for_update: bool = False
    ) -> LeaveRequest | None:
        stmt = (
            select(LeaveRequest)
            .where(LeaveRequest.id == leave_id, LeaveRequest.tenant_id == tenant_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update(of=LeaveRequest)
        result = await self.db.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def get_by_id_and_tenant(self, leave_id: str, tenant_id: str) -> LeaveRequestResult | None:
        entity = await self.get_entity_by_id_and_tenant(leave_id, tenant_id)
        return leave_to_result(entity) if entity else None

    async def save(self, entity: LeaveRequest) -> LeaveRequestResult:
        """Flush changes made to an attached entity and return its DTO."""
        await self.db.flush()
        await self.db.refresh(entity)
        return leave_to_result(entity)

    async def list(
        self, filters: LeaveRequestFilter, *, skip: int = 0, limit: int = 10
    ) -> tuple[list[LeaveRequestResult], int]:
        conditions = _conditions(filters)
        total = (
            await self.db.execute(
                select(func.count()).select_from(LeaveRequest).where(*conditions)
            )
        ).scalar_one()
        result = await self.db.execute(
            select(LeaveRequest)
            .where(*conditions)
            .order_by(LeaveRequest.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return ([leave_to_result(r) for r in result.unique().scalars().all()], int(total))

    async def stats(self, tenant_id: str) -> LeaveStats:
        by_status_rows = await self.db.execute(
            select(LeaveRequest.status, func.count())
            .where(LeaveRequest.tenant_id == tenant_id)
            .group_by(LeaveRequest.status)
        )
        by_status = {s: int(n) for s, n in by_status_rows.all()}
        emergency = (
            await self.db.execute(
                select(func.count())
                .select_from(LeaveRequest)
                .where(LeaveRequest.tenant_id == tenant_id, LeaveRequest.is_emergency.is_(True))
            )
        ).scalar_one()
        by_type_rows = await self.db.execute(
            select(LeaveRequest.leave_type, func.count())
            .where(LeaveRequest.tenant_id == tenant_id)
            .group_by(LeaveRequest.leave_type)
        )
        return LeaveStats(
            total=sum(by_status.values()),
            pending=by_status.get(LeaveStatus.PENDING.value, 0),
            approved=by_status.get(LeaveStatus.APPROVED.value, 0),
            rejected=by_status.get(LeaveStatus.REJECTED.value, 0),
            emergency=int(emergency),
            by_type={t: int(n) for t, n in by_type_rows.all()},
        )
