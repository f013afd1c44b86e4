"""Leave request service: submission, review and the notifications they trigger."""

from __future__ import annotations

import logging
from typing import Any

from schoolhub.application.dtos.leave import (
    LeaveRequestCreate,
    LeaveRequestFilter,
    LeaveRequestResult,
    LeaveStats,
)
from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.application.services.notification_service import NotificationService
from schoolhub.domain.exceptions import (
    AuthorizationException,
    InvalidStateTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from schoolhub.shared.enums import LeaveStatus, NotificationType
from schoolhub.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

REVIEW_STATUSES = frozenset(
    {LeaveStatus.APPROVED.value, LeaveStatus.REJECTED.value, LeaveStatus.CANCELLED.value}
)

_STATUS_EVENTS: dict[str, NotificationType] = {
    LeaveStatus.APPROVED.value: NotificationType.LEAVE_APPROVED,
    LeaveStatus.REJECTED.value: NotificationType.LEAVE_REJECTED,
}


class LeaveService:
    def __init__(
        self,
        leave_repo: Any,
        student_repo: Any,
        notifications: NotificationService,
    ) -> None:
        self._leave_repo = leave_repo
        self._student_repo = student_repo
        self._notifications = notifications

    async def list_requests(
        self, filters: LeaveRequestFilter, *, skip: int = 0, limit: int = 10
    ) -> tuple[list[LeaveRequestResult], int]:
        return await self._leave_repo.list(filters, skip=skip, limit=limit)

    async def get_request(self, tenant_id: str, leave_id: str) -> LeaveRequestResult:
        found = await self._leave_repo.get_by_id_and_tenant(leave_id, tenant_id)
        if found is None:
            raise ResourceNotFoundException("leave_request", leave_id)
        return found

    async def submit(
        self, actor: AuthenticatedUser, payload: LeaveRequestCreate
    ) -> LeaveRequestResult:
        """Create a PENDING request and notify the requester (LEAVE_REQUEST)."""
        if payload.start_date > payload.end_date:
            raise ValidationException("Start date cannot be after end date", field="startDate")
        student = await self._student_repo.get_with_parents(payload.student_id, actor.tenant_id)
        if student is None:
            raise ResourceNotFoundException("student", payload.student_id)
        created = await self._leave_repo.create_request(actor.tenant_id, actor.id, payload)
        logger.info("Leave request %s submitted by %s", created.id, actor.id)
        await self._notifications.notify_leave_event(created, NotificationType.LEAVE_REQUEST)
        return created

    async def review(
        self,
        actor: AuthenticatedUser,
        leave_id: str,
        status: str,
        rejected_reason: str | None = None,
    ) -> LeaveRequestResult:
        """Move a PENDING request to APPROVED, REJECTED or CANCELLED.

        Approval and rejection notify the original requester; the transition
        commits even if that notification cannot be stored.
        """
        if status not in REVIEW_STATUSES:
            raise ValidationException(
                f"Status must be one of: {', '.join(sorted(REVIEW_STATUSES))}", field="status"
            )
        entity = await self._leave_repo.get_entity_by_id_and_tenant(
            leave_id, actor.tenant_id, for_update=True
        )
        if entity is None:
            raise ResourceNotFoundException("leave_request", leave_id)
        if entity.status != LeaveStatus.PENDING.value:
            raise InvalidStateTransitionException(
                "Only pending requests can be updated", entity.status
            )
        entity.status = status
        if status == LeaveStatus.APPROVED.value:
            entity.approved_by = actor.id
            entity.approved_at = utc_now()
        elif status == LeaveStatus.REJECTED.value:
            entity.rejected_reason = rejected_reason
        updated = await self._leave_repo.save(entity)
        logger.info("Leave request %s -> %s by %s", leave_id, status, actor.id)
        event = _STATUS_EVENTS.get(status)
        if event is not None:
            await self._notifications.notify_leave_event(updated, event)
        return updated

    async def delete(self, actor: AuthenticatedUser, leave_id: str) -> None:
        """Delete a request that is still pending, or one the caller filed."""
        entity = await self._leave_repo.get_entity_by_id_and_tenant(leave_id, actor.tenant_id)
        if entity is None:
            raise ResourceNotFoundException("leave_request", leave_id)
        if entity.status != LeaveStatus.PENDING.value and entity.requested_by != actor.id:
            raise AuthorizationException(
                message="Only pending requests or your own requests can be deleted"
            )
        await self._leave_repo.delete(entity)

    async def stats(self, tenant_id: str) -> LeaveStats:
        return await self._leave_repo.stats(tenant_id)
