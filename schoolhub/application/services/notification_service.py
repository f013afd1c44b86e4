"""Notification service: domain-event side effects and recipient inbox operations.

Event notifications (leave lifecycle, attendance alerts) are best effort.
Each row is inserted in its own SAVEPOINT; a failure is logged and swallowed
so the business transaction that triggered it still commits.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from schoolhub.application.dtos.leave import LeaveRequestResult
from schoolhub.application.dtos.notification import (
    NotificationCreate,
    NotificationResult,
    NotificationStats,
)
from schoolhub.application.dtos.school import StudentResult
from schoolhub.domain.exceptions import ResourceNotFoundException, ValidationException
from schoolhub.shared.enums import AttendanceStatus, NotificationPriority, NotificationType

logger = logging.getLogger(__name__)

# (title, message) per leave event; {name} is the student's full name
LEAVE_TEMPLATES: dict[NotificationType, tuple[str, str]] = {
    NotificationType.LEAVE_REQUEST: (
        "New Leave Request",
        "{name} has submitted a leave request",
    ),
    NotificationType.LEAVE_APPROVED: (
        "Leave Request Approved",
        "Leave request for {name} has been approved",
    ),
    NotificationType.LEAVE_REJECTED: (
        "Leave Request Rejected",
        "Leave request for {name} has been rejected",
    ),
}


def leave_priority(leave_request: LeaveRequestResult) -> NotificationPriority:
    """HIGH for emergency leave, else NORMAL."""
    return NotificationPriority.HIGH if leave_request.is_emergency else NotificationPriority.NORMAL


def attendance_priority(status: str) -> NotificationPriority:
    """HIGH only for absences."""
    if status == AttendanceStatus.ABSENT.value:
        return NotificationPriority.HIGH
    return NotificationPriority.NORMAL


class NotificationService:
    def __init__(self, notification_repo: Any, user_repo: Any = None) -> None:
        self._notification_repo = notification_repo
        self._user_repo = user_repo

    async def _create_quietly(self, payload: NotificationCreate) -> NotificationResult | None:
        try:
            return await self._notification_repo.create(payload)
        except Exception:
            logger.warning(
                "Failed to create %s notification for user %s",
                payload.type,
                payload.user_id,
                exc_info=True,
            )
            return None

    async def notify_leave_event(
        self, leave_request: LeaveRequestResult, event_type: NotificationType
    ) -> NotificationResult | None:
        """Notify the requester of a leave event. Returns None if the insert failed."""
        if event_type not in LEAVE_TEMPLATES:
            raise ValueError(f"Not a leave event: {event_type}")
        title, message = LEAVE_TEMPLATES[event_type]
        return await self._create_quietly(
            NotificationCreate(
                tenant_id=leave_request.tenant_id,
                user_id=leave_request.requested_by,
                type=event_type.value,
                title=title,
                message=message.format(name=leave_request.student_name),
                priority=leave_priority(leave_request).value,
                data={
                    "leaveRequestId": leave_request.id,
                    "studentId": leave_request.student_id,
                },
            )
        )

    async def notify_attendance_alert(
        self, student: StudentResult, attendance_date: date, status: str
    ) -> list[NotificationResult]:
        """Notify every linked parent that has a login. Each insert stands alone."""
        name = student.full_name
        priority = attendance_priority(status).value
        delivered: list[NotificationResult] = []
        for parent in student.parents:
            if not parent.user_id:
                continue
            created = await self._create_quietly(
                NotificationCreate(
                    tenant_id=student.tenant_id,
                    user_id=parent.user_id,
                    type=NotificationType.ATTENDANCE_ALERT.value,
                    title=f"Attendance Alert - {name}",
                    message=(
                        f"Your child {name} was marked as {status.lower()} "
                        f"on {attendance_date.isoformat()}"
                    ),
                    priority=priority,
                    data={
                        "studentId": student.id,
                        "attendanceDate": attendance_date.isoformat(),
                        "status": status,
                        "studentName": name,
                    },
                )
            )
            if created is not None:
                delivered.append(created)
        logger.info(
            "Attendance alert for student %s delivered to %d parent(s)", student.id, len(delivered)
        )
        return delivered

    async def create(
        self,
        tenant_id: str,
        user_id: str,
        type: str,
        title: str,
        message: str,
        priority: str = NotificationPriority.NORMAL.value,
        data: dict[str, Any] | None = None,
    ) -> NotificationResult:
        """Create a notification on an administrator's behalf. Errors propagate."""
        if not await self._user_repo.exists_in_tenant(user_id, tenant_id):
            raise ValidationException("User not found in this tenant", field="userId")
        return await self._notification_repo.create(
            NotificationCreate(
                tenant_id=tenant_id,
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                priority=priority,
                data=data,
            )
        )

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
    ) -> tuple[list[NotificationResult], int, int]:
        """Return (page, total, unread_count) for the recipient."""
        items, total = await self._notification_repo.list_for_user(
            tenant_id,
            user_id,
            is_read=is_read,
            type=type,
            priority=priority,
            skip=skip,
            limit=limit,
        )
        unread = await self._notification_repo.count_unread(tenant_id, user_id)
        return items, total, unread

    async def mark_read(
        self, tenant_id: str, user_id: str, notification_id: str
    ) -> NotificationResult:
        updated = await self._notification_repo.mark_read(notification_id, tenant_id, user_id)
        if updated is None:
            raise ResourceNotFoundException("notification", notification_id)
        return updated

    async def mark_all_read(self, tenant_id: str, user_id: str) -> int:
        return await self._notification_repo.mark_all_read(tenant_id, user_id)

    async def delete(self, tenant_id: str, user_id: str, notification_id: str) -> None:
        if not await self._notification_repo.delete(notification_id, tenant_id, user_id):
            raise ResourceNotFoundException("notification", notification_id)

    async def stats(self, tenant_id: str, user_id: str) -> NotificationStats:
        return await self._notification_repo.stats(tenant_id, user_id)
