"""Notifications API: the caller's inbox, admin-created notifications and attendance alerts."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from schoolhub.api.v1.dependencies import (
    CurrentUser,
    authorize,
    get_notification_service,
    get_notification_service_for_write,
    get_student_repo,
)
from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.application.services.notification_service import NotificationService
from schoolhub.core.limiter import limit_writes
from schoolhub.domain.exceptions import ResourceNotFoundException
from schoolhub.infrastructure.persistence.repositories import StudentRepository
from schoolhub.schemas.common import MessageResponse, Pagination, page_to_skip
from schoolhub.schemas.notification import (
    AttendanceAlertRequest,
    AttendanceAlertResponse,
    MarkAllReadResponse,
    NotificationCreateRequest,
    NotificationListResponse,
    NotificationResponse,
    NotificationStatsResponse,
)
from schoolhub.shared.enums import NotificationPriority, NotificationType

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    current_user: CurrentUser,
    service: Annotated[NotificationService, Depends(get_notification_service)],
    is_read: Annotated[bool | None, Query(alias="isRead")] = None,
    type: NotificationType | None = None,
    priority: NotificationPriority | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
):
    """The caller's notifications, newest first, with the unread count."""
    items, total, unread = await service.list_for_user(
        current_user.tenant_id,
        current_user.id,
        is_read=is_read,
        type=type.value if type else None,
        priority=priority.value if priority else None,
        skip=page_to_skip(page, limit),
        limit=limit,
    )
    return NotificationListResponse(
        items=[NotificationResponse.model_validate(n) for n in items],
        pagination=Pagination.build(page, limit, total),
        unread_count=unread,
    )


@router.get("/stats", response_model=NotificationStatsResponse)
async def notification_stats(
    current_user: CurrentUser,
    service: Annotated[NotificationService, Depends(get_notification_service)],
):
    stats = await service.stats(current_user.tenant_id, current_user.id)
    return NotificationStatsResponse.model_validate(stats)


@router.put("/read-all", response_model=MarkAllReadResponse)
@limit_writes
async def mark_all_read(
    request: Request,
    current_user: CurrentUser,
    service: Annotated[NotificationService, Depends(get_notification_service_for_write)],
):
    updated = await service.mark_all_read(current_user.tenant_id, current_user.id)
    return MarkAllReadResponse(message="All notifications marked as read", updated=updated)


@router.put("/{notification_id}/read", response_model=NotificationResponse)
@limit_writes
async def mark_read(
    request: Request,
    notification_id: str,
    current_user: CurrentUser,
    service: Annotated[NotificationService, Depends(get_notification_service_for_write)],
):
    updated = await service.mark_read(current_user.tenant_id, current_user.id, notification_id)
    return NotificationResponse.model_validate(updated)


@router.delete("/{notification_id}", response_model=MessageResponse)
@limit_writes
async def delete_notification(
    request: Request,
    notification_id: str,
    current_user: CurrentUser,
    service: Annotated[NotificationService, Depends(get_notification_service_for_write)],
):
    await service.delete(current_user.tenant_id, current_user.id, notification_id)
    return MessageResponse(message="Notification deleted successfully")


@router.post("", response_model=NotificationResponse, status_code=201)
@limit_writes
async def create_notification(
    request: Request,
    body: NotificationCreateRequest,
    current_user: Annotated[
        AuthenticatedUser,
        Depends(authorize(["parents:create", "parents:update", "notifications:manage"])),
    ],
    service: Annotated[NotificationService, Depends(get_notification_service_for_write)],
):
    """Send a notification to a user of the caller's tenant."""
    created = await service.create(
        current_user.tenant_id,
        body.user_id,
        type=body.type.value,
        title=body.title,
        message=body.message,
        priority=body.priority.value,
        data=body.data,
    )
    return NotificationResponse.model_validate(created)


@router.post("/attendance-alert", response_model=AttendanceAlertResponse, status_code=201)
@limit_writes
async def send_attendance_alert(
    request: Request,
    body: AttendanceAlertRequest,
    current_user: Annotated[AuthenticatedUser, Depends(authorize("attendance:manage"))],
    student_repo: Annotated[StudentRepository, Depends(get_student_repo)],
    service: Annotated[NotificationService, Depends(get_notification_service_for_write)],
):
    """Alert every parent of the student who has an account. HIGH priority for absences."""
    student = await student_repo.get_with_parents(body.student_id, current_user.tenant_id)
    if student is None:
        raise ResourceNotFoundException("student", body.student_id)
    delivered = await service.notify_attendance_alert(
        student, body.attendance_date, body.status.value
    )
    return AttendanceAlertResponse(
        student_id=student.id,
        notified=len(delivered),
        notifications=[NotificationResponse.model_validate(n) for n in delivered],
    )
