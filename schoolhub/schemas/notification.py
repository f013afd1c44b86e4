"""Notification API schemas."""

from datetime import date, datetime
from typing import Any

from pydantic import Field

from schoolhub.schemas.common import ApiModel, Pagination
from schoolhub.shared.enums import AttendanceStatus, NotificationPriority, NotificationType


class NotificationResponse(ApiModel):
    id: str
    tenant_id: str
    user_id: str
    type: str
    title: str
    message: str
    data: dict[str, Any] | None = None
    priority: str
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime | None = None


class NotificationListResponse(ApiModel):
    items: list[NotificationResponse]
    pagination: Pagination
    unread_count: int


class NotificationStatsResponse(ApiModel):
    total: int
    unread: int
    high_priority: int
    by_type: dict[str, int]


class NotificationCreateRequest(ApiModel):
    user_id: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.GENERAL
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=2000)
    priority: NotificationPriority = NotificationPriority.NORMAL
    data: dict[str, Any] | None = None


class AttendanceAlertRequest(ApiModel):
    student_id: str = Field(..., min_length=1)
    attendance_date: date
    status: AttendanceStatus


class AttendanceAlertResponse(ApiModel):
    student_id: str
    notified: int
    notifications: list[NotificationResponse]


class MarkAllReadResponse(ApiModel):
    success: bool = True
    message: str
    updated: int
