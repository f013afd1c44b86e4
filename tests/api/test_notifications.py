"""Notification endpoints (services and student lookup mocked)."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock

from httpx import AsyncClient

from schoolhub.api.v1.dependencies import (
    get_notification_service,
    get_notification_service_for_write,
    get_student_repo,
)
from schoolhub.application.dtos.notification import NotificationResult
from schoolhub.application.dtos.school import ParentContact, StudentResult
from tests.factories import TENANT_A, make_user


def _notification(**overrides) -> NotificationResult:
    values = dict(
        id="n-1",
        tenant_id=TENANT_A,
        user_id="user-1",
        type="ATTENDANCE_ALERT",
        title="Attendance alert",
        message="Amani Kato was marked ABSENT on 2026-05-04",
        data={"studentId": "student-1"},
        priority="HIGH",
        is_read=False,
        read_at=None,
        created_at=datetime(2026, 5, 4, 9, 0, tzinfo=UTC),
    )
    values.update(overrides)
    return NotificationResult(**values)


async def test_inbox_lists_own_notifications(client: AsyncClient, login_as, override) -> None:
    service = AsyncMock()
    service.list_for_user.return_value = ([_notification()], 1, 1)
    override(get_notification_service, service)

    response = await client.get("/api/v1/notifications?isRead=false", headers=login_as(make_user()))

    assert response.status_code == 200
    data = response.json()
    assert data["unreadCount"] == 1
    assert data["items"][0]["isRead"] is False
    args, kwargs = service.list_for_user.await_args
    assert args == (TENANT_A, "user-1")
    assert kwargs["is_read"] is False


async def test_mark_all_read(client: AsyncClient, login_as, override) -> None:
    service = AsyncMock()
    service.mark_all_read.return_value = 4
    override(get_notification_service_for_write, service)

    response = await client.put("/api/v1/notifications/read-all", headers=login_as(make_user()))

    assert response.status_code == 200
    assert response.json()["updated"] == 4


async def test_create_accepts_any_listed_permission(client: AsyncClient, login_as, override) -> None:
    service = AsyncMock()
    service.create.return_value = _notification(type="GENERAL", priority="NORMAL", user_id="parent-1")
    override(get_notification_service_for_write, service)
    body = {"userId": "parent-1", "title": "Trip", "message": "Permission slips due Friday"}

    for permission in ("parents:create", "parents:update", "notifications:manage"):
        user = make_user(permission, user_id=f"admin-{permission}")
        response = await client.post("/api/v1/notifications", headers=login_as(user), json=body)
        assert response.status_code == 201, permission

    response = await client.post(
        "/api/v1/notifications", headers=login_as(make_user("parents:read")), json=body
    )
    assert response.status_code == 403


async def test_attendance_alert_unknown_student_returns_404(
    client: AsyncClient, login_as, override
) -> None:
    students = AsyncMock()
    students.get_with_parents.return_value = None
    service = AsyncMock()
    override(get_student_repo, students)
    override(get_notification_service_for_write, service)

    response = await client.post(
        "/api/v1/notifications/attendance-alert",
        headers=login_as(make_user("attendance:manage")),
        json={"studentId": "ghost", "attendanceDate": "2026-05-04", "status": "ABSENT"},
    )

    assert response.status_code == 404
    service.notify_attendance_alert.assert_not_awaited()


async def test_attendance_alert_reports_delivered_count(
    client: AsyncClient, login_as, override
) -> None:
    student = StudentResult(
        id="student-1",
        tenant_id=TENANT_A,
        first_name="Amani",
        last_name="Kato",
        parents=(
            ParentContact("par-1", "Grace", "Kato", "parent-1"),
            ParentContact("par-2", "John", "Kato", None),
        ),
    )
    students = AsyncMock()
    students.get_with_parents.return_value = student
    service = AsyncMock()
    service.notify_attendance_alert.return_value = [_notification(user_id="parent-1")]
    override(get_student_repo, students)
    override(get_notification_service_for_write, service)

    response = await client.post(
        "/api/v1/notifications/attendance-alert",
        headers=login_as(make_user("attendance:manage")),
        json={"studentId": "student-1", "attendanceDate": "2026-05-04", "status": "ABSENT"},
    )

    assert response.status_code == 201
    assert response.json()["notified"] == 1
    service.notify_attendance_alert.assert_awaited_once_with(student, date(2026, 5, 4), "ABSENT")
