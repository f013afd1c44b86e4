"""Leave lifecycle with its notifications against Postgres. Each test is rolled back."""

from datetime import date

import pytest

from schoolhub.application.dtos.leave import LeaveRequestCreate
from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.application.services.leave_service import LeaveService
from schoolhub.application.services.notification_service import NotificationService
from schoolhub.infrastructure.persistence.repositories import (
    LeaveRequestRepository,
    NotificationRepository,
    StudentRepository,
    UserRepository,
)
from tests.integration.helpers import add_student_with_parent, add_tenant, add_user

pytestmark = pytest.mark.requires_db


def _actor(user, tenant_id: str, *permissions: str) -> AuthenticatedUser:
    return AuthenticatedUser(
        id=user.id,
        tenant_id=tenant_id,
        email=user.email,
        name=user.full_name,
        roles=(),
        permissions=frozenset(permissions),
    )


def _services(db) -> tuple[LeaveService, NotificationService]:
    notifications = NotificationService(NotificationRepository(db), UserRepository(db))
    leave = LeaveService(
        leave_repo=LeaveRequestRepository(db),
        student_repo=StudentRepository(db),
        notifications=notifications,
    )
    return leave, notifications


async def test_emergency_leave_then_rejection_notifies_parent(db_session) -> None:
    tenant = await add_tenant(db_session, "greenfield.example.com")
    parent_user = await add_user(db_session, tenant.id, "grace@greenfield.example.com", "Grace")
    teacher_user = await add_user(db_session, tenant.id, "tom@greenfield.example.com", "Tom")
    student = await add_student_with_parent(db_session, tenant.id, parent_user.id)
    leave, notifications = _services(db_session)
    parent = _actor(parent_user, tenant.id, "leave:create")
    teacher = _actor(teacher_user, tenant.id, "leave:update")

    created = await leave.submit(
        parent,
        LeaveRequestCreate(
            student_id=student.id,
            leave_type="MEDICAL",
            start_date=date(2026, 6, 1),
            end_date=date(2026, 6, 3),
            reason="Hospital visit",
            is_emergency=True,
        ),
    )
    assert created.status == "PENDING"
    assert created.student_name == "Amani Kato"

    rejected = await leave.review(teacher, created.id, "REJECTED", "Exam week")
    assert rejected.status == "REJECTED"
    assert rejected.rejected_reason == "Exam week"

    items, total, unread = await notifications.list_for_user(tenant.id, parent_user.id)
    assert total == 2
    assert unread == 2
    assert sorted(n.type for n in items) == ["LEAVE_REJECTED", "LEAVE_REQUEST"]
    assert {n.priority for n in items} == {"HIGH"}

    stats = await leave.stats(tenant.id)
    assert stats.total == 1
    assert stats.rejected == 1
    assert stats.emergency == 1


async def test_attendance_alert_skips_parents_without_login(db_session) -> None:
    tenant = await add_tenant(db_session, "hillside.example.com")
    student = await add_student_with_parent(db_session, tenant.id, parent_user_id=None)
    _, notifications = _services(db_session)

    with_parents = await StudentRepository(db_session).get_with_parents(student.id, tenant.id)
    delivered = await notifications.notify_attendance_alert(with_parents, date(2026, 6, 2), "ABSENT")

    assert len(with_parents.parents) == 1
    assert delivered == []
