"""Repository and service factories (composition root).

Read paths get a plain session from get_db. Write paths share one
transactional session per request (FastAPI caches get_db_transactional),
so every repository a write endpoint touches commits or rolls back together.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.application.services.audit_log_service import AuditLogService
from schoolhub.application.services.auth_service import AuthService
from schoolhub.application.services.authorization_service import AuthorizationService
from schoolhub.application.services.leave_service import LeaveService
from schoolhub.application.services.notification_service import NotificationService
from schoolhub.application.services.role_service import RoleService
from schoolhub.infrastructure.persistence.database import get_db, get_db_transactional
from schoolhub.infrastructure.persistence.repositories import (
    AuditLogRepository,
    LeaveRequestRepository,
    NotificationRepository,
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    StudentRepository,
    TenantRepository,
    UserRepository,
    UserRoleRepository,
)
from schoolhub.infrastructure.services import PermissionResolver

ReadSession = Annotated[AsyncSession, Depends(get_db)]
WriteSession = Annotated[AsyncSession, Depends(get_db_transactional)]


def _role_service(db: AsyncSession) -> RoleService:
    return RoleService(
        role_repo=RoleRepository(db),
        permission_repo=PermissionRepository(db),
        role_permission_repo=RolePermissionRepository(db),
        user_role_repo=UserRoleRepository(db),
        user_repo=UserRepository(db),
    )


def _notification_service(db: AsyncSession) -> NotificationService:
    return NotificationService(NotificationRepository(db), UserRepository(db))


def _leave_service(db: AsyncSession) -> LeaveService:
    return LeaveService(
        leave_repo=LeaveRequestRepository(db),
        student_repo=StudentRepository(db),
        notifications=_notification_service(db),
    )


async def get_authorization_service(db: ReadSession) -> AuthorizationService:
    """Permission checks straight from the database (no cache)."""
    return AuthorizationService(permission_resolver=PermissionResolver(db))


async def get_auth_service(
    db: ReadSession,
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> AuthService:
    return AuthService(
        tenant_repo=TenantRepository(db),
        user_repo=UserRepository(db),
        user_role_repo=UserRoleRepository(db),
        authorization=authorization,
    )


async def get_role_service(db: ReadSession) -> RoleService:
    return _role_service(db)


async def get_role_service_for_write(db: WriteSession) -> RoleService:
    """Role writes: the permission-set replacement runs in this one transaction."""
    return _role_service(db)


async def get_student_repo(db: ReadSession) -> StudentRepository:
    return StudentRepository(db)


async def get_notification_service(db: ReadSession) -> NotificationService:
    return _notification_service(db)


async def get_notification_service_for_write(db: WriteSession) -> NotificationService:
    return _notification_service(db)


async def get_leave_service(db: ReadSession) -> LeaveService:
    return _leave_service(db)


async def get_leave_service_for_write(db: WriteSession) -> LeaveService:
    """Leave writes and their notifications share the request transaction."""
    return _leave_service(db)


async def get_audit_log_service(db: ReadSession) -> AuditLogService:
    return AuditLogService(AuditLogRepository(db))


async def get_audit_log_service_for_write(db: WriteSession) -> AuditLogService:
    return AuditLogService(AuditLogRepository(db))
