"""Repositories (SQLAlchemy async). Read methods return application DTOs."""

from schoolhub.infrastructure.persistence.repositories.audit_log_repo import AuditLogRepository
from schoolhub.infrastructure.persistence.repositories.leave_request_repo import (
    LeaveRequestRepository,
)
from schoolhub.infrastructure.persistence.repositories.notification_repo import (
    NotificationRepository,
)
from schoolhub.infrastructure.persistence.repositories.permission_repo import PermissionRepository
from schoolhub.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from schoolhub.infrastructure.persistence.repositories.role_repo import RoleRepository
from schoolhub.infrastructure.persistence.repositories.student_repo import StudentRepository
from schoolhub.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from schoolhub.infrastructure.persistence.repositories.user_repo import UserRepository
from schoolhub.infrastructure.persistence.repositories.user_role_repo import UserRoleRepository

__all__ = [
    "AuditLogRepository",
    "LeaveRequestRepository",
    "NotificationRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "StudentRepository",
    "TenantRepository",
    "UserRepository",
    "UserRoleRepository",
]
