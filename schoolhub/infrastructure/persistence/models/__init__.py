"""ORM models. Importing this package registers every table on Base.metadata."""

from schoolhub.infrastructure.persistence.models.audit_log import AuditLog
from schoolhub.infrastructure.persistence.models.leave_request import LeaveRequest
from schoolhub.infrastructure.persistence.models.notification import Notification
from schoolhub.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from schoolhub.infrastructure.persistence.models.role import Role
from schoolhub.infrastructure.persistence.models.school import Parent, Student, StudentParent
from schoolhub.infrastructure.persistence.models.tenant import Tenant
from schoolhub.infrastructure.persistence.models.user import User

__all__ = [
    "AuditLog",
    "LeaveRequest",
    "Notification",
    "Parent",
    "Permission",
    "Role",
    "RolePermission",
    "Student",
    "StudentParent",
    "Tenant",
    "User",
    "UserRole",
]
