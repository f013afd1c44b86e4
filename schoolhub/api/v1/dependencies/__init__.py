"""API v1 dependencies. Routes import from here, never from infrastructure."""

from .auth import (
    CurrentUser,
    audit_action,
    authorize,
    get_current_user,
    requested_tenant_id,
)
from .repositories import (
    get_audit_log_service,
    get_audit_log_service_for_write,
    get_auth_service,
    get_authorization_service,
    get_leave_service,
    get_leave_service_for_write,
    get_notification_service,
    get_notification_service_for_write,
    get_role_service,
    get_role_service_for_write,
    get_student_repo,
)

__all__ = [
    "CurrentUser",
    "audit_action",
    "authorize",
    "get_audit_log_service",
    "get_audit_log_service_for_write",
    "get_auth_service",
    "get_authorization_service",
    "get_current_user",
    "get_leave_service",
    "get_leave_service_for_write",
    "get_notification_service",
    "get_notification_service_for_write",
    "get_role_service",
    "get_role_service_for_write",
    "get_student_repo",
    "requested_tenant_id",
]
