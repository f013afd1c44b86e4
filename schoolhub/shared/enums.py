"""Shared enumerations for SchoolHub.

Stored values are upper-case strings so they read the same in the database,
the API and the audit trail.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TenantStatus(_ValuesMixin, str, Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


class UserStatus(_ValuesMixin, str, Enum):
    """Only ACTIVE users may authenticate."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class AuditStatus(_ValuesMixin, str, Enum):
    """Outcome of an audited request."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    PENDING = "PENDING"


class AuditAction(_ValuesMixin, str, Enum):
    """Audit action recorded for a request. READ..DELETE are the method defaults."""

    READ = "READ"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    VIEW = "VIEW"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    ASSIGN = "ASSIGN"
    REVOKE = "REVOKE"


class NotificationType(_ValuesMixin, str, Enum):
    LEAVE_REQUEST = "LEAVE_REQUEST"
    LEAVE_APPROVED = "LEAVE_APPROVED"
    LEAVE_REJECTED = "LEAVE_REJECTED"
    ATTENDANCE_ALERT = "ATTENDANCE_ALERT"
    GENERAL = "GENERAL"


class NotificationPriority(_ValuesMixin, str, Enum):
    NORMAL = "NORMAL"
    HIGH = "HIGH"


class LeaveStatus(_ValuesMixin, str, Enum):
    """Leave request lifecycle. Only PENDING requests may change status."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class LeaveType(_ValuesMixin, str, Enum):
    SICK = "SICK"
    PERSONAL = "PERSONAL"
    FAMILY = "FAMILY"
    MEDICAL = "MEDICAL"
    OTHER = "OTHER"


class AttendanceStatus(_ValuesMixin, str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"
