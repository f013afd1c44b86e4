"""Domain exceptions for SchoolHub.

Business rule violations, independent of HTTP. The presentation layer maps
them to responses in core.exception_handlers using error_code.
"""

from typing import Any


class SchoolHubException(Exception):
    """Base exception for all SchoolHub application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context merged into the response body.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the failure envelope: success flag, message, error code and details."""
        return {
            "success": False,
            "message": self.message,
            "error": self.error_code,
            **self.details,
        }


class ValidationException(SchoolHubException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        merged = dict(details or {})
        if field:
            merged["field"] = field
        super().__init__(message, "VALIDATION_ERROR", merged)


class AuthenticationException(SchoolHubException):
    """Raised when the caller cannot be authenticated (missing, invalid or expired token, inactive user)."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(SchoolHubException):
    """Raised when the user holds none of the permissions a route accepts."""

    def __init__(
        self,
        required: list[str] | None = None,
        message: str = "Insufficient permissions",
    ) -> None:
        details: dict[str, Any] = {}
        if required:
            details["required"] = required
        super().__init__(message, "PERMISSION_DENIED", details)


class TenantMismatchException(SchoolHubException):
    """Raised when the request targets a tenant other than the user's own."""

    def __init__(self) -> None:
        super().__init__("Access denied - tenant isolation", "TENANT_MISMATCH")


class ResourceNotFoundException(SchoolHubException):
    """Raised when an entity does not exist or belongs to another tenant."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type.replace('_', ' ').capitalize()} not found",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(SchoolHubException):
    """Raised on a uniqueness violation (e.g. duplicate role name in a tenant)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "CONFLICT", details)


class RoleInUseException(ConflictException):
    """Raised when deleting a role that users still hold."""

    def __init__(self, role_id: str, user_count: int) -> None:
        super().__init__(
            "Cannot delete role that is assigned to users",
            {"roleId": role_id, "userCount": user_count},
        )
        self.error_code = "ROLE_IN_USE"


class SystemRoleProtectedException(SchoolHubException):
    """Raised on any attempt to modify or delete a system role."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Cannot {operation} system roles",
            "SYSTEM_ROLE_PROTECTED",
            {"operation": operation},
        )


class InvalidStateTransitionException(SchoolHubException):
    """Raised when a record is not in a state that allows the requested change."""

    def __init__(self, message: str, current_state: str) -> None:
        super().__init__(
            message, "INVALID_STATE_TRANSITION", {"currentState": current_state}
        )


class SqlNotConfiguredException(SchoolHubException):
    """Raised when a database session is requested but DATABASE_URL is not usable."""

    def __init__(self) -> None:
        super().__init__(
            "Database is not configured. Set DATABASE_URL to a postgresql+asyncpg URL.",
            "SQL_NOT_CONFIGURED",
        )
