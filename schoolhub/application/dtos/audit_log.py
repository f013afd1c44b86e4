"""DTOs for the audit trail."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class AuditLogEntryCreate:
    """Input for appending one audit log record. Append-only; no update."""

    action: str
    resource: str
    status: str
    tenant_id: str | None = None
    user_id: str | None = None
    user_email: str | None = None
    user_name: str | None = None
    user_roles: tuple[str, ...] = ()
    resource_id: str | None = None
    details: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None
    error_message: str | None = None
    timestamp: datetime | None = None


@dataclass(frozen=True)
class AuditLogResult:
    """Single audit log entry (read-model for list/get)."""

    id: str
    tenant_id: str | None
    user_id: str | None
    user_email: str | None
    user_name: str | None
    user_roles: list[str]
    action: str
    resource: str
    resource_id: str | None
    details: dict[str, Any] | None
    ip_address: str | None
    user_agent: str | None
    request_id: str | None
    timestamp: datetime
    status: str
    error_message: str | None


@dataclass(frozen=True)
class AuditLogFilter:
    """List filters. action and resource match case-insensitive substrings."""

    tenant_id: str
    user_id: str | None = None
    action: str | None = None
    resource: str | None = None
    status: str | None = None
    start: datetime | None = None
    end: datetime | None = None


@dataclass(frozen=True)
class CountByKey:
    key: str
    count: int


@dataclass(frozen=True)
class AuditLogStats:
    total_logs: int
    success_logs: int
    failure_logs: int
    pending_logs: int
    top_actions: list[CountByKey] = field(default_factory=list)
    top_resources: list[CountByKey] = field(default_factory=list)
