"""DTOs for leave requests."""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class LeaveRequestCreate:
    student_id: str
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    description: str | None = None
    supporting_docs: list[str] | None = None
    is_emergency: bool = False


@dataclass(frozen=True)
class LeaveRequestResult:
    id: str
    tenant_id: str
    student_id: str
    student_name: str
    requested_by: str
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    description: str | None
    supporting_docs: list[str] | None
    is_emergency: bool
    status: str
    approved_by: str | None
    approved_at: datetime | None
    rejected_reason: str | None
    created_at: datetime | None


@dataclass(frozen=True)
class LeaveRequestFilter:
    tenant_id: str
    status: str | None = None
    student_id: str | None = None
    leave_type: str | None = None
    start_date: date | None = None
    end_date: date | None = None


@dataclass(frozen=True)
class LeaveStats:
    total: int
    pending: int
    approved: int
    rejected: int
    emergency: int
    by_type: dict[str, int] = field(default_factory=dict)
