"""DTOs for notifications."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class NotificationCreate:
    tenant_id: str
    user_id: str
    type: str
    title: str
    message: str
    priority: str
    data: dict[str, Any] | None = None


@dataclass(frozen=True)
class NotificationResult:
    id: str
    tenant_id: str
    user_id: str
    type: str
    title: str
    message: str
    data: dict[str, Any] | None
    priority: str
    is_read: bool
    read_at: datetime | None
    created_at: datetime | None


@dataclass(frozen=True)
class NotificationStats:
    total: int
    unread: int
    high_priority: int
    by_type: dict[str, int] = field(default_factory=dict)
