"""Ports the application layer depends on (implemented in infrastructure)."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol

from schoolhub.application.dtos.audit_log import AuditLogEntryCreate


class IPermissionResolver(Protocol):
    async def get_user_permissions(self, user_id: str, tenant_id: str) -> set[str]:
        """Return the permission names the user holds in the tenant."""
        ...


AuditEntryWriter = Callable[[AuditLogEntryCreate], Awaitable[None]]
