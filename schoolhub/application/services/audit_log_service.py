"""Audit trail read side and client-reported entries."""

from __future__ import annotations

from typing import Any

from schoolhub.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogFilter,
    AuditLogResult,
    AuditLogStats,
)
from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.domain.exceptions import ResourceNotFoundException
from schoolhub.shared.redaction import redact


class AuditLogService:
    def __init__(self, audit_log_repo: Any) -> None:
        self._repo = audit_log_repo

    async def list_logs(
        self, filters: AuditLogFilter, *, skip: int = 0, limit: int = 50
    ) -> tuple[list[AuditLogResult], int]:
        return await self._repo.list(filters, skip=skip, limit=limit)

    async def get_log(self, tenant_id: str, log_id: str) -> AuditLogResult:
        found = await self._repo.get_by_id_and_tenant(log_id, tenant_id)
        if found is None:
            raise ResourceNotFoundException("audit_log", log_id)
        return found

    async def stats(self, tenant_id: str) -> AuditLogStats:
        return await self._repo.stats(tenant_id)

    async def record_client_event(
        self,
        actor: AuthenticatedUser,
        *,
        action: str,
        resource: str,
        status: str,
        resource_id: str | None = None,
        details: dict[str, Any] | None = None,
        error_message: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        request_id: str | None = None,
    ) -> AuditLogResult:
        """Append an entry reported by a client. Identity and tenant always come from the caller.

        details is redacted here: this route is not seen by the audit middleware.
        """
        return await self._repo.create(
            AuditLogEntryCreate(
                tenant_id=actor.tenant_id,
                user_id=actor.id,
                user_email=actor.email,
                user_name=actor.name,
                user_roles=actor.roles,
                action=action,
                resource=resource,
                resource_id=resource_id,
                details=redact(details),
                status=status,
                error_message=error_message,
                ip_address=ip_address,
                user_agent=user_agent,
                request_id=request_id,
            )
        )
