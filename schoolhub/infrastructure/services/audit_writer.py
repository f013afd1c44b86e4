"""Persists audit entries produced by AuditLogMiddleware.

Each entry is written in its own session and transaction, independent of
the request that produced it.
"""

from schoolhub.application.dtos.audit_log import AuditLogEntryCreate
from schoolhub.infrastructure.persistence.database import session_scope
from schoolhub.infrastructure.persistence.repositories.audit_log_repo import (
    AuditLogRepository,
)


async def write_audit_entry(entry: AuditLogEntryCreate) -> None:
    """Append one audit log row. Errors propagate to the caller (the middleware logs them)."""
    async with session_scope() as session:
        await AuditLogRepository(session).create(entry)
