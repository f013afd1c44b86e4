"""Audit log API: tenant-scoped search, detail, statistics and client-reported events.

These paths are excluded from the audit middleware so reading the trail
does not grow it.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from schoolhub.api.v1.dependencies import (
    CurrentUser,
    authorize,
    get_audit_log_service,
    get_audit_log_service_for_write,
)
from schoolhub.application.dtos.audit_log import AuditLogFilter
from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.application.services.audit_log_service import AuditLogService
from schoolhub.core.limiter import limit_writes
from schoolhub.schemas.audit_log import (
    AuditLogEntryResponse,
    AuditLogListResponse,
    AuditLogStatsResponse,
    ClientAuditEventRequest,
)
from schoolhub.schemas.common import Pagination, page_to_skip
from schoolhub.shared.enums import AuditStatus
from schoolhub.shared.request_audit import get_audit_request_context

router = APIRouter()

CanReadAudit = Annotated[AuthenticatedUser, Depends(authorize("audit-logs:read"))]


@router.get("", response_model=AuditLogListResponse)
async def list_audit_logs(
    current_user: CanReadAudit,
    service: Annotated[AuditLogService, Depends(get_audit_log_service)],
    user_id: Annotated[str | None, Query(alias="userId")] = None,
    action: str | None = None,
    resource: str | None = None,
    status: AuditStatus | None = None,
    start_date: Annotated[datetime | None, Query(alias="startDate")] = None,
    end_date: Annotated[datetime | None, Query(alias="endDate")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
):
    """Newest first. action and resource match case-insensitive substrings."""
    filters = AuditLogFilter(
        tenant_id=current_user.tenant_id,
        user_id=user_id,
        action=action,
        resource=resource,
        status=status.value if status else None,
        start=start_date,
        end=end_date,
    )
    items, total = await service.list_logs(filters, skip=page_to_skip(page, limit), limit=limit)
    return AuditLogListResponse(
        items=[AuditLogEntryResponse.model_validate(i) for i in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/stats/summary", response_model=AuditLogStatsResponse)
async def audit_log_stats(
    current_user: CanReadAudit,
    service: Annotated[AuditLogService, Depends(get_audit_log_service)],
):
    stats = await service.stats(current_user.tenant_id)
    return AuditLogStatsResponse.model_validate(stats)


@router.get("/{log_id}", response_model=AuditLogEntryResponse)
async def get_audit_log(
    log_id: str,
    current_user: CanReadAudit,
    service: Annotated[AuditLogService, Depends(get_audit_log_service)],
):
    entry = await service.get_log(current_user.tenant_id, log_id)
    return AuditLogEntryResponse.model_validate(entry)


@router.post("", response_model=AuditLogEntryResponse, status_code=201)
@limit_writes
async def create_client_audit_event(
    request: Request,
    body: ClientAuditEventRequest,
    current_user: CurrentUser,
    service: Annotated[AuditLogService, Depends(get_audit_log_service_for_write)],
):
    """Record an event reported by a client. Tenant and user are taken from the token."""
    request_id, ip_address, user_agent = get_audit_request_context(request)
    created = await service.record_client_event(
        current_user,
        action=body.action,
        resource=body.resource,
        status=body.status.value,
        resource_id=body.resource_id,
        details=body.details,
        error_message=body.error_message,
        ip_address=ip_address,
        user_agent=user_agent,
        request_id=request_id,
    )
    return AuditLogEntryResponse.model_validate(created)
