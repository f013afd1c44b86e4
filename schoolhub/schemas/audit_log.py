"""Audit log API schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field

from schoolhub.schemas.common import ApiModel, Pagination
from schoolhub.shared.enums import AuditStatus


class AuditLogEntryResponse(ApiModel):
    id: str
    tenant_id: str | None
    user_id: str | None
    user_email: str | None
    user_name: str | None
    user_roles: list[str]
    action: str
    resource: str
    resource_id: str | None
    details: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None
    timestamp: datetime
    status: str
    error_message: str | None = None


class AuditLogListResponse(ApiModel):
    items: list[AuditLogEntryResponse]
    pagination: Pagination


class CountByKeyResponse(ApiModel):
    key: str
    count: int


class AuditLogStatsResponse(ApiModel):
    total_logs: int
    success_logs: int
    failure_logs: int
    pending_logs: int
    top_actions: list[CountByKeyResponse]
    top_resources: list[CountByKeyResponse]


class ClientAuditEventRequest(ApiModel):
    """Client-side event. Tenant and user always come from the token."""

    action: str = Field(..., min_length=1, max_length=64)
    resource: str = Field(..., min_length=1, max_length=128)
    resource_id: str | None = Field(default=None, max_length=128)
    details: dict[str, Any] | None = None
    status: AuditStatus = AuditStatus.SUCCESS
    error_message: str | None = Field(default=None, max_length=2000)
