"""Leave request API: list, submit, review, delete and statistics, tenant-scoped."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from schoolhub.api.v1.dependencies import (
    audit_action,
    authorize,
    get_leave_service,
    get_leave_service_for_write,
)
from schoolhub.application.dtos.leave import LeaveRequestCreate, LeaveRequestFilter
from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.application.services.leave_service import LeaveService
from schoolhub.core.limiter import limit_writes
from schoolhub.schemas.common import MessageResponse, Pagination, page_to_skip
from schoolhub.schemas.leave import (
    LeaveRequestCreateRequest,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    LeaveReviewRequest,
    LeaveStatsResponse,
)
from schoolhub.shared.enums import AuditAction, LeaveStatus, LeaveType

router = APIRouter()

CanReadLeave = Annotated[AuthenticatedUser, Depends(authorize(["leave:read", "leave:manage"]))]

_REVIEW_ACTIONS = {
    LeaveStatus.APPROVED: AuditAction.APPROVE,
    LeaveStatus.REJECTED: AuditAction.REJECT,
}


@router.get("", response_model=LeaveRequestListResponse)
async def list_leave_requests(
    current_user: CanReadLeave,
    service: Annotated[LeaveService, Depends(get_leave_service)],
    status: LeaveStatus | None = None,
    student_id: Annotated[str | None, Query(alias="studentId")] = None,
    leave_type: Annotated[LeaveType | None, Query(alias="leaveType")] = None,
    start_date: Annotated[date | None, Query(alias="startDate")] = None,
    end_date: Annotated[date | None, Query(alias="endDate")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
):
    """Requests overlapping [startDate, endDate] when given, newest first."""
    filters = LeaveRequestFilter(
        tenant_id=current_user.tenant_id,
        status=status.value if status else None,
        student_id=student_id,
        leave_type=leave_type.value if leave_type else None,
        start_date=start_date,
        end_date=end_date,
    )
    items, total = await service.list_requests(
        filters, skip=page_to_skip(page, limit), limit=limit
    )
    return LeaveRequestListResponse(
        items=[LeaveRequestResponse.model_validate(i) for i in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/stats", response_model=LeaveStatsResponse)
async def leave_stats(
    current_user: CanReadLeave,
    service: Annotated[LeaveService, Depends(get_leave_service)],
):
    stats = await service.stats(current_user.tenant_id)
    return LeaveStatsResponse.model_validate(stats)


@router.get("/{leave_id}", response_model=LeaveRequestResponse)
async def get_leave_request(
    leave_id: str,
    current_user: CanReadLeave,
    service: Annotated[LeaveService, Depends(get_leave_service)],
):
    found = await service.get_request(current_user.tenant_id, leave_id)
    return LeaveRequestResponse.model_validate(found)


@router.post("", response_model=LeaveRequestResponse, status_code=201)
@limit_writes
async def submit_leave_request(
    request: Request,
    body: LeaveRequestCreateRequest,
    current_user: Annotated[
        AuthenticatedUser, Depends(authorize(["leave:create", "leave:manage"]))
    ],
    service: Annotated[LeaveService, Depends(get_leave_service_for_write)],
):
    """Submit a PENDING request; the requester is notified (HIGH priority for emergencies)."""
    created = await service.submit(
        current_user,
        LeaveRequestCreate(
            student_id=body.student_id,
            leave_type=body.leave_type.value,
            start_date=body.start_date,
            end_date=body.end_date,
            reason=body.reason,
            description=body.description,
            supporting_docs=body.supporting_docs,
            is_emergency=body.is_emergency,
        ),
    )
    return LeaveRequestResponse.model_validate(created)


@router.put("/{leave_id}", response_model=LeaveRequestResponse)
@limit_writes
async def review_leave_request(
    request: Request,
    leave_id: str,
    body: LeaveReviewRequest,
    current_user: Annotated[
        AuthenticatedUser, Depends(authorize(["leave:update", "leave:manage"]))
    ],
    service: Annotated[LeaveService, Depends(get_leave_service_for_write)],
):
    """Approve, reject or cancel a pending request."""
    review_action = _REVIEW_ACTIONS.get(body.status)
    if review_action is not None:
        request.state.audit_action = review_action.value
    updated = await service.review(
        current_user, leave_id, body.status.value, body.rejected_reason
    )
    return LeaveRequestResponse.model_validate(updated)


@router.delete(
    "/{leave_id}",
    response_model=MessageResponse,
    dependencies=[Depends(audit_action(AuditAction.DELETE))],
)
@limit_writes
async def delete_leave_request(
    request: Request,
    leave_id: str,
    current_user: Annotated[
        AuthenticatedUser, Depends(authorize(["leave:delete", "leave:manage"]))
    ],
    service: Annotated[LeaveService, Depends(get_leave_service_for_write)],
):
    await service.delete(current_user, leave_id)
    return MessageResponse(message="Leave request deleted successfully")
