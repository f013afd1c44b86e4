"""Leave request API schemas."""

from datetime import date, datetime

from pydantic import Field, model_validator

from schoolhub.schemas.common import ApiModel, Pagination
from schoolhub.shared.enums import LeaveStatus, LeaveType


class LeaveRequestCreateRequest(ApiModel):
    student_id: str = Field(..., min_length=1)
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=2000)
    supporting_docs: list[str] | None = Field(default=None, max_length=20)
    is_emergency: bool = False


class LeaveReviewRequest(ApiModel):
    status: LeaveStatus
    rejected_reason: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def reason_required_for_rejection(self) -> "LeaveReviewRequest":
        if self.status == LeaveStatus.REJECTED and not (self.rejected_reason or "").strip():
            raise ValueError("rejectedReason is required when rejecting a leave request")
        return self


class LeaveRequestResponse(ApiModel):
    id: str
    tenant_id: str
    student_id: str
    student_name: str
    requested_by: str
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    description: str | None = None
    supporting_docs: list[str] | None = None
    is_emergency: bool
    status: str
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejected_reason: str | None = None
    created_at: datetime | None = None


class LeaveRequestListResponse(ApiModel):
    items: list[LeaveRequestResponse]
    pagination: Pagination


class LeaveStatsResponse(ApiModel):
    total: int
    pending: int
    approved: int
    rejected: int
    emergency: int
    by_type: dict[str, int]
