"""Leave request ORM model."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.infrastructure.persistence.database import Base
from schoolhub.infrastructure.persistence.models.mixins import MultiTenantModel
from schoolhub.shared.enums import LeaveStatus

if TYPE_CHECKING:
    from schoolhub.infrastructure.persistence.models.school import Student


class LeaveRequest(MultiTenantModel, Base):
    """Student leave request. Status moves only out of PENDING."""

    __tablename__ = "leave_request"

    student_id: Mapped[str] = mapped_column(
        String, ForeignKey("student.id", ondelete="CASCADE"), nullable=False
    )
    requested_by: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    leave_type: Mapped[str] = mapped_column(String, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    supporting_docs: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    is_emergency: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=LeaveStatus.PENDING.value
    )
    approved_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    rejected_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    student: Mapped[Student] = relationship("Student", lazy="joined")

    __table_args__ = (Index("ix_leave_request_tenant_status", "tenant_id", "status"),)
