"""Notification ORM model: per-user message created by domain events."""

from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from schoolhub.infrastructure.persistence.database import Base
from schoolhub.infrastructure.persistence.models.mixins import CuidMixin, TenantMixin
from schoolhub.shared.enums import NotificationPriority


class Notification(CuidMixin, TenantMixin, Base):
    """Notification. Mutated only to flip is_read/read_at; deleted by its recipient."""

    __tablename__ = "notification"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    data: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    priority: Mapped[str] = mapped_column(
        String, nullable=False, default=NotificationPriority.NORMAL.value
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_notification_recipient", "tenant_id", "user_id", "is_read"),
    )
