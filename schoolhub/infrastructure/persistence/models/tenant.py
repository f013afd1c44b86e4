"""Tenant ORM model: one school. Isolation boundary for every other record."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from schoolhub.infrastructure.persistence.database import Base
from schoolhub.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin
from schoolhub.shared.enums import TenantStatus


class Tenant(CuidMixin, TimestampMixin, Base):
    """Tenant. Table: tenant. domain and email are globally unique."""

    __tablename__ = "tenant"

    name: Mapped[str] = mapped_column(String, nullable=False)
    domain: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=TenantStatus.ACTIVE.value
    )
