"""User ORM model. Table name app_user (user is reserved in PostgreSQL)."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from schoolhub.infrastructure.persistence.database import Base
from schoolhub.infrastructure.persistence.models.mixins import MultiTenantModel
from schoolhub.shared.enums import UserStatus


class User(MultiTenantModel, Base):
    """Tenant user. Unique (tenant_id, email). Only ACTIVE users authenticate."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String, nullable=False)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=UserStatus.ACTIVE.value
    )

    __table_args__ = (UniqueConstraint("tenant_id", "email", name="uq_user_tenant_email"),)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
