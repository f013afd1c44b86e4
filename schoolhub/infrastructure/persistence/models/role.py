"""Role ORM model (tenant-scoped bundle of permissions)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.infrastructure.persistence.database import Base
from schoolhub.infrastructure.persistence.models.mixins import MultiTenantModel

if TYPE_CHECKING:
    from schoolhub.infrastructure.persistence.models.permission import Permission, UserRole


class Role(MultiTenantModel, Base):
    """Role. Table: role. Unique (tenant_id, name). System roles are read-only."""

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Read-side relationships; writes go through the join repositories.
    permissions: Mapped[list[Permission]] = relationship(
        "Permission",
        secondary="role_permission",
        viewonly=True,
        order_by="Permission.name",
    )
    user_roles: Mapped[list[UserRole]] = relationship("UserRole", viewonly=True)

    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_role_tenant_name"),)
