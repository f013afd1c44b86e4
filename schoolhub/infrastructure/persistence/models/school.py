"""Student and parent ORM models (the people attendance alerts fan out to)."""

from __future__ import annotations

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.infrastructure.persistence.database import Base
from schoolhub.infrastructure.persistence.models.mixins import CuidMixin, MultiTenantModel


class Student(MultiTenantModel, Base):
    """Student. Table: student."""

    __tablename__ = "student"

    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    admission_number: Mapped[str | None] = mapped_column(String, nullable=True)
    user_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )

    parents: Mapped[list[Parent]] = relationship(
        "Parent", secondary="student_parent", viewonly=True
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "admission_number", name="uq_student_admission"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Parent(MultiTenantModel, Base):
    """Parent or guardian. user_id is set only when they have a login."""

    __tablename__ = "parent"

    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    user_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )


class StudentParent(CuidMixin, Base):
    """Many-to-many student-parent. Table: student_parent."""

    __tablename__ = "student_parent"

    student_id: Mapped[str] = mapped_column(
        String, ForeignKey("student.id", ondelete="CASCADE"), nullable=False
    )
    parent_id: Mapped[str] = mapped_column(
        String, ForeignKey("parent.id", ondelete="CASCADE"), nullable=False
    )
    relationship_type: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("student_id", "parent_id", name="uq_student_parent"),
    )
