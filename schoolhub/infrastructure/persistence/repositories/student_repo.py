"""Student repository (read-only lookups used by leave and attendance flows)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from schoolhub.application.dtos.school import ParentContact, StudentResult
from schoolhub.infrastructure.persistence.models.school import Student
from schoolhub.infrastructure.persistence.repositories.base import BaseRepository


class StudentRepository(BaseRepository[Student]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Student)

    async def get_with_parents(self, student_id: str, tenant_id: str) -> StudentResult | None:
        """Return the student with every linked parent, or None if not in tenant."""
        result = await self.db.execute(
            select(Student)
            .where(Student.id == student_id, Student.tenant_id == tenant_id)
            .options(selectinload(Student.parents))
        )
        student = result.scalar_one_or_none()
        if student is None:
            return None
        return StudentResult(
            id=student.id,
            tenant_id=student.tenant_id,
            first_name=student.first_name,
            last_name=student.last_name,
            parents=tuple(
                ParentContact(
                    id=p.id,
                    first_name=p.first_name,
                    last_name=p.last_name,
                    user_id=p.user_id,
                )
                for p in student.parents
            ),
        )
