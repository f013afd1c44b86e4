"""DTOs for students and their parents."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParentContact:
    """A parent linked to a student. user_id is None when the parent has no login."""

    id: str
    first_name: str
    last_name: str
    user_id: str | None


@dataclass(frozen=True)
class StudentResult:
    id: str
    tenant_id: str
    first_name: str
    last_name: str
    parents: tuple[ParentContact, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
