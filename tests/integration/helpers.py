"""Row builders for integration tests."""

from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.infrastructure.persistence.models import Parent, Student, StudentParent, Tenant, User


async def add_tenant(db: AsyncSession, domain: str) -> Tenant:
    tenant = Tenant(name=domain.split(".")[0].title(), domain=domain, email=f"office@{domain}")
    db.add(tenant)
    await db.flush()
    return tenant


async def add_user(db: AsyncSession, tenant_id: str, email: str, first_name: str = "Test") -> User:
    user = User(
        tenant_id=tenant_id,
        email=email,
        first_name=first_name,
        last_name="User",
        hashed_password="not-a-real-hash",
    )
    db.add(user)
    await db.flush()
    return user


async def add_student_with_parent(
    db: AsyncSession, tenant_id: str, parent_user_id: str | None
) -> Student:
    student = Student(tenant_id=tenant_id, first_name="Amani", last_name="Kato")
    parent = Parent(tenant_id=tenant_id, first_name="Grace", last_name="Kato", user_id=parent_user_id)
    db.add_all([student, parent])
    await db.flush()
    db.add(StudentParent(student_id=student.id, parent_id=parent.id, relationship_type="mother"))
    await db.flush()
    return student
