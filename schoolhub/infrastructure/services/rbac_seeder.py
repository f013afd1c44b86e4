"""Idempotent RBAC bootstrap from the declarative manifest.

Every upsert is keyed on its natural unique constraint, so running the seeder
any number of times converges on the same rows. Each upsert runs in its own
SAVEPOINT: a failing row is logged, recorded in the report, and the rest of
the batch carries on.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.application.rbac_manifest import (
    DEFAULT_ROLES,
    PERMISSION_CATALOG,
    PermissionSpec,
    RoleSpec,
    expand_role_permissions,
)
from schoolhub.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from schoolhub.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from schoolhub.infrastructure.persistence.repositories.role_repo import RoleRepository

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    """Counts and failures of one seeding run."""

    permissions_created: int = 0
    permissions_existing: int = 0
    roles_created: int = 0
    roles_existing: int = 0
    role_permissions_added: int = 0
    unresolved_permissions: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class RbacSeeder:
    """Applies PERMISSION_CATALOG and DEFAULT_ROLES to the database.

    System roles are re-synced on every run so they always hold their
    manifest permissions. Non-system default roles receive their bundle
    only when first created; later edits by tenant admins are preserved.
    """

    def __init__(
        self,
        db: AsyncSession,
        *,
        refresh_descriptions: bool = False,
        permissions: Iterable[PermissionSpec] = PERMISSION_CATALOG,
        roles: Iterable[RoleSpec] = DEFAULT_ROLES,
    ) -> None:
        self.db = db
        self.refresh_descriptions = refresh_descriptions
        self.permissions = tuple(permissions)
        self.roles = tuple(roles)
        self.permission_repo = PermissionRepository(db)
        self.role_repo = RoleRepository(db)
        self.role_permission_repo = RolePermissionRepository(db)
        self.report = SeedReport()

    async def ensure_permission(
        self, resource: str, action: str, description: str | None
    ) -> str | None:
        """Upsert one permission. Return its id, or None if the upsert failed."""
        name = f"{resource}:{action}"
        try:
            async with self.db.begin_nested():
                permission_id, created = await self.permission_repo.ensure(
                    resource,
                    action,
                    description,
                    refresh_description=self.refresh_descriptions,
                )
        except SQLAlchemyError:
            logger.error("Failed to upsert permission %s", name, exc_info=True)
            self.report.failures.append(f"permission:{name}")
            return None
        if created:
            self.report.permissions_created += 1
        else:
            self.report.permissions_existing += 1
        return permission_id

    async def ensure_role(
        self,
        tenant_id: str,
        name: str,
        description: str | None,
        *,
        is_system: bool = False,
    ) -> tuple[str, bool, bool] | None:
        """Upsert one role in a tenant.

        Return (id, created, stored is_system), or None if the upsert failed.
        """
        try:
            async with self.db.begin_nested():
                role_id, created, stored_is_system = await self.role_repo.ensure(
                    tenant_id, name, description, is_system=is_system
                )
        except SQLAlchemyError:
            logger.error("Failed to upsert role %r in tenant %s", name, tenant_id, exc_info=True)
            self.report.failures.append(f"role:{tenant_id}:{name}")
            return None
        if created:
            self.report.roles_created += 1
        else:
            self.report.roles_existing += 1
        return (role_id, created, stored_is_system)

    async def assign_permissions_to_role(
        self, role_id: str, permission_names: Iterable[str]
    ) -> int:
        """Upsert role-permission pairs by permission name. Unknown names are logged and skipped."""
        names = list(dict.fromkeys(permission_names))
        ids_by_name = await self.permission_repo.get_ids_by_names(names)
        for name in names:
            if name not in ids_by_name:
                logger.warning("Permission %s not found; skipping for role %s", name, role_id)
                self.report.unresolved_permissions.append(name)
        if not ids_by_name:
            return 0
        try:
            async with self.db.begin_nested():
                added = await self.role_permission_repo.add(role_id, ids_by_name.values())
        except SQLAlchemyError:
            logger.error("Failed to assign permissions to role %s", role_id, exc_info=True)
            self.report.failures.append(f"role_permissions:{role_id}")
            return 0
        self.report.role_permissions_added += added
        return added

    async def seed_catalog(self) -> None:
        for spec in self.permissions:
            await self.ensure_permission(spec.resource, spec.action, spec.description)
        logger.info(
            "Permission catalog: %d created, %d already present",
            self.report.permissions_created,
            self.report.permissions_existing,
        )

    async def seed_tenant(self, tenant_id: str) -> None:
        """Create the default roles in a tenant and give them their permission bundles."""
        for spec in self.roles:
            ensured = await self.ensure_role(
                tenant_id, spec.name, spec.description, is_system=spec.is_system
            )
            if ensured is None:
                continue
            role_id, created, stored_is_system = ensured
            if spec.is_system and not stored_is_system:
                # Name taken by a tenant-made role: leave its permissions alone
                logger.error(
                    "Role %r in tenant %s is not a system role; permission sync skipped",
                    spec.name,
                    tenant_id,
                )
                self.report.failures.append(f"system_role_clash:{tenant_id}:{spec.name}")
                continue
            if created or spec.is_system:
                await self.assign_permissions_to_role(role_id, expand_role_permissions(spec))
        logger.info("Default roles ensured for tenant %s", tenant_id)

    async def seed(self, tenant_ids: Iterable[str] = ()) -> SeedReport:
        """Seed the catalog, then the default roles of every given tenant."""
        await self.seed_catalog()
        for tenant_id in tenant_ids:
            await self.seed_tenant(tenant_id)
        return self.report
