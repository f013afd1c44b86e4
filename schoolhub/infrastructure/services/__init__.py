"""Infrastructure services (permission resolution, RBAC seeding, audit persistence)."""

from schoolhub.infrastructure.services.permission_resolver import PermissionResolver
from schoolhub.infrastructure.services.rbac_seeder import RbacSeeder, SeedReport

__all__ = ["PermissionResolver", "RbacSeeder", "SeedReport"]
