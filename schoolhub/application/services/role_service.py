"""Role application service: tenant-scoped role CRUD and user-role assignment.

All writes run on the request's transactional session, so a role and its
permission set change together or not at all.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Any

from sqlalchemy.exc import IntegrityError

from schoolhub.application.dtos.role import PermissionResult, RoleResult, UserRoleResult
from schoolhub.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    RoleInUseException,
    SystemRoleProtectedException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class RoleService:
    """Role administration with system-role protection and name uniqueness per tenant."""

    def __init__(
        self,
        role_repo: Any,
        permission_repo: Any,
        role_permission_repo: Any,
        user_role_repo: Any = None,
        user_repo: Any = None,
    ) -> None:
        self._role_repo = role_repo
        self._permission_repo = permission_repo
        self._role_permission_repo = role_permission_repo
        self._user_role_repo = user_role_repo
        self._user_repo = user_repo

    async def list_roles(self, tenant_id: str) -> list[RoleResult]:
        return await self._role_repo.list_by_tenant(tenant_id)

    async def list_permissions(
        self,
    ) -> tuple[list[PermissionResult], dict[str, list[PermissionResult]]]:
        """Return the catalog and the same permissions grouped by resource."""
        permissions = await self._permission_repo.list_all()
        grouped: dict[str, list[PermissionResult]] = defaultdict(list)
        for permission in permissions:
            grouped[permission.resource].append(permission)
        return permissions, dict(grouped)

    async def _validate_permission_ids(self, permission_ids: Sequence[str]) -> list[str]:
        """Deduplicate ids and reject any that are not in the catalog."""
        ids = list(dict.fromkeys(permission_ids))
        if not ids:
            return []
        existing = await self._permission_repo.get_existing_ids(ids)
        unknown = [pid for pid in ids if pid not in existing]
        if unknown:
            raise ValidationException(
                "Unknown permission ids",
                field="permissionIds",
                details={"invalidPermissionIds": unknown},
            )
        return ids

    async def create_role(
        self,
        tenant_id: str,
        name: str,
        description: str | None = None,
        permission_ids: Sequence[str] = (),
    ) -> RoleResult:
        """Create a non-system role with the given permissions.

        Raises:
            ConflictException: A role with this name already exists in the tenant.
            ValidationException: A permission id does not exist.
        """
        name = name.strip()
        if await self._role_repo.get_by_name_and_tenant(name, tenant_id):
            raise ConflictException(
                "Role with this name already exists in this tenant", {"name": name}
            )
        ids = await self._validate_permission_ids(permission_ids)
        try:
            created = await self._role_repo.create_role(tenant_id, name, description)
        except IntegrityError:
            # Lost a race with a concurrent create of the same name
            raise ConflictException(
                "Role with this name already exists in this tenant", {"name": name}
            ) from None
        if ids:
            await self._role_permission_repo.add(created.id, ids)
        logger.info("Role %s (%s) created in tenant %s", created.id, name, tenant_id)
        return await self._role_repo.get_by_id_and_tenant(created.id, tenant_id) or created

    async def update_role(
        self,
        tenant_id: str,
        role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        permission_ids: Sequence[str] | None = None,
    ) -> RoleResult:
        """Update name/description and, when permission_ids is given, replace the permission set.

        The role row is locked for the rest of the transaction, so concurrent
        updates of the same role serialize instead of interleaving. The
        replacement is applied as a set difference.
        """
        role = await self._role_repo.get_entity_for_update(role_id, tenant_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        if role.is_system:
            raise SystemRoleProtectedException("modify")
        if name is not None:
            name = name.strip()
            if name != role.name:
                clash = await self._role_repo.get_by_name_and_tenant(name, tenant_id)
                if clash and clash.id != role.id:
                    raise ConflictException(
                        "Role with this name already exists in this tenant", {"name": name}
                    )
                role.name = name
        if description is not None:
            role.description = description
        try:
            await self._role_repo.save(role)
        except IntegrityError:
            # Lost a race with a concurrent rename or create to the same name
            raise ConflictException(
                "Role with this name already exists in this tenant", {"name": role.name}
            ) from None
        if permission_ids is not None:
            wanted = set(await self._validate_permission_ids(permission_ids))
            current = await self._role_permission_repo.get_permission_ids(role.id)
            removed = await self._role_permission_repo.remove(role.id, current - wanted)
            added = await self._role_permission_repo.add(role.id, wanted - current)
            logger.info(
                "Role %s permissions replaced: %d added, %d removed", role.id, added, removed
            )
        updated = await self._role_repo.get_by_id_and_tenant(role.id, tenant_id)
        if updated is None:
            raise ResourceNotFoundException("role", role_id)
        return updated

    async def delete_role(self, tenant_id: str, role_id: str) -> None:
        """Delete a role nobody holds.

        Raises:
            SystemRoleProtectedException: The role is a system role.
            RoleInUseException: Users still hold the role (reports userCount).
        """
        role = await self._role_repo.get_entity_for_update(role_id, tenant_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        if role.is_system:
            raise SystemRoleProtectedException("delete")
        user_count = await self._user_role_repo.count_for_role(role.id)
        if user_count:
            raise RoleInUseException(role.id, user_count)
        await self._role_repo.delete(role)
        logger.info("Role %s deleted from tenant %s", role_id, tenant_id)

    async def list_user_roles(self, tenant_id: str, user_id: str) -> list[UserRoleResult]:
        if not await self._user_repo.exists_in_tenant(user_id, tenant_id):
            raise ResourceNotFoundException("user", user_id)
        return await self._user_role_repo.list_for_user(user_id, tenant_id)

    async def assign_role_to_user(
        self,
        tenant_id: str,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
    ) -> bool:
        """Grant a role to a user of the same tenant. Re-assigning is a no-op (returns False)."""
        if not await self._user_repo.exists_in_tenant(user_id, tenant_id):
            raise ResourceNotFoundException("user", user_id)
        if await self._role_repo.get_by_id_and_tenant(role_id, tenant_id) is None:
            raise ResourceNotFoundException("role", role_id)
        return await self._user_role_repo.assign(user_id, role_id, tenant_id, assigned_by)

    async def remove_role_from_user(self, tenant_id: str, user_id: str, role_id: str) -> None:
        if not await self._user_role_repo.remove(user_id, role_id, tenant_id):
            raise ResourceNotFoundException("user_role", f"{user_id}:{role_id}")
