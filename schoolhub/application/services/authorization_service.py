"""Authorization service: effective permissions plus policy and tenant checks."""

from __future__ import annotations

import logging

from schoolhub.application.interfaces import IPermissionResolver
from schoolhub.domain.exceptions import AuthorizationException, TenantMismatchException
from schoolhub.domain.policies import Policy

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Centralized permission checking.

    The effective permission set is recomputed from the database on every
    call; there is no cache, so role edits apply to the very next request.
    """

    def __init__(self, permission_resolver: IPermissionResolver) -> None:
        self.permission_resolver = permission_resolver

    async def get_user_permissions(self, user_id: str, tenant_id: str) -> frozenset[str]:
        """Union of permission names across every role the user holds in the tenant."""
        return frozenset(
            await self.permission_resolver.get_user_permissions(user_id, tenant_id)
        )

    @staticmethod
    def require_granted(granted: frozenset[str], policy: Policy) -> None:
        """Raise AuthorizationException unless the resolved permission set satisfies policy."""
        if not policy.is_satisfied_by(granted):
            raise AuthorizationException(required=policy.permission_names())

    @staticmethod
    def ensure_same_tenant(user_tenant_id: str, requested_tenant_id: str | None) -> None:
        """Hard deny when the request targets a tenant other than the user's.

        No requested tenant (header absent) means the user's own tenant.
        """
        if requested_tenant_id is not None and requested_tenant_id != user_tenant_id:
            logger.warning(
                "Tenant mismatch: user tenant %s, requested %s", user_tenant_id, requested_tenant_id
            )
            raise TenantMismatchException()
