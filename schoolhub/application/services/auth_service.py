"""Authentication: credential login and bearer-token resolution."""

from __future__ import annotations

import logging
from typing import Any

from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.application.services.authorization_service import AuthorizationService
from schoolhub.domain.exceptions import AuthenticationException
from schoolhub.infrastructure.security.jwt import (
    TokenExpiredError,
    create_access_token,
    verify_token,
)
from schoolhub.infrastructure.security.password import verify_password
from schoolhub.shared.enums import TenantStatus, UserStatus

logger = logging.getLogger(__name__)


class AuthService:
    """Builds the AuthenticatedUser for a request from credentials or a JWT."""

    def __init__(
        self,
        tenant_repo: Any,
        user_repo: Any,
        user_role_repo: Any,
        authorization: AuthorizationService,
    ) -> None:
        self._tenant_repo = tenant_repo
        self._user_repo = user_repo
        self._user_role_repo = user_role_repo
        self._authorization = authorization

    async def _build_user(
        self, user_id: str, tenant_id: str, email: str, name: str
    ) -> AuthenticatedUser:
        roles = await self._user_role_repo.get_role_names(user_id, tenant_id)
        permissions = await self._authorization.get_user_permissions(user_id, tenant_id)
        return AuthenticatedUser(
            id=user_id,
            tenant_id=tenant_id,
            email=email,
            name=name,
            roles=tuple(roles),
            permissions=permissions,
        )

    async def login(
        self, tenant_domain: str, email: str, password: str
    ) -> tuple[str, AuthenticatedUser]:
        """Verify credentials and return (access_token, user).

        Unknown tenant, unknown email and wrong password share one message.
        """
        tenant = await self._tenant_repo.get_by_domain(tenant_domain)
        if tenant is None or tenant.status != TenantStatus.ACTIVE.value:
            raise AuthenticationException("Invalid credentials")
        user = await self._user_repo.get_entity_by_email_and_tenant(email, tenant.id)
        if user is None or not verify_password(password, user.hashed_password):
            logger.info("Failed login for %s in tenant %s", email, tenant.id)
            raise AuthenticationException("Invalid credentials")
        if user.status != UserStatus.ACTIVE.value:
            raise AuthenticationException("Account is not active")
        token = create_access_token({"sub": user.id, "tenant_id": tenant.id})
        current = await self._build_user(
            user.id, tenant.id, user.email, f"{user.first_name} {user.last_name}".strip()
        )
        return token, current

    async def resolve_token(self, token: str) -> AuthenticatedUser:
        """Return the caller for a bearer token, with roles and permissions loaded."""
        try:
            payload = verify_token(token)
        except TokenExpiredError:
            raise AuthenticationException("Token expired") from None
        except ValueError:
            raise AuthenticationException("Invalid token") from None
        user = await self._user_repo.get_by_id_and_tenant(payload["sub"], payload["tenant_id"])
        if user is None:
            raise AuthenticationException("Invalid token")
        if user.status != UserStatus.ACTIVE.value:
            raise AuthenticationException("Account is not active")
        return await self._build_user(user.id, user.tenant_id, user.email, user.name)
