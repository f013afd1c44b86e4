"""Authentication, authorization and audit-annotation dependencies."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.application.services.auth_service import AuthService
from schoolhub.application.services.authorization_service import AuthorizationService
from schoolhub.core.config import get_settings
from schoolhub.domain.exceptions import AuthenticationException
from schoolhub.domain.policies import PolicyLike, as_policy
from schoolhub.shared.enums import AuditAction

from .repositories import get_auth_service

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthenticatedUser:
    """Resolve the bearer token to the caller; 401 when missing or invalid.

    The caller is also stored on request.state so the audit middleware can
    attribute the request, including requests that are later denied.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Access token required")
    user = await auth_service.resolve_token(credentials.credentials)
    request.state.current_user = user
    return user


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


def requested_tenant_id(request: Request) -> str | None:
    """Tenant named by the tenant header, if the client sent one."""
    value = request.headers.get(get_settings().tenant_header_name)
    if not value or not value.strip():
        return None
    return value.strip()


def authorize(requirement: PolicyLike | Iterable[PolicyLike]):
    """Dependency factory: authenticated, same tenant, and the policy holds.

    A plain list means any one of the permissions suffices. The tenant check
    runs first and cannot be satisfied by any permission.
    """
    policy = as_policy(requirement)

    async def _authorize(request: Request, current_user: CurrentUser) -> AuthenticatedUser:
        AuthorizationService.ensure_same_tenant(
            current_user.tenant_id, requested_tenant_id(request)
        )
        AuthorizationService.require_granted(current_user.permissions, policy)
        return current_user

    return _authorize


def audit_action(action: AuditAction | str, resource: str | None = None):
    """Dependency factory: override the audit action (and resource) recorded for this route."""

    async def _annotate(request: Request) -> None:
        request.state.audit_action = getattr(action, "value", action)
        if resource is not None:
            request.state.audit_resource = resource

    return _annotate
