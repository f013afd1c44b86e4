"""Auth API: login and current user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from schoolhub.api.v1.dependencies import CurrentUser, audit_action, get_auth_service
from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.application.services.auth_service import AuthService
from schoolhub.core.limiter import limit_auth
from schoolhub.schemas.auth import CurrentUserResponse, LoginRequest, TokenResponse
from schoolhub.shared.enums import AuditAction

router = APIRouter()


def _to_response(user: AuthenticatedUser) -> CurrentUserResponse:
    return CurrentUserResponse(
        id=user.id,
        tenant_id=user.tenant_id,
        email=user.email,
        name=user.name,
        roles=list(user.roles),
        permissions=sorted(user.permissions),
    )


@router.post(
    "/login",
    response_model=TokenResponse,
    dependencies=[Depends(audit_action(AuditAction.LOGIN, "auth"))],
)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Authenticate with tenant domain, email and password; return a JWT.

    Failed attempts are audited as anonymous LOGIN failures.
    """
    token, user = await auth_service.login(body.tenant_domain, body.email, body.password)
    request.state.current_user = user
    return TokenResponse(access_token=token, user=_to_response(user))


@router.get("/me", response_model=CurrentUserResponse)
async def me(current_user: CurrentUser):
    """The caller with roles and effective permissions."""
    return _to_response(current_user)
