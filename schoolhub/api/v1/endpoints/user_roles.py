"""User-role assignment API: list, assign and revoke roles of a user in the caller's tenant."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from schoolhub.api.v1.dependencies import (
    audit_action,
    authorize,
    get_role_service,
    get_role_service_for_write,
)
from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.application.services.role_service import RoleService
from schoolhub.core.limiter import limit_writes
from schoolhub.schemas.common import MessageResponse
from schoolhub.schemas.role import UserRoleAssignRequest, UserRoleResponse
from schoolhub.shared.enums import AuditAction

router = APIRouter()


@router.get("/{user_id}/roles", response_model=list[UserRoleResponse])
async def list_user_roles(
    user_id: str,
    current_user: Annotated[AuthenticatedUser, Depends(authorize("roles:read"))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    assignments = await role_service.list_user_roles(current_user.tenant_id, user_id)
    return [UserRoleResponse.model_validate(a) for a in assignments]


@router.post(
    "/{user_id}/roles",
    response_model=MessageResponse,
    status_code=201,
    dependencies=[Depends(audit_action(AuditAction.ASSIGN))],
)
@limit_writes
async def assign_role(
    request: Request,
    user_id: str,
    body: UserRoleAssignRequest,
    current_user: Annotated[AuthenticatedUser, Depends(authorize("roles:assign"))],
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
):
    """Grant a role. Assigning a role the user already holds succeeds without change."""
    created = await role_service.assign_role_to_user(
        current_user.tenant_id, user_id, body.role_id, assigned_by=current_user.id
    )
    message = "Role assigned successfully" if created else "Role already assigned"
    return MessageResponse(message=message)


@router.delete(
    "/{user_id}/roles/{role_id}",
    response_model=MessageResponse,
    dependencies=[Depends(audit_action(AuditAction.REVOKE))],
)
@limit_writes
async def remove_role(
    request: Request,
    user_id: str,
    role_id: str,
    current_user: Annotated[AuthenticatedUser, Depends(authorize("roles:assign"))],
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
):
    await role_service.remove_role_from_user(current_user.tenant_id, user_id, role_id)
    return MessageResponse(message="Role removed successfully")
