"""Roles API: list, create, update (with permission-set replacement) and delete, tenant-scoped."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from schoolhub.api.v1.dependencies import authorize, get_role_service, get_role_service_for_write
from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.application.services.role_service import RoleService
from schoolhub.core.limiter import limit_writes
from schoolhub.schemas.common import MessageResponse
from schoolhub.schemas.role import RoleCreateRequest, RoleResponse, RoleUpdateRequest

router = APIRouter()


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    current_user: Annotated[AuthenticatedUser, Depends(authorize("roles:read"))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Roles of the caller's tenant with permissions, members and user count."""
    roles = await role_service.list_roles(current_user.tenant_id)
    return [RoleResponse.model_validate(r) for r in roles]


@router.post("", response_model=RoleResponse, status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreateRequest,
    current_user: Annotated[AuthenticatedUser, Depends(authorize("roles:create"))],
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
):
    created = await role_service.create_role(
        current_user.tenant_id, body.name, body.description, body.permission_ids
    )
    return RoleResponse.model_validate(created)


@router.put("/{role_id}", response_model=RoleResponse)
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdateRequest,
    current_user: Annotated[AuthenticatedUser, Depends(authorize("roles:update"))],
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
):
    """Update name/description; permissionIds, when sent, replaces the permission set."""
    updated = await role_service.update_role(
        current_user.tenant_id,
        role_id,
        name=body.name,
        description=body.description,
        permission_ids=body.permission_ids,
    )
    return RoleResponse.model_validate(updated)


@router.delete("/{role_id}", response_model=MessageResponse)
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    current_user: Annotated[AuthenticatedUser, Depends(authorize("roles:delete"))],
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
):
    await role_service.delete_role(current_user.tenant_id, role_id)
    return MessageResponse(message="Role deleted successfully")
