"""Permissions API: the global catalog (read-only)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from schoolhub.api.v1.dependencies import authorize, get_role_service
from schoolhub.application.dtos.user import AuthenticatedUser
from schoolhub.application.services.role_service import RoleService
from schoolhub.schemas.permission import PermissionCatalogResponse, PermissionResponse

router = APIRouter()


@router.get("", response_model=PermissionCatalogResponse)
async def list_permissions(
    _: Annotated[AuthenticatedUser, Depends(authorize("permissions:read"))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    permissions, grouped = await role_service.list_permissions()
    return PermissionCatalogResponse(
        items=[PermissionResponse.model_validate(p) for p in permissions],
        grouped={
            resource: [PermissionResponse.model_validate(p) for p in items]
            for resource, items in grouped.items()
        },
    )
