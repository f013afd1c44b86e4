"""Permission API schemas."""

from schoolhub.schemas.common import ApiModel


class PermissionResponse(ApiModel):
    id: str
    name: str
    resource: str
    action: str
    description: str | None


class PermissionCatalogResponse(ApiModel):
    """The global catalog, flat and grouped by resource."""

    items: list[PermissionResponse]
    grouped: dict[str, list[PermissionResponse]]
