"""Auth API schemas."""

from pydantic import EmailStr, Field

from schoolhub.schemas.common import ApiModel


class LoginRequest(ApiModel):
    """Request body for login. The tenant is identified by its domain."""

    tenant_domain: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)


class CurrentUserResponse(ApiModel):
    id: str
    tenant_id: str
    email: str
    name: str
    roles: list[str]
    permissions: list[str]


class TokenResponse(ApiModel):
    """JWT token response plus the caller's profile."""

    access_token: str
    token_type: str = "bearer"
    user: CurrentUserResponse
