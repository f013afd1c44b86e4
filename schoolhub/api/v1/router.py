"""API v1 router aggregation."""

from fastapi import APIRouter

from schoolhub.api.v1.endpoints import (
    audit_logs,
    auth,
    health,
    leave,
    notifications,
    permissions,
    roles,
    user_roles,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
api_router.include_router(user_roles.router, prefix="/users", tags=["user-roles"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit-logs"])
api_router.include_router(
    notifications.router, prefix="/notifications", tags=["notifications"]
)
api_router.include_router(leave.router, prefix="/leave", tags=["leave"])
