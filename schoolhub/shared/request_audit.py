"""Helpers for audit logging: derive request metadata from a Starlette Request."""

from __future__ import annotations

from starlette.requests import Request

from schoolhub.shared.enums import AuditAction

# Path prefix to strip (e.g. /api/v1); first segment = resource, second = resource id
API_PREFIX = "/api/v1"

UNKNOWN_USER_AGENT = "unknown"

_METHOD_ACTIONS: dict[str, AuditAction] = {
    "GET": AuditAction.READ,
    "HEAD": AuditAction.READ,
    "POST": AuditAction.CREATE,
    "PUT": AuditAction.UPDATE,
    "PATCH": AuditAction.UPDATE,
    "DELETE": AuditAction.DELETE,
}


def get_audit_request_context(request: Request) -> tuple[str | None, str | None, str]:
    """Return (request_id, ip_address, user_agent) for audit log entries.

    request_id comes from request state (RequestIDMiddleware), the IP from
    X-Forwarded-For (first hop) or request.client.host, the user agent from
    its header ("unknown" when absent).
    """
    request_id = getattr(request.state, "request_id", None)
    client_host = request.client.host if request.client else None
    forwarded = request.headers.get("X-Forwarded-For")
    ip_address = (forwarded.split(",")[0].strip() if forwarded else None) or client_host
    user_agent = request.headers.get("User-Agent") or UNKNOWN_USER_AGENT
    return (request_id, ip_address, user_agent)


def get_audit_resource_from_path(path: str) -> tuple[str, str | None]:
    """Infer (resource, resource_id) from path. E.g. /api/v1/roles/abc -> (roles, abc)."""
    if not path.startswith(API_PREFIX + "/"):
        return (path, None)
    rest = path[len(API_PREFIX) :].strip("/")
    if not rest:
        return (path, None)
    parts = rest.split("/")
    resource = parts[0]
    resource_id = parts[1] if len(parts) > 1 else None
    return (resource, resource_id)


def get_audit_action_from_method(method: str) -> str:
    """Map HTTP method to the default audit action (GET -> READ, POST -> CREATE, ...)."""
    action = _METHOD_ACTIONS.get(method.upper())
    return action.value if action else method.upper()
