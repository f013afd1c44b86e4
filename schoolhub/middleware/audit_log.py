"""API audit log middleware.

Records one AuditLog row per audited API request, success or failure.
Raw ASGI: it observes `receive` and `send` to copy the request body, the
response status and the response body, and passes every message through
unchanged. Once the app has finished sending, the write is handed to a
background task, so persisting the entry never delays or fails the request.

Request handlers refine the entry through request.state:
  current_user     AuthenticatedUser set by get_current_user
  audit_action     overrides the method-derived action (e.g. LOGIN, APPROVE)
  audit_resource   overrides the path-derived resource
  audit_resource_id
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Iterable
from typing import Any

from starlette.requests import Request

from schoolhub.application.dtos.audit_log import AuditLogEntryCreate
from schoolhub.application.interfaces import AuditEntryWriter
from schoolhub.core.tenant_validation import is_valid_tenant_id_format
from schoolhub.infrastructure.services.audit_writer import write_audit_entry
from schoolhub.shared.enums import AuditStatus
from schoolhub.shared.redaction import redact
from schoolhub.shared.request_audit import (
    API_PREFIX,
    get_audit_action_from_method,
    get_audit_request_context,
    get_audit_resource_from_path,
)

logger = logging.getLogger(__name__)

ANONYMOUS_EMAIL = "anonymous"
ANONYMOUS_NAME = "Anonymous"
TRUNCATED_MARKER = "[TRUNCATED]"
UNKNOWN_ERROR = "Unknown error"

# Strong references to in-flight writes; asyncio only keeps weak ones.
_pending_writes: set[asyncio.Task[None]] = set()


class _BodyCopy:
    """Bounded copy of a streamed body. Past the limit only the size is tracked."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.size = 0
        self._chunks: list[bytes] = []

    def feed(self, chunk: bytes) -> None:
        if not chunk:
            return
        self.size += len(chunk)
        if self.size <= self.limit:
            self._chunks.append(chunk)
        else:
            self._chunks.clear()

    @property
    def truncated(self) -> bool:
        return self.size > self.limit

    def parsed(self, content_type: str | None) -> Any:
        """JSON-decoded body, TRUNCATED_MARKER past the limit, None when empty or not JSON."""
        if self.size == 0:
            return None
        if self.truncated:
            return TRUNCATED_MARKER
        if not content_type or "json" not in content_type.lower():
            return None
        try:
            return json.loads(b"".join(self._chunks))
        except ValueError:
            return None


def derive_status(status_code: int) -> AuditStatus:
    """SUCCESS for 2xx responses, FAILURE for everything else."""
    return AuditStatus.SUCCESS if 200 <= status_code < 300 else AuditStatus.FAILURE


def extract_error_message(status_code: int, body: Any) -> str | None:
    """For status >= 400: the body's message or error field, else 'Unknown error'."""
    if status_code < 400:
        return None
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if value:
                return value if isinstance(value, str) else json.dumps(value, default=str)
    return UNKNOWN_ERROR


def is_audited_path(path: str, excluded_prefixes: Iterable[str]) -> bool:
    """Only API paths are audited, minus the excluded prefixes (audit-log API, health)."""
    if not path.startswith(API_PREFIX + "/"):
        return False
    return not any(path.startswith(prefix) for prefix in excluded_prefixes)


def _resource_id_from_params(path_params: dict[str, Any]) -> str | None:
    if "id" in path_params:
        return str(path_params["id"])
    ids = [str(v) for k, v in path_params.items() if k.endswith("_id")]
    return ids[-1] if ids else None


def build_audit_entry(
    scope: dict[str, Any],
    status_code: int,
    request_body: Any,
    response_body: Any,
    tenant_header_name: str = "X-Tenant-ID",
) -> AuditLogEntryCreate:
    """Assemble the audit entry for a completed request. Bodies are redacted here."""
    request = Request(scope)
    state = scope.get("state", {})
    user = state.get("current_user")
    path_params = dict(scope.get("path_params") or {})
    path_resource, path_resource_id = get_audit_resource_from_path(request.url.path)
    request_id, ip_address, user_agent = get_audit_request_context(request)

    if user is not None:
        tenant_id = user.tenant_id
    else:
        header_tenant = request.headers.get(tenant_header_name)
        tenant_id = header_tenant if header_tenant and is_valid_tenant_id_format(header_tenant) else None

    response_data = redact(response_body)
    action = state.get("audit_action") or get_audit_action_from_method(request.method)
    return AuditLogEntryCreate(
        tenant_id=tenant_id,
        user_id=user.id if user is not None else None,
        user_email=user.email if user is not None else ANONYMOUS_EMAIL,
        user_name=user.name if user is not None else ANONYMOUS_NAME,
        user_roles=tuple(user.roles) if user is not None else (),
        action=str(getattr(action, "value", action)),
        resource=state.get("audit_resource") or path_resource,
        resource_id=(
            state.get("audit_resource_id")
            or _resource_id_from_params(path_params)
            or path_resource_id
        ),
        details={
            "method": request.method,
            "path": request.url.path,
            "query": redact(dict(request.query_params)),
            "params": {k: str(v) for k, v in path_params.items()},
            "body": redact(request_body),
            "responseStatus": status_code,
            "responseData": response_data,
        },
        ip_address=ip_address,
        user_agent=user_agent,
        request_id=request_id,
        status=derive_status(status_code).value,
        error_message=extract_error_message(status_code, response_data),
    )


async def drain_pending_audit_writes(timeout: float | None = 5.0) -> None:
    """Wait for in-flight audit writes (shutdown, tests)."""
    if not _pending_writes:
        return
    _, still_pending = await asyncio.wait(set(_pending_writes), timeout=timeout)
    if still_pending:
        logger.warning("%d audit log writes still pending after drain", len(still_pending))


def _header(headers: Iterable[tuple[bytes, bytes]], name: bytes) -> str | None:
    for key, value in headers:
        if key.lower() == name:
            return value.decode("latin-1")
    return None


def AuditLogMiddleware(
    app: Callable,
    *,
    writer: AuditEntryWriter | None = None,
    enabled: bool = True,
    excluded_prefixes: Iterable[str] = (f"{API_PREFIX}/audit-logs", f"{API_PREFIX}/health"),
    max_body_bytes: int = 64 * 1024,
    tenant_header_name: str = "X-Tenant-ID",
) -> Callable:
    """Audit every API request after its response is sent. Raw ASGI."""
    excluded = tuple(excluded_prefixes)

    async def _persist(
        scope: dict[str, Any],
        status_code: int,
        request_body: Any,
        response_body: Any,
    ) -> None:
        try:
            entry = build_audit_entry(
                scope, status_code, request_body, response_body, tenant_header_name
            )
            persist = writer if writer is not None else write_audit_entry
            await persist(entry)
        except Exception:
            logger.warning(
                "Failed to write audit log for %s %s",
                scope.get("method"),
                scope.get("path"),
                exc_info=True,
            )

    def _schedule(
        scope: dict[str, Any],
        status_code: int,
        request_body: Any,
        response_body: Any,
    ) -> None:
        task = asyncio.create_task(_persist(scope, status_code, request_body, response_body))
        _pending_writes.add(task)
        task.add_done_callback(_pending_writes.discard)

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if (
            scope["type"] != "http"
            or not enabled
            or not is_audited_path(scope.get("path", ""), excluded)
        ):
            await app(scope, receive, send)
            return
        scope.setdefault("state", {})
        request_copy = _BodyCopy(max_body_bytes)
        response_copy = _BodyCopy(max_body_bytes)
        response_meta: dict[str, Any] = {"status": None, "content_type": None}
        request_content_type = _header(scope.get("headers", []), b"content-type")

        async def receive_wrapper() -> dict:
            message = await receive()
            if message["type"] == "http.request":
                request_copy.feed(message.get("body", b""))
            return message

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                response_meta["status"] = message["status"]
                response_meta["content_type"] = _header(
                    message.get("headers", []), b"content-type"
                )
            elif message["type"] == "http.response.body":
                response_copy.feed(message.get("body", b""))
            await send(message)

        try:
            await app(scope, receive_wrapper, send_wrapper)
        except Exception:
            # The outer error middleware turns this into a 500.
            _schedule(
                scope,
                500,
                request_copy.parsed(request_content_type),
                {"message": "Internal server error"},
            )
            raise
        _schedule(
            scope,
            response_meta["status"] or 500,
            request_copy.parsed(request_content_type),
            response_copy.parsed(response_meta["content_type"]),
        )

    return asgi_app
