"""Request id middleware.

Forwards a well-formed client X-Request-ID or mints a new one, stores it in
request.state for the audit trail and log lines, and echoes it on the response.
Raw ASGI so streamed responses and background tasks are left alone.
"""

import re
import uuid
from typing import Callable

REQUEST_ID_MAX_LENGTH = 64
_REQUEST_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def _first_header(scope: dict, name: str) -> str | None:
    wanted = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == wanted:
            return value.decode("utf-8", errors="replace")
    return None


def normalize_request_id(raw: str | None) -> str:
    """Keep a safe client id; anything else (missing, too long, odd characters) gets a uuid4."""
    candidate = (raw or "").strip()
    if _REQUEST_ID_RE.match(candidate):
        return candidate
    return str(uuid.uuid4())


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = normalize_request_id(_first_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id
        encoded = (header_name.encode(), request_id.encode())

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [*message.get("headers", []), encoded]
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
