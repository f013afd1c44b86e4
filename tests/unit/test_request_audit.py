"""Tests for request metadata helpers used by the audit trail."""

from starlette.requests import Request

from schoolhub.shared.request_audit import (
    get_audit_action_from_method,
    get_audit_request_context,
    get_audit_resource_from_path,
)


def _request(headers: dict[str, str] | None = None, state: dict | None = None) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/api/v1/roles",
            "query_string": b"",
            "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
            "client": ("10.0.0.7", 5123),
            "state": state or {},
        }
    )


def test_action_from_method() -> None:
    assert get_audit_action_from_method("GET") == "READ"
    assert get_audit_action_from_method("head") == "READ"
    assert get_audit_action_from_method("POST") == "CREATE"
    assert get_audit_action_from_method("PUT") == "UPDATE"
    assert get_audit_action_from_method("PATCH") == "UPDATE"
    assert get_audit_action_from_method("DELETE") == "DELETE"
    assert get_audit_action_from_method("OPTIONS") == "OPTIONS"


def test_resource_from_path() -> None:
    assert get_audit_resource_from_path("/api/v1/roles") == ("roles", None)
    assert get_audit_resource_from_path("/api/v1/roles/abc") == ("roles", "abc")
    assert get_audit_resource_from_path("/api/v1/users/u1/roles") == ("users", "u1")
    assert get_audit_resource_from_path("/docs") == ("/docs", None)


def test_request_context_prefers_forwarded_for() -> None:
    request = _request(
        {"X-Forwarded-For": "203.0.113.9, 10.0.0.1", "User-Agent": "pytest"},
        state={"request_id": "req-1"},
    )
    assert get_audit_request_context(request) == ("req-1", "203.0.113.9", "pytest")


def test_request_context_defaults() -> None:
    assert get_audit_request_context(_request()) == (None, "10.0.0.7", "unknown")
