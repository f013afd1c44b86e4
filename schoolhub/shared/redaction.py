"""Redaction of secrets in payloads written to the audit trail.

Any mapping key that contains one of SENSITIVE_KEY_FRAGMENTS (case-insensitive
substring) has its value replaced by REDACTED_MARKER. Nested dicts and lists
are walked to any depth. Inputs are never mutated.
"""

from typing import Any

REDACTED_MARKER = "[REDACTED]"

SENSITIVE_KEY_FRAGMENTS: tuple[str, ...] = ("password", "token", "secret", "key", "auth")


def is_sensitive_key(key: object) -> bool:
    """Return True if key (as text) contains a deny-listed fragment."""
    lowered = str(key).lower()
    return any(fragment in lowered for fragment in SENSITIVE_KEY_FRAGMENTS)


def redact(value: Any) -> Any:
    """Return a copy of value with sensitive keys masked, recursively."""
    if isinstance(value, dict):
        return {
            k: REDACTED_MARKER if is_sensitive_key(k) else redact(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value
