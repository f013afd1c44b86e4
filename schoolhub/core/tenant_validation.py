"""Tenant id format check shared by the tenant gate and the audit middleware.

A header value that fails this check is treated as absent, never trusted.
"""

import re

TENANT_ID_MAX_LENGTH = 64
_TENANT_ID_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


def is_valid_tenant_id_format(value: str | None) -> bool:
    """True for non-empty cuid-like ids of at most TENANT_ID_MAX_LENGTH characters."""
    if not value or len(value) > TENANT_ID_MAX_LENGTH:
        return False
    return bool(_TENANT_ID_RE.fullmatch(value))
