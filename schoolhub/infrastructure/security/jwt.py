"""JWT access tokens (python-jose, HS256 by default).

Claims: sub (user id), tenant_id, exp. Secret and algorithm come from settings.
"""

from datetime import timedelta
from typing import Any, cast

from jose import ExpiredSignatureError, JWTError, jwt

from schoolhub.core.config import get_settings
from schoolhub.shared.utils.datetime import utc_now


class TokenExpiredError(ValueError):
    """The token was well-formed but its exp claim has passed."""


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT carrying data plus an exp claim.

    Args:
        data: Claims to encode (sub, tenant_id).
        expires_delta: Optional TTL; else settings.access_token_expire_minutes.
    """
    settings = get_settings()
    to_encode = data.copy()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = utc_now() + ttl
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Raises:
        TokenExpiredError: If the token has expired.
        ValueError: If the token is invalid or missing sub/tenant_id.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub") or not payload.get("tenant_id"):
        raise ValueError("Token missing required claims: sub, tenant_id")
    return payload
