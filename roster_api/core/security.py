from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional

from jose import JWTError, jwt

from roster_api.core.context import CallerContext
from roster_api.core.settings import get_app_settings


# PUBLIC_INTERFACE
def create_access_token(
    subject: str,
    roles: Iterable[str] | None = None,
    domain: str | None = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """Create a signed access token with subject (user id), roles and domain claims."""
    settings = get_app_settings()
    now = datetime.now(tz=timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: Dict[str, Any] = {
        "sub": subject,
        "roles": list(roles or []),
        "domain": domain or "",
        "exp": expire,
        "iat": now,
        "type": "access",
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


# PUBLIC_INTERFACE
def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT; raises JWTError if invalid/expired."""
    settings = get_app_settings()
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


# PUBLIC_INTERFACE
def caller_from_token(token: str) -> CallerContext:
    """
    Build the CallerContext carried by an access token.

    Raises:
        JWTError: if the token is invalid, expired or has no subject.
    """
    payload = decode_token(token)
    subject = payload.get("sub")
    if not subject:
        raise JWTError("Token has no subject")
    roles = payload.get("roles") or []
    return CallerContext.build(subject, roles=roles, domain=payload.get("domain"))
