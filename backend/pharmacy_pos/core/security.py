"""Bearer token verification.

Tokens are HS256 JWTs issued by the external identity provider; `sub` is the
stable caller id that stores are owned by. Password handling lives with the
provider, not here.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from pharmacy_pos.core.config import settings

logger = logging.getLogger(__name__)


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """Mint a token the way the identity provider does. Used by tests and dev tooling."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {"sub": subject, "exp": expire}
    if settings.JWT_AUDIENCE:
        claims["aud"] = settings.JWT_AUDIENCE
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Return the caller id (`sub`) or None if the token is invalid or expired."""
    options = {} if settings.JWT_AUDIENCE else {"verify_aud": False}
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE or None,
            options=options,
        )
    except JWTError as e:
        logger.info(f"Token rejected: {e}")
        return None
    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        return None
    return sub
