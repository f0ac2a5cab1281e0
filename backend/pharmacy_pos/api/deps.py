"""FastAPI dependencies: DB session and caller identity from the bearer token.

The caller id is passed explicitly into every service call; there is no
global session or user object.
"""
from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from pharmacy_pos.core.exceptions import AuthenticationError
from pharmacy_pos.core.security import decode_access_token
from pharmacy_pos.db.session import SessionLocal
from pharmacy_pos.models.store import Store
from pharmacy_pos.services.store_service import get_store_for_owner

security = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Verify `Authorization: Bearer <token>` and return the caller id."""
    if not credentials or not credentials.credentials:
        raise AuthenticationError("Missing Authorization header.")

    sub = decode_access_token(credentials.credentials)
    if not sub:
        raise AuthenticationError("Authentication required or token invalid.")
    return sub


def get_current_store(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> Store:
    """The caller's own store. 404 until store setup is done."""
    return get_store_for_owner(db, user_id)
