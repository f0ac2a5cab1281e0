"""Store ownership checks and store setup.

Every store-scoped operation starts here: the caller id comes from the bearer
token, never from the request body.
"""
import logging

from sqlalchemy.orm import Session

from pharmacy_pos.core.audit import AuditLog
from pharmacy_pos.core.exceptions import AuthorizationError, NotFoundError
from pharmacy_pos.models.store import Store
from pharmacy_pos.schemas.store import StoreSetup

logger = logging.getLogger(__name__)


def verify_store_owner(db: Session, store_id: str, user_id: str, action: str) -> Store:
    """
    Load the store only if `user_id` owns it.

    SECURITY: Same AuthorizationError whether the store is missing or owned by
    someone else, so callers can't probe for store ids.
    """
    store = db.query(Store).filter(Store.id == store_id, Store.owner_user_id == user_id).first()
    if store is None:
        logger.warning(f"Store verification failed for user {user_id}, store {store_id}")
        AuditLog.log_access_denied(action, "store", store_id, user_id, "Store not found or not owned by caller")
        raise AuthorizationError()
    logger.info(f"Store {store_id} ownership verified for user {user_id}")
    return store


def get_store_for_owner(db: Session, user_id: str) -> Store:
    store = db.query(Store).filter(Store.owner_user_id == user_id).first()
    if store is None:
        raise NotFoundError("Store not found. Please complete Store Setup first.")
    return store


def upsert_store(db: Session, user_id: str, data: StoreSetup) -> Store:
    """Owner creates or edits their store. One store per owner (unique owner_user_id)."""
    store = db.query(Store).filter(Store.owner_user_id == user_id).first()
    created = store is None
    if created:
        store = Store(owner_user_id=user_id)
        db.add(store)

    store.name = data.name
    store.address = data.address
    store.city = data.city
    store.state = data.state
    store.zip_code = data.zip_code
    store.latitude = data.latitude
    store.longitude = data.longitude

    db.commit()
    db.refresh(store)
    AuditLog.log_action("create" if created else "update", "store", store.id, user_id)
    return store
