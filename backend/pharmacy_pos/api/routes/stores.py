"""Store setup: one store per owner, created or edited in place."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pharmacy_pos.api.deps import get_current_store, get_current_user_id, get_db
from pharmacy_pos.models.store import Store
from pharmacy_pos.schemas.store import StoreResponse, StoreSetup
from pharmacy_pos.services.store_service import upsert_store

router = APIRouter()


@router.get("", response_model=StoreResponse)
def get_store(store: Store = Depends(get_current_store)):
    """Current owner's store. 404 if not set up yet."""
    return store


@router.put("", response_model=StoreResponse)
def save_store(
    data: StoreSetup,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Create the store on first save, update it afterwards."""
    return upsert_store(db, user_id, data)
