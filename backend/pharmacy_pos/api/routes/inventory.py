"""Inventory batches of the caller's store."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharmacy_pos.api.deps import get_current_store, get_current_user_id, get_db
from pharmacy_pos.models.store import Store
from pharmacy_pos.schemas.inventory import InventoryCreate
from pharmacy_pos.services.inventory_service import add_batch, list_batches, serialize_batch

router = APIRouter()


@router.get("", response_model=list)
def list_inventory(
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    store: Store = Depends(get_current_store),
):
    """Batches with medicine name and manufacturer, newest first."""
    return [serialize_batch(b) for b in list_batches(db, store, search)]


@router.post("", response_model=dict)
def create_inventory_batch(
    data: InventoryCreate,
    db: Session = Depends(get_db),
    store: Store = Depends(get_current_store),
    user_id: str = Depends(get_current_user_id),
):
    """Add one received batch of a catalog medicine."""
    batch = add_batch(db, store, user_id, data)
    return {**serialize_batch(batch), "message": f"{batch.medicine.name} added successfully."}
