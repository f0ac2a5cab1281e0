"""Master catalog search for the add-to-inventory form."""
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharmacy_pos.api.deps import get_current_user_id, get_db
from pharmacy_pos.schemas.inventory import MedicineRecord
from pharmacy_pos.services.medicine_resolver import search_catalog

router = APIRouter()


@router.get("", response_model=List[MedicineRecord])
def search_medicines(
    search: str = Query("", description="Part of the medicine name"),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return search_catalog(db, search, limit=limit)
