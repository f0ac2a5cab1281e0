"""
Reports API: dashboard cards and alert lists for the caller's store.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharmacy_pos.api.deps import get_current_store, get_db
from pharmacy_pos.models.store import Store
from pharmacy_pos.services.report_service import store_report

router = APIRouter()


@router.get("/summary")
def get_report_summary(
    start: Optional[date] = Query(None, description="Sales range start (defaults to first day of this month)"),
    end: Optional[date] = Query(None, description="Sales range end, inclusive (defaults to last day of this month)"),
    db: Session = Depends(get_db),
    store: Store = Depends(get_current_store),
):
    """
    Returns:
        inventory_summary, low_stock_items, expiring_soon_items, sales_summary
    """
    return store_report(db, store, start=start, end=end)
