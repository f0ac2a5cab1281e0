"""Bulk inventory function: validate an uploaded sheet and insert the valid rows."""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from pharmacy_pos.api.deps import get_current_user_id, get_db
from pharmacy_pos.api.function_route import BulkImportRoute
from pharmacy_pos.core.config import settings
from pharmacy_pos.schemas.inventory import BulkInventoryPayload
from pharmacy_pos.services.bulk_inventory_service import process_bulk_inventory

router = APIRouter(route_class=BulkImportRoute)


@router.options("/process-bulk-inventory")
def process_bulk_inventory_preflight():
    return PlainTextResponse("ok", headers=settings.FUNCTION_CORS_HEADERS)


@router.post("/process-bulk-inventory", response_model=dict)
def process_bulk_inventory_endpoint(
    payload: BulkInventoryPayload,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """200 even when some rows were skipped; the client reads `errors`."""
    result = process_bulk_inventory(db, user_id, payload)
    return result.model_dump()
