"""Sale function: checkout a cart into a bill. See services/sale_service for the transaction."""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from pharmacy_pos.api.deps import get_current_user_id, get_db
from pharmacy_pos.api.function_route import FunctionRoute
from pharmacy_pos.core.config import settings
from pharmacy_pos.schemas.sale import SalePayload
from pharmacy_pos.services.sale_service import process_sale

router = APIRouter(route_class=FunctionRoute)


@router.options("/process-sale")
def process_sale_preflight():
    return PlainTextResponse("ok", headers=settings.FUNCTION_CORS_HEADERS)


@router.post("/process-sale", response_model=dict)
def process_sale_endpoint(
    payload: SalePayload,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    200 {success, saleId, bill_number}
    400 bad payload / not your store / insufficient stock
    401 missing or invalid token
    500 anything else (nothing was saved)
    """
    receipt = process_sale(db, user_id, payload)
    return receipt.model_dump(by_alias=True)
