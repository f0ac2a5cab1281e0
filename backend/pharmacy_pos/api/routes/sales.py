"""Bills: detail view and printable PDF for a completed sale."""
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from pharmacy_pos.api.deps import get_current_user_id, get_db
from pharmacy_pos.schemas.sale import SaleItemRecord, SaleRecord
from pharmacy_pos.schemas.store import StoreResponse
from pharmacy_pos.services.pdf_service import generate_bill_pdf
from pharmacy_pos.services.sale_service import get_sale_for_owner

router = APIRouter()


@router.get("/{sale_id}", response_model=dict)
def get_bill(
    sale_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Sale header, store details and line items for the print view."""
    sale = get_sale_for_owner(db, sale_id, user_id)
    return {
        "sale": SaleRecord.model_validate(sale).model_dump(mode="json"),
        "store": StoreResponse.model_validate(sale.store).model_dump(mode="json"),
        "items": [SaleItemRecord.model_validate(i).model_dump(mode="json") for i in sale.items],
    }


@router.get("/{sale_id}/pdf")
def download_bill_pdf(
    sale_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    sale = get_sale_for_owner(db, sale_id, user_id)
    pdf = generate_bill_pdf(sale, sale.store)
    return StreamingResponse(
        pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"inline; filename=bill_{sale.bill_number}.pdf"},
    )
