"""Inventory read and single-batch entry. Stock is only decremented by sale_service."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from pharmacy_pos.core.audit import AuditLog
from pharmacy_pos.core.exceptions import ValidationError
from pharmacy_pos.models.inventory import InventoryBatch
from pharmacy_pos.models.medicine import MasterMedicine
from pharmacy_pos.models.store import Store
from pharmacy_pos.schemas.inventory import InventoryCreate
from pharmacy_pos.services.medicine_resolver import escape_like

logger = logging.getLogger(__name__)


def serialize_batch(batch: InventoryBatch) -> dict:
    medicine = batch.medicine
    return {
        "id": batch.id,
        "medicine_id": batch.medicine_id,
        "medicine_name": medicine.name if medicine else None,
        "manufacturer": medicine.manufacturer if medicine else None,
        "batch_number": batch.batch_number,
        "quantity": batch.quantity,
        "purchase_price": float(batch.purchase_price) if batch.purchase_price is not None else None,
        "mrp": float(batch.mrp) if batch.mrp is not None else None,
        "expiry_date": batch.expiry_date.isoformat() if batch.expiry_date else None,
    }


def list_batches(db: Session, store: Store, search: Optional[str] = None) -> List[InventoryBatch]:
    q = (
        db.query(InventoryBatch)
        .options(joinedload(InventoryBatch.medicine))
        .filter(InventoryBatch.store_id == store.id)
    )
    if search and search.strip():
        q = q.join(MasterMedicine, InventoryBatch.medicine_id == MasterMedicine.id).filter(
            MasterMedicine.name.ilike(f"%{escape_like(search.strip())}%", escape="\\")
        )
    return q.order_by(InventoryBatch.created_at.desc(), InventoryBatch.id).all()


def add_batch(db: Session, store: Store, user_id: str, data: InventoryCreate) -> InventoryBatch:
    """Add one received batch to the store. Called from the manual entry form."""
    medicine = db.query(MasterMedicine).filter(MasterMedicine.id == data.medicine_id).first()
    if not medicine:
        raise ValidationError("Selected medicine is not in the master list.")

    batch = InventoryBatch(
        store_id=store.id,
        medicine_id=medicine.id,
        batch_number=(data.batch_number or "").strip() or None,
        quantity=data.quantity,
        purchase_price=data.purchase_price,
        mrp=data.mrp,
        expiry_date=data.expiry_date,
    )
    db.add(batch)
    db.commit()
    db.refresh(batch)

    logger.info(f"Added {data.quantity} x {medicine.name} to store {store.id}")
    AuditLog.log_action("create", "inventory", batch.id, user_id, changes={"medicine": medicine.name, "quantity": data.quantity})
    return batch
