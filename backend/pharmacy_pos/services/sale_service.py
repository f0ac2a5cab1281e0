"""
Sale transaction processing.

================================================================================
ATOMICITY
================================================================================

A checkout is one database transaction:

    verify store owner
    lock every cart batch (SELECT ... FOR UPDATE, ordered by id)
    check stock for every line
    INSERT sale               (savepoint; retried on bill number collision)
    INSERT sale_items
    UPDATE inventory SET quantity = quantity - n WHERE quantity >= n
    COMMIT

Any exception before COMMIT rolls the whole thing back: no sale row, no
items, no quantity change. The guarded UPDATE re-checks stock at write time,
so even a database without row locks cannot be oversold; a zero rowcount
aborts the transaction exactly like a failed pre-check.

Stock checks and the decrement must never be split into separate
transactions or separate API calls.
================================================================================
"""
import logging
import secrets
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pharmacy_pos.core.audit import AuditLog
from pharmacy_pos.core.config import settings
from pharmacy_pos.core.exceptions import (
    DomainError,
    InsufficientStockError,
    InventoryNotFoundError,
    NotFoundError,
    PersistenceError,
)
from pharmacy_pos.models.inventory import InventoryBatch
from pharmacy_pos.models.sale import Sale, SaleItem
from pharmacy_pos.models.store import Store
from pharmacy_pos.schemas.sale import SaleItemPayload, SalePayload, SaleReceipt
from pharmacy_pos.services.store_service import verify_store_owner

logger = logging.getLogger(__name__)


def generate_bill_number(store_id: str, now: Optional[datetime] = None) -> str:
    """
    PREFIX-YYYYMMDD-HHMMSS-RRR, e.g. "3F2A-20261019-143005-042".

    Unique in practice, not by construction: the unique index on
    sales.bill_number catches the rare collision and the caller retries.
    """
    now = now or datetime.now(timezone.utc)
    prefix = store_id[:4].upper()
    return f"{prefix}-{now:%Y%m%d}-{now:%H%M%S}-{secrets.randbelow(1000):03d}"


def _lock_batches(db: Session, store_id: str, inventory_ids: List[str]) -> Dict[str, InventoryBatch]:
    # Fixed lock order (by id) so two carts sharing batches can't deadlock
    batches = (
        db.query(InventoryBatch)
        .filter(InventoryBatch.store_id == store_id, InventoryBatch.id.in_(inventory_ids))
        .order_by(InventoryBatch.id)
        .with_for_update()
        .all()
    )
    return {b.id: b for b in batches}


def check_stock(batches: Dict[str, InventoryBatch], items: List[SaleItemPayload]) -> None:
    """Raise on the first line that references a foreign batch or asks for too much."""
    for item in items:
        batch = batches.get(item.inventory_id)
        if batch is None:
            raise InventoryNotFoundError(item.inventory_id)
        if batch.quantity < item.quantity_sold:
            raise InsufficientStockError(item.medicine_name, batch.quantity, item.quantity_sold)


def _insert_sale(db: Session, payload: SalePayload) -> Sale:
    attempts = max(1, settings.BILL_NUMBER_ATTEMPTS)
    last_error = None
    for attempt in range(1, attempts + 1):
        sale = Sale(
            store_id=payload.store_id,
            bill_number=generate_bill_number(payload.store_id),
            customer_name=payload.customer_name,
            total_amount=payload.total_amount,
        )
        savepoint = db.begin_nested()
        try:
            db.add(sale)
            db.flush()
        except IntegrityError as e:
            savepoint.rollback()
            logger.warning(f"Bill number {sale.bill_number} collided (attempt {attempt}/{attempts})")
            last_error = e
            continue
        savepoint.commit()
        return sale
    raise PersistenceError("Could not allocate a unique bill number. Please retry.", original_error=last_error)


def _insert_items(db: Session, sale: Sale, items: List[SaleItemPayload]) -> None:
    for item in items:
        db.add(SaleItem(
            sale_id=sale.id,
            inventory_id=item.inventory_id,
            medicine_name=item.medicine_name.strip(),
            quantity_sold=item.quantity_sold,
            price_per_unit=item.price_per_unit,
            total_price=item.total_price,
        ))
    db.flush()


def decrement_stock(db: Session, store_id: str, items: List[SaleItemPayload]) -> None:
    for item in items:
        result = db.execute(
            update(InventoryBatch)
            .where(
                InventoryBatch.id == item.inventory_id,
                InventoryBatch.store_id == store_id,
                InventoryBatch.quantity >= item.quantity_sold,
            )
            .values(quantity=InventoryBatch.quantity - item.quantity_sold)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            current = db.query(InventoryBatch.quantity).filter(InventoryBatch.id == item.inventory_id).scalar()
            raise InsufficientStockError(item.medicine_name, current or 0, item.quantity_sold)


def process_sale(db: Session, user_id: str, payload: SalePayload) -> SaleReceipt:
    """
    Record a checkout for `user_id`'s store and decrement stock, all or nothing.

    Args:
        db: Session with no pending work the caller wants to keep
        user_id: verified caller id from the bearer token
        payload: validated cart (non-empty, distinct batches, positive quantities)

    Returns:
        SaleReceipt with the new sale id and bill number

    Raises:
        AuthorizationError: caller doesn't own payload.store_id
        InventoryNotFoundError: a line references a batch outside the store
        InsufficientStockError: a line asks for more than the batch holds
        PersistenceError: the database failed; nothing was written
    """
    logger.info(f"Processing sale for user {user_id}, store {payload.store_id}, {len(payload.items)} line(s)")
    try:
        verify_store_owner(db, payload.store_id, user_id, action="sell")

        batches = _lock_batches(db, payload.store_id, [i.inventory_id for i in payload.items])
        check_stock(batches, payload.items)

        sale = _insert_sale(db, payload)
        _insert_items(db, sale, payload.items)
        decrement_stock(db, payload.store_id, payload.items)

        receipt = SaleReceipt(sale_id=sale.id, bill_number=sale.bill_number)
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("Database transaction failed. No changes were saved.", original_error=e)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Sale {receipt.sale_id} committed with bill number {receipt.bill_number}")
    AuditLog.log_action(
        "create", "sale", receipt.sale_id, user_id,
        changes={
            "bill_number": receipt.bill_number,
            "total_amount": str(payload.total_amount),
            "items": {i.inventory_id: i.quantity_sold for i in payload.items},
        },
    )
    return receipt


def get_sale_for_owner(db: Session, sale_id: str, user_id: str) -> Sale:
    """Bill lookup. Another owner's sale looks exactly like a missing one."""
    sale = (
        db.query(Sale)
        .join(Store, Sale.store_id == Store.id)
        .filter(Sale.id == sale_id, Store.owner_user_id == user_id)
        .first()
    )
    if sale is None:
        raise NotFoundError("Bill not found")
    return sale
