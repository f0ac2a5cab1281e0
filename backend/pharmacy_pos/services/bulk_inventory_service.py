"""
Bulk inventory import: validate spreadsheet rows, insert the good ones.

Each row is judged on its own. A bad row becomes an entry in `errors` with
its row number and original data; it never stops the rest of the upload.
All valid rows are then inserted in a single statement inside one
transaction, so the insert either lands completely or not at all.

Expiry dates are stricter than prices: an unparseable price is stored as
null, an unparseable expiry date rejects the row.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pharmacy_pos.core.audit import AuditLog
from pharmacy_pos.core.exceptions import DomainError, PersistenceError
from pharmacy_pos.core.parsing import (
    is_blank,
    parse_date,
    parse_optional_decimal,
    parse_optional_text,
    parse_positive_quantity,
)
from pharmacy_pos.models.inventory import InventoryBatch
from pharmacy_pos.schemas.inventory import BulkImportResult, BulkInventoryPayload, RowError
from pharmacy_pos.services.medicine_resolver import AmbiguousMedicine, MedicineNotFound, MedicineResolver
from pharmacy_pos.services.store_service import verify_store_owner

logger = logging.getLogger(__name__)

# snake_case first, then the spreadsheet client's camelCase
FIELD_ALIASES = {
    "row_number": ("row_number", "__rowNum__", "rowNum"),
    "medicine_name": ("medicine_name", "medicineName"),
    "batch_number": ("batch_number", "batchNumber"),
    "quantity": ("quantity",),
    "mrp": ("mrp",),
    "purchase_price": ("purchase_price", "purchasePrice"),
    "expiry_date": ("expiry_date", "expiryDate"),
}


class RowRejected(Exception):
    pass


def _field(row: Dict[str, Any], name: str) -> Any:
    for key in FIELD_ALIASES[name]:
        if key in row:
            return row[key]
    return None


def _row_number(row: Dict[str, Any], position: int) -> int:
    value = _field(row, "row_number")
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return position


def validate_row(row: Dict[str, Any], store_id: str, resolver: MedicineResolver) -> Dict[str, Any]:
    """Turn one raw row into inventory insert values or raise RowRejected."""
    name = _field(row, "medicine_name")
    if not isinstance(name, str) or not name.strip():
        raise RowRejected("Missing or invalid 'Medicine Name'.")

    quantity = parse_positive_quantity(_field(row, "quantity"))
    if quantity is None:
        raise RowRejected("Missing or invalid 'Quantity' (must be a positive number).")

    try:
        medicine_id = resolver.resolve(name)
    except (MedicineNotFound, AmbiguousMedicine) as e:
        raise RowRejected(str(e))

    raw_expiry = _field(row, "expiry_date")
    expiry_date: Optional[str] = parse_date(raw_expiry)
    if not is_blank(raw_expiry) and expiry_date is None:
        raise RowRejected(f"Invalid 'Expiry Date' format for value: {raw_expiry}")

    return {
        "store_id": store_id,
        "medicine_id": medicine_id,
        "batch_number": parse_optional_text(_field(row, "batch_number")),
        "quantity": quantity,
        "mrp": parse_optional_decimal(_field(row, "mrp")),
        "purchase_price": parse_optional_decimal(_field(row, "purchase_price")),
        "expiry_date": date.fromisoformat(expiry_date) if expiry_date else None,
    }


def classify_rows(
    db: Session, store_id: str, rows: List[Dict[str, Any]]
) -> Tuple[List[Dict[str, Any]], List[RowError]]:
    """Split rows into insert candidates and row errors, preserving input order."""
    resolver = MedicineResolver(db)
    candidates: List[Dict[str, Any]] = []
    errors: List[RowError] = []

    for position, row in enumerate(rows, start=1):
        row_number = _row_number(row, position)
        try:
            candidates.append(validate_row(row, store_id, resolver))
        except RowRejected as e:
            logger.warning(f"Skipping row {row_number}: {e}")
            errors.append(RowError(row_number=row_number, error=str(e), row_data=row))

    return candidates, errors


def build_result(total_rows: int, inserted: int, errors: List[RowError]) -> BulkImportResult:
    if errors:
        message = f"Processed {total_rows} rows. Inserted {inserted}, Skipped {len(errors)}."
    else:
        message = f"Successfully inserted {inserted} inventory items."
    return BulkImportResult(
        success=not errors and inserted > 0,
        insertedCount=inserted,
        skippedCount=len(errors),
        errors=errors,
        message=message,
    )


def process_bulk_inventory(db: Session, user_id: str, payload: BulkInventoryPayload) -> BulkImportResult:
    """
    Validate and insert an uploaded inventory sheet for `user_id`'s store.

    Partial success is normal: the result lists inserted and skipped counts
    plus one error per rejected row.

    Raises:
        AuthorizationError: caller doesn't own the store (before any row is read)
        PersistenceError: the bulk insert failed; no rows were added
    """
    rows = payload.inventoryItems
    logger.info(f"Processing bulk inventory for user {user_id}, store {payload.store_id}, rows: {len(rows)}")
    try:
        verify_store_owner(db, payload.store_id, user_id, action="import")
        candidates, errors = classify_rows(db, payload.store_id, rows)
        logger.info(f"Validation complete. Valid rows: {len(candidates)}, errors: {len(errors)}")

        if candidates:
            db.execute(insert(InventoryBatch), candidates)
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError("Database bulk insert failed. No inventory items were added.", original_error=e)
    except Exception:
        db.rollback()
        raise

    inserted = len(candidates)
    if inserted:
        logger.info(f"Bulk insert successful for {inserted} items")
        AuditLog.log_action(
            "import", "inventory", payload.store_id, user_id,
            changes={"inserted": inserted, "skipped": len(errors)},
        )
    return build_result(len(rows), inserted, errors)
