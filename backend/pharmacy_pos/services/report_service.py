"""
Store reports for the dashboard.

- inventory summary: in-stock batches, how many are low, how many expire soon
- low stock list: 1..LOW_STOCK_THRESHOLD units left
- expiring soon list: expiry between today and today + EXPIRY_ALERT_DAYS
- sales summary: revenue and bill count between two dates (inclusive)
"""
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from pharmacy_pos.core.config import settings
from pharmacy_pos.core.exceptions import ValidationError
from pharmacy_pos.models.inventory import InventoryBatch
from pharmacy_pos.models.sale import Sale
from pharmacy_pos.models.store import Store
from pharmacy_pos.services.inventory_service import serialize_batch


def default_sales_range(today: date) -> Tuple[date, date]:
    """Current calendar month."""
    start = today.replace(day=1)
    next_month = (start + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(days=1)


def inventory_summary(db: Session, store: Store, today: date) -> dict:
    threshold = settings.LOW_STOCK_THRESHOLD
    expiry_limit = today + timedelta(days=settings.EXPIRY_ALERT_DAYS)
    in_stock = db.query(InventoryBatch).filter(
        InventoryBatch.store_id == store.id,
        InventoryBatch.quantity > 0,
    )
    return {
        "total_items": in_stock.count(),
        "low_stock_count": in_stock.filter(InventoryBatch.quantity <= threshold).count(),
        "expiring_soon_count": in_stock.filter(
            InventoryBatch.expiry_date.isnot(None),
            InventoryBatch.expiry_date >= today,
            InventoryBatch.expiry_date <= expiry_limit,
        ).count(),
    }


def low_stock_items(db: Session, store: Store) -> list:
    items = (
        db.query(InventoryBatch)
        .options(joinedload(InventoryBatch.medicine))
        .filter(
            InventoryBatch.store_id == store.id,
            InventoryBatch.quantity > 0,
            InventoryBatch.quantity <= settings.LOW_STOCK_THRESHOLD,
        )
        .order_by(InventoryBatch.quantity.asc(), InventoryBatch.id)
        .limit(settings.REPORT_LIST_LIMIT)
        .all()
    )
    return [serialize_batch(i) for i in items]


def expiring_soon_items(db: Session, store: Store, today: date) -> list:
    expiry_limit = today + timedelta(days=settings.EXPIRY_ALERT_DAYS)
    items = (
        db.query(InventoryBatch)
        .options(joinedload(InventoryBatch.medicine))
        .filter(
            InventoryBatch.store_id == store.id,
            InventoryBatch.quantity > 0,
            InventoryBatch.expiry_date >= today,
            InventoryBatch.expiry_date <= expiry_limit,
        )
        .order_by(InventoryBatch.expiry_date.asc(), InventoryBatch.id)
        .limit(settings.REPORT_LIST_LIMIT)
        .all()
    )
    return [
        {**serialize_batch(i), "days_until_expiry": (i.expiry_date - today).days}
        for i in items
    ]


def sales_summary(db: Session, store: Store, start: date, end: date) -> dict:
    if end < start:
        raise ValidationError("Report start date must not be after end date.")
    # Half-open range so the whole end day is included
    window_start = datetime.combine(start, time.min)
    window_end = datetime.combine(end + timedelta(days=1), time.min)
    revenue, count = (
        db.query(func.coalesce(func.sum(Sale.total_amount), 0), func.count(Sale.id))
        .filter(
            Sale.store_id == store.id,
            Sale.sale_date >= window_start,
            Sale.sale_date < window_end,
        )
        .one()
    )
    return {
        "start": start.isoformat(),
        "end": end.isoformat(),
        "total_revenue": float(Decimal(str(revenue or 0))),
        "total_sales_count": count or 0,
    }


def store_report(
    db: Session, store: Store, start: Optional[date] = None, end: Optional[date] = None, today: Optional[date] = None
) -> dict:
    today = today or date.today()
    if start is None or end is None:
        default_start, default_end = default_sales_range(today)
        start = start or default_start
        end = end or default_end
    return {
        "inventory_summary": inventory_summary(db, store, today),
        "low_stock_items": low_stock_items(db, store),
        "expiring_soon_items": expiring_soon_items(db, store, today),
        "sales_summary": sales_summary(db, store, start, end),
        "thresholds": {
            "low_stock": settings.LOW_STOCK_THRESHOLD,
            "expiry_days": settings.EXPIRY_ALERT_DAYS,
        },
    }
