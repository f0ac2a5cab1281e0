from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class MedicineRecord(BaseModel):
    id: str
    name: str
    manufacturer: Optional[str] = None

    class Config:
        from_attributes = True


class InventoryCreate(BaseModel):
    medicine_id: str = Field(min_length=1)
    batch_number: Optional[str] = None
    quantity: int = Field(gt=0)
    purchase_price: Optional[Decimal] = Field(default=None, ge=0)
    mrp: Optional[Decimal] = Field(default=None, ge=0)
    expiry_date: Optional[date] = None


class BulkInventoryPayload(BaseModel):
    """
    Rows stay raw dicts: validation is per row and must report, not reject.
    Keys may be snake_case or the spreadsheet client's camelCase.
    """
    store_id: str = Field(min_length=1)
    inventoryItems: List[Dict[str, Any]]


class RowError(BaseModel):
    row_number: Optional[int] = None
    error: str
    row_data: Dict[str, Any]


class BulkImportResult(BaseModel):
    success: bool
    insertedCount: int
    skippedCount: int
    errors: List[RowError]
    message: str
