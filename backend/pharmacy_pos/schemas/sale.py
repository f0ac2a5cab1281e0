from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

# Client-side totals may carry float noise; anything beyond a paisa is a real mismatch
TOTAL_TOLERANCE = Decimal("0.01")


class SaleItemPayload(BaseModel):
    inventory_id: str = Field(min_length=1)
    quantity_sold: int = Field(gt=0)
    price_per_unit: Decimal = Field(ge=0)
    total_price: Decimal = Field(ge=0)
    medicine_name: str = Field(min_length=1)


class SalePayload(BaseModel):
    store_id: str
    customer_name: Optional[str] = None
    total_amount: Decimal = Field(ge=0)
    items: List[SaleItemPayload] = Field(min_length=1)

    @field_validator("store_id")
    @classmethod
    def store_id_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("store_id is required")
        return v

    @field_validator("customer_name")
    @classmethod
    def blank_customer_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = " ".join(v.split())
        return v or None

    @model_validator(mode="after")
    def one_line_per_batch_and_totals_match(self) -> "SalePayload":
        seen = set()
        for item in self.items:
            if item.inventory_id in seen:
                raise ValueError(f"inventory item {item.inventory_id} appears more than once in the cart")
            seen.add(item.inventory_id)

        lines_total = sum((item.total_price for item in self.items), Decimal("0"))
        if abs(lines_total - self.total_amount) > TOTAL_TOLERANCE:
            raise ValueError(
                f"total_amount {self.total_amount} does not match sum of item totals {lines_total}"
            )
        return self


class SaleItemRecord(BaseModel):
    id: str
    inventory_id: str
    medicine_name: str
    quantity_sold: int
    price_per_unit: Decimal
    total_price: Decimal

    class Config:
        from_attributes = True


class SaleRecord(BaseModel):
    id: str
    store_id: str
    bill_number: str
    customer_name: Optional[str] = None
    total_amount: Decimal
    sale_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class SaleReceipt(BaseModel):
    success: bool = True
    sale_id: str = Field(serialization_alias="saleId")
    bill_number: str
