"""
Sale and SaleItem: written once per successful checkout, never updated.

SaleItem.medicine_name is copied at sale time so printed bills stay stable
even if the catalog entry is renamed later.
"""
from sqlalchemy import Column, String, Integer, ForeignKey, Numeric, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from pharmacy_pos.db.base import Base
from pharmacy_pos.models._ids import new_id


class Sale(Base):
    __tablename__ = "sales"

    id = Column(String(36), primary_key=True, default=new_id)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    bill_number = Column(String(64), unique=True, nullable=False)
    customer_name = Column(String(255), nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    sale_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    store = relationship("Store", backref="sales")
    items = relationship("SaleItem", back_populates="sale", order_by="SaleItem.medicine_name")


class SaleItem(Base):
    __tablename__ = "sale_items"

    id = Column(String(36), primary_key=True, default=new_id)
    sale_id = Column(String(36), ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    inventory_id = Column(String(36), ForeignKey("inventory.id"), nullable=False, index=True)
    medicine_name = Column(String(255), nullable=False)
    quantity_sold = Column(Integer, nullable=False)
    price_per_unit = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)

    sale = relationship("Sale", back_populates="items")
