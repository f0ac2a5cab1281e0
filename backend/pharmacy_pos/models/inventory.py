from sqlalchemy import Column, String, Integer, ForeignKey, Numeric, Date, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from pharmacy_pos.db.base import Base
from pharmacy_pos.models._ids import new_id


class InventoryBatch(Base):
    """
    One receipt of a medicine into a store's stock.

    Same medicine can have many batches (different expiry, batch number, price).
    quantity is decremented only by sale processing and can never go below zero;
    the CHECK constraint is the last line of defense behind the guarded UPDATE.
    """
    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    store_id = Column(String(36), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    medicine_id = Column(String(36), ForeignKey("master_medicines.id"), nullable=False, index=True)
    batch_number = Column(String(128), nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    purchase_price = Column(Numeric(10, 2), nullable=True)
    mrp = Column(Numeric(10, 2), nullable=True)  # max retail price per unit
    expiry_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    store = relationship("Store", backref="inventory_batches")
    medicine = relationship("MasterMedicine")
