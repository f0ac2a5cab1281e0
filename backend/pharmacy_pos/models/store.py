from sqlalchemy import Column, String, Numeric, DateTime
from sqlalchemy.sql import func

from pharmacy_pos.db.base import Base
from pharmacy_pos.models._ids import new_id


class Store(Base):
    """One pharmacy per owner. owner_user_id is the identity provider's user id."""
    __tablename__ = "stores"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_user_id = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(512), nullable=True)
    city = Column(String(128), nullable=True)
    state = Column(String(128), nullable=True)
    zip_code = Column(String(32), nullable=True)
    latitude = Column(Numeric(9, 6), nullable=True)
    longitude = Column(Numeric(9, 6), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
