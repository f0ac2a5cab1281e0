from sqlalchemy import Column, String, Text

from pharmacy_pos.db.base import Base
from pharmacy_pos.models._ids import new_id


class MasterMedicine(Base):
    """Global catalog shared by all stores. Read-only for sales and imports."""
    __tablename__ = "master_medicines"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    manufacturer = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
