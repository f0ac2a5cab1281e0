from pharmacy_pos.models.store import Store
from pharmacy_pos.models.medicine import MasterMedicine
from pharmacy_pos.models.inventory import InventoryBatch
from pharmacy_pos.models.sale import Sale, SaleItem

__all__ = ["Store", "MasterMedicine", "InventoryBatch", "Sale", "SaleItem"]
