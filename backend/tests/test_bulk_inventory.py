from datetime import date
from decimal import Decimal

import pytest

from pharmacy_pos.core.exceptions import AuthorizationError
from pharmacy_pos.models import InventoryBatch
from pharmacy_pos.schemas.inventory import BulkInventoryPayload
from pharmacy_pos.services.bulk_inventory_service import process_bulk_inventory
from pharmacy_pos.services.medicine_resolver import (
    AmbiguousMedicine,
    MedicineNotFound,
    MedicineResolver,
    search_catalog,
)
from tests.conftest import OWNER_A, OWNER_B


def _import(db, seed, rows, user_id=OWNER_A):
    return process_bulk_inventory(db, user_id, BulkInventoryPayload(store_id=seed.store_a, inventoryItems=rows))


def _store_a_batches(db, seed):
    db.expire_all()
    return db.query(InventoryBatch).filter(InventoryBatch.store_id == seed.store_a).count()


def test_valid_and_invalid_rows_are_reported_separately(db, seed):
    rows = [
        {"row_number": 1, "medicine_name": "Cetirizine 10mg", "quantity": 30, "mrp": "4.25", "expiry_date": "2027-06-30"},
        {"row_number": 2, "medicine_name": "Unobtainium 5mg", "quantity": 10},
        {"row_number": 3, "medicine_name": "Dolo 650", "quantity": 10, "expiry_date": "not-a-date"},
    ]

    result = _import(db, seed, rows)

    assert result.insertedCount == 1
    assert result.skippedCount == 2
    assert result.success is False
    assert result.message == "Processed 3 rows. Inserted 1, Skipped 2."
    assert [e.row_number for e in result.errors] == [2, 3]
    assert result.errors[0].error == "Medicine named 'Unobtainium 5mg' not found in master list."
    assert result.errors[1].error == "Invalid 'Expiry Date' format for value: not-a-date"
    assert result.errors[1].row_data == rows[2]

    batch = (
        db.query(InventoryBatch)
        .filter(InventoryBatch.medicine_id == seed.medicines["cetirizine"])
        .one()
    )
    assert batch.store_id == seed.store_a
    assert batch.quantity == 30
    assert batch.mrp == Decimal("4.25")
    assert batch.expiry_date == date(2027, 6, 30)


def test_malformed_row_does_not_block_the_rest(db, seed):
    rows = [
        {"row_number": 2, "medicine_name": "Dolo 650", "quantity": "12"},
        {"row_number": 3, "medicine_name": "", "quantity": 5},
        {"row_number": 4, "quantity": 5},
        {"row_number": 5, "medicine_name": "Dolo 650", "quantity": 0},
        {"row_number": 6, "medicine_name": "Paracetamol 500mg", "quantity": "8.9", "expiry_date": "31 Mar 2027"},
    ]

    result = _import(db, seed, rows)

    assert result.insertedCount == 2
    assert [(e.row_number, e.error) for e in result.errors] == [
        (3, "Missing or invalid 'Medicine Name'."),
        (4, "Missing or invalid 'Medicine Name'."),
        (5, "Missing or invalid 'Quantity' (must be a positive number)."),
    ]
    assert _store_a_batches(db, seed) == 4

    paracetamol = (
        db.query(InventoryBatch)
        .filter(InventoryBatch.store_id == seed.store_a, InventoryBatch.quantity == 8)
        .one()
    )
    assert paracetamol.expiry_date == date(2027, 3, 31)


def test_all_rows_valid(db, seed):
    rows = [
        {"row_number": 1, "medicine_name": "dolo 650", "quantity": 10, "batch_number": " DL-9 "},
        {"row_number": 2, "medicine_name": "CETIRIZINE 10MG", "quantity": 4, "purchase_price": "oops"},
    ]

    result = _import(db, seed, rows)

    assert result.success is True
    assert result.message == "Successfully inserted 2 inventory items."
    assert result.errors == []
    batch = db.query(InventoryBatch).filter(InventoryBatch.batch_number == "DL-9").one()
    assert batch.medicine_id == seed.medicines["dolo"]
    cetirizine = db.query(InventoryBatch).filter(InventoryBatch.medicine_id == seed.medicines["cetirizine"]).one()
    assert cetirizine.purchase_price is None


def test_spreadsheet_keys_are_accepted(db, seed):
    rows = [
        {"__rowNum__": 7, "medicineName": "Cetirizine", "quantity": 3, "batchNumber": "C-1",
         "purchasePrice": 1.5, "expiryDate": "2027-01-15"},
    ]

    result = _import(db, seed, rows)

    assert result.insertedCount == 1
    batch = db.query(InventoryBatch).filter(InventoryBatch.batch_number == "C-1").one()
    assert batch.purchase_price == Decimal("1.50")
    assert batch.expiry_date == date(2027, 1, 15)


def test_ambiguous_name_is_rejected(db, seed):
    result = _import(db, seed, [{"row_number": 9, "medicine_name": "Amoxicillin", "quantity": 5}])

    assert result.insertedCount == 0
    assert result.success is False
    assert result.errors[0].row_number == 9
    assert result.errors[0].error == (
        "Multiple medicines found matching 'Amoxicillin'. Please use a more specific name."
    )


def test_missing_row_number_falls_back_to_position(db, seed):
    result = _import(db, seed, [
        {"medicine_name": "Dolo 650", "quantity": 1},
        {"medicine_name": "Dolo 650", "quantity": "lots"},
    ])

    assert result.errors[0].row_number == 2


def test_non_owner_import_touches_nothing(db, seed):
    with pytest.raises(AuthorizationError):
        _import(db, seed, [{"row_number": 1, "medicine_name": "Dolo 650", "quantity": 1}], user_id=OWNER_B)

    assert _store_a_batches(db, seed) == 2


def test_empty_sheet(db, seed):
    result = _import(db, seed, [])

    assert result.insertedCount == 0
    assert result.skippedCount == 0
    assert result.success is False


class TestMedicineResolver:
    def test_exact_match_wins_over_substring(self, db, seed):
        resolver = MedicineResolver(db)
        assert resolver.resolve("  amoxicillin 250MG ") == seed.medicines["amox250"]

    def test_unique_substring(self, db, seed):
        assert MedicineResolver(db).resolve("Parac") == seed.medicines["paracetamol"]

    def test_not_found(self, db, seed):
        with pytest.raises(MedicineNotFound):
            MedicineResolver(db).resolve("Aspirin")

    def test_ambiguous(self, db, seed):
        with pytest.raises(AmbiguousMedicine):
            MedicineResolver(db).resolve("mg")

    def test_like_wildcards_are_literal(self, db, seed):
        with pytest.raises(MedicineNotFound):
            MedicineResolver(db).resolve("Dolo%")

    def test_catalog_search(self, db, seed):
        names = [m.name for m in search_catalog(db, "amox")]
        assert names == ["Amoxicillin 250mg", "Amoxicillin 500mg"]
        assert search_catalog(db, "  ") == []


def test_out_of_range_numbers_stay_on_their_row(db, seed):
    rows = [
        {"row_number": 1, "medicine_name": "Dolo 650", "quantity": 10},
        {"row_number": 2, "medicine_name": "Cetirizine 10mg", "quantity": "1e20"},
        {"row_number": 3, "medicine_name": "Cetirizine 10mg", "quantity": 4, "mrp": "1e9", "purchase_price": 100000000},
    ]

    result = _import(db, seed, rows)

    assert result.insertedCount == 2
    assert [(e.row_number, e.error) for e in result.errors] == [
        (2, "Missing or invalid 'Quantity' (must be a positive number)."),
    ]
    cetirizine = db.query(InventoryBatch).filter(InventoryBatch.medicine_id == seed.medicines["cetirizine"]).one()
    assert cetirizine.quantity == 4
    assert cetirizine.mrp is None
    assert cetirizine.purchase_price is None


def test_incomplete_expiry_date_rejects_row(db, seed):
    result = _import(db, seed, [
        {"row_number": 1, "medicine_name": "Dolo 650", "quantity": 10, "expiry_date": "March"},
        {"row_number": 2, "medicine_name": "Dolo 650", "quantity": 10, "expiry_date": "12"},
    ])

    assert result.insertedCount == 0
    assert [e.error for e in result.errors] == [
        "Invalid 'Expiry Date' format for value: March",
        "Invalid 'Expiry Date' format for value: 12",
    ]
    assert _store_a_batches(db, seed) == 2
