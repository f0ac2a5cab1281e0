"""
Shared fixtures.

Each test gets its own SQLite file under tmp_path, built with the same
engine factory the app uses (BEGIN IMMEDIATE transactions). Because every
transaction takes the write lock, sessions must be closed before another
session or request touches the database.
"""
from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from pharmacy_pos.api.deps import get_db
from pharmacy_pos.core.security import create_access_token
from pharmacy_pos.db.init_db import init_db
from pharmacy_pos.db.session import build_engine
from pharmacy_pos.main import app, functions_app
from pharmacy_pos.models import InventoryBatch, MasterMedicine, Store

OWNER_A = "user-a"
OWNER_B = "user-b"
STORE_A_ID = "abcd1234-0000-4000-8000-000000000001"
STORE_B_ID = "ef015678-0000-4000-8000-000000000002"


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'pharmacy_test.db'}")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def seed(session_factory):
    """
    Two stores with one owner each and a small catalog.

    Store A: Paracetamol batch (qty 5), Dolo batch (qty 20, expires in 30 days)
    Store B: Paracetamol batch (qty 50)
    """
    db = session_factory()
    try:
        db.add_all([
            Store(id=STORE_A_ID, owner_user_id=OWNER_A, name="Care Pharmacy", city="Pune"),
            Store(id=STORE_B_ID, owner_user_id=OWNER_B, name="City Chemist"),
        ])
        medicines = {
            "paracetamol": MasterMedicine(name="Paracetamol 500mg", manufacturer="GSK"),
            "dolo": MasterMedicine(name="Dolo 650", manufacturer="Micro Labs"),
            "amox250": MasterMedicine(name="Amoxicillin 250mg", manufacturer="Alkem"),
            "amox500": MasterMedicine(name="Amoxicillin 500mg", manufacturer="Alkem"),
            "cetirizine": MasterMedicine(name="Cetirizine 10mg", manufacturer="Dr. Reddy's"),
        }
        db.add_all(medicines.values())
        db.flush()

        batches = {
            "a_paracetamol": InventoryBatch(
                store_id=STORE_A_ID, medicine_id=medicines["paracetamol"].id,
                batch_number="PCM-01", quantity=5, mrp=Decimal("2.50"),
                expiry_date=date.today() + timedelta(days=400),
            ),
            "a_dolo": InventoryBatch(
                store_id=STORE_A_ID, medicine_id=medicines["dolo"].id,
                batch_number="DL-07", quantity=20, mrp=Decimal("3.00"),
                expiry_date=date.today() + timedelta(days=30),
            ),
            "b_paracetamol": InventoryBatch(
                store_id=STORE_B_ID, medicine_id=medicines["paracetamol"].id,
                quantity=50, mrp=Decimal("2.40"),
            ),
        }
        db.add_all(batches.values())
        db.commit()

        return SimpleNamespace(
            store_a=STORE_A_ID,
            store_b=STORE_B_ID,
            medicines={k: m.id for k, m in medicines.items()},
            batches={k: b.id for k, b in batches.items()},
        )
    finally:
        db.close()


@pytest.fixture
def db(session_factory, seed):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    # The function endpoints live on a mounted app with its own overrides
    for target in (app, functions_app):
        target.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    for target in (app, functions_app):
        target.dependency_overrides.clear()


def auth_headers(user_id: str = OWNER_A) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def read_quantity(session_factory, inventory_id: str) -> int:
    session = session_factory()
    try:
        return session.get(InventoryBatch, inventory_id).quantity
    finally:
        session.close()


def sale_payload(store_id: str, *lines, customer_name=None) -> dict:
    """lines: (inventory_id, medicine_name, quantity, unit_price)"""
    items = []
    for inventory_id, name, quantity, unit_price in lines:
        price = Decimal(str(unit_price))
        items.append({
            "inventory_id": inventory_id,
            "medicine_name": name,
            "quantity_sold": quantity,
            "price_per_unit": str(price),
            "total_price": str(price * quantity),
        })
    return {
        "store_id": store_id,
        "customer_name": customer_name,
        "total_amount": str(sum((Decimal(i["total_price"]) for i in items), Decimal("0"))),
        "items": items,
    }
