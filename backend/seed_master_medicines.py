"""Seed the master medicine catalog shared by all stores.

Usage (from backend/): python seed_master_medicines.py
Existing catalog entries (matched by name, case-insensitive) are left alone.
"""
from sqlalchemy import func

from pharmacy_pos.db.init_db import init_db
from pharmacy_pos.db.session import SessionLocal
from pharmacy_pos.models.medicine import MasterMedicine

MEDICINES = [
    {"name": "Paracetamol 500mg", "manufacturer": "GSK", "description": "Fever, Headache, Body Pain"},
    {"name": "Dolo 650", "manufacturer": "Micro Labs", "description": "High Fever, Severe Headache"},
    {"name": "Crocin Advance", "manufacturer": "GSK", "description": "Fast Relief from Fever and Pain"},
    {"name": "Azithromycin 500mg", "manufacturer": "Cipla", "description": "Bacterial Infections"},
    {"name": "Amoxicillin 250mg", "manufacturer": "Alkem", "description": "Bacterial Infections"},
    {"name": "Cetirizine 10mg", "manufacturer": "Dr. Reddy's", "description": "Allergy, Sneezing, Runny Nose"},
    {"name": "Pantoprazole 40mg", "manufacturer": "Sun Pharma", "description": "Acidity, GERD"},
    {"name": "Omeprazole 20mg", "manufacturer": "Dr. Reddy's", "description": "Acidity, Stomach Ulcers"},
    {"name": "Metformin 500mg", "manufacturer": "USV", "description": "Type 2 Diabetes"},
    {"name": "Amlodipine 5mg", "manufacturer": "Cipla", "description": "High Blood Pressure"},
    {"name": "Atorvastatin 10mg", "manufacturer": "Ranbaxy", "description": "High Cholesterol"},
    {"name": "ORS Powder", "manufacturer": "FDC", "description": "Dehydration, Diarrhoea"},
    {"name": "Vitamin D3 60000 IU", "manufacturer": "Mankind", "description": "Vitamin D Deficiency"},
    {"name": "Calcium + Vitamin D3", "manufacturer": "Abbott", "description": "Bone Strength, Osteoporosis Prevention"},
    {"name": "Ibuprofen 400mg", "manufacturer": "Abbott", "description": "Pain, Inflammation"},
]


def seed_master_medicines():
    init_db()
    db = SessionLocal()
    added = 0
    try:
        for med in MEDICINES:
            exists = (
                db.query(MasterMedicine.id)
                .filter(func.lower(MasterMedicine.name) == med["name"].lower())
                .first()
            )
            if exists:
                continue
            db.add(MasterMedicine(**med))
            added += 1
        db.commit()
    finally:
        db.close()

    print(f"Added {added} medicines to the master catalog ({len(MEDICINES) - added} already present).")


if __name__ == "__main__":
    seed_master_medicines()
