"""
Catalog name resolution for imported rows.

Maps the free-text medicine name of an import row to exactly one
MasterMedicine:
1. case-insensitive exact name match
2. otherwise case-insensitive substring match

Zero candidates and several candidates are both failures. There is no
scoring or best-guess pick: an ambiguous row is reported back so the person
uploading the sheet can make the name more specific.
"""
import logging
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from pharmacy_pos.models.medicine import MasterMedicine

logger = logging.getLogger(__name__)


class MedicineNotFound(Exception):
    pass


class AmbiguousMedicine(Exception):
    pass


def normalize_medicine_name(name: str) -> str:
    """Lowercase and collapse whitespace: '  Dolo   650 ' -> 'dolo 650'."""
    return " ".join(name.lower().split())


def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def find_candidates(db: Session, name: str, limit: int = 2) -> List[MasterMedicine]:
    """At most `limit` catalog rows for `name`; two is enough to detect ambiguity."""
    normalized = normalize_medicine_name(name)
    exact = (
        db.query(MasterMedicine)
        .filter(func.lower(MasterMedicine.name) == normalized)
        .order_by(MasterMedicine.id)
        .limit(limit)
        .all()
    )
    if exact:
        return exact
    return (
        db.query(MasterMedicine)
        .filter(MasterMedicine.name.ilike(f"%{escape_like(normalized)}%", escape="\\"))
        .order_by(MasterMedicine.id)
        .limit(limit)
        .all()
    )


class MedicineResolver:
    """Resolves names against the catalog, remembering answers for one import."""

    def __init__(self, db: Session):
        self.db = db
        self._cache: Dict[str, str] = {}

    def resolve(self, name: str) -> str:
        """Return the medicine id or raise MedicineNotFound / AmbiguousMedicine."""
        key = normalize_medicine_name(name)
        if key in self._cache:
            return self._cache[key]

        search_name = name.strip()
        candidates = find_candidates(self.db, search_name)
        if not candidates:
            raise MedicineNotFound(f"Medicine named '{search_name}' not found in master list.")
        if len(candidates) > 1:
            raise AmbiguousMedicine(
                f"Multiple medicines found matching '{search_name}'. Please use a more specific name."
            )

        self._cache[key] = candidates[0].id
        logger.debug(f"Resolved '{search_name}' -> {candidates[0].name} ({candidates[0].id})")
        return candidates[0].id


def search_catalog(db: Session, term: str, limit: int = 10) -> List[MasterMedicine]:
    """Type-ahead search used when adding a single batch."""
    term = (term or "").strip()
    if not term:
        return []
    return (
        db.query(MasterMedicine)
        .filter(MasterMedicine.name.ilike(f"%{escape_like(term)}%", escape="\\"))
        .order_by(MasterMedicine.name)
        .limit(limit)
        .all()
    )
