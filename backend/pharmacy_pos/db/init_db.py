"""Create all tables. Run on app startup."""
import logging

from pharmacy_pos.db.base import Base
from pharmacy_pos.db.session import engine
from pharmacy_pos.models import store, medicine, inventory, sale  # noqa: F401 - register models

logger = logging.getLogger(__name__)


def init_db(bind=None):
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    logger.info(f"Database schema ready ({bind.url.get_backend_name()})")
