"""
Lenient field parsing for imported rows.

Spreadsheet rows arrive loosely typed: numbers as strings, dates in whatever
format the sheet used. These helpers never raise; they return None when a
value can't be understood and leave the decision (skip the row or store null)
to the caller.
"""
import logging
import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from dateutil import parser as date_parser

from pharmacy_pos.core.config import settings

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")

# Column limits: INTEGER quantity, Numeric(10, 2) prices
MAX_QUANTITY = 2**31 - 1
MAX_PRICE = Decimal(10) ** 8

# Two unrelated defaults: a component dateutil fills in differs between them
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_date(value: Any) -> Optional[str]:
    """
    Normalize a date to 'YYYY-MM-DD'.

    Order of attempts:
    1. Leading ISO date ("2026-03-31", "2026-03-31T00:00:00Z")
    2. date / datetime objects
    3. dateutil for everything else ("31 Mar 2026", "03/31/2026")

    Numbers (spreadsheet serial dates) are not supported and return None.
    """
    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float, Decimal)) or not isinstance(value, str):
        logger.warning(f"Unsupported date value {value!r} ({type(value).__name__})")
        return None

    text = value.strip()
    match = _ISO_DATE.match(text)
    try:
        if match:
            year, month, day = (int(g) for g in match.groups())
            return date(year, month, day).isoformat()
        first = date_parser.parse(text, dayfirst=settings.DATE_DAYFIRST, default=_DEFAULT_A)
        second = date_parser.parse(text, dayfirst=settings.DATE_DAYFIRST, default=_DEFAULT_B)
    except (ValueError, OverflowError) as e:
        logger.info(f"Date parsing failed for {text!r}: {e}")
        return None
    if first.date() != second.date():
        # "March", "12", "Mar 2027": year, month or day missing
        logger.info(f"Date {text!r} is incomplete")
        return None
    return first.date().isoformat()


def _to_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool) or is_blank(value):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def parse_positive_quantity(value: Any) -> Optional[int]:
    """
    Quantity as a whole number of units; fractions truncate toward zero.
    None unless 0 < quantity <= MAX_QUANTITY.
    """
    if isinstance(value, float) and not math.isfinite(value):
        return None
    number = _to_decimal(value)
    if number is None or not 1 <= number < MAX_QUANTITY + 1:
        return None
    return int(number)


def parse_optional_decimal(value: Any) -> Optional[Decimal]:
    """Price-like fields: anything that isn't a finite number below MAX_PRICE becomes None."""
    number = _to_decimal(value)
    if number is None or abs(number) >= MAX_PRICE:
        return None
    try:
        price = number.quantize(Decimal("0.01"))
    except InvalidOperation:
        return None
    # 99999999.999 rounds up to the limit
    return price if abs(price) < MAX_PRICE else None


def parse_optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
