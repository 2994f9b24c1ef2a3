"""
Check-and-convert functions for operator input.

Every parser returns either the converted value or an :class:`Invalid`
describing why the text was rejected. Nothing here prints or raises on bad
input; callers inspect the result with ``isinstance(result, Invalid)``.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from sqlalchemy import select

from . import models
from .database import StorageGateway

_POSITIVE_DIGITS = re.compile(r"[0-9]{1,10}")
_SIGNED_DIGITS = re.compile(r"[+-]?[0-9]{1,10}")
_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

DATE_FORMAT = "%Y-%m-%d"

# Values must fit the INTEGER columns they are stored in.
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


@dataclass(frozen=True)
class Invalid:
    field: str
    reason: str

    def __str__(self) -> str:
        return self.reason


def parse_positive_integer(text: str, field: str = "value") -> Union[int, Invalid]:
    """Accept unsigned ASCII digits whose value is at least 1."""
    if text is None or not _POSITIVE_DIGITS.fullmatch(text):
        return Invalid(field, f"Invalid {field}. Please enter a positive whole number.")
    value = int(text)
    if not 1 <= value <= INT_MAX:
        return Invalid(field, f"Invalid {field}. Please enter a positive whole number.")
    return value


def parse_integer(text: str, field: str = "value") -> Union[int, Invalid]:
    if text is None or not _SIGNED_DIGITS.fullmatch(text):
        return Invalid(field, f"Invalid {field} format. Please enter a number.")
    value = int(text)
    if not INT_MIN <= value <= INT_MAX:
        return Invalid(field, f"Invalid {field} format. Please enter a number.")
    return value


def parse_date(text: str, field: str = "date") -> Union[date, Invalid]:
    """Accept only ``YYYY-MM-DD`` naming a real calendar date."""
    message = f"Invalid {field}. Please use yyyy-mm-dd format."
    # strptime alone would also take "2024-1-5"
    if text is None or not _ISO_DATE.fullmatch(text):
        return Invalid(field, message)
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return Invalid(field, message)


def check_date_order(admission: date, discharge: date) -> Optional[Invalid]:
    if discharge < admission:
        return Invalid("discharge date", "Discharge date cannot be before admission date.")
    return None


def doctor_exists(gateway: StorageGateway, doctor_id: int) -> bool:
    statement = (
        select(models.Doctor.doctor_id)
        .where(models.Doctor.doctor_id == doctor_id)
        .limit(1)
    )
    return len(gateway.query(statement)) > 0
