"""Age helpers: birthdate parsing and child/adult classification."""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterable

from safetynet.core.errors import InvalidFormatError

BIRTHDATE_PATTERN = re.compile(r"\d{2}/\d{2}/\d{4}")
BIRTHDATE_FORMAT = "%m/%d/%Y"
CHILD_MAX_AGE = 18


def parse_birthdate(birthdate: str | None) -> date:
    """Parse a MM/DD/YYYY birthdate, raising InvalidFormatError otherwise."""
    if not birthdate:
        raise InvalidFormatError("Birthdate cannot be null or empty.")
    if not BIRTHDATE_PATTERN.fullmatch(birthdate):
        raise InvalidFormatError("Invalid birthdate format.")
    try:
        return datetime.strptime(birthdate, BIRTHDATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidFormatError("Invalid birthdate format.") from exc


def _whole_years(start: date, end: date) -> int:
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years


def calculate_age(birthdate: str | None, today: date | None = None) -> int:
    """
    Whole years between birthdate and today.

    A birthday not yet reached this year does not count. Birthdates in the
    future give a negative age.
    """
    born = parse_birthdate(birthdate)
    current = today or date.today()
    if born > current:
        return -_whole_years(current, born)
    return _whole_years(born, current)


def is_child(birthdate: str | None, today: date | None = None) -> bool:
    return calculate_age(birthdate, today) <= CHILD_MAX_AGE


def count_children(birthdates: Iterable[str], today: date | None = None) -> int:
    return sum(1 for value in birthdates if is_child(value, today))


def count_adults(birthdates: Iterable[str], today: date | None = None) -> int:
    values = list(birthdates)
    return len(values) - count_children(values, today)
