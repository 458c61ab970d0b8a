"""Date manipulation utilities"""

import re
from datetime import date, datetime
from typing import Union

_ISO_MONTH = re.compile(r"^(\d{4})-(\d{1,2})(?:-(\d{1,2}))?$")
_BR_MONTH = re.compile(r"^(?:(\d{1,2})[/.])?(\d{1,2})[/.](\d{4})$")


def first_of_month(value: date) -> date:
    """Truncate a date to day 1 of its month"""
    return date(value.year, value.month, 1)


def add_months(value: date, months: int) -> date:
    """Shift a first-of-month date by whole months (negative goes back)"""
    index = value.year * 12 + (value.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def normalize_competence(value: Union[date, datetime, str]) -> date:
    """
    Normalize a year-month identifier to the first day of that month.

    Accepts date/datetime objects, ISO strings ("2020-07", "2020-07-15") and
    Brazilian strings ("07/2020", "15/07/2020", "07.2020").

    Raises:
        ValueError: When the value is not a recognizable year-month
    """
    if isinstance(value, datetime):
        return first_of_month(value.date())
    if isinstance(value, date):
        return first_of_month(value)

    text = str(value).strip()
    match = _ISO_MONTH.match(text)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
    else:
        match = _BR_MONTH.match(text)
        if not match:
            raise ValueError(f"Unrecognized competence date: {value!r}")
        month, year = int(match.group(2)), int(match.group(3))

    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range in {value!r}")
    return date(year, month, 1)


def age_on(birth_date: date, reference: date) -> int:
    """Whole years between birth_date and reference"""
    years = reference.year - birth_date.year
    if (reference.month, reference.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years
