"""Unit tests for month arithmetic and competence normalization"""

import pytest
from datetime import date, datetime
from rmc_recalc.utils.date_utils import add_months, age_on, first_of_month, normalize_competence


def test_add_months_crosses_year_boundaries():
    assert add_months(date(2020, 12, 1), 1) == date(2021, 1, 1)
    assert add_months(date(2021, 1, 1), -1) == date(2020, 12, 1)
    assert add_months(date(2020, 7, 1), -14) == date(2019, 5, 1)
    assert add_months(date(2020, 7, 1), 0) == date(2020, 7, 1)


def test_first_of_month():
    assert first_of_month(date(2020, 2, 29)) == date(2020, 2, 1)


@pytest.mark.parametrize(
    "raw",
    ["2020-07", "2020-07-15", "07/2020", "15/07/2020", "07.2020", date(2020, 7, 31), datetime(2020, 7, 9, 13, 0)],
)
def test_normalize_competence(raw):
    assert normalize_competence(raw) == date(2020, 7, 1)


@pytest.mark.parametrize("raw", ["13/2020", "2020-00", "julho de 2020", ""])
def test_normalize_competence_rejects_garbage(raw):
    with pytest.raises(ValueError):
        normalize_competence(raw)


def test_age_on_birthday_boundary():
    assert age_on(date(1958, 3, 15), date(2024, 3, 14)) == 65
    assert age_on(date(1958, 3, 15), date(2024, 3, 15)) == 66
