"""Brazilian-locale money parsing"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from rmc_recalc.domain.exceptions import MalformedNumericTokenError

CENTS = Decimal("0.01")

# "1.234,56" | "123,45" | "1234,56"
BRL_AMOUNT_PATTERN = r"\d{1,3}(?:\.\d{3})+,\d{2}|\d+,\d{2}"


def parse_brl_decimal(value: Union[str, int, float, Decimal]) -> Decimal:
    """
    Convert a Brazilian-formatted amount into a Decimal.

    Handles "R$ 1.234,56", "1.234,56", "1234,56", "-1.234,56", "1.234,56-"
    and plain dot-decimal strings such as "1234.56" (manual entry).

    Raises:
        MalformedNumericTokenError: If the value cannot be parsed
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Decimal(str(value))

    s = re.sub(r"\s+", "", str(value or ""))
    s = s.replace("R$", "")

    # sinal no fim: "1.234,56-" -> "-1.234,56"
    if s.endswith("-"):
        s = "-" + s[:-1]

    if "," in s:
        s = s.replace(".", "").replace(",", ".")
    elif s.count(".") > 1:
        # "1.234.567" without cents
        s = s.replace(".", "")

    try:
        result = Decimal(s)
    except InvalidOperation as e:
        raise MalformedNumericTokenError(f"Invalid amount: {value!r}") from e

    if not result.is_finite():
        raise MalformedNumericTokenError(f"Invalid amount: {value!r}")
    return result


def to_cents(value: Decimal) -> Decimal:
    """Round half-up to two decimal places"""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_cents_int(value: Decimal) -> int:
    """Integer cents, for storage"""
    return int(to_cents(value) * 100)


def from_cents_int(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENTS)
