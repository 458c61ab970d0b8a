"""Statement parser - turns extracted statement text into payment candidates"""

import logging
import re
import unicodedata
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from rmc_recalc.domain.exceptions import MalformedNumericTokenError
from rmc_recalc.domain.models import PaymentRecord
from rmc_recalc.utils.currency import BRL_AMOUNT_PATTERN, parse_brl_decimal

logger = logging.getLogger(__name__)

# Header/footer fields that carry date-shaped values unrelated to competence
NOISE_KEYWORDS = (
    "INICIAL",
    "FINAL",
    "INICIO",
    "CONCESSAO",
    "NASCIMENTO",
    "DATA",
    "BENEFICIO",
    "MARGEM",
    "RESERVAD",
    "EXTRATO",
    "INSTITUTO",
    "HISTORICO",
    "GERADO",
    "PAGINA",
)
NOISE_CODES = ("216",)

TARGET_CODE = "217"
TARGET_TEXT = "EMPRESTIMO SOBRE A RMC"

MIN_YEAR = 2000
MAX_YEAR = 2030
MIN_AMOUNT = Decimal("10")
MAX_AMOUNT = Decimal("10000")


def _standalone(token: str) -> re.Pattern:
    return re.compile(rf"(?<![\d.,]){token}(?![\d.,])")


_NOISE_CODE_RE = [_standalone(code) for code in NOISE_CODES]
_TARGET_CODE_RE = _standalone(TARGET_CODE)
_TIME_RE = re.compile(r"\b\d{1,2}:\d{2}\b")
_DATE_RE = re.compile(r"(?<!\d)(?:(\d{1,2})[/.])?(\d{1,2})[/.](\d{4})(?!\d)")
_AMOUNT_RE = re.compile(rf"(?<![\d.,])(?:{BRL_AMOUNT_PATTERN})(?!\d)")

# A misread letter must touch a digit or slash on one side and a digit, slash,
# separator, space or line edge on the other.
_OCR_FIXES = (
    (re.compile(r"(?<=[\d/])O(?=[\d/ .,]|$)|(?:(?<=[\d/ .,])|^)O(?=[\d/])"), "0"),
    (re.compile(r"(?<=[\d/])[IL](?=[\d/ .,]|$)|(?:(?<=[\d/ .,])|^)[IL](?=[\d/])"), "1"),
)


def normalize_line(line: str) -> str:
    """Uppercase, strip accents, collapse whitespace and repair OCR digit confusions"""
    text = unicodedata.normalize("NFKD", line)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = re.sub(r"\s+", " ", text.upper()).strip()

    # Repeat so chains like "2O1O" settle
    previous = None
    while previous != text:
        previous = text
        for pattern, digit in _OCR_FIXES:
            text = pattern.sub(digit, text)
    return text


def is_noise(line: str) -> bool:
    """True for header/footer lines that must not move the cursor or yield a debit"""
    if any(keyword in line for keyword in NOISE_KEYWORDS):
        return True
    if any(pattern.search(line) for pattern in _NOISE_CODE_RE):
        return True
    return bool(_TIME_RE.search(line))


def match_competence_date(line: str) -> Optional[date]:
    """First plausible [dd/]mm/yyyy in the line, as day 1 of that month"""
    for match in _DATE_RE.finditer(line):
        month, year = int(match.group(2)), int(match.group(3))
        if 1 <= month <= 12 and MIN_YEAR <= year <= MAX_YEAR:
            return date(year, month, 1)
    return None


def is_target_debit(line: str) -> bool:
    return TARGET_TEXT in line or bool(_TARGET_CODE_RE.search(line))


def match_amount(line: str) -> Optional[Decimal]:
    """
    First money value in the plausible (10, 10000) range.

    Tokens that fail numeric conversion are logged and skipped.
    """
    for token in _AMOUNT_RE.findall(line):
        try:
            amount = parse_brl_decimal(token)
        except MalformedNumericTokenError as e:
            logger.warning("Dropping malformed amount token", extra={"token": token, "error": str(e)})
            continue
        if MIN_AMOUNT < amount < MAX_AMOUNT:
            return amount
        logger.debug("Amount outside plausible range", extra={"token": token})
    return None


def classify_line(line: str, cursor: Optional[date]) -> Tuple[Optional[date], Optional[Decimal]]:
    """
    Advance the competence cursor over one normalized line.

    Returns:
        (new_cursor, debit_amount) where debit_amount is None unless the line
        is a target debit with a plausible value
    """
    if not line or is_noise(line):
        return cursor, None

    marker = match_competence_date(line)
    if marker is not None:
        cursor = marker

    if is_target_debit(line):
        return cursor, match_amount(line)
    return cursor, None


def parse_statement(text: str) -> List[PaymentRecord]:
    """
    Scan statement text and emit one candidate per target debit line.

    Source statements are line-oriented tables where a competence heading
    precedes its debit lines, so a single cursor holding the last valid date
    is enough. Debits seen before any date keep competence_date=None and are
    resolved by the reconciler.

    Returns:
        Candidates in document order (empty list when nothing matched)
    """
    candidates: List[PaymentRecord] = []
    cursor: Optional[date] = None

    for raw_line in (text or "").splitlines():
        line = normalize_line(raw_line)
        cursor, amount = classify_line(line, cursor)
        if amount is None:
            continue
        candidates.append(
            PaymentRecord(
                id=len(candidates) + 1,
                competence_date=cursor,
                amount=amount,
                source_line=line,
            )
        )

    logger.debug("Statement parsed", extra={"candidate_count": len(candidates)})
    return candidates
