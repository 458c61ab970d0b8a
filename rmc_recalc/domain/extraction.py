"""Statement extraction pipeline: parse then reconcile"""

from datetime import date
from typing import Optional

from rmc_recalc.domain.exceptions import NoRecordsFoundError
from rmc_recalc.domain.models import ExtractionResult
from rmc_recalc.domain.reconciler import resolve_dates
from rmc_recalc.domain.statement_parser import parse_statement


def extract_payments(text: str, today: Optional[date] = None) -> ExtractionResult:
    """
    Main entry point: raw statement text to a chronologically ordered payment list.

    Raises:
        NoRecordsFoundError: When no target debit line was recognized
    """
    candidates = parse_statement(text)
    if not candidates:
        raise NoRecordsFoundError(
            "No RMC debit found in the statement text; check the extracted text or upload another file"
        )

    payments, degraded = resolve_dates(candidates, today=today)
    return ExtractionResult(payments=payments, degraded_dates=degraded)
