"""Competence date reconciliation for extracted payment candidates"""

import logging
import warnings
from datetime import date
from typing import List, Optional, Tuple

from rmc_recalc.domain.exceptions import DegradedDateRecovery
from rmc_recalc.domain.models import PaymentRecord
from rmc_recalc.utils.date_utils import add_months, first_of_month

logger = logging.getLogger(__name__)


def resolve_dates(candidates: List[PaymentRecord], today: Optional[date] = None) -> Tuple[List[PaymentRecord], bool]:
    """
    Give every candidate a strictly increasing monthly competence date.

    Candidates are taken in extraction order, which follows the document and
    therefore the calendar. OCR and column misalignment often drop or repeat
    a date marker while the amount is read correctly, and RMC debits are
    monthly, so gaps are filled one month at a time:

    1. No dated candidate at all: anchor the last one on the current month
       and report the result as degraded.
    2. Walk back from the first dated candidate, one month per step.
    3. Walk forward: a missing date, or one not later than its predecessor,
       becomes predecessor + 1 month. Valid later dates are kept.
    4. Sort ascending by date.

    Only competence_date is mutated.

    Returns:
        (records in date order, degraded) where degraded is True when the
        dates were anchored on the current month
    """
    if not candidates:
        return [], False

    records = list(candidates)
    anchor = next((i for i, r in enumerate(records) if r.competence_date is not None), None)
    degraded = anchor is None

    if degraded:
        anchor = len(records) - 1
        fallback = first_of_month(today or date.today())
        records[anchor].competence_date = fallback
        logger.warning(
            "No competence date found, anchoring on current month",
            extra={"anchor_date": fallback.isoformat(), "record_count": len(records)},
        )
    else:
        records[anchor].competence_date = first_of_month(records[anchor].competence_date)

    for i in range(anchor - 1, -1, -1):
        records[i].competence_date = add_months(records[i + 1].competence_date, -1)

    for i in range(anchor + 1, len(records)):
        previous = records[i - 1].competence_date
        current = records[i].competence_date
        if current is None or first_of_month(current) <= previous:
            records[i].competence_date = add_months(previous, 1)
        else:
            records[i].competence_date = first_of_month(current)

    return sorted(records, key=lambda r: r.competence_date), degraded


def reconcile_dates(candidates: List[PaymentRecord], today: Optional[date] = None) -> List[PaymentRecord]:
    """
    resolve_dates for callers that only want the records.

    The current-month fallback is signalled with DegradedDateRecovery.
    """
    records, degraded = resolve_dates(candidates, today=today)
    if degraded:
        warnings.warn(
            f"No competence date found in {len(records)} records; anchored on {records[-1].competence_date.isoformat()}",
            DegradedDateRecovery,
            stacklevel=2,
        )
    return records
