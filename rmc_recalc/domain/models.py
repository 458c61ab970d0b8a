"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional


@dataclass
class PaymentRecord:
    """Debit entry detected in a statement (or typed in manually)"""

    id: int
    competence_date: Optional[date]  # first day of month, None until reconciled
    amount: Decimal
    source_line: str = ""


@dataclass
class Contract:
    """Declared loan terms"""

    principal: Optional[Decimal]
    monthly_rate: Optional[Decimal]  # percentage, e.g. Decimal("2.5") for 2.5% a.m.
    double_restitution: bool = False
    start_date: Optional[date] = None
    fees_percent: Decimal = Decimal("0")


@dataclass
class Client:
    """Borrower identification, informational only"""

    name: str = ""
    cpf: str = ""
    birth_date: Optional[date] = None
    benefit_number: str = ""


@dataclass
class EvolutionRow:
    """One recalculated month of the schedule"""

    reference_date: date
    prior_balance: Decimal
    interest: Decimal
    amortization: Decimal
    current_balance: Decimal
    amount_paid: Decimal
    restitution_amount: Decimal
    payment_id: Optional[int] = None


@dataclass
class Summary:
    """Aggregate figures of a recalculation"""

    total_paid: Decimal
    current_debt_balance: Decimal
    total_restitution: Decimal
    simple_restitution: Decimal
    doubling_surcharge: Decimal


@dataclass
class Evolution:
    """Output of the amortization engine"""

    rows: List[EvolutionRow]
    summary: Summary


@dataclass
class ExtractionResult:
    """Reconciled payments plus confidence flag"""

    payments: List[PaymentRecord] = field(default_factory=list)
    degraded_dates: bool = False
