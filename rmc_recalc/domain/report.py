"""Report data assembly - shapes engine output for the PDF renderer"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from rmc_recalc.domain.amortization import DOUBLE_RESTITUTION_CUTOFF
from rmc_recalc.domain.models import Client, Contract, Evolution, EvolutionRow
from rmc_recalc.utils.currency import to_cents
from rmc_recalc.utils.date_utils import age_on

METHODOLOGY = "Conversão em Empréstimo Consignado"
CORRECTION_INDEX = "IPCA-E (IBGE)"


@dataclass
class ReportClient:
    name: str
    cpf: str
    birth_date: Optional[date]
    age: Optional[int]
    benefit_number: str


@dataclass
class ReportContract:
    principal: Decimal
    start_date: Optional[date]
    monthly_rate: Decimal


@dataclass
class ReportParameters:
    methodology: str
    correction_index: str
    double_restitution: bool
    double_restitution_label: str


@dataclass
class ReportSummary:
    current_debt_balance: Decimal
    total_paid: Decimal
    simple_restitution: Decimal
    doubling_surcharge: Decimal
    total_restitution: Decimal
    moral_damages: Decimal
    fees_percent: Decimal
    fees: Decimal
    total_award: Decimal


@dataclass
class ReportRow:
    index: int
    reference_date: date
    amount_paid: Decimal
    prior_balance: Decimal
    monthly_rate: Decimal
    interest: Decimal
    amortization: Decimal
    restitution_amount: Decimal
    current_balance: Decimal


@dataclass
class ReportTotals:
    amount_paid: Decimal
    interest: Decimal
    amortization: Decimal
    restitution_amount: Decimal


@dataclass
class Report:
    """Everything the renderer needs: {client, contract, summary, evolution}"""

    generated_at: datetime
    client: ReportClient
    contract: ReportContract
    parameters: ReportParameters
    summary: ReportSummary
    evolution: List[ReportRow]
    totals: ReportTotals


def displayed_amortization(row: EvolutionRow) -> Decimal:
    """
    Amortization as shown in the evolution table.

    Once the debt is settled nothing is amortized; on the month that crosses
    into credit only the part that cleared the debt counts.
    """
    if row.prior_balance <= 0:
        return Decimal("0")
    if row.current_balance < 0:
        return max(row.amortization - abs(row.current_balance), Decimal("0"))
    return row.amortization


def double_restitution_label(enabled: bool) -> str:
    if enabled:
        return f"Sim (Modulação STJ - A partir de {DOUBLE_RESTITUTION_CUTOFF:%d/%m/%Y})"
    return "Não (Devolução Simples)"


def build_report(
    client: Client,
    contract: Contract,
    evolution: Evolution,
    generated_at: Optional[datetime] = None,
    moral_damages: Decimal = Decimal("0"),
) -> Report:
    """
    Map an Evolution into the report shape.

    Restitution figures come straight from the engine rows and summary; the
    report never re-derives them.
    """
    generated_at = generated_at or datetime.now()
    monthly_rate = contract.monthly_rate if contract.monthly_rate is not None else Decimal("0")
    summary = evolution.summary

    rows = [
        ReportRow(
            index=i,
            reference_date=row.reference_date,
            amount_paid=to_cents(row.amount_paid),
            prior_balance=to_cents(row.prior_balance),
            monthly_rate=monthly_rate,
            interest=to_cents(row.interest),
            amortization=to_cents(displayed_amortization(row)),
            restitution_amount=to_cents(row.restitution_amount),
            current_balance=to_cents(row.current_balance),
        )
        for i, row in enumerate(evolution.rows, start=1)
    ]

    totals = ReportTotals(
        amount_paid=to_cents(sum((r.amount_paid for r in evolution.rows), Decimal("0"))),
        interest=to_cents(sum((r.interest for r in evolution.rows), Decimal("0"))),
        amortization=to_cents(sum((displayed_amortization(r) for r in evolution.rows), Decimal("0"))),
        restitution_amount=to_cents(sum((r.restitution_amount for r in evolution.rows), Decimal("0"))),
    )

    total_restitution = to_cents(summary.total_restitution)
    fees = to_cents(total_restitution * contract.fees_percent / Decimal("100"))
    moral_damages = to_cents(moral_damages)

    return Report(
        generated_at=generated_at,
        client=ReportClient(
            name=client.name or "Não informado",
            cpf=client.cpf,
            birth_date=client.birth_date,
            age=age_on(client.birth_date, generated_at.date()) if client.birth_date else None,
            benefit_number=client.benefit_number,
        ),
        contract=ReportContract(
            principal=to_cents(contract.principal or Decimal("0")),
            start_date=contract.start_date,
            monthly_rate=monthly_rate,
        ),
        parameters=ReportParameters(
            methodology=METHODOLOGY,
            correction_index=CORRECTION_INDEX,
            double_restitution=contract.double_restitution,
            double_restitution_label=double_restitution_label(contract.double_restitution),
        ),
        summary=ReportSummary(
            current_debt_balance=to_cents(summary.current_debt_balance),
            total_paid=to_cents(summary.total_paid),
            simple_restitution=to_cents(summary.simple_restitution),
            doubling_surcharge=to_cents(summary.doubling_surcharge),
            total_restitution=total_restitution,
            moral_damages=moral_damages,
            fees_percent=contract.fees_percent,
            fees=fees,
            total_award=total_restitution + moral_damages + fees,
        ),
        evolution=rows,
        totals=totals,
    )
