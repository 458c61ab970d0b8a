"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from rmc_recalc.domain.models import Client, Contract, Evolution, EvolutionRow, PaymentRecord
from rmc_recalc.utils.currency import parse_brl_decimal, to_cents
from rmc_recalc.utils.date_utils import normalize_competence


def _optional_money(value):
    """Accept numbers or Brazilian-formatted strings ("1.234,56")"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_brl_decimal(value)


class ClientSchema(BaseModel):
    """Borrower identification"""

    name: str = ""
    cpf: str = ""
    birth_date: Optional[date] = None
    benefit_number: str = ""

    def to_domain(self) -> Client:
        return Client(
            name=self.name,
            cpf=self.cpf,
            birth_date=self.birth_date,
            benefit_number=self.benefit_number,
        )


class ContractSchema(BaseModel):
    """Declared loan terms; positivity is enforced by the engine"""

    principal: Optional[Decimal] = Field(None, description="Amount originally made available")
    monthly_rate: Optional[Decimal] = Field(None, description="Monthly rate in percent, e.g. 2.5")
    double_restitution: bool = False
    start_date: Optional[date] = None
    fees_percent: Decimal = Field(Decimal("0"), ge=0, description="Attorney fees in percent")

    @field_validator("principal", "monthly_rate", mode="before")
    @classmethod
    def parse_money(cls, value):
        return _optional_money(value)

    @field_validator("fees_percent", mode="before")
    @classmethod
    def parse_fees(cls, value):
        parsed = _optional_money(value)
        return Decimal("0") if parsed is None else parsed

    def to_domain(self) -> Contract:
        return Contract(
            principal=to_cents(self.principal) if self.principal is not None else None,
            monthly_rate=self.monthly_rate,
            double_restitution=self.double_restitution,
            start_date=self.start_date,
            fees_percent=self.fees_percent,
        )


class PaymentSchema(BaseModel):
    """Single debit, as extracted or edited by hand"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    competence_date: Optional[date] = None
    amount: Decimal = Field(..., ge=0)
    source_line: str = ""

    @field_validator("competence_date", mode="before")
    @classmethod
    def parse_competence(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return normalize_competence(value)

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value):
        return parse_brl_decimal(value)

    def to_domain(self) -> PaymentRecord:
        return PaymentRecord(
            id=self.id,
            competence_date=self.competence_date,
            amount=self.amount,
            source_line=self.source_line,
        )


class ParseRequest(BaseModel):
    """Request body for POST /v1/statements/parse"""

    text: str = Field(..., min_length=1, description="Raw statement text")


class ExtractionResponse(BaseModel):
    """Response for statement extraction endpoints"""

    payments: List[PaymentSchema]
    payment_count: int
    degraded_dates: bool
    extracted_text: Optional[str] = None


class CalculationRequest(BaseModel):
    """Request body for POST /v1/calculations"""

    client: ClientSchema = Field(default_factory=ClientSchema)
    contract: ContractSchema
    payments: List[PaymentSchema]


class EvolutionRowSchema(BaseModel):
    """One recalculated month"""

    payment_id: Optional[int] = None
    reference_date: date
    prior_balance: Decimal
    interest: Decimal
    amortization: Decimal
    current_balance: Decimal
    amount_paid: Decimal
    restitution_amount: Decimal

    @classmethod
    def from_domain(cls, row: EvolutionRow) -> "EvolutionRowSchema":
        return cls(
            payment_id=row.payment_id,
            reference_date=row.reference_date,
            prior_balance=to_cents(row.prior_balance),
            interest=to_cents(row.interest),
            amortization=to_cents(row.amortization),
            current_balance=to_cents(row.current_balance),
            amount_paid=to_cents(row.amount_paid),
            restitution_amount=to_cents(row.restitution_amount),
        )


class SummarySchema(BaseModel):
    """Aggregate results"""

    total_paid: Decimal
    current_debt_balance: Decimal
    total_restitution: Decimal
    simple_restitution: Decimal
    doubling_surcharge: Decimal


class CalculationResponse(BaseModel):
    """Response for POST /v1/calculations and GET /v1/calculations/{id}"""

    calculation_id: str
    created_at: Optional[str] = None
    evolution: List[EvolutionRowSchema]
    summary: SummarySchema

    @classmethod
    def from_domain(cls, calculation_id: str, evolution: Evolution, created_at: Optional[str] = None) -> "CalculationResponse":
        summary = evolution.summary
        return cls(
            calculation_id=calculation_id,
            created_at=created_at,
            evolution=[EvolutionRowSchema.from_domain(row) for row in evolution.rows],
            summary=SummarySchema(
                total_paid=to_cents(summary.total_paid),
                current_debt_balance=to_cents(summary.current_debt_balance),
                total_restitution=to_cents(summary.total_restitution),
                simple_restitution=to_cents(summary.simple_restitution),
                doubling_surcharge=to_cents(summary.doubling_surcharge),
            ),
        )


class HistoryItem(BaseModel):
    """Single calculation in history"""

    calculation_id: str
    client_name: Optional[str] = None
    total_paid: Decimal
    current_debt_balance: Decimal
    total_restitution: Decimal
    created_at: str


class HistoryResponse(BaseModel):
    """Response for GET /v1/calculations"""

    cpf: str
    calculations: List[HistoryItem]


class RateResponse(BaseModel):
    """Response for GET /v1/rates"""

    reference_date: date
    series_code: int
    monthly_rate: Optional[Decimal] = None


# Report payload mirrors rmc_recalc.domain.report dataclasses


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ReportClientSchema(_FromAttributes):
    name: str
    cpf: str
    birth_date: Optional[date] = None
    age: Optional[int] = None
    benefit_number: str


class ReportContractSchema(_FromAttributes):
    principal: Decimal
    start_date: Optional[date] = None
    monthly_rate: Decimal


class ReportParametersSchema(_FromAttributes):
    methodology: str
    correction_index: str
    double_restitution: bool
    double_restitution_label: str


class ReportSummarySchema(_FromAttributes):
    current_debt_balance: Decimal
    total_paid: Decimal
    simple_restitution: Decimal
    doubling_surcharge: Decimal
    total_restitution: Decimal
    moral_damages: Decimal
    fees_percent: Decimal
    fees: Decimal
    total_award: Decimal


class ReportRowSchema(_FromAttributes):
    index: int
    reference_date: date
    amount_paid: Decimal
    prior_balance: Decimal
    monthly_rate: Decimal
    interest: Decimal
    amortization: Decimal
    restitution_amount: Decimal
    current_balance: Decimal


class ReportTotalsSchema(_FromAttributes):
    amount_paid: Decimal
    interest: Decimal
    amortization: Decimal
    restitution_amount: Decimal


class ReportResponse(_FromAttributes):
    """Response for GET /v1/calculations/{id}/report"""

    generated_at: datetime
    client: ReportClientSchema
    contract: ReportContractSchema
    parameters: ReportParametersSchema
    summary: ReportSummarySchema
    evolution: List[ReportRowSchema]
    totals: ReportTotalsSchema
