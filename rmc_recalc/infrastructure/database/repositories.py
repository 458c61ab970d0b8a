"""Data access layer for calculation runs"""

import uuid
from datetime import date
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from rmc_recalc.infrastructure.database.models import RMCCalculation
from rmc_recalc.domain.models import Client, Contract, PaymentRecord, Summary
from rmc_recalc.utils.currency import from_cents_int, to_cents_int


def _payment_to_json(payment: PaymentRecord) -> dict:
    return {
        "id": payment.id,
        "competence_date": payment.competence_date.isoformat() if payment.competence_date else None,
        "amount": str(payment.amount),
        "source_line": payment.source_line,
    }


def _payment_from_json(data: dict) -> PaymentRecord:
    return PaymentRecord(
        id=data["id"],
        competence_date=date.fromisoformat(data["competence_date"]) if data.get("competence_date") else None,
        amount=Decimal(data["amount"]),
        source_line=data.get("source_line", ""),
    )


class CalculationRepository:
    """Repository for stored recalculations"""

    def __init__(self, db: Session):
        self.db = db

    def create_calculation(
        self,
        client: Client,
        contract: Contract,
        payments: List[PaymentRecord],
        summary: Summary,
    ) -> RMCCalculation:
        """Persist inputs and headline results"""
        db_calculation = RMCCalculation(
            client_name=client.name or None,
            client_cpf=client.cpf or None,
            client_birth_date=client.birth_date,
            client_benefit_number=client.benefit_number or None,
            principal_cents=to_cents_int(contract.principal),
            monthly_rate=str(contract.monthly_rate),
            start_date=contract.start_date,
            double_restitution=contract.double_restitution,
            fees_percent=str(contract.fees_percent),
            payments=[_payment_to_json(p) for p in payments],
            total_paid_cents=to_cents_int(summary.total_paid),
            current_debt_balance_cents=to_cents_int(summary.current_debt_balance),
            total_restitution_cents=to_cents_int(summary.total_restitution),
        )
        self.db.add(db_calculation)
        self.db.flush()  # Get ID without committing
        return db_calculation

    def get_calculation_by_id(self, calculation_id: uuid.UUID) -> Optional[RMCCalculation]:
        return (
            self.db.query(RMCCalculation)
            .filter(RMCCalculation.id == calculation_id)
            .first()
        )

    def get_calculations_by_cpf(self, cpf: str, limit: int = 10) -> List[RMCCalculation]:
        """Fetch recent calculations for a client"""
        return (
            self.db.query(RMCCalculation)
            .filter(RMCCalculation.client_cpf == cpf)
            .order_by(RMCCalculation.created_at.desc())
            .limit(limit)
            .all()
        )


def to_domain(db_calculation: RMCCalculation) -> tuple[Client, Contract, List[PaymentRecord]]:
    """Rebuild engine inputs from a stored run"""
    client = Client(
        name=db_calculation.client_name or "",
        cpf=db_calculation.client_cpf or "",
        birth_date=db_calculation.client_birth_date,
        benefit_number=db_calculation.client_benefit_number or "",
    )
    contract = Contract(
        principal=from_cents_int(db_calculation.principal_cents),
        monthly_rate=Decimal(db_calculation.monthly_rate),
        double_restitution=db_calculation.double_restitution,
        start_date=db_calculation.start_date,
        fees_percent=Decimal(db_calculation.fees_percent),
    )
    payments = [_payment_from_json(p) for p in db_calculation.payments]
    return client, contract, payments
