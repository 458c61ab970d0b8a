"""/v1/calculations - RMC recalculation, stored runs and report data"""

import time
import uuid
import logging
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from rmc_recalc.api.v1.schemas import (
    CalculationRequest,
    CalculationResponse,
    HistoryItem,
    HistoryResponse,
    ReportResponse,
)
from rmc_recalc.api.dependencies import get_request_id
from rmc_recalc.infrastructure.database.session import get_db
from rmc_recalc.infrastructure.database.repositories import CalculationRepository, to_domain
from rmc_recalc.infrastructure.database.models import RMCCalculation
from rmc_recalc.domain.amortization import compute_evolution
from rmc_recalc.domain.report import build_report
from rmc_recalc.domain.exceptions import InvalidContractInputError
from rmc_recalc.infrastructure.observability.metrics import calculation_counter, record_calculation
from rmc_recalc.infrastructure.observability.logging import log_calculation
from rmc_recalc.utils.currency import from_cents_int, to_cents_int

router = APIRouter()


def _load(calculation_id: str, db: Session) -> RMCCalculation:
    try:
        calculation_uuid = uuid.UUID(calculation_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid calculation ID format")

    db_calculation = CalculationRepository(db).get_calculation_by_id(calculation_uuid)
    if not db_calculation:
        raise HTTPException(status_code=404, detail="Calculation not found")
    return db_calculation


@router.post("/calculations", response_model=CalculationResponse)
def create_calculation(
    request_body: CalculationRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Recalculate the RMC balance under the declared monthly rate.

    Flow:
    1. Normalize client/contract/payments (done by the schemas)
    2. Run the amortization engine
    3. Persist the run
    4. Return evolution rows + summary
    """
    start_time = time.time()
    request_id = get_request_id(request)

    client = request_body.client.to_domain()
    contract = request_body.contract.to_domain()
    payments = [p.to_domain() for p in request_body.payments]

    try:
        evolution = compute_evolution(contract, payments)

        db_calculation = CalculationRepository(db).create_calculation(
            client=client,
            contract=contract,
            payments=payments,
            summary=evolution.summary,
        )
        db.commit()

    except InvalidContractInputError as e:
        db.rollback()
        calculation_counter.labels(outcome="invalid").inc()
        logging.warning(f"Invalid contract input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    calculation_id = str(db_calculation.id)
    total_restitution_cents = to_cents_int(evolution.summary.total_restitution)
    duration_ms = (time.time() - start_time) * 1000
    record_calculation(total_restitution_cents)
    log_calculation(request_id, calculation_id, len(payments), total_restitution_cents, duration_ms)

    return CalculationResponse.from_domain(
        calculation_id,
        evolution,
        created_at=db_calculation.created_at.isoformat() if db_calculation.created_at else None,
    )


@router.get("/calculations", response_model=HistoryResponse)
def get_calculation_history(
    cpf: str = Query(..., min_length=1, description="Client CPF"),
    db: Session = Depends(get_db),
):
    """Recent calculations for a client"""
    calculations = CalculationRepository(db).get_calculations_by_cpf(cpf, limit=20)

    history_items = [
        HistoryItem(
            calculation_id=str(c.id),
            client_name=c.client_name,
            total_paid=from_cents_int(c.total_paid_cents),
            current_debt_balance=from_cents_int(c.current_debt_balance_cents),
            total_restitution=from_cents_int(c.total_restitution_cents),
            created_at=c.created_at.isoformat(),
        )
        for c in calculations
    ]

    return HistoryResponse(cpf=cpf, calculations=history_items)


@router.get("/calculations/{calculation_id}", response_model=CalculationResponse)
def get_calculation(calculation_id: str, db: Session = Depends(get_db)):
    """Stored run, recomputed into its full evolution"""
    db_calculation = _load(calculation_id, db)
    _, contract, payments = to_domain(db_calculation)
    evolution = compute_evolution(contract, payments)

    return CalculationResponse.from_domain(
        str(db_calculation.id),
        evolution,
        created_at=db_calculation.created_at.isoformat(),
    )


@router.get("/calculations/{calculation_id}/report", response_model=ReportResponse)
def get_calculation_report(
    calculation_id: str,
    moral_damages: Decimal = Query(Decimal("0"), ge=0, description="Estimated moral damages"),
    db: Session = Depends(get_db),
):
    """Report payload for the PDF renderer"""
    db_calculation = _load(calculation_id, db)
    client, contract, payments = to_domain(db_calculation)
    evolution = compute_evolution(contract, payments)

    report = build_report(client, contract, evolution, moral_damages=moral_damages)
    return ReportResponse.model_validate(report)
