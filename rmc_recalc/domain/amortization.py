"""Amortization engine - recalculates the RMC balance under a capped monthly rate"""

from datetime import date
from decimal import Decimal
from typing import List

from rmc_recalc.domain.exceptions import InvalidContractInputError
from rmc_recalc.domain.models import Contract, Evolution, EvolutionRow, PaymentRecord, Summary

# Payments after this date are refunded in double (STJ modulation)
DOUBLE_RESTITUTION_CUTOFF = date(2021, 3, 30)
DOUBLE_RESTITUTION_FACTOR = Decimal("2")

ZERO = Decimal("0")


def validate_inputs(contract: Contract, payments: List[PaymentRecord]) -> None:
    """
    Raises:
        InvalidContractInputError: Missing/non-positive principal, missing rate,
            empty payment list or an undated payment
    """
    if contract.principal is None or contract.principal <= 0:
        raise InvalidContractInputError("Principal must be greater than zero")
    if contract.monthly_rate is None:
        raise InvalidContractInputError("Monthly interest rate is required")
    if not contract.monthly_rate.is_finite():
        raise InvalidContractInputError("Monthly interest rate must be a number")
    if not payments:
        raise InvalidContractInputError("At least one payment is required")

    undated = [p.id for p in payments if p.competence_date is None]
    if undated:
        raise InvalidContractInputError(f"Payments without competence date: {undated}")


def restitution_eligible(prior_balance: Decimal, current_balance: Decimal, amount_paid: Decimal) -> Decimal:
    """
    Portion of a payment made over a debt that was already settled.

    - prior_balance <= 0: the debt was gone, the whole payment is undue
    - current_balance < 0: this payment crossed into credit, the overshoot is undue
    - otherwise nothing
    """
    if prior_balance <= 0:
        return amount_paid
    if current_balance < 0:
        return abs(current_balance)
    return ZERO


def doubling_applies(contract: Contract, reference_date: date) -> bool:
    return contract.double_restitution and reference_date > DOUBLE_RESTITUTION_CUTOFF


def compute_evolution(contract: Contract, payments: List[PaymentRecord]) -> Evolution:
    """
    Walk the payments month by month starting from the principal.

    For each payment:
        interest      = prior_balance * rate    (negative once in credit)
        amortization  = amount_paid - interest
        balance       = prior_balance - amortization

    Row restitution_amount carries the doubled refund: twice the eligible
    amount when the double-restitution policy is on and the month is after
    the cutoff, zero otherwise. The simple refund is the final credit
    balance, so:

        total_restitution = abs(final balance, if negative) + sum(row restitution)

    No rounding happens here; callers quantize for presentation.

    Raises:
        InvalidContractInputError: See validate_inputs
    """
    validate_inputs(contract, payments)

    rate = contract.monthly_rate / Decimal("100")
    ordered = sorted(payments, key=lambda p: p.competence_date)

    balance = contract.principal
    rows: List[EvolutionRow] = []

    for payment in ordered:
        amount_paid = payment.amount
        prior_balance = balance

        interest = prior_balance * rate
        amortization = amount_paid - interest
        balance = prior_balance - amortization

        eligible = restitution_eligible(prior_balance, balance, amount_paid)
        if doubling_applies(contract, payment.competence_date):
            restitution = eligible * DOUBLE_RESTITUTION_FACTOR
        else:
            restitution = ZERO

        rows.append(
            EvolutionRow(
                reference_date=payment.competence_date,
                prior_balance=prior_balance,
                interest=interest,
                amortization=amortization,
                current_balance=balance,
                amount_paid=amount_paid,
                restitution_amount=restitution,
                payment_id=payment.id,
            )
        )

    total_paid = sum((row.amount_paid for row in rows), ZERO)
    simple_restitution = abs(balance) if balance < 0 else ZERO
    doubling_surcharge = sum((row.restitution_amount for row in rows), ZERO)

    summary = Summary(
        total_paid=total_paid,
        current_debt_balance=balance if balance > 0 else ZERO,
        total_restitution=simple_restitution + doubling_surcharge,
        simple_restitution=simple_restitution,
        doubling_surcharge=doubling_surcharge,
    )
    return Evolution(rows=rows, summary=summary)
