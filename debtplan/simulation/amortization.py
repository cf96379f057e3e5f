"""Amortization schedule for a single loan.

Pays the loan's configured monthly payment every month until the balance is
cleared, switching to the post-fixed rate once the fixed period runs out.
A payment that never covers interest plus fees runs to the month cap and
returns a schedule that does not reach zero.
"""
from __future__ import annotations

from debtplan.models.loan import Loan
from debtplan.models.strategy import AmortizationRow
from debtplan.simulation.interest import (
    MAX_MONTHS,
    PAID_OFF_EPSILON,
    active_rate,
    is_paid_off,
    monthly_interest,
)


def amortize_month(
    balance: float, annual_rate: float, payment: float, fee: float,
) -> tuple[float, float, float, float]:
    """Apply one month's scheduled payment.

    Returns (payment, principal, interest, new_balance). The payment is capped
    at balance + interest + fee so the final month never overpays.
    """
    interest = monthly_interest(balance, annual_rate)
    paid = min(payment, balance + interest + fee)
    principal = max(0.0, paid - interest - fee)
    return paid, principal, interest, max(0.0, balance - principal)


def generate_amortization_schedule(
    loan: Loan, max_months: int = MAX_MONTHS,
) -> list[AmortizationRow]:
    schedule: list[AmortizationRow] = []
    balance = loan.current_balance
    month = 0

    while balance > PAID_OFF_EPSILON and month < max_months:
        month += 1
        rate = active_rate(
            month,
            loan.nominal_rate,
            loan.fixed_rate_months_remaining,
            loan.rate_after_fixed_period,
        )
        payment, principal, interest, balance = amortize_month(
            balance, rate, loan.monthly_payment, loan.monthly_fees,
        )
        schedule.append(AmortizationRow(
            month=month,
            payment=payment,
            principal=principal,
            interest=interest,
            fees=loan.monthly_fees,
            remaining_balance=balance,
            annual_rate=rate,
        ))

    return schedule


def schedule_totals(schedule: list[AmortizationRow]) -> dict:
    """Totals shown under a schedule: months, amounts paid, final balance."""
    final_balance = schedule[-1].remaining_balance if schedule else 0.0
    return {
        "months": len(schedule),
        "total_paid": round(sum(r.payment for r in schedule), 2),
        "total_interest": round(sum(r.interest for r in schedule), 2),
        "total_fees": round(sum(r.fees for r in schedule), 2),
        "final_balance": round(final_balance, 2),
        "paid_off": is_paid_off(final_balance),
    }
