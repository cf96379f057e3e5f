"""Planning service: fills in plan defaults and runs the wealth simulators.

This is where the application's loan annotations are interpreted: a loan
with priority at or above ``settings.AUTOPILOT_PRIORITY`` is minimum-only
forever, and a loan cheaper than the portfolio's blended return is better
left on minimum payments while the surplus is invested.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from debtplan.config import settings
from debtplan.models.loan import Investment, Loan
from debtplan.models.plan import (
    OpportunityCostResult,
    OptimalPlanResult,
    RateSpread,
    WealthComparisonResult,
)
from debtplan.simulation.interest import blended_annual_return, blended_monthly_return
from debtplan.simulation.optimal_plan import calculate_optimal_plan
from debtplan.simulation.strategies import snowball_order
from debtplan.simulation.wealth import calculate_opportunity_cost, simulate_wealth_comparison

logger = logging.getLogger(__name__)


def suggest_autopilot_ids(loans: Sequence[Loan], investments: Sequence[Investment]) -> list[str]:
    """Loans that should only ever receive their minimum payment."""
    annual_return = blended_annual_return(investments)
    ids = []
    for loan in loans:
        if loan.priority >= settings.AUTOPILOT_PRIORITY:
            ids.append(loan.loan_id)
        elif 0 < loan.nominal_rate < annual_return:
            ids.append(loan.loan_id)
    return ids


def default_payoff_order(loans: Sequence[Loan], autopilot_ids: Iterable[str]) -> list[str]:
    """Smallest balance first among the loans that receive surplus."""
    autopilot = set(autopilot_ids)
    return snowball_order([l for l in loans if l.loan_id not in autopilot])


def build_optimal_plan(
    loans: Sequence[Loan],
    investments: Sequence[Investment],
    extra_monthly: float,
    payoff_order: Sequence[str] | None = None,
    autopilot_ids: Iterable[str] | None = None,
    horizon_months: int | None = None,
    today: date | None = None,
) -> OptimalPlanResult:
    if autopilot_ids is None:
        autopilot_ids = suggest_autopilot_ids(loans, investments)
    autopilot_ids = list(autopilot_ids)
    if payoff_order is None:
        payoff_order = default_payoff_order(loans, autopilot_ids)

    logger.info(
        "Building plan: %d loans (%d on autopilot), %d investments, extra %.2f",
        len(loans), len(autopilot_ids), len(investments), extra_monthly,
    )
    result = calculate_optimal_plan(
        loans,
        investments,
        extra_monthly,
        payoff_order,
        autopilot_ids,
        horizon_months,
        today=today,
        max_months=settings.MAX_MONTHS,
    )
    annual_return = blended_annual_return(investments)
    autopilot = set(result.autopilot_ids)
    result.rate_spreads = [
        rate_spread(l, annual_return) for l in loans if l.loan_id in autopilot
    ]
    if loans and result.summary.debt_free_month is None:
        logger.warning(
            "Plan ends after %d months with %.2f debt outstanding",
            result.horizon, result.summary.final_debt,
        )
    return result


def compare_wealth(
    loans: Sequence[Loan],
    investments: Sequence[Investment],
    extra_monthly: float,
    target_loan_ids: Iterable[str] | None = None,
    horizon_months: int | None = None,
) -> WealthComparisonResult:
    """Invest-now vs pay-down-first; targets default to every non-autopilot loan."""
    if target_loan_ids is None:
        autopilot = set(suggest_autopilot_ids(loans, investments))
        target_loan_ids = [l.loan_id for l in loans if l.loan_id not in autopilot]
    target_loan_ids = list(target_loan_ids)

    monthly_return = blended_monthly_return(investments)
    logger.info(
        "Comparing wealth for %d target loans at %.4f monthly return",
        len(target_loan_ids), monthly_return,
    )
    return simulate_wealth_comparison(
        loans,
        target_loan_ids,
        extra_monthly,
        monthly_return,
        horizon_months,
        max_months=settings.MAX_MONTHS,
    )


def opportunity_cost(
    loans: Sequence[Loan],
    investments: Sequence[Investment],
    extra_monthly: float,
    months: int,
) -> OpportunityCostResult:
    return calculate_opportunity_cost(
        loans, investments, extra_monthly, months, max_months=settings.MAX_MONTHS,
    )


def rate_spread(loan: Loan, annual_return: float, amount: float = 1000.0) -> RateSpread:
    """Yearly saving from paying ``amount`` off a loan vs earning on it invested."""
    saved = amount * loan.nominal_rate / 100.0
    earned = amount * annual_return / 100.0
    return RateSpread(
        loan_id=loan.loan_id,
        amount=amount,
        saved_per_year=round(saved, 2),
        earned_per_year=round(earned, 2),
        advantage_per_year=round(earned - saved, 2),
        spread=round(annual_return - loan.nominal_rate, 4),
    )
