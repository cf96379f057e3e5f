"""Combined month-by-month plan for all loans and the investment portfolio.

Each month every live loan pays its minimum, the surplus (extra amount plus
minimums freed by paid-off loans) goes down the payoff order skipping
autopilot loans, and whatever is left is invested. The existing portfolio
compounds from the first month. Every month produces a full ledger row.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from debtplan.models.loan import Investment, Loan
from debtplan.models.plan import Milestone, OptimalPlanResult, PlanMonth, PlanSummary
from debtplan.simulation.amortization import amortize_month
from debtplan.simulation.interest import (
    MAX_MONTHS,
    active_rate,
    blended_monthly_return,
    is_paid_off,
)
from debtplan.simulation.strategies import add_months
from debtplan.simulation.wealth import default_horizon

DEBT_FREE_EVENT = "Debt free"


def surplus_order(
    loans: Sequence[Loan], payoff_order: Sequence[str], autopilot_ids: Iterable[str],
) -> list[str]:
    """Loans eligible for surplus, payoff order first, then any the order omits."""
    autopilot = set(autopilot_ids)
    known = {l.loan_id for l in loans}
    ordered = [lid for lid in dict.fromkeys(payoff_order) if lid in known and lid not in autopilot]
    ordered += [
        l.loan_id for l in loans
        if l.loan_id not in autopilot and l.loan_id not in ordered
    ]
    return ordered


def simulate_optimal_plan(
    loans: Sequence[Loan],
    extra_monthly: float,
    payoff_order: Sequence[str],
    autopilot_ids: Iterable[str],
    horizon_months: int,
    starting_portfolio: float,
    monthly_return: float,
    *,
    today: date | None = None,
    max_months: int = MAX_MONTHS,
) -> OptimalPlanResult:
    today = today or date.today()
    autopilot = list(dict.fromkeys(autopilot_ids))
    horizon = min(max(horizon_months, 0), max_months)
    by_id = {l.loan_id: l for l in loans}
    order = surplus_order(loans, payoff_order, autopilot)

    balances = {l.loan_id: l.current_balance for l in loans}
    paid_off = {lid for lid, b in balances.items() if is_paid_off(b)}
    portfolio = starting_portfolio
    cumulative_interest = 0.0
    total_invested = 0.0
    freed = 0.0
    debt_free_month: int | None = 0 if loans and len(paid_off) == len(loans) else None

    months: list[PlanMonth] = []
    milestones: list[Milestone] = []

    for month in range(1, horizon + 1):
        month_date = add_months(today, month)
        payments = dict.fromkeys(balances, 0.0)
        events: list[str] = []

        alive = [l for l in loans if l.loan_id not in paid_off]
        for loan in alive:
            rate = active_rate(
                month, loan.nominal_rate,
                loan.fixed_rate_months_remaining, loan.rate_after_fixed_period,
            )
            paid, _, interest, balances[loan.loan_id] = amortize_month(
                balances[loan.loan_id], rate, loan.monthly_payment, loan.monthly_fees,
            )
            payments[loan.loan_id] += paid
            cumulative_interest += interest

        budget = extra_monthly + freed
        for lid in order:
            if budget <= 0:
                break
            if is_paid_off(balances[lid]):
                continue
            extra = min(budget, balances[lid])
            balances[lid] = max(0.0, balances[lid] - extra)
            payments[lid] += extra
            budget -= extra

        for loan in alive:
            if is_paid_off(balances[loan.loan_id]):
                paid_off.add(loan.loan_id)
                freed += loan.monthly_payment
                event = f"{loan.display_name} paid off"
                events.append(event)
                milestones.append(Milestone(
                    month=month, date=month_date, loan_id=loan.loan_id, event=event,
                ))
        if loans and debt_free_month is None and len(paid_off) == len(loans):
            debt_free_month = month
            events.append(DEBT_FREE_EVENT)
            milestones.append(Milestone(month=month, date=month_date, event=DEBT_FREE_EVENT))

        invested = max(budget, 0.0)
        portfolio = (portfolio + invested) * (1.0 + monthly_return)
        total_invested += invested
        total_debt = sum(balances.values())

        months.append(PlanMonth(
            month=month,
            date=month_date,
            loan_payments={lid: round(p, 2) for lid, p in payments.items()},
            loan_balances={lid: round(b, 2) for lid, b in balances.items()},
            invested=round(invested, 2),
            total_debt=round(total_debt, 2),
            investment_portfolio=round(portfolio, 2),
            cumulative_interest=round(cumulative_interest, 2),
            net_wealth=round(portfolio - total_debt, 2),
            events=events,
        ))

    if months:
        last = months[-1]
        summary = PlanSummary(
            final_portfolio=last.investment_portfolio,
            final_debt=last.total_debt,
            final_net_wealth=last.net_wealth,
            total_interest_paid=last.cumulative_interest,
            total_invested=round(total_invested, 2),
            debt_free_month=debt_free_month,
            milestones=milestones,
        )
    else:
        debt = sum(balances.values())
        summary = PlanSummary(
            final_portfolio=round(portfolio, 2),
            final_debt=round(debt, 2),
            final_net_wealth=round(portfolio - debt, 2),
            total_interest_paid=0.0,
            total_invested=0.0,
            debt_free_month=debt_free_month,
        )

    return OptimalPlanResult(
        extra_monthly=extra_monthly,
        horizon=horizon,
        starting_portfolio=starting_portfolio,
        monthly_return=monthly_return,
        payoff_order=order,
        autopilot_ids=[lid for lid in autopilot if lid in by_id],
        months=months,
        summary=summary,
    )


def calculate_optimal_plan(
    loans: Sequence[Loan],
    investments: Sequence[Investment],
    extra_monthly: float,
    payoff_order: Sequence[str],
    autopilot_ids: Iterable[str] = (),
    horizon_months: int | None = None,
    *,
    today: date | None = None,
    max_months: int = MAX_MONTHS,
) -> OptimalPlanResult:
    """Plan seeded with the existing portfolio and its blended return."""
    if horizon_months is None:
        horizon_months = default_horizon(loans, max_months)
    return simulate_optimal_plan(
        loans,
        extra_monthly,
        payoff_order,
        autopilot_ids,
        horizon_months,
        starting_portfolio=sum(inv.current_value for inv in investments),
        monthly_return=blended_monthly_return(investments),
        today=today,
        max_months=max_months,
    )
