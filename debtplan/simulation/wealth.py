"""Invest-now vs pay-down-first wealth comparison.

Both branches pay the minimums on the target loans. "Invest now" sends the
extra amount (plus minimums freed by paid-off loans) straight into the
portfolio; "pay down first" throws it at the loans, highest rate first, and
invests only what is left over. Loans outside the target set behave the same
in both branches and are left out of the simulation.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence

from debtplan.models.loan import Investment, Loan
from debtplan.models.plan import (
    InvestInstead,
    OpportunityCostResult,
    PayLoansInstead,
    Recommendation,
    WealthComparisonResult,
    WealthScenarioSummary,
    WealthTimelinePoint,
)
from debtplan.simulation.amortization import amortize_month, generate_amortization_schedule
from debtplan.simulation.interest import (
    MAX_MONTHS,
    blended_monthly_return,
    is_paid_off,
)
from debtplan.simulation.strategies import avalanche_order, calculate_avalanche

_FIRST_YEAR = 12
_SAMPLE_EVERY = 6


def should_sample(month: int, horizon: int) -> bool:
    """Every month of the first year, every 6th month after, and the last."""
    return month <= _FIRST_YEAR or month % _SAMPLE_EVERY == 0 or month == horizon


def sample_months(horizon: int) -> list[int]:
    return [m for m in range(1, horizon + 1) if should_sample(m, horizon)]


class _Branch:
    """Working state of one scenario: balances, portfolio and running totals."""

    def __init__(self, loans: Sequence[Loan]):
        self.loans = {l.loan_id: l for l in loans}
        self.balances = {l.loan_id: l.current_balance for l in loans}
        self.portfolio = 0.0
        self.contributed = 0.0
        self.interest = 0.0
        self.freed = 0.0
        self.debt_free_month: int | None = 0 if self.is_clear() else None

    def is_clear(self) -> bool:
        return all(is_paid_off(b) for b in self.balances.values())

    def debt(self) -> float:
        return sum(self.balances.values())

    def pay_minimums(self) -> list[str]:
        """Pay every live loan's minimum. Returns the ids alive at month start."""
        alive = [lid for lid, b in self.balances.items() if not is_paid_off(b)]
        for lid in alive:
            loan = self.loans[lid]
            _, _, interest, self.balances[lid] = amortize_month(
                self.balances[lid], loan.nominal_rate, loan.monthly_payment, loan.monthly_fees,
            )
            self.interest += interest
        return alive

    def apply_surplus(self, budget: float, order: Sequence[str]) -> float:
        for lid in order:
            if budget <= 0:
                break
            balance = self.balances[lid]
            if is_paid_off(balance):
                continue
            extra = min(budget, balance)
            self.balances[lid] = max(0.0, balance - extra)
            budget -= extra
        return budget

    def invest(self, contribution: float, monthly_return: float) -> None:
        self.portfolio = (self.portfolio + contribution) * (1.0 + monthly_return)
        self.contributed += contribution

    def settle(self, alive: list[str], month: int) -> None:
        for lid in alive:
            if is_paid_off(self.balances[lid]):
                self.freed += self.loans[lid].monthly_payment
        if self.debt_free_month is None and self.is_clear():
            self.debt_free_month = month

    def summary(self) -> WealthScenarioSummary:
        return WealthScenarioSummary(
            portfolio_value=round(self.portfolio, 2),
            total_contributed=round(self.contributed, 2),
            interest_paid=round(self.interest, 2),
            debt_free_month=self.debt_free_month,
            remaining_debt=round(self.debt(), 2),
        )


def _term_months(loan: Loan, max_months: int) -> int:
    if loan.remaining_term_months > 0:
        return loan.remaining_term_months
    return len(generate_amortization_schedule(loan, max_months))


def default_horizon(loans: Iterable[Loan], max_months: int = MAX_MONTHS) -> int:
    """Longest remaining term among ``loans``, capped at ``max_months``.

    A loan without a known term counts with the length of its own
    amortization schedule.
    """
    terms = [_term_months(l, max_months) for l in loans]
    if not terms:
        return 0
    return min(max(max(terms), 1), max_months)


def simulate_wealth_comparison(
    loans: Sequence[Loan],
    target_loan_ids: Iterable[str],
    extra_monthly: float,
    monthly_return: float,
    horizon_months: int | None = None,
    *,
    max_months: int = MAX_MONTHS,
) -> WealthComparisonResult:
    target_ids = set(target_loan_ids)
    targets = [l for l in loans if l.loan_id in target_ids]
    if horizon_months is None:
        horizon = default_horizon(targets, max_months)
    else:
        horizon = min(max(horizon_months, 0), max_months)

    invest_now = _Branch(targets)
    pay_down = _Branch(targets)
    order = avalanche_order(targets)
    timeline: list[WealthTimelinePoint] = []

    for month in range(1, horizon + 1):
        alive = invest_now.pay_minimums()
        invest_now.invest(extra_monthly + invest_now.freed, monthly_return)
        invest_now.settle(alive, month)

        alive = pay_down.pay_minimums()
        leftover = pay_down.apply_surplus(extra_monthly + pay_down.freed, order)
        pay_down.invest(leftover, monthly_return)
        pay_down.settle(alive, month)

        if should_sample(month, horizon):
            timeline.append(WealthTimelinePoint(
                month=month,
                invest_portfolio=round(invest_now.portfolio, 2),
                invest_debt=round(invest_now.debt(), 2),
                pay_down_portfolio=round(pay_down.portfolio, 2),
                pay_down_debt=round(pay_down.debt(), 2),
            ))

    net_benefit = pay_down.portfolio - invest_now.portfolio
    return WealthComparisonResult(
        extra_monthly=extra_monthly,
        horizon_months=horizon,
        monthly_return=monthly_return,
        target_loan_ids=[l.loan_id for l in targets],
        invest_now=invest_now.summary(),
        pay_down_first=pay_down.summary(),
        interest_saved=round(invest_now.interest - pay_down.interest, 2),
        net_benefit=round(net_benefit, 2),
        recommendation=Recommendation.pay_loans if net_benefit > 0 else Recommendation.invest,
        timeline=timeline,
    )


def calculate_opportunity_cost(
    loans: Sequence[Loan],
    investments: Sequence[Investment],
    extra_monthly: float,
    months: int,
    *,
    max_months: int = MAX_MONTHS,
) -> OpportunityCostResult:
    """Compound ``extra_monthly`` for ``months`` vs the interest it saves on the loans.

    A quick estimate that ignores freed payments; positive ``net_benefit``
    means investing the extra amount earns more than it would save.
    """
    monthly_return = blended_monthly_return(investments)
    existing_value = sum(inv.current_value for inv in investments)

    value = 0.0
    for _ in range(months):
        value = (value + extra_monthly) * (1.0 + monthly_return)
    earnings = value - extra_monthly * months

    with_extra = calculate_avalanche(loans, extra_monthly, max_months=max_months)
    without_extra = calculate_avalanche(loans, 0.0, max_months=max_months)
    interest_saved = without_extra.total_interest - with_extra.total_interest
    months_saved = without_extra.total_months - with_extra.total_months

    net_benefit = earnings - interest_saved
    return OpportunityCostResult(
        extra_monthly=extra_monthly,
        months=months,
        invest_instead=InvestInstead(
            total_value_after_months=round(value),
            total_earnings=round(earnings),
            monthly_income=round(existing_value * monthly_return),
        ),
        pay_loans_instead=PayLoansInstead(
            interest_saved=round(interest_saved),
            months_saved=months_saved,
        ),
        net_benefit=round(net_benefit),
        recommendation=Recommendation.invest if net_benefit > 0 else Recommendation.pay_loans,
    )
