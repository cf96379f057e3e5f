"""Multi-loan payoff simulator and the orderings that drive it.

Every loan pays its minimum each month; a shared surplus (the configured
extra amount plus minimums freed by loans already paid off) is then poured
into the loans in visiting order. Snowball, avalanche and custom strategies
differ only in that order.
"""
from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from debtplan.models.loan import Loan
from debtplan.models.strategy import MonthlySnapshot, StrategyResult, StrategyType
from debtplan.simulation.amortization import amortize_month
from debtplan.simulation.interest import MAX_MONTHS, is_paid_off


# ---------------------------------------------------------------------------
# Orderings
# ---------------------------------------------------------------------------
def snowball_order(loans: Sequence[Loan]) -> list[str]:
    """Smallest current balance first. Ties keep input order."""
    return [l.loan_id for l in sorted(loans, key=lambda l: l.current_balance)]


def avalanche_order(loans: Sequence[Loan]) -> list[str]:
    """Highest nominal rate first. Ties keep input order."""
    return [l.loan_id for l in sorted(loans, key=lambda l: -l.nominal_rate)]


def custom_order(order: Sequence[str]) -> list[str]:
    """User order with repeated ids dropped after their first visit."""
    return list(dict.fromkeys(order))


def resolve_order(
    strategy: StrategyType,
    loans: Sequence[Loan],
    order: Sequence[str] | None = None,
) -> list[str]:
    if strategy == StrategyType.snowball:
        return snowball_order(loans)
    if strategy == StrategyType.avalanche:
        return avalanche_order(loans)
    if order is None:
        return [l.loan_id for l in loans]
    return custom_order(order)


def add_months(start: date, months: int) -> date:
    """First day of the calendar month ``months`` after ``start``."""
    index = start.year * 12 + (start.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


# ---------------------------------------------------------------------------
# Simulator
# ---------------------------------------------------------------------------
def run_strategy(
    loans: Sequence[Loan],
    extra_monthly: float,
    ordered_ids: Sequence[str],
    *,
    today: date | None = None,
    max_months: int = MAX_MONTHS,
    label: str | None = None,
) -> StrategyResult:
    """Pay ``loans`` down together, visiting them in ``ordered_ids`` order.

    Loans absent from ``ordered_ids`` receive no payments but still appear at
    the end of the payoff order, so the order is always a permutation of the
    input loan ids.
    """
    today = today or date.today()
    state: dict[str, dict[str, float]] = {
        l.loan_id: {
            "balance": l.current_balance,
            "rate": l.nominal_rate,
            "minimum": l.monthly_payment,
            "fee": l.monthly_fees,
        }
        for l in loans
    }
    visit = [lid for lid in dict.fromkeys(ordered_ids) if lid in state]

    payoff_order: list[str] = []
    timeline: list[MonthlySnapshot] = []
    total_interest = total_fees = total_paid = 0.0
    freed = 0.0
    month = 0

    while month < max_months:
        active = [lid for lid in visit if not is_paid_off(state[lid]["balance"])]
        if not active:
            break
        month += 1

        # Minimum payments
        for lid in active:
            s = state[lid]
            paid, _, interest, s["balance"] = amortize_month(
                s["balance"], s["rate"], s["minimum"], s["fee"],
            )
            total_interest += interest
            total_fees += s["fee"]
            total_paid += paid

        # Surplus in visiting order
        budget = extra_monthly + freed
        for lid in visit:
            if budget <= 0:
                break
            s = state[lid]
            if is_paid_off(s["balance"]):
                continue
            extra = min(budget, s["balance"])
            s["balance"] = max(0.0, s["balance"] - extra)
            budget -= extra
            total_paid += extra

        for lid in active:
            if is_paid_off(state[lid]["balance"]) and lid not in payoff_order:
                payoff_order.append(lid)
                freed += state[lid]["minimum"]

        timeline.append(MonthlySnapshot(
            month=month,
            total_balance=sum(s["balance"] for s in state.values()),
            total_interest_paid=total_interest,
            loans_remaining=sum(1 for lid in visit if not is_paid_off(state[lid]["balance"])),
        ))

    hit_cap = any(not is_paid_off(state[lid]["balance"]) for lid in visit)

    for lid in visit:
        if lid not in payoff_order:
            payoff_order.append(lid)
    for l in loans:
        if l.loan_id not in payoff_order:
            payoff_order.append(l.loan_id)

    return StrategyResult(
        strategy=label,
        payoff_order=payoff_order,
        total_months=month,
        total_interest=round(total_interest),
        total_fees=round(total_fees),
        total_paid=round(total_paid),
        debt_free_date=add_months(today, month),
        hit_month_cap=hit_cap,
        timeline=timeline,
    )


def calculate_strategy(
    strategy: StrategyType,
    loans: Sequence[Loan],
    extra_monthly: float,
    order: Sequence[str] | None = None,
    *,
    today: date | None = None,
    max_months: int = MAX_MONTHS,
) -> StrategyResult:
    return run_strategy(
        loans,
        extra_monthly,
        resolve_order(strategy, loans, order),
        today=today,
        max_months=max_months,
        label=strategy.value,
    )


def calculate_snowball(loans, extra_monthly, *, today=None, max_months=MAX_MONTHS):
    return calculate_strategy(
        StrategyType.snowball, loans, extra_monthly, today=today, max_months=max_months,
    )


def calculate_avalanche(loans, extra_monthly, *, today=None, max_months=MAX_MONTHS):
    return calculate_strategy(
        StrategyType.avalanche, loans, extra_monthly, today=today, max_months=max_months,
    )


def calculate_custom_strategy(loans, extra_monthly, order, *, today=None, max_months=MAX_MONTHS):
    return calculate_strategy(
        StrategyType.custom, loans, extra_monthly, order, today=today, max_months=max_months,
    )
