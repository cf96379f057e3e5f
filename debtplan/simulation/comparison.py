"""Snowball vs avalanche vs minimum-only over the same loan set."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from debtplan.models.loan import Loan
from debtplan.models.strategy import PayoffComparison
from debtplan.simulation.interest import MAX_MONTHS
from debtplan.simulation.strategies import (
    calculate_avalanche,
    calculate_snowball,
    run_strategy,
)


def calculate_payoff_comparison(
    loans: Sequence[Loan],
    extra_monthly: float,
    *,
    today: date | None = None,
    max_months: int = MAX_MONTHS,
) -> PayoffComparison:
    today = today or date.today()
    snowball = calculate_snowball(loans, extra_monthly, today=today, max_months=max_months)
    avalanche = calculate_avalanche(loans, extra_monthly, today=today, max_months=max_months)
    minimum_only = run_strategy(
        loans, 0.0, [l.loan_id for l in loans],
        today=today, max_months=max_months, label="minimum_only",
    )
    return PayoffComparison(
        snowball=snowball,
        avalanche=avalanche,
        minimum_only=minimum_only,
        interest_saved=minimum_only.total_interest - avalanche.total_interest,
        months_saved=minimum_only.total_months - avalanche.total_months,
    )
