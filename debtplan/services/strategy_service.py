"""Strategy orchestration service.

Applies the application's loan annotations (excluded ids, saved scenarios)
before handing a clean loan set to the payoff simulators.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from debtplan.config import settings
from debtplan.models.loan import Loan
from debtplan.models.strategy import (
    AmortizationRow,
    PayoffComparison,
    Scenario,
    StrategyResult,
    StrategyType,
)
from debtplan.simulation.amortization import generate_amortization_schedule
from debtplan.simulation.comparison import calculate_payoff_comparison
from debtplan.simulation.strategies import calculate_strategy

logger = logging.getLogger(__name__)


def filter_loans(loans: Sequence[Loan], excluded_ids: Iterable[str] = ()) -> list[Loan]:
    excluded = set(excluded_ids)
    return [l for l in loans if l.loan_id not in excluded]


def compare_strategies(
    loans: Sequence[Loan],
    extra_monthly: float,
    excluded_ids: Iterable[str] = (),
    today: date | None = None,
) -> PayoffComparison:
    """Snowball / avalanche / minimum-only over the loans not excluded."""
    included = filter_loans(loans, excluded_ids)
    logger.info(
        "Comparing strategies for %d of %d loans, extra %.2f",
        len(included), len(loans), extra_monthly,
    )
    comparison = calculate_payoff_comparison(
        included, extra_monthly, today=today, max_months=settings.MAX_MONTHS,
    )
    if comparison.minimum_only.hit_month_cap:
        logger.warning(
            "Minimum payments do not clear the debt within %d months", settings.MAX_MONTHS,
        )
    return comparison


def run_scenario(
    loans: Sequence[Loan], scenario: Scenario, today: date | None = None,
) -> StrategyResult:
    """Run a saved scenario through the ordering it names."""
    order = None
    if scenario.strategy == StrategyType.custom and scenario.custom_order:
        order = scenario.custom_order
    if order is not None:
        known = {l.loan_id for l in loans}
        unknown = [lid for lid in order if lid not in known]
        if unknown:
            logger.warning("Scenario %r names unknown loans %s", scenario.name, unknown)
        missing = known.difference(order)
        if missing:
            logger.warning(
                "Scenario %r omits %d loans; they receive no payments", scenario.name, len(missing),
            )

    logger.info("Running scenario %r (%s)", scenario.name, scenario.strategy.value)
    result = calculate_strategy(
        scenario.strategy,
        loans,
        scenario.extra_monthly_payment,
        order,
        today=today,
        max_months=settings.MAX_MONTHS,
    )
    if result.hit_month_cap:
        logger.warning("Scenario %r stopped at the %d month cap", scenario.name, result.total_months)
    return result


def loan_schedules(loans: Sequence[Loan]) -> dict[str, list[AmortizationRow]]:
    """Amortization schedule per loan id."""
    return {
        l.loan_id: generate_amortization_schedule(l, settings.MAX_MONTHS)
        for l in loans
    }
