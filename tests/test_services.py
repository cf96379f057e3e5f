"""Tests for the strategy and planning services."""
import logging
from datetime import date

import pytest

from debtplan.models.loan import Investment, Loan
from debtplan.models.strategy import Scenario, StrategyType
from debtplan.services.plan_service import (
    build_optimal_plan,
    compare_wealth,
    default_payoff_order,
    opportunity_cost,
    rate_spread,
    suggest_autopilot_ids,
)
from debtplan.services.strategy_service import (
    compare_strategies,
    filter_loans,
    loan_schedules,
    run_scenario,
)

TODAY = date(2026, 1, 15)


def _make_loan(**overrides) -> Loan:
    defaults = dict(
        loan_id="L1",
        current_balance=10_000.0,
        nominal_rate=5.0,
        monthly_payment=500.0,
        remaining_term_months=24,
    )
    defaults.update(overrides)
    return Loan(**defaults)


def _loans() -> list[Loan]:
    return [
        _make_loan(loan_id="mortgage", current_balance=200_000, nominal_rate=3.0,
                   monthly_payment=1_200, remaining_term_months=240),
        _make_loan(loan_id="card", current_balance=4_000, nominal_rate=19.9,
                   monthly_payment=200, remaining_term_months=24),
        _make_loan(loan_id="car", current_balance=15_000, nominal_rate=8.0,
                   monthly_payment=450, remaining_term_months=36),
        _make_loan(loan_id="family", current_balance=5_000, nominal_rate=0.0,
                   monthly_payment=100, remaining_term_months=50, priority=9999),
    ]


def _investments() -> list[Investment]:
    return [Investment(investment_id="fund", current_value=50_000, average_net_return=7.0)]


# --- Strategy service ---


class TestStrategyService:
    def test_filter_loans(self):
        assert [l.loan_id for l in filter_loans(_loans(), ["car", "family"])] == ["mortgage", "card"]

    def test_compare_excludes_ids(self):
        result = compare_strategies(_loans(), 500, excluded_ids=["mortgage"], today=TODAY)
        for run in (result.snowball, result.avalanche, result.minimum_only):
            assert "mortgage" not in run.payoff_order
            assert len(run.payoff_order) == 3

    def test_run_snowball_scenario(self):
        scenario = Scenario(name="fast", strategy=StrategyType.snowball, extra_monthly_payment=500)
        result = run_scenario(_loans(), scenario, today=TODAY)
        assert result.strategy == "snowball"
        assert result.payoff_order[0] == "card"

    def test_run_custom_scenario(self):
        scenario = Scenario(
            name="car first", strategy=StrategyType.custom,
            extra_monthly_payment=1_000, custom_order=["car", "card", "family", "mortgage"],
        )
        result = run_scenario(_loans(), scenario, today=TODAY)
        assert result.strategy == "custom"
        assert result.payoff_order.index("car") < result.payoff_order.index("mortgage")

    def test_custom_scenario_warns_on_omitted_loans(self, caplog):
        scenario = Scenario(
            name="partial", strategy=StrategyType.custom,
            extra_monthly_payment=100, custom_order=["card", "ghost"],
        )
        with caplog.at_level(logging.WARNING):
            result = run_scenario(_loans(), scenario, today=TODAY)
        assert "unknown loans" in caplog.text
        assert "omits 3 loans" in caplog.text
        assert sorted(result.payoff_order) == sorted(l.loan_id for l in _loans())

    def test_loan_schedules_keyed_by_id(self):
        schedules = loan_schedules(_loans())
        assert set(schedules) == {"mortgage", "card", "car", "family"}
        assert schedules["family"][0].interest == 0


# --- Planning service ---


class TestPlanService:
    def test_suggest_autopilot(self):
        # mortgage is cheaper than the 7% fund, family is flagged by priority
        assert suggest_autopilot_ids(_loans(), _investments()) == ["mortgage", "family"]

    def test_zero_rate_loan_not_autopilot_by_rate(self):
        loans = [_make_loan(loan_id="free", nominal_rate=0.0)]
        assert suggest_autopilot_ids(loans, _investments()) == []

    def test_no_investments_only_priority(self):
        assert suggest_autopilot_ids(_loans(), []) == ["family"]

    def test_default_payoff_order(self):
        assert default_payoff_order(_loans(), ["mortgage", "family"]) == ["card", "car"]

    def test_build_optimal_plan_defaults(self):
        plan = build_optimal_plan(_loans(), _investments(), 1_000, horizon_months=24, today=TODAY)
        assert plan.autopilot_ids == ["mortgage", "family"]
        assert plan.payoff_order == ["card", "car"]
        assert plan.starting_portfolio == 50_000
        assert len(plan.months) == 24

    def test_build_optimal_plan_attaches_rate_spreads(self):
        plan = build_optimal_plan(_loans(), _investments(), 1_000, horizon_months=12, today=TODAY)
        spreads = {s.loan_id: s for s in plan.rate_spreads}
        assert list(spreads) == ["mortgage", "family"]
        assert spreads["mortgage"].spread == 4.0
        assert spreads["family"].advantage_per_year == 70

    def test_no_rate_spreads_without_autopilot(self):
        plan = build_optimal_plan(
            _loans(), _investments(), 1_000, autopilot_ids=[], horizon_months=12, today=TODAY,
        )
        assert plan.rate_spreads == []

    def test_build_optimal_plan_explicit_order(self):
        plan = build_optimal_plan(
            _loans(), _investments(), 1_000,
            payoff_order=["car", "card"], autopilot_ids=[], horizon_months=12, today=TODAY,
        )
        assert plan.payoff_order == ["car", "card", "mortgage", "family"]
        assert plan.autopilot_ids == []

    def test_compare_wealth_targets_non_autopilot(self):
        result = compare_wealth(_loans(), _investments(), 500)
        assert result.target_loan_ids == ["card", "car"]
        assert result.horizon_months == 36
        assert result.monthly_return == pytest.approx(0.07 / 12)

    def test_compare_wealth_explicit_targets(self):
        result = compare_wealth(_loans(), _investments(), 500, ["card"], 12)
        assert result.target_loan_ids == ["card"]
        assert result.horizon_months == 12

    def test_opportunity_cost(self):
        result = opportunity_cost(_loans(), _investments(), 500, 24)
        assert result.months == 24
        assert result.invest_instead.total_value_after_months > 12_000

    def test_rate_spread(self):
        spread = rate_spread(_make_loan(nominal_rate=3.0), 7.0)
        assert spread.saved_per_year == 30
        assert spread.earned_per_year == 70
        assert spread.advantage_per_year == 40
        assert spread.spread == 4.0
