"""Tests for the invest-vs-repay wealth comparison and opportunity cost."""
import pytest

from debtplan.models.loan import Investment, Loan
from debtplan.models.plan import Recommendation
from debtplan.simulation.amortization import generate_amortization_schedule
from debtplan.simulation.wealth import (
    calculate_opportunity_cost,
    default_horizon,
    sample_months,
    simulate_wealth_comparison,
)


def _make_loan(**overrides) -> Loan:
    defaults = dict(
        loan_id="L1",
        current_balance=12_000.0,
        nominal_rate=0.0,
        monthly_payment=100.0,
        remaining_term_months=12,
    )
    defaults.update(overrides)
    return Loan(**defaults)


# --- Timeline sampling ---


def test_sample_months_first_year_then_every_sixth():
    assert sample_months(30) == list(range(1, 13)) + [18, 24, 30]


def test_sample_months_includes_final_month():
    assert sample_months(31) == list(range(1, 13)) + [18, 24, 30, 31]


def test_sample_months_short_and_empty():
    assert sample_months(5) == [1, 2, 3, 4, 5]
    assert sample_months(0) == []


# --- Horizon ---


def test_default_horizon_is_longest_target_term():
    loans = [
        _make_loan(loan_id="A", remaining_term_months=24),
        _make_loan(loan_id="B", remaining_term_months=36),
    ]
    assert default_horizon(loans) == 36
    assert default_horizon([]) == 0


def test_default_horizon_ignores_non_targets():
    loans = [
        _make_loan(loan_id="A", remaining_term_months=24),
        _make_loan(loan_id="B", remaining_term_months=120),
    ]
    result = simulate_wealth_comparison(loans, ["A"], 100, 0.0)
    assert result.horizon_months == 24
    assert result.target_loan_ids == ["A"]


def test_horizon_clamped_to_month_cap():
    result = simulate_wealth_comparison([_make_loan()], ["L1"], 100, 0.0, 1_000, max_months=600)
    assert result.horizon_months == 600


# --- Branch behaviour ---


def test_zero_return_portfolios_match_contributions():
    result = simulate_wealth_comparison([_make_loan()], ["L1"], 200, 0.0, 12)
    assert result.invest_now.portfolio_value == 2_400
    assert result.invest_now.remaining_debt == 10_800
    assert result.pay_down_first.portfolio_value == 0
    assert result.pay_down_first.remaining_debt == 8_400
    assert result.net_benefit == -2_400
    assert result.recommendation == Recommendation.invest


def test_freed_minimum_is_invested():
    loan = _make_loan(current_balance=1_000, monthly_payment=500, remaining_term_months=2)
    result = simulate_wealth_comparison([loan], ["L1"], 100, 0.0, 4)
    assert result.invest_now.portfolio_value == 1_400
    assert result.pay_down_first.portfolio_value == 1_300
    assert result.invest_now.debt_free_month == 2
    assert result.pay_down_first.debt_free_month == 2


def test_high_rate_loan_favours_paying_down():
    loan = _make_loan(
        current_balance=20_000, nominal_rate=20.0, monthly_payment=500, remaining_term_months=60,
    )
    result = simulate_wealth_comparison([loan], ["L1"], 1_000, 0.02 / 12)
    assert result.net_benefit > 0
    assert result.recommendation == Recommendation.pay_loans
    assert result.interest_saved > 0
    assert result.pay_down_first.debt_free_month is not None
    assert result.invest_now.debt_free_month is None


def test_low_rate_loan_favours_investing():
    loan = _make_loan(
        current_balance=100_000, nominal_rate=1.0, monthly_payment=1_000, remaining_term_months=120,
    )
    result = simulate_wealth_comparison([loan], ["L1"], 1_000, 0.10 / 12)
    assert result.net_benefit < 0
    assert result.recommendation == Recommendation.invest


def test_paying_down_never_clears_later():
    loan = _make_loan(current_balance=5_000, nominal_rate=6.0, monthly_payment=200, remaining_term_months=36)
    result = simulate_wealth_comparison([loan], ["L1"], 300, 0.005, 36)
    assert result.pay_down_first.debt_free_month <= result.invest_now.debt_free_month


def test_timeline_follows_sampling():
    result = simulate_wealth_comparison([_make_loan()], ["L1"], 100, 0.004, 40)
    assert [p.month for p in result.timeline] == sample_months(40)
    assert result.timeline[-1].month == 40


def test_no_targets():
    result = simulate_wealth_comparison([_make_loan()], [], 500, 0.005)
    assert result.horizon_months == 0
    assert result.invest_now.portfolio_value == 0
    assert result.timeline == []
    assert result.recommendation == Recommendation.invest


# --- Opportunity cost ---


def test_opportunity_cost_with_investments():
    investments = [Investment(investment_id="I1", current_value=100_000, average_net_return=6.0)]
    loans = [_make_loan(current_balance=20_000, nominal_rate=10.0, monthly_payment=500)]
    result = calculate_opportunity_cost(loans, investments, 1_000, 60)
    assert result.invest_instead.total_value_after_months > 60_000
    assert result.invest_instead.total_earnings == pytest.approx(
        result.invest_instead.total_value_after_months - 60_000, abs=1,
    )
    assert result.invest_instead.monthly_income == 500
    assert result.pay_loans_instead.interest_saved > 0
    assert result.pay_loans_instead.months_saved > 0
    expected = Recommendation.invest if result.net_benefit > 0 else Recommendation.pay_loans
    assert result.recommendation == expected


def test_opportunity_cost_without_investments():
    loans = [_make_loan(current_balance=20_000, nominal_rate=10.0, monthly_payment=500)]
    result = calculate_opportunity_cost(loans, [], 1_000, 60)
    assert result.invest_instead.total_value_after_months == 60_000
    assert result.invest_instead.total_earnings == 0
    assert result.net_benefit == -result.pay_loans_instead.interest_saved
    assert result.recommendation == Recommendation.pay_loans


def test_loan_without_term_uses_schedule_length():
    loan = Loan(loan_id="A", current_balance=50_000, nominal_rate=5.0, monthly_payment=1_000)
    payoff = len(generate_amortization_schedule(loan))
    assert default_horizon([loan]) == payoff
    result = simulate_wealth_comparison([loan], ["A"], 500, 0.004)
    assert result.horizon_months == payoff
    assert result.invest_now.debt_free_month == payoff
    assert result.invest_now.remaining_debt == 0
