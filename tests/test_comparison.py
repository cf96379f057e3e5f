"""Tests for the three-way strategy comparison."""
from datetime import date

from debtplan.models.loan import Loan
from debtplan.simulation.comparison import calculate_payoff_comparison

TODAY = date(2026, 1, 15)


def _make_loan(**overrides) -> Loan:
    defaults = dict(
        loan_id="L1",
        current_balance=20_000.0,
        nominal_rate=5.0,
        monthly_payment=500.0,
    )
    defaults.update(overrides)
    return Loan(**defaults)


def _loan_sets() -> list[list[Loan]]:
    return [
        [
            _make_loan(loan_id="1", current_balance=50_000, monthly_payment=1_500, nominal_rate=4),
            _make_loan(loan_id="2", current_balance=20_000, monthly_payment=800, nominal_rate=7),
        ],
        [
            _make_loan(loan_id="A", current_balance=50_000, monthly_payment=1_000, nominal_rate=8),
            _make_loan(loan_id="B", current_balance=10_000, monthly_payment=500, nominal_rate=3),
        ],
    ]


def test_returns_all_three_results():
    result = calculate_payoff_comparison(_loan_sets()[0], 500, today=TODAY)
    assert result.snowball.strategy == "snowball"
    assert result.avalanche.strategy == "avalanche"
    assert result.minimum_only.strategy == "minimum_only"


def test_interest_ordering():
    for loans in _loan_sets():
        result = calculate_payoff_comparison(loans, 2_000, today=TODAY)
        assert result.avalanche.total_interest <= result.snowball.total_interest
        assert result.snowball.total_interest <= result.minimum_only.total_interest


def test_avalanche_strictly_cheaper_when_orders_diverge():
    result = calculate_payoff_comparison(_loan_sets()[1], 2_000, today=TODAY)
    assert result.avalanche.total_interest < result.snowball.total_interest


def test_minimum_only_takes_longest():
    result = calculate_payoff_comparison(_loan_sets()[0], 500, today=TODAY)
    assert result.minimum_only.total_months >= result.snowball.total_months
    assert result.minimum_only.total_months >= result.avalanche.total_months


def test_savings_against_minimum_only():
    result = calculate_payoff_comparison(_loan_sets()[0], 500, today=TODAY)
    assert result.interest_saved == result.minimum_only.total_interest - result.avalanche.total_interest
    assert result.months_saved == result.minimum_only.total_months - result.avalanche.total_months
    assert result.interest_saved > 0


def test_zero_extra_matches_minimum_only():
    result = calculate_payoff_comparison(_loan_sets()[0], 0, today=TODAY)
    assert result.avalanche.total_interest == result.minimum_only.total_interest
    assert result.months_saved == 0


def test_empty_loans():
    result = calculate_payoff_comparison([], 500, today=TODAY)
    assert result.minimum_only.total_months == 0
    assert result.interest_saved == 0
