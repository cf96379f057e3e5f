"""Simulation engine: amortization, payoff strategies, wealth comparison and the optimal plan."""
from debtplan.simulation.interest import (
    MAX_MONTHS,
    PAID_OFF_EPSILON,
    monthly_interest,
    blended_monthly_return,
)
from debtplan.simulation.amortization import generate_amortization_schedule, schedule_totals
from debtplan.simulation.strategies import (
    snowball_order,
    avalanche_order,
    run_strategy,
    calculate_strategy,
    calculate_snowball,
    calculate_avalanche,
    calculate_custom_strategy,
)
from debtplan.simulation.comparison import calculate_payoff_comparison
from debtplan.simulation.wealth import (
    simulate_wealth_comparison,
    calculate_opportunity_cost,
    sample_months,
)
from debtplan.simulation.optimal_plan import simulate_optimal_plan, calculate_optimal_plan

__all__ = [
    "MAX_MONTHS",
    "PAID_OFF_EPSILON",
    "monthly_interest",
    "blended_monthly_return",
    "generate_amortization_schedule",
    "schedule_totals",
    "snowball_order",
    "avalanche_order",
    "run_strategy",
    "calculate_strategy",
    "calculate_snowball",
    "calculate_avalanche",
    "calculate_custom_strategy",
    "calculate_payoff_comparison",
    "simulate_wealth_comparison",
    "calculate_opportunity_cost",
    "sample_months",
    "simulate_optimal_plan",
    "calculate_optimal_plan",
]
