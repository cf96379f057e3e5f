"""Interest and return primitives shared by every simulator."""
from __future__ import annotations

from collections.abc import Iterable

from debtplan.models.loan import Investment

MAX_MONTHS = 600  # 50 years of monthly steps
PAID_OFF_EPSILON = 0.01


def monthly_interest(balance: float, annual_rate: float) -> float:
    """Interest for one month on ``balance`` at an annual percentage rate."""
    return balance * annual_rate / 100.0 / 12.0


def is_paid_off(balance: float) -> bool:
    return balance <= PAID_OFF_EPSILON


def blended_annual_return(investments: Iterable[Investment]) -> float:
    """Value-weighted average of the investments' annual net return, in percent."""
    investments = list(investments)
    total_value = sum(inv.current_value for inv in investments)
    if total_value <= 0:
        return 0.0
    weighted = sum(inv.current_value * inv.average_net_return for inv in investments)
    return weighted / total_value


def blended_monthly_return(investments: Iterable[Investment]) -> float:
    """Blended return as a monthly decimal rate (7 % a year -> 0.07 / 12)."""
    return blended_annual_return(investments) / 100.0 / 12.0


def active_rate(
    month: int,
    nominal_rate: float,
    fixed_months: int,
    rate_after_fixed: float | None,
) -> float:
    """Rate in force in 1-based ``month`` given a one-time fixed-rate expiry."""
    if fixed_months > 0 and month > fixed_months and rate_after_fixed is not None:
        return rate_after_fixed
    return nominal_rate
