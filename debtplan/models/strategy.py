from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class StrategyType(str, Enum):
    """Which visiting order the payoff simulator uses."""
    snowball = "snowball"    # smallest balance first
    avalanche = "avalanche"  # highest nominal rate first
    custom = "custom"        # caller-supplied order


class AmortizationRow(BaseModel):
    """One month of a single-loan schedule."""
    month: int
    payment: float
    principal: float
    interest: float
    fees: float
    remaining_balance: float
    annual_rate: float


class MonthlySnapshot(BaseModel):
    month: int
    total_balance: float
    total_interest_paid: float
    loans_remaining: int


class StrategyResult(BaseModel):
    """Outcome of paying a set of loans down under one visiting order."""
    strategy: Optional[str] = None
    payoff_order: list[str]
    total_months: int
    total_interest: float
    total_fees: float
    total_paid: float
    debt_free_date: date
    hit_month_cap: bool = False
    timeline: list[MonthlySnapshot] = []


class PayoffComparison(BaseModel):
    snowball: StrategyResult
    avalanche: StrategyResult
    minimum_only: StrategyResult
    interest_saved: float = 0.0
    months_saved: int = 0


class Scenario(BaseModel):
    """A saved payoff scenario, as stored by the application."""
    name: str
    strategy: StrategyType
    extra_monthly_payment: float = 0.0
    custom_order: list[str] = []
