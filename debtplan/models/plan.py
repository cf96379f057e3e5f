import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Recommendation(str, Enum):
    invest = "invest"
    pay_loans = "pay_loans"


class WealthScenarioSummary(BaseModel):
    """End state of one branch of the wealth comparison."""
    portfolio_value: float
    total_contributed: float
    interest_paid: float
    debt_free_month: Optional[int] = None
    remaining_debt: float


class WealthTimelinePoint(BaseModel):
    month: int
    invest_portfolio: float
    invest_debt: float
    pay_down_portfolio: float
    pay_down_debt: float


class WealthComparisonResult(BaseModel):
    """Invest the surplus now vs pay the target loans down first."""
    extra_monthly: float
    horizon_months: int
    monthly_return: float
    target_loan_ids: list[str]
    invest_now: WealthScenarioSummary
    pay_down_first: WealthScenarioSummary
    interest_saved: float
    net_benefit: float  # positive = paying down first ends wealthier
    recommendation: Recommendation
    timeline: list[WealthTimelinePoint] = []


class Milestone(BaseModel):
    month: int
    date: datetime.date
    loan_id: Optional[str] = None
    event: str


class PlanMonth(BaseModel):
    """Full ledger row for one month of the optimal plan."""
    month: int
    date: datetime.date
    loan_payments: dict[str, float]
    loan_balances: dict[str, float]
    invested: float
    total_debt: float
    investment_portfolio: float
    cumulative_interest: float
    net_wealth: float
    events: list[str] = []


class PlanSummary(BaseModel):
    final_portfolio: float
    final_debt: float
    final_net_wealth: float
    total_interest_paid: float
    total_invested: float
    debt_free_month: Optional[int] = None
    milestones: list[Milestone] = []


class RateSpread(BaseModel):
    """Yearly effect of putting ``amount`` on a loan vs investing it."""
    loan_id: str
    amount: float
    saved_per_year: float
    earned_per_year: float
    advantage_per_year: float
    spread: float


class OptimalPlanResult(BaseModel):
    extra_monthly: float
    horizon: int
    starting_portfolio: float
    monthly_return: float
    payoff_order: list[str]
    autopilot_ids: list[str]
    months: list[PlanMonth]
    summary: PlanSummary
    rate_spreads: list[RateSpread] = []  # autopilot loans only


class InvestInstead(BaseModel):
    total_value_after_months: float
    total_earnings: float
    monthly_income: float


class PayLoansInstead(BaseModel):
    interest_saved: float
    months_saved: int


class OpportunityCostResult(BaseModel):
    """Quick estimate: compound the extra amount vs interest it would save."""
    extra_monthly: float
    months: int
    invest_instead: InvestInstead
    pay_loans_instead: PayLoansInstead
    net_benefit: float  # positive = investing is better
    recommendation: Recommendation
