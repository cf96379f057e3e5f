from datetime import date
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from debtplan.models.loan import Investment, Loan
from debtplan.models.plan import OpportunityCostResult, OptimalPlanResult, WealthComparisonResult
from debtplan.services.plan_service import build_optimal_plan, compare_wealth, opportunity_cost

router = APIRouter(tags=["plans"])


class WealthRequest(BaseModel):
    loans: list[Loan]
    investments: list[Investment] = []
    extra_monthly: float = Field(..., ge=0)
    target_loan_ids: Optional[list[str]] = None
    horizon_months: Optional[int] = Field(None, ge=0)


class OptimalPlanRequest(BaseModel):
    """Optional fields fall back to the suggested autopilot set and snowball order."""
    loans: list[Loan]
    investments: list[Investment] = []
    extra_monthly: float = Field(..., ge=0)
    payoff_order: Optional[list[str]] = None
    autopilot_ids: Optional[list[str]] = None
    horizon_months: Optional[int] = Field(None, ge=0)
    today: Optional[date] = None


class OpportunityCostRequest(BaseModel):
    loans: list[Loan]
    investments: list[Investment] = []
    extra_monthly: float = Field(..., ge=0)
    months: int = Field(60, ge=1)


@router.post("/plans/wealth", response_model=WealthComparisonResult)
def wealth_endpoint(request: WealthRequest):
    return compare_wealth(
        request.loans,
        request.investments,
        request.extra_monthly,
        request.target_loan_ids,
        request.horizon_months,
    )


@router.post("/plans/optimal", response_model=OptimalPlanResult)
def optimal_plan_endpoint(request: OptimalPlanRequest):
    """Full month-by-month plan; callers downsample the ledger themselves."""
    return build_optimal_plan(
        request.loans,
        request.investments,
        request.extra_monthly,
        request.payoff_order,
        request.autopilot_ids,
        request.horizon_months,
        today=request.today,
    )


@router.post("/plans/opportunity-cost", response_model=OpportunityCostResult)
def opportunity_cost_endpoint(request: OpportunityCostRequest):
    return opportunity_cost(
        request.loans, request.investments, request.extra_monthly, request.months,
    )
