from datetime import date
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from debtplan.config import settings
from debtplan.models.loan import Loan
from debtplan.models.strategy import AmortizationRow, PayoffComparison, Scenario, StrategyResult
from debtplan.services.strategy_service import compare_strategies, run_scenario
from debtplan.simulation.amortization import generate_amortization_schedule, schedule_totals

router = APIRouter(tags=["strategies"])


class AmortizationRequest(BaseModel):
    loan: Loan


class AmortizationResponse(BaseModel):
    loan_id: str
    schedule: list[AmortizationRow]
    totals: dict


class CompareRequest(BaseModel):
    """Loans to compare, with ids the caller wants left out of the run."""
    loans: list[Loan]
    extra_monthly: float = Field(0.0, ge=0)
    excluded_ids: list[str] = []
    today: Optional[date] = None


class ScenarioRequest(BaseModel):
    loans: list[Loan]
    scenario: Scenario
    today: Optional[date] = None


@router.post("/strategies/amortization", response_model=AmortizationResponse)
def amortization_endpoint(request: AmortizationRequest):
    schedule = generate_amortization_schedule(request.loan, settings.MAX_MONTHS)
    return AmortizationResponse(
        loan_id=request.loan.loan_id,
        schedule=schedule,
        totals=schedule_totals(schedule),
    )


@router.post("/strategies/compare", response_model=PayoffComparison)
def compare_endpoint(request: CompareRequest):
    """Snowball, avalanche and minimum-only results for the same loans."""
    return compare_strategies(
        request.loans, request.extra_monthly, request.excluded_ids, today=request.today,
    )


@router.post("/strategies/scenario", response_model=StrategyResult)
def scenario_endpoint(request: ScenarioRequest):
    return run_scenario(request.loans, request.scenario, today=request.today)
