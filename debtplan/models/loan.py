from enum import Enum
from typing import Optional

from pydantic import BaseModel


class LoanType(str, Enum):
    housing = "housing"
    car = "car"
    consumer = "consumer"
    student = "student"


class Loan(BaseModel):
    loan_id: str
    name: str = ""
    loan_type: LoanType = LoanType.consumer
    lender: Optional[str] = None
    current_balance: float
    nominal_rate: float  # annual percent, e.g. 5.0
    effective_rate: Optional[float] = None
    monthly_fees: float = 0.0
    monthly_payment: float  # minimum payment, fees included
    remaining_term_months: int = 0
    fixed_rate_months_remaining: int = 0
    rate_after_fixed_period: Optional[float] = None
    priority: int = 1

    @property
    def display_name(self) -> str:
        return self.name or self.loan_id


class Investment(BaseModel):
    investment_id: str
    name: str = ""
    current_value: float
    average_net_return: float  # annual percent, net of fees


class LoanBook(BaseModel):
    """A set of loans imported from a spreadsheet."""
    name: str
    loan_count: int
    total_balance: float
    loans: list[Loan] = []
