#!/usr/bin/env python3
"""Plan report: strategy comparison and monthly plan ledger for a loan sheet.

Reads a loan sheet (Excel or CSV, same columns as the upload endpoint) and an
optional investments CSV (columns: name, value, return), then writes:
  - reports/<sheet>_strategies.csv   (one row per strategy)
  - reports/<sheet>_plan.xlsx        (monthly ledger, milestones, per-loan schedules)

Usage:
    python scripts/plan_report.py loans.xlsx --extra 2000
    python scripts/plan_report.py loans.xlsx --investments funds.csv --extra 3000 --horizon 120
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
PROJECT_DIR = Path(__file__).resolve().parent.parent
REPORTS_DIR = PROJECT_DIR / "reports"

sys.path.insert(0, str(PROJECT_DIR))

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(message)s", datefmt="%H:%M:%S")
logger = logging.getLogger(__name__)

from debtplan.models.loan import Investment
from debtplan.models.plan import OptimalPlanResult
from debtplan.models.strategy import AmortizationRow, PayoffComparison
from debtplan.services.loan_sheet import parse_loan_sheet
from debtplan.services.plan_service import build_optimal_plan
from debtplan.services.strategy_service import compare_strategies, loan_schedules


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------
def load_investments(path: Path | None) -> list[Investment]:
    if path is None:
        return []
    df = pd.read_csv(path)
    df.columns = [str(c).strip().lower() for c in df.columns]
    investments = []
    for i, row in df.iterrows():
        investments.append(Investment(
            investment_id=f"INV-{i + 1:03d}",
            name=str(row.get("name", "")),
            current_value=float(row["value"]),
            average_net_return=float(row["return"]),
        ))
    logger.info("Loaded %d investments from %s", len(investments), path)
    return investments


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------
def strategies_frame(comparison: PayoffComparison) -> pd.DataFrame:
    rows = []
    for label, result in (
        ("snowball", comparison.snowball),
        ("avalanche", comparison.avalanche),
        ("minimum_only", comparison.minimum_only),
    ):
        rows.append({
            "strategy": label,
            "months": result.total_months,
            "debt_free_date": result.debt_free_date.isoformat(),
            "total_interest": result.total_interest,
            "total_fees": result.total_fees,
            "total_paid": result.total_paid,
            "payoff_order": " > ".join(result.payoff_order),
            "hit_month_cap": result.hit_month_cap,
        })
    return pd.DataFrame(rows)


def ledger_frame(plan: OptimalPlanResult) -> pd.DataFrame:
    rows = []
    for m in plan.months:
        row = {"month": m.month, "date": m.date.isoformat()}
        for lid, payment in m.loan_payments.items():
            row[f"{lid} payment"] = payment
            row[f"{lid} balance"] = m.loan_balances[lid]
        row.update({
            "invested": m.invested,
            "total_debt": m.total_debt,
            "portfolio": m.investment_portfolio,
            "cumulative_interest": m.cumulative_interest,
            "net_wealth": m.net_wealth,
            "events": "; ".join(m.events),
        })
        rows.append(row)
    return pd.DataFrame(rows)


def schedules_frame(schedules: dict[str, list[AmortizationRow]]) -> pd.DataFrame:
    rows = []
    for lid, schedule in schedules.items():
        rows.extend({"loan_id": lid, **r.model_dump()} for r in schedule)
    return pd.DataFrame(rows)


def milestones_frame(plan: OptimalPlanResult) -> pd.DataFrame:
    return pd.DataFrame([ms.model_dump() for ms in plan.summary.milestones])


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main() -> int:
    parser = argparse.ArgumentParser(description="Debt payoff and investment plan report")
    parser.add_argument("sheet", type=Path, help="Loan sheet (.xlsx, .xls or .csv)")
    parser.add_argument("--investments", type=Path, default=None, help="Investments CSV")
    parser.add_argument("--extra", type=float, default=0.0, help="Extra monthly amount")
    parser.add_argument("--horizon", type=int, default=None, help="Plan horizon in months")
    parser.add_argument("--exclude", nargs="*", default=[], help="Loan ids left out of the comparison")
    args = parser.parse_args()

    with open(args.sheet, "rb") as f:
        book = parse_loan_sheet(f, args.sheet.name)
    logger.info("Parsed %d loans (%.2f outstanding) from %s", book.loan_count, book.total_balance, args.sheet)
    investments = load_investments(args.investments)

    comparison = compare_strategies(book.loans, args.extra, args.exclude)
    plan = build_optimal_plan(book.loans, investments, args.extra, horizon_months=args.horizon)

    REPORTS_DIR.mkdir(parents=True, exist_ok=True)
    stem = args.sheet.stem
    strategies_path = REPORTS_DIR / f"{stem}_strategies.csv"
    strategies_frame(comparison).to_csv(strategies_path, index=False)
    logger.info("Wrote %s", strategies_path)

    plan_path = REPORTS_DIR / f"{stem}_plan.xlsx"
    with pd.ExcelWriter(plan_path, engine="openpyxl") as writer:
        ledger_frame(plan).to_excel(writer, sheet_name="ledger", index=False)
        milestones_frame(plan).to_excel(writer, sheet_name="milestones", index=False)
        schedules_frame(loan_schedules(book.loans)).to_excel(writer, sheet_name="schedules", index=False)
    logger.info("Wrote %s", plan_path)

    s = plan.summary
    logger.info(
        "Plan over %d months: portfolio %.0f, debt %.0f, net wealth %.0f, interest %.0f",
        plan.horizon, s.final_portfolio, s.final_debt, s.final_net_wealth, s.total_interest_paid,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
