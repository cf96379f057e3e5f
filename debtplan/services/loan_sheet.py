"""Parse an uploaded loan spreadsheet into a LoanBook.

Column matching is flexible (partial, case-insensitive). Keys are matched
most specific first and a column claimed by one key is not offered to the
next, so "Rate after fixed period" never shadows "Interest rate".
Rates are kept in percent. A rate column is read as fractions (0.035 for
3.5%) only when every positive value in it is below 0.5; otherwise values
are taken as percent, so a 0.9% promo loan stays 0.9.
"""
from __future__ import annotations

import logging
import re
from io import BytesIO
from typing import BinaryIO

import pandas as pd

from debtplan.models.loan import Loan, LoanBook, LoanType

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Column matching helpers
# ---------------------------------------------------------------------------
_COLUMN_PATTERNS: dict[str, list[str]] = {
    "rate_after_fixed": ["rate after fixed", "after fixed", "post.*fixed"],
    "fixed_months": ["fixed rate months", "fixed months", "fixed period", "fixed"],
    "effective_rate": ["effective rate", "effective"],
    "rate": ["nominal rate", "interest rate", "nominal", "rate"],
    "fees": ["monthly fee", "fees", "fee"],
    "payment": ["monthly payment", "minimum payment", "payment", "instalment"],
    "balance": ["current balance", "balance", "outstanding", "remaining debt"],
    "term": ["remaining term", "term", "months left"],
    "priority": ["priority"],
    "loan_type": ["loan type", "type"],
    "lender": ["lender", "bank"],
    "name": ["loan name", "name"],
}


def _match(columns: list[str], patterns: list[str]) -> str | None:
    col_lower = {c: c.lower().strip() for c in columns}
    for pattern in patterns:
        pat = pattern.lower()
        if any(ch in pat for ch in ("*", "+", "?", "\\", "^", "$", "|")):
            rx = re.compile(pat)
            for orig, low in col_lower.items():
                if rx.search(low):
                    return orig
        else:
            for orig, low in col_lower.items():
                if pat in low:
                    return orig
    return None


def map_columns(columns: list[str]) -> dict[str, str | None]:
    """Assign each known key at most one column, in pattern-table order."""
    available = list(columns)
    col_map: dict[str, str | None] = {}
    for key, patterns in _COLUMN_PATTERNS.items():
        col = _match(available, patterns)
        col_map[key] = col
        if col is not None:
            available.remove(col)
    return col_map


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def parse_loan_sheet(file: BinaryIO, filename: str) -> LoanBook:
    """Parse an Excel (or CSV) loan sheet into a LoanBook.

    Raises ValueError on invalid / empty data.
    """
    data = file.read()
    if not data:
        raise ValueError("Uploaded file is empty")

    if filename.lower().endswith(".csv"):
        df = pd.read_csv(BytesIO(data))
    else:
        df = pd.read_excel(BytesIO(data))
    df.columns = [str(c).strip() for c in df.columns]

    if df.empty:
        raise ValueError("Spreadsheet contains no data rows")

    col_map = map_columns(list(df.columns))
    logger.info("Loan sheet columns: %s", list(df.columns))
    logger.info("Column mapping: %s", col_map)

    balance_col = col_map.get("balance")
    payment_col = col_map.get("payment")
    if not balance_col:
        raise ValueError(
            f"Cannot find a balance column. Available columns: {list(df.columns)}"
        )
    if not payment_col:
        raise ValueError(
            f"Cannot find a monthly payment column. Available columns: {list(df.columns)}"
        )

    df[balance_col] = pd.to_numeric(df[balance_col], errors="coerce")
    df[payment_col] = pd.to_numeric(df[payment_col], errors="coerce")
    df = df[
        df[balance_col].notna()
        & (df[balance_col] > 0)
        & df[payment_col].notna()
        & (df[payment_col] > 0)
    ].copy()

    if df.empty:
        raise ValueError("No valid loan rows after filtering")

    rate_col = col_map.get("rate")
    effective_col = col_map.get("effective_rate")
    after_fixed_col = col_map.get("rate_after_fixed")
    rate_scale = _rate_scale(df, rate_col)
    effective_scale = _rate_scale(df, effective_col)
    after_fixed_scale = _rate_scale(df, after_fixed_col)

    loans: list[Loan] = []
    for _, row in df.iterrows():
        loan_id = f"LN-{len(loans) + 1:04d}"
        rate_after_fixed = None
        if after_fixed_col is not None and _safe_float(row, after_fixed_col, -1.0) >= 0:
            rate_after_fixed = _safe_float(row, after_fixed_col, 0.0) * after_fixed_scale
        effective_rate = None
        if effective_col is not None and _safe_float(row, effective_col, -1.0) >= 0:
            effective_rate = _safe_float(row, effective_col, 0.0) * effective_scale

        loans.append(Loan(
            loan_id=loan_id,
            name=_safe_str(row, col_map.get("name")) or loan_id,
            loan_type=_loan_type(_safe_str(row, col_map.get("loan_type"))),
            lender=_safe_str(row, col_map.get("lender")),
            current_balance=float(row[balance_col]),
            nominal_rate=_safe_float(row, rate_col, 0.0) * rate_scale,
            effective_rate=effective_rate,
            monthly_fees=_safe_float(row, col_map.get("fees"), 0.0),
            monthly_payment=float(row[payment_col]),
            remaining_term_months=_safe_int(row, col_map.get("term"), 0),
            fixed_rate_months_remaining=_safe_int(row, col_map.get("fixed_months"), 0),
            rate_after_fixed_period=rate_after_fixed,
            priority=_safe_int(row, col_map.get("priority"), 1),
        ))

    name = re.sub(r"\.(xlsx?|csv)$", "", filename, flags=re.IGNORECASE)
    name = name.replace("_", " ").replace("-", " ").strip()

    return LoanBook(
        name=name,
        loan_count=len(loans),
        total_balance=sum(l.current_balance for l in loans),
        loans=loans,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
_FRACTION_CEILING = 0.5


def _rate_scale(df: pd.DataFrame, col: str | None) -> float:
    """100 when the whole column holds fractions, else 1."""
    if col is None:
        return 1.0
    values = pd.to_numeric(df[col], errors="coerce").dropna()
    values = values[values > 0]
    if not values.empty and values.max() < _FRACTION_CEILING:
        logger.info("Reading %r as fractions", col)
        return 100.0
    return 1.0


def _loan_type(raw: str | None) -> LoanType:
    if raw:
        try:
            return LoanType(raw.strip().lower())
        except ValueError:
            logger.warning("Unknown loan type %r, using consumer", raw)
    return LoanType.consumer


def _safe_str(row, col: str | None) -> str | None:
    if col is None:
        return None
    val = row.get(col)
    if isinstance(val, str) and val.strip():
        return val.strip()
    return None


def _safe_float(row, col: str | None, default: float) -> float:
    if col is None:
        return default
    try:
        val = float(row[col])
        if val != val:  # NaN check
            return default
        return val
    except (ValueError, TypeError, KeyError):
        return default


def _safe_int(row, col: str | None, default: int) -> int:
    if col is None:
        return default
    try:
        val = row[col]
        if val != val:  # NaN check
            return default
        return int(float(val))
    except (ValueError, TypeError, KeyError):
        return default
