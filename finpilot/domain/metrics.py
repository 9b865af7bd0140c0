"""Metrics calculator - turns raw monthly financials into normalized risk metrics"""

import math
from typing import Any

from finpilot.domain.models import FinancialMetrics, Months, Runway, Stable, STABLE
from finpilot.utils.currency import round_half_up

MAX_RUNWAY_MONTHS = 999.0
MAX_DEBT_RATIO = 99.99
# Ceiling for any single input amount (INR); larger values saturate
MAX_AMOUNT = 1e15


def sanitize_amount(value: Any) -> float:
    """Coerce an input amount to a finite, non-negative float (anything else becomes 0)

    Amounts above MAX_AMOUNT saturate to it, so derived figures stay finite.
    """
    if isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return min(amount, MAX_AMOUNT)


def calculate_runway(cash: float, burn_rate: float) -> Runway:
    """Months of cash left at the current burn, or Stable when nothing is burning"""
    if burn_rate == 0:
        return STABLE
    return Months(round_half_up(min(MAX_RUNWAY_MONTHS, cash / burn_rate), 1))


def calculate_debt_ratio(debt: float, revenue: float) -> float:
    """
    Total debt over annualized revenue.

    Saturates at 99.99 instead of dividing by zero: no revenue with any debt
    is treated as the worst possible leverage.
    """
    annual_revenue = revenue * 12
    if annual_revenue > 0:
        return round_half_up(min(MAX_DEBT_RATIO, debt / annual_revenue), 2)
    return MAX_DEBT_RATIO if debt > 0 else 0.0


def classify_risk_level(runway: Runway, debt_ratio: float) -> str:
    """Coarse display triage, independent of the readiness score"""
    if isinstance(runway, Stable):
        return "Low"
    if runway.value > 12 and debt_ratio < 0.5:
        return "Low"
    if 6 <= runway.value <= 12:
        return "Moderate"
    return "High"


def compute_metrics(revenue: Any, expenses: Any, cash: Any, debt: Any) -> FinancialMetrics:
    """
    Main entry point: derive burn rate, runway, debt ratio and risk level.

    Total over any input: invalid, negative or non-finite amounts count as 0.
    """
    revenue = sanitize_amount(revenue)
    expenses = sanitize_amount(expenses)
    cash = sanitize_amount(cash)
    debt = sanitize_amount(debt)

    burn_rate = max(0.0, expenses - revenue)
    runway = calculate_runway(cash, burn_rate)
    debt_ratio = calculate_debt_ratio(debt, revenue)

    return FinancialMetrics(
        burn_rate=burn_rate,
        runway=runway,
        debt_ratio=debt_ratio,
        risk_level=classify_risk_level(runway, debt_ratio),
    )
