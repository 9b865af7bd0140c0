"""Readiness scoring engine - tiered 0-100 funding readiness score"""

from finpilot.domain.metrics import sanitize_amount
from finpilot.domain.models import (
    FinancialMetrics,
    FundingReadiness,
    ReadinessBreakdown,
    ReadinessFactor,
    Stable,
)
from finpilot.utils.currency import format_inr, round_half_up

RUNWAY_MAX = 40
CASHFLOW_MAX = 30
DEBT_MAX = 30
# Burn percentages above this are reported at the cap
MAX_BURN_PCT = 99_999

PROFESSIONAL_EXPLANATIONS = {
    "Strong": (
        "The business demonstrates strong financial fundamentals with healthy cash flow, "
        "adequate runway and manageable debt. It is well positioned to approach mainstream "
        "lenders and negotiate favourable terms."
    ),
    "Moderate": (
        "The business shows reasonable financial health with some areas that need attention. "
        "Approval is achievable with complete documentation, though lenders may scrutinise "
        "the weaker factors in the breakdown."
    ),
    "Weak": (
        "The business has notable weaknesses in runway, cash flow or leverage. Lenders are "
        "likely to ask for collateral or guarantees; strengthening the weakest factor before "
        "applying will materially improve the outcome."
    ),
    "High Risk": (
        "The business currently shows fundamental financial stress. Most lenders would decline "
        "an application on these numbers; focus on stabilising cash flow and reducing debt "
        "before seeking new credit."
    ),
}


def classify_score(score: int) -> str:
    """
    Map readiness score to classification bands.

    Score bands:
    - 80+:     Strong
    - 60 - 79: Moderate
    - 40 - 59: Weak
    - < 40:    High Risk
    """
    if score >= 80:
        return "Strong"
    elif score >= 60:
        return "Moderate"
    elif score >= 40:
        return "Weak"
    else:
        return "High Risk"


def score_runway(metrics: FinancialMetrics) -> ReadinessFactor:
    runway = metrics.runway
    if isinstance(runway, Stable):
        return ReadinessFactor(
            RUNWAY_MAX, RUNWAY_MAX, "Business is cash-flow positive, so runway is stable and not a limiting factor"
        )
    months = runway.value
    if months > 12:
        return ReadinessFactor(RUNWAY_MAX, RUNWAY_MAX, f"Runway of {months:.1f} months exceeds 12 months")
    if months >= 6:
        return ReadinessFactor(25, RUNWAY_MAX, f"Runway of {months:.1f} months is in the 6–12 month range")
    if months >= 3:
        return ReadinessFactor(15, RUNWAY_MAX, f"Runway of {months:.1f} months is in the 3–6 month range")
    return ReadinessFactor(5, RUNWAY_MAX, f"Runway of {months:.1f} months is critically short (under 3 months)")


def score_cashflow(metrics: FinancialMetrics, revenue: float) -> ReadinessFactor:
    burn = metrics.burn_rate
    if burn == 0:
        return ReadinessFactor(CASHFLOW_MAX, CASHFLOW_MAX, "Revenue covers all expenses; no monthly cash burn")
    if revenue <= 0:
        return ReadinessFactor(
            5, CASHFLOW_MAX, f"No revenue reported against a burn of {format_inr(burn)}/month; cash-flow health cannot be assessed"
        )
    burn_pct = int(round_half_up(min(MAX_BURN_PCT, burn / revenue * 100)))
    if burn < revenue * 0.2:
        return ReadinessFactor(20, CASHFLOW_MAX, f"Burn of {format_inr(burn)}/month is {burn_pct}% of revenue (under 20%)")
    if burn <= revenue * 0.5:
        return ReadinessFactor(12, CASHFLOW_MAX, f"Burn of {format_inr(burn)}/month is {burn_pct}% of revenue (20–50%)")
    return ReadinessFactor(5, CASHFLOW_MAX, f"Burn of {format_inr(burn)}/month is {burn_pct}% of revenue (over 50%)")


def score_debt(metrics: FinancialMetrics) -> ReadinessFactor:
    ratio = metrics.debt_ratio
    if ratio < 0.2:
        return ReadinessFactor(DEBT_MAX, DEBT_MAX, f"Debt ratio of {ratio:.2f} is below 0.2")
    if ratio <= 0.5:
        return ReadinessFactor(20, DEBT_MAX, f"Debt ratio of {ratio:.2f} is in the 0.2–0.5 range")
    if ratio <= 0.8:
        return ReadinessFactor(10, DEBT_MAX, f"Debt ratio of {ratio:.2f} is in the 0.5–0.8 range")
    return ReadinessFactor(5, DEBT_MAX, f"Debt ratio of {ratio:.2f} exceeds 0.8")


def score_readiness(metrics: FinancialMetrics, revenue: float) -> FundingReadiness:
    """
    Main entry point: combine three tiered factors into a 0-100 score.

    Scoring weights:
    - 40: Runway (stable or >12mo best, <3mo worst)
    - 30: Cash flow (burn rate relative to revenue)
    - 30: Debt ratio (debt over annualized revenue)

    Deterministic: identical metrics and revenue always produce the same result.
    """
    revenue = sanitize_amount(revenue)
    runway = score_runway(metrics)
    cashflow = score_cashflow(metrics, revenue)
    debt = score_debt(metrics)

    score = min(100, runway.points + cashflow.points + debt.points)
    classification = classify_score(score)

    calculation_summary = (
        f"Runway: {runway.points}/{runway.max} + Cash Flow: {cashflow.points}/{cashflow.max} "
        f"+ Debt: {debt.points}/{debt.max} = {score}/100"
    )

    return FundingReadiness(
        score=score,
        classification=classification,
        breakdown=ReadinessBreakdown(runway=runway, cashflow=cashflow, debt=debt),
        calculation_summary=calculation_summary,
        professional_explanation=PROFESSIONAL_EXPLANATIONS[classification],
    )
