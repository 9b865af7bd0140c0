"""Rejection-risk engine - evaluates lender rejection rules against a financial profile"""

from dataclasses import dataclass
from typing import Callable, List, Tuple

from finpilot.domain.metrics import sanitize_amount
from finpilot.domain.models import (
    FinancialMetrics,
    FundingReadiness,
    Months,
    RejectionAnalysis,
    RejectionRiskItem,
)
from finpilot.utils.currency import format_inr, round_half_up

MAX_RISKS = 3


@dataclass(frozen=True)
class RiskContext:
    """Everything a rule may test, computed once per analysis"""

    revenue: float
    expenses: float
    cash: float
    debt: float
    funding_amount: float
    surplus: float
    annual_revenue: float
    metrics: FinancialMetrics
    readiness: FundingReadiness
    goal: str

    @property
    def runway_months(self) -> float | None:
        runway = self.metrics.runway
        return runway.value if isinstance(runway, Months) else None


@dataclass(frozen=True)
class RiskRule:
    id: str
    priority: int  # lower = more critical
    severity: str
    title: str
    check: Callable[[RiskContext], bool]
    why: Callable[[RiskContext], str]
    fix: Callable[[RiskContext], str]


def _runway_below(ctx: RiskContext, upper: float, lower: float = float("-inf")) -> bool:
    months = ctx.runway_months
    return months is not None and lower <= months < upper


RISK_RULES: Tuple[RiskRule, ...] = (
    # High severity
    RiskRule(
        id="zero_revenue",
        priority=0,
        severity="High",
        title="No Reported Revenue",
        check=lambda ctx: ctx.revenue <= 0,
        why=lambda ctx: (
            "Without revenue, there is no basis for demonstrating repayment capacity. Banks require at least "
            "6–12 months of revenue history (typically via bank statements or GST returns) before extending "
            f"credit to MSMEs; current monthly expenses of {format_inr(ctx.expenses)} are entirely unfunded."
        ),
        fix=lambda ctx: (
            "Establish a track record of revenue first. For startups, consider MUDRA Shishu loans (up to ₹50,000) "
            "or incubator/angel funding that doesn't require revenue history."
        ),
    ),
    RiskRule(
        id="negative_surplus",
        priority=1,
        severity="High",
        title="Negative or Zero Monthly Surplus",
        check=lambda ctx: ctx.surplus <= 0,
        why=lambda ctx: (
            f"Monthly expenses ({format_inr(ctx.expenses)}) meet or exceed revenue ({format_inr(ctx.revenue)}), "
            "leaving no surplus for loan repayment. Indian lenders typically require demonstration of consistent "
            "repayment capacity, which is absent here."
        ),
        fix=lambda ctx: (
            f"Close the monthly gap of {format_inr(abs(ctx.surplus))} by reducing non-essential expenses or "
            "increasing revenue before applying. Present a 3-month projection showing improved surplus with "
            "specific cost-cutting measures."
        ),
    ),
    RiskRule(
        id="extreme_debt_ratio",
        priority=2,
        severity="High",
        title="Dangerously High Debt-to-Revenue Ratio",
        check=lambda ctx: ctx.metrics.debt_ratio > 0.8,
        why=lambda ctx: (
            f"Current debt ratio of {ctx.metrics.debt_ratio:.2f} (existing debt {format_inr(ctx.debt)} against "
            f"annual revenue {format_inr(ctx.annual_revenue)}) is well above the 0.5 threshold most banks consider "
            "acceptable. This signals over-leveraging and may trigger automatic rejection in credit scoring models."
        ),
        fix=lambda ctx: (
            f"Prioritize paying down existing debt toward {format_inr(round_half_up(ctx.annual_revenue * 0.5))} before "
            "seeking new funding. Consider debt consolidation through schemes like CGTMSE to reduce the overall "
            "burden. Aim for a debt ratio below 0.5."
        ),
    ),
    RiskRule(
        id="critical_runway",
        priority=3,
        severity="High",
        title="Critically Low Cash Runway (<3 Months)",
        check=lambda ctx: _runway_below(ctx, 3),
        why=lambda ctx: (
            f"With only {ctx.runway_months:.1f} months of runway, the business is at imminent risk of cash "
            "depletion. Banks interpret this as a sign that the loan may be sought for survival rather than "
            "growth, which significantly reduces approval chances."
        ),
        fix=lambda ctx: (
            f"Build up cash reserves from {format_inr(ctx.cash)} to at least {format_inr(ctx.metrics.burn_rate * 3)} "
            "(3 months of burn) before applying. Negotiate payment terms with vendors or collect outstanding "
            "receivables faster."
        ),
    ),
    RiskRule(
        id="excessive_funding_request",
        priority=4,
        severity="High",
        title="Funding Request Exceeds Annual Revenue",
        check=lambda ctx: ctx.funding_amount > ctx.annual_revenue,
        why=lambda ctx: (
            f"Requested amount of {format_inr(ctx.funding_amount)} exceeds the annual revenue of "
            f"{format_inr(ctx.annual_revenue)}. Indian lenders, especially PSBs, typically cap MSME loans at "
            "1–2× annual turnover unless backed by substantial collateral or government guarantee."
        ),
        fix=lambda ctx: (
            f"Reduce the requested amount to {format_inr(round_half_up(ctx.annual_revenue * 0.5))}–"
            f"{format_inr(ctx.annual_revenue)} or apply in phases. Alternatively, explore CGTMSE-backed "
            "collateral-free loans which have different assessment criteria."
        ),
    ),
    # Medium severity
    RiskRule(
        id="high_debt_ratio",
        priority=5,
        severity="Medium",
        title="Elevated Debt-to-Revenue Ratio",
        check=lambda ctx: 0.5 < ctx.metrics.debt_ratio <= 0.8,
        why=lambda ctx: (
            f"Debt ratio of {ctx.metrics.debt_ratio:.2f} is above the 0.5 comfort zone for most lenders. While "
            "not an automatic disqualifier, it may trigger additional scrutiny, higher interest rates, or "
            "requests for collateral guarantee."
        ),
        fix=lambda ctx: (
            f"Reduce outstanding debt of {format_inr(ctx.debt)} or grow annual revenue to bring the ratio below "
            "0.5. Provide a clear repayment timeline for existing obligations in the application."
        ),
    ),
    RiskRule(
        id="short_runway",
        priority=6,
        severity="Medium",
        title="Limited Cash Runway (3–6 Months)",
        check=lambda ctx: _runway_below(ctx, 6, lower=3),
        why=lambda ctx: (
            f"A runway of {ctx.runway_months:.1f} months indicates a thin financial cushion. Lenders prefer at "
            "least 6 months of operational buffer to ensure the business can absorb temporary revenue "
            "disruptions while servicing the new loan."
        ),
        fix=lambda ctx: (
            f"Build cash reserves toward {format_inr(ctx.expenses * 6)} to cover at least 6 months of expenses. "
            "Consider delaying the loan application by 2–3 months while accumulating a larger buffer."
        ),
    ),
    RiskRule(
        id="high_burn_relative_to_revenue",
        priority=7,
        severity="Medium",
        title="Burn Rate Exceeds 50% of Revenue",
        check=lambda ctx: ctx.revenue > 0 and ctx.metrics.burn_rate > ctx.revenue * 0.5,
        why=lambda ctx: (
            f"Monthly burn rate of {format_inr(ctx.metrics.burn_rate)} consumes over 50% of revenue "
            f"({format_inr(ctx.revenue)}). This leaves minimal margin for additional loan servicing costs. "
            "Lenders assess DSCR (Debt Service Coverage Ratio) and may find the current cash flow insufficient."
        ),
        fix=lambda ctx: (
            "Identify and cut discretionary expenses. Present a concrete plan showing how the funded "
            f"{ctx.goal.lower() or 'initiative'} will reduce burn rate or increase revenue within 6–12 months."
        ),
    ),
    RiskRule(
        id="large_funding_vs_revenue",
        priority=8,
        severity="Medium",
        title="Funding Request is Large Relative to Monthly Revenue",
        check=lambda ctx: ctx.revenue * 6 < ctx.funding_amount <= ctx.annual_revenue,
        why=lambda ctx: (
            f"The requested {format_inr(ctx.funding_amount)} represents more than 6 months of revenue. While "
            "within annual turnover, it may lead to extended scrutiny of the business plan and collateral "
            "assessment, especially from PSBs."
        ),
        fix=lambda ctx: (
            "Provide a detailed utilization plan and projected ROI in the application. If possible, phase the "
            f"request into smaller tranches, starting near {format_inr(ctx.revenue * 6)}, to build lender trust."
        ),
    ),
    RiskRule(
        id="low_cash_reserve",
        priority=9,
        severity="Medium",
        title="Insufficient Cash Reserves for Buffer",
        check=lambda ctx: ctx.cash < ctx.expenses * 2 and ctx.surplus > 0,
        why=lambda ctx: (
            f"Cash balance of {format_inr(ctx.cash)} covers less than 2 months of expenses "
            f"({format_inr(ctx.expenses)}/month). Banks view adequate cash reserves as a sign of financial "
            "prudence; low reserves suggest vulnerability to even minor operational disruptions."
        ),
        fix=lambda ctx: (
            f"Build reserves to at least {format_inr(ctx.expenses * 3)} (3 months of expenses) before applying. "
            "This demonstrates financial discipline and provides lender confidence."
        ),
    ),
    # Low severity
    RiskRule(
        id="moderate_debt_ratio",
        priority=10,
        severity="Low",
        title="Moderate Existing Debt Obligations",
        check=lambda ctx: 0.2 <= ctx.metrics.debt_ratio <= 0.5,
        why=lambda ctx: (
            f"Existing debt of {format_inr(ctx.debt)} creates a debt ratio of {ctx.metrics.debt_ratio:.2f}. "
            "While manageable, lenders will factor in the combined EMI burden of existing and new loans when "
            "assessing affordability."
        ),
        fix=lambda ctx: (
            "Disclose all existing obligations transparently. Present a consolidated repayment schedule showing "
            f"that combined EMIs remain within 40% of monthly surplus ({format_inr(round_half_up(max(ctx.surplus, 0) * 0.4))})."
        ),
    ),
    RiskRule(
        id="thin_margin",
        priority=11,
        severity="Low",
        title="Thin Profit Margin (<15%)",
        check=lambda ctx: ctx.revenue > 0 and 0 < ctx.surplus < ctx.revenue * 0.15,
        why=lambda ctx: (
            f"Monthly surplus of {format_inr(ctx.surplus)} represents only {int(round_half_up(ctx.surplus / ctx.revenue * 100))}% "
            "of revenue. This thin margin leaves little room for loan servicing if revenue dips even slightly. "
            "Lenders may require additional collateral or a guarantor."
        ),
        fix=lambda ctx: (
            "Demonstrate plans to improve margins through cost optimization or revenue diversification. Consider "
            "applying for a smaller loan amount that requires lower EMI payments."
        ),
    ),
    RiskRule(
        id="weak_readiness_score",
        priority=12,
        severity="Medium",
        title="Weak Funding Readiness Classification",
        check=lambda ctx: ctx.readiness.classification in ("Weak", "High Risk"),
        why=lambda ctx: (
            f"Overall readiness score of {ctx.readiness.score}/100 ({ctx.readiness.classification}) indicates "
            "fundamental financial weaknesses. While banks don't use this exact metric, the underlying factors "
            "(runway, cash flow, debt) are individually assessed and collectively paint a concerning picture."
        ),
        fix=lambda ctx: (
            "Focus on improving the weakest factor in the breakdown. Even improving one factor (e.g., lowering "
            "debt ratio from >0.5 to <0.3) can materially change the lender's assessment."
        ),
    ),
)

STRONG_PROFILE = RejectionRiskItem(
    risk_title="Strong Financial Profile",
    severity="Low",
    why_it_matters=(
        "No major rejection risks identified based on the current financial data. The business demonstrates "
        "adequate surplus, manageable debt, and sufficient runway."
    ),
    how_to_improve=(
        "Ensure all supporting documents (GST returns, bank statements, ITR for 2+ years, Udyam registration) "
        "are ready before submitting. A well-prepared application package significantly improves approval speed."
    ),
)

APPROVAL_PROBABILITY = {
    "High": "Low — significant financial concerns may lead to rejection or additional collateral requirements",
    "Medium": "Moderate — approval possible with strong documentation and possibly a guarantor",
    "Low": "Good — financial profile supports the application; focus on documentation completeness",
}


def determine_overall_risk(risks: List[RejectionRiskItem]) -> str:
    high_count = sum(1 for risk in risks if risk.severity == "High")
    medium_count = sum(1 for risk in risks if risk.severity == "Medium")
    if high_count >= 2:
        return "High"
    if high_count >= 1 or medium_count >= 2:
        return "Medium"
    return "Low"


def evaluate_rules(ctx: RiskContext) -> List[RejectionRiskItem]:
    """Run every rule, returning triggered risks ordered by priority"""
    triggered = sorted((rule for rule in RISK_RULES if rule.check(ctx)), key=lambda rule: rule.priority)
    return [
        RejectionRiskItem(
            risk_title=rule.title,
            severity=rule.severity,
            why_it_matters=rule.why(ctx),
            how_to_improve=rule.fix(ctx),
        )
        for rule in triggered
    ]


def analyze_rejection_risk(
    metrics: FinancialMetrics,
    readiness: FundingReadiness,
    revenue: float,
    expenses: float,
    cash: float,
    debt: float,
    funding_amount: float,
    goal: str,
) -> RejectionAnalysis:
    """
    Main entry point: surface the 3 most critical rejection risks.

    Never returns an empty list: a clean profile yields a single
    "Strong Financial Profile" entry.
    """
    revenue = sanitize_amount(revenue)
    expenses = sanitize_amount(expenses)
    ctx = RiskContext(
        revenue=revenue,
        expenses=expenses,
        cash=sanitize_amount(cash),
        debt=sanitize_amount(debt),
        funding_amount=sanitize_amount(funding_amount),
        surplus=revenue - expenses,
        annual_revenue=revenue * 12,
        metrics=metrics,
        readiness=readiness,
        goal=goal or "",
    )

    top_risks = evaluate_rules(ctx)[:MAX_RISKS] or [STRONG_PROFILE]
    overall = determine_overall_risk(top_risks)

    return RejectionAnalysis(
        rejection_analysis=top_risks,
        overall_risk_level=overall,
        approval_probability=APPROVAL_PROBABILITY[overall],
    )
