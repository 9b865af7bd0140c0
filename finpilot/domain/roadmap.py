"""Improvement-roadmap engine - picks the three most urgent improvement actions"""

from dataclasses import dataclass
from typing import Callable, List, Tuple

from finpilot.domain.metrics import sanitize_amount
from finpilot.domain.models import (
    FinancialMetrics,
    FinancialRoadmap,
    FundingReadiness,
    Months,
    RoadmapAction,
)
from finpilot.utils.currency import format_inr, round_half_up

ROADMAP_SIZE = 3


@dataclass(frozen=True)
class RoadmapContext:
    revenue: float
    expenses: float
    cash: float
    debt: float
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
class RoadmapRule:
    """
    One improvement rule.

    `weight` orders selection (lower = more urgent); `priority` is the band
    reported to the user and is carried through unchanged.
    """

    id: str
    weight: int
    priority: str
    title: str
    check: Callable[[RoadmapContext], bool]
    what_to_do: Callable[[RoadmapContext], str]
    why_it_matters: Callable[[RoadmapContext], str]
    expected_impact: Callable[[RoadmapContext], str]


def _reduce_extreme_debt_steps(ctx: RoadmapContext) -> str:
    target_debt = round_half_up(ctx.annual_revenue * 0.5)
    reduction = max(0, round_half_up(ctx.debt - target_debt))
    return (
        f"Pay down at least {format_inr(reduction)} of existing debt (from {format_inr(ctx.debt)} to "
        f"{format_inr(target_debt)}). Prioritize high-interest unsecured debt first. Consider consolidating smaller "
        "loans through a single CGTMSE-backed facility at lower interest rates."
    )


def _surplus_margin_steps(ctx: RoadmapContext) -> str:
    margin = int(round_half_up(ctx.surplus / ctx.revenue * 100))
    target = round_half_up(ctx.revenue * 0.2)
    return (
        f"Current surplus margin is {margin}% ({format_inr(ctx.surplus)}/month). Target: increase to "
        f"{format_inr(target)}/month (20%). Review cost structure — negotiate bulk purchase discounts, optimize "
        "staffing efficiency, and eliminate underperforming product lines or services."
    )


def _liquidity_buffer_steps(ctx: RoadmapContext) -> str:
    target = ctx.expenses * 3
    gap = target - ctx.cash
    return (
        f"Accumulate an additional {format_inr(gap)} in reserves over the next 2–3 months to reach "
        f"{format_inr(target)} (3× monthly expenses). Set aside {format_inr(round_half_up(gap / 3))}/month from surplus "
        "into a fixed deposit or liquid fund earmarked as an operating reserve."
    )


ROADMAP_RULES: Tuple[RoadmapRule, ...] = (
    # High priority
    RoadmapRule(
        id="eliminate_deficit",
        weight=1,
        priority="High",
        title="Eliminate Monthly Cash Flow Deficit",
        check=lambda ctx: ctx.surplus <= 0,
        what_to_do=lambda ctx: (
            f"Reduce monthly expenses from {format_inr(ctx.expenses)} to below {format_inr(ctx.revenue)} within "
            "60 days. Identify the top 3 non-essential expense categories and negotiate 10–15% reductions with "
            "vendors. Consider renegotiating rent, switching raw material suppliers, or deferring discretionary spending."
        ),
        why_it_matters=lambda ctx: (
            "Lenders evaluate DSCR (Debt Service Coverage Ratio) as a primary approval criterion. A negative surplus "
            "means DSCR < 1, which is an automatic red flag in most Indian PSB and NBFC credit models. No lender "
            "will extend credit if the borrower cannot demonstrate operating surplus."
        ),
        expected_impact=lambda ctx: (
            "Achieving even a small positive surplus (₹10,000–₹30,000/month) moves the DSCR above 1.0. This single "
            "change can shift the readiness classification from 'High Risk' toward 'Weak', opening up MUDRA and "
            "NBFC lending options."
        ),
    ),
    RoadmapRule(
        id="reduce_extreme_debt",
        weight=2,
        priority="High",
        title="Reduce Debt-to-Revenue Ratio Below 0.5",
        check=lambda ctx: ctx.metrics.debt_ratio > 0.8,
        what_to_do=_reduce_extreme_debt_steps,
        why_it_matters=lambda ctx: (
            f"Current debt ratio of {ctx.metrics.debt_ratio:.2f} is well above the 0.5 threshold that most banks "
            "consider acceptable. High leverage signals over-borrowing and reduces the lender's confidence in "
            "repayment. Credit scoring models penalize ratios above 0.5 heavily."
        ),
        expected_impact=lambda ctx: (
            "Bringing the ratio below 0.5 can improve readiness score by 15–25 points. Lenders view sub-0.5 ratios "
            "as manageable, which unlocks access to PSB term loans and SBI MSME schemes with lower interest rates."
        ),
    ),
    RoadmapRule(
        id="extend_critical_runway",
        weight=3,
        priority="High",
        title="Build Cash Reserves to Extend Runway",
        check=lambda ctx: ctx.runway_months is not None and ctx.runway_months < 3,
        what_to_do=lambda ctx: (
            f"Increase cash reserves from {format_inr(ctx.cash)} to at least {format_inr(ctx.expenses * 6)} "
            "(6 months of expenses). Accelerate receivable collections — offer 2–3% early payment discounts to key "
            "clients. Hold off on non-essential capital expenditure for 2–3 months while building the buffer."
        ),
        why_it_matters=lambda ctx: (
            f"A runway of {ctx.runway_months:.1f} months tells banks that the loan application is driven by survival "
            "rather than growth. RBI guidelines encourage lenders to assess liquidity buffers as part of NPA risk "
            "assessment. Adequate reserves demonstrate financial prudence."
        ),
        expected_impact=lambda ctx: (
            "Extending runway to 6+ months improves the readiness score by 20–35 points and shifts classification "
            "from 'High Risk' toward 'Moderate'. This makes the business eligible for SIDBI and SBI MSME term loans."
        ),
    ),
    RoadmapRule(
        id="build_revenue_track",
        weight=4,
        priority="High",
        title="Establish Minimum Revenue Track Record",
        check=lambda ctx: ctx.revenue > 0 and ctx.annual_revenue < 500_000,
        what_to_do=lambda ctx: (
            f"Annual revenue of {format_inr(ctx.annual_revenue)} is below most lenders' minimum. Ensure at least 6 "
            "consecutive months of bank account credits demonstrating consistent revenue. Register on GST and file "
            "returns for at least 2 quarters. Obtain Udyam registration (free) to qualify for MSME-specific schemes."
        ),
        why_it_matters=lambda ctx: (
            "Indian lenders typically require 6–12 months of bank statements showing consistent revenue inflows. "
            "For MUDRA loans, Udyam registration is mandatory. GST returns serve as independent verification of "
            "turnover that lenders cross-reference with bank statements."
        ),
        expected_impact=lambda ctx: (
            "Meeting these documentary baselines makes the business eligible for MUDRA Shishu (up to ₹50,000) and "
            "Kishore (up to ₹5 lakh) categories. It also enables access to the PSB Loans in 59 Minutes portal."
        ),
    ),
    # Medium priority
    RoadmapRule(
        id="improve_surplus_margin",
        weight=5,
        priority="Medium",
        title="Improve Operating Surplus to 20%+ of Revenue",
        check=lambda ctx: ctx.revenue > 0 and 0 < ctx.surplus < ctx.revenue * 0.2,
        what_to_do=_surplus_margin_steps,
        why_it_matters=lambda ctx: (
            "A surplus margin of 20%+ signals operational efficiency and provides adequate headroom for loan EMI "
            "payments. Lenders calculate whether the EMI (typically 40% of surplus) leaves enough buffer for "
            "operational continuity."
        ),
        expected_impact=lambda ctx: (
            "A 20% margin allows comfortable EMI servicing while maintaining business operations. This can improve "
            "approval probability from 'Moderate' to 'Good' and may qualify for lower interest rates on MSME loans."
        ),
    ),
    RoadmapRule(
        id="reduce_elevated_debt",
        weight=6,
        priority="Medium",
        title="Bring Debt Ratio into Comfortable Range",
        check=lambda ctx: 0.5 < ctx.metrics.debt_ratio <= 0.8,
        what_to_do=lambda ctx: (
            f"Reduce outstanding debt from {format_inr(ctx.debt)} toward {format_inr(round_half_up(ctx.annual_revenue * 0.3))} "
            "(ratio of 0.3). Focus on clearing the highest-interest obligations first. If debt is across multiple "
            "lenders, consolidate under one facility to improve the debt profile on CIBIL."
        ),
        why_it_matters=lambda ctx: (
            f"A debt ratio of {ctx.metrics.debt_ratio:.2f} sits in the 0.5–0.8 band that triggers enhanced scrutiny "
            "from lenders. While not an automatic rejection, it reduces the sanctioned loan amount and may result "
            "in higher interest rates or collateral requirements."
        ),
        expected_impact=lambda ctx: (
            "Reducing to below 0.3 positions the business for premium lending products like SBI MSME and SIDBI "
            "Finance, which offer interest rates 2–3% lower than high-ratio borrowers."
        ),
    ),
    RoadmapRule(
        id="build_liquidity_buffer",
        weight=7,
        priority="Medium",
        title="Build 3-Month Liquidity Buffer",
        check=lambda ctx: ctx.surplus > 0 and ctx.expenses <= ctx.cash < ctx.expenses * 3,
        what_to_do=_liquidity_buffer_steps,
        why_it_matters=lambda ctx: (
            "Lenders evaluate liquid reserves as insurance against revenue disruptions. A 3-month buffer "
            "demonstrates that the business can continue servicing loan EMIs even during seasonal slowdowns or "
            "client payment delays."
        ),
        expected_impact=lambda ctx: (
            "A 3-month buffer strengthens the lender's view of liquidity and reduces the requirement for "
            "additional collateral or a personal guarantee."
        ),
    ),
    RoadmapRule(
        id="extend_moderate_runway",
        weight=8,
        priority="Medium",
        title="Extend Runway to 6+ Months",
        check=lambda ctx: ctx.runway_months is not None and 3 <= ctx.runway_months < 6,
        what_to_do=lambda ctx: (
            f"Accumulate an additional {format_inr(max(0, ctx.expenses * 6 - ctx.cash))} to reach 6 months of expense "
            "coverage. Implement weekly cash flow monitoring. Consider offering early payment incentives to top 5 "
            "clients to accelerate receivable conversion by 15–20 days."
        ),
        why_it_matters=lambda ctx: (
            f"A runway of {ctx.runway_months:.1f} months is borderline acceptable. Extending to 6+ months moves the "
            "assessment from 'adequate' to 'comfortable', which directly influences the loan amount sanctioned and "
            "interest rate offered."
        ),
        expected_impact=lambda ctx: (
            "Moving to a 6-month runway can improve the readiness score by 10 points and shift classification "
            "from 'Weak' toward 'Moderate', significantly improving approval odds."
        ),
    ),
    RoadmapRule(
        id="reduce_high_burn",
        weight=9,
        priority="Medium",
        title="Reduce Operating Burn Rate",
        check=lambda ctx: ctx.revenue > 0 and ctx.metrics.burn_rate > ctx.revenue * 0.3,
        what_to_do=lambda ctx: (
            f"Bring net burn rate from {format_inr(ctx.metrics.burn_rate)}/month down to "
            f"{format_inr(round_half_up(ctx.revenue * 0.2))}/month. Conduct a line-by-line expense audit: identify the top 5 "
            "cost categories, benchmark each against industry averages, and target a 15–25% reduction in the "
            "largest 2–3 categories."
        ),
        why_it_matters=lambda ctx: (
            "High burn relative to revenue signals operational inefficiency. Lenders analyze whether the business "
            "model is sustainable — high burn erodes cash reserves and reduces the available surplus for debt servicing."
        ),
        expected_impact=lambda ctx: (
            "A 20–30% burn reduction directly increases monthly surplus, improves DSCR, and extends runway, "
            "strengthening the financial profile across multiple lending assessment criteria."
        ),
    ),
    # Low priority
    RoadmapRule(
        id="prepare_documentation",
        weight=10,
        priority="Low",
        title="Prepare Complete Loan Documentation Package",
        check=lambda ctx: ctx.surplus > 0 and ctx.readiness.score >= 40,
        what_to_do=lambda ctx: (
            "Compile: (1) Last 12 months bank statements, (2) ITR for 2+ years, (3) GST returns for 4+ quarters, "
            "(4) Udyam registration certificate, (5) Business PAN and Aadhaar, (6) Current office/factory address "
            "proof, (7) Audited/projected financials."
        ),
        why_it_matters=lambda ctx: (
            "Incomplete documentation is the most common cause of MSME loan delays in India. A complete package "
            "demonstrates professionalism and speeds up the credit appraisal process."
        ),
        expected_impact=lambda ctx: (
            "A complete documentation package reduces processing time from 30–45 days to 7–15 days and creates a "
            "positive first impression with the credit officer."
        ),
    ),
    RoadmapRule(
        id="improve_cibil",
        weight=11,
        priority="Low",
        title="Strengthen CIBIL/Credit Profile",
        check=lambda ctx: ctx.debt > 0 and ctx.surplus > 0,
        what_to_do=lambda ctx: (
            f"Keep every EMI on the existing {format_inr(ctx.debt)} of debt current with zero delays. Pay credit card "
            "balances in full each month. Avoid multiple loan inquiries within 30 days. Request a CIBIL report and "
            "dispute any errors. Target a minimum score of 700 for PSB loans or 650 for MUDRA."
        ),
        why_it_matters=lambda ctx: (
            "CIBIL score is a go/no-go criterion for most Indian lenders. PSBs typically require 700+ for unsecured "
            "business loans."
        ),
        expected_impact=lambda ctx: (
            "A CIBIL score improvement from 650 to 750 can reduce offered interest rates by 1–2% and increase the "
            "maximum sanctioned amount by 20–30%."
        ),
    ),
    RoadmapRule(
        id="diversify_revenue",
        weight=12,
        priority="Low",
        title="Diversify Revenue Streams for Stability",
        check=lambda ctx: ctx.revenue > 0 and ctx.surplus > 0 and ctx.readiness.score >= 60,
        what_to_do=lambda ctx: (
            "Reduce dependency on the top 1–2 clients to below 40% of total revenue. Add 2–3 new smaller clients or "
            "introduce a complementary product/service line. Document the diversification in the loan application."
        ),
        why_it_matters=lambda ctx: (
            "Revenue concentration risk is a key assessment factor for large loans. Lenders view diversified revenue "
            "as a stability indicator."
        ),
        expected_impact=lambda ctx: (
            "Demonstrating diversified revenue can increase the sanctioned amount by 10–15% and position the "
            "application favorably for larger loans (₹25 lakh+)."
        ),
    ),
)

FALLBACK_ACTIONS: Tuple[RoadmapAction, ...] = (
    RoadmapAction(
        priority="Low",
        action_title="Maintain Financial Discipline",
        what_to_do=(
            "Continue tracking monthly revenue vs expenses and maintain current surplus levels. Build a 6-month "
            "rolling financial report to demonstrate consistency to lenders."
        ),
        why_it_matters=(
            "Lenders value consistency and financial discipline. A stable 6-month track record of positive cash flow "
            "is one of the strongest indicators of creditworthiness for MSMEs."
        ),
        expected_impact=(
            "A proven track record of 6+ months of consistent surplus can improve approval probability and may "
            "qualify the business for pre-approved loan offers from relationship banks."
        ),
    ),
    RoadmapAction(
        priority="Low",
        action_title="Build Banking Relationship",
        what_to_do=(
            "Route all business transactions through one primary current account. Maintain minimum balance "
            "requirements. Approach the relationship manager for a credit facility discussion before formally applying."
        ),
        why_it_matters=(
            "Banks prefer lending to existing account holders with visible transaction history. An active current "
            "account with consistent deposits is strong evidence of genuine business activity."
        ),
        expected_impact=(
            "Existing customers can access faster processing, reduced documentation, and pre-approved loan offers. "
            "Some PSBs offer 0.25–0.5% interest rate concessions to loyal customers."
        ),
    ),
    RoadmapAction(
        priority="Low",
        action_title="Register for Government MSME Benefits",
        what_to_do=(
            "Complete Udyam registration (free, online at udyamregistration.gov.in). Enroll for NSIC and GeM "
            "marketplace registration, and explore PMEGP subsidy if applicable."
        ),
        why_it_matters=(
            "Udyam registration is a prerequisite for CGTMSE guarantee (collateral-free loans up to ₹5 crore), MUDRA "
            "loans, and PSB MSME priority sector lending."
        ),
        expected_impact=(
            "Unlocks access to subsidized interest rates (1–2% lower), collateral-free lending under CGTMSE, and "
            "priority processing under RBI guidelines for MSME lending."
        ),
    ),
)


def summarize_readiness(score: int) -> str:
    if score >= 80:
        return f"Strong position ({score}/100). Focus on documentation and timing to maximize approval terms."
    if score >= 60:
        return (
            f"Moderate position ({score}/100). Address the high-priority items below to strengthen the application "
            "before submission."
        )
    if score >= 40:
        return (
            f"Weak position ({score}/100). Significant improvements needed — focus on the roadmap items before "
            "approaching any lender."
        )
    return (
        f"High Risk position ({score}/100). The financial profile currently has fundamental weaknesses that will "
        "likely result in rejection. Address all roadmap items as priority."
    )


def pad_with_fallbacks(actions: List[RoadmapAction]) -> List[RoadmapAction]:
    """Top up to exactly 3 actions with fallback advice, never repeating a title"""
    padded = list(actions)
    for fallback in FALLBACK_ACTIONS:
        if len(padded) >= ROADMAP_SIZE:
            break
        if any(action.action_title == fallback.action_title for action in padded):
            continue
        padded.append(fallback)
    return padded[:ROADMAP_SIZE]


def build_improvement_roadmap(
    metrics: FinancialMetrics,
    readiness: FundingReadiness,
    revenue: float,
    expenses: float,
    cash: float,
    debt: float,
    goal: str,
) -> FinancialRoadmap:
    """
    Main entry point: exactly 3 improvement actions, most urgent first.

    Triggered rules are ranked by weight; when fewer than 3 trigger the
    remainder comes from fixed fallback advice.
    """
    revenue = sanitize_amount(revenue)
    expenses = sanitize_amount(expenses)
    ctx = RoadmapContext(
        revenue=revenue,
        expenses=expenses,
        cash=sanitize_amount(cash),
        debt=sanitize_amount(debt),
        surplus=revenue - expenses,
        annual_revenue=revenue * 12,
        metrics=metrics,
        readiness=readiness,
        goal=goal or "",
    )

    triggered = sorted((rule for rule in ROADMAP_RULES if rule.check(ctx)), key=lambda rule: rule.weight)
    actions = [
        RoadmapAction(
            priority=rule.priority,
            action_title=rule.title,
            what_to_do=rule.what_to_do(ctx),
            why_it_matters=rule.why_it_matters(ctx),
            expected_impact=rule.expected_impact(ctx),
        )
        for rule in triggered[:ROADMAP_SIZE]
    ]

    return FinancialRoadmap(
        financial_roadmap=pad_with_fallbacks(actions),
        readiness_summary=summarize_readiness(readiness.score),
    )
