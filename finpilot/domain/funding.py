"""Funding recommendation engine - matches a profile against the MSME scheme catalog"""

import re
from typing import List, Tuple

from finpilot.domain.metrics import sanitize_amount
from finpilot.domain.models import (
    FinancialMetrics,
    FundingOption,
    FundingReadiness,
    PrimaryRecommendation,
    Runway,
    SchemeEntry,
    SmartFundingRecommendation,
    Stable,
)
from finpilot.utils.currency import format_lakh_crore, round_half_up

SCHEME_CATALOG: Tuple[SchemeEntry, ...] = (
    SchemeEntry(
        name="PM MUDRA Yojana — Shishu",
        type="Government Micro-Loan",
        official_link="https://www.mudra.org.in/",
        description="Collateral-free loans up to ₹50,000 for micro enterprises under the Pradhan Mantri MUDRA Yojana.",
        max_amount="Up to ₹50,000",
        eligibility="Any non-corporate, non-farm small/micro enterprise; Aadhaar, PAN, and business proof required",
        best_for=("Working Capital", "Inventory Financing"),
        risk_suitability=("High", "Moderate"),
        revenue_tier=("micro",),
    ),
    SchemeEntry(
        name="PM MUDRA Yojana — Kishore",
        type="Government MSME Loan",
        official_link="https://www.mudra.org.in/",
        description="Loans from ₹50,001 to ₹5,00,000 for growing micro/small enterprises under the MUDRA scheme.",
        max_amount="₹50,001 – ₹5,00,000",
        eligibility="Existing business with 1+ year track record; basic KYC and business plan required",
        best_for=("Working Capital", "Inventory Financing", "Marketing & Growth"),
        risk_suitability=("High", "Moderate"),
        revenue_tier=("micro", "small"),
    ),
    SchemeEntry(
        name="PM MUDRA Yojana — Tarun",
        type="Government MSME Loan",
        official_link="https://www.mudra.org.in/",
        description="Loans from ₹5,00,001 to ₹10,00,000 for established micro/small businesses looking to expand.",
        max_amount="₹5,00,001 – ₹10,00,000",
        eligibility="Established business with 2+ year track record; financials and business plan required",
        best_for=("Business Expansion", "Equipment Purchase", "Working Capital"),
        risk_suitability=("Moderate", "Low"),
        revenue_tier=("small", "medium"),
    ),
    SchemeEntry(
        name="CGTMSE-backed MSME Loan",
        type="Govt-Guaranteed Collateral-Free Loan",
        official_link="https://www.cgtmse.in/",
        description=(
            "Collateral-free credit facility up to ₹5 Crore backed by the Credit Guarantee Fund Trust "
            "for Micro and Small Enterprises."
        ),
        max_amount="Up to ₹5 Crore",
        eligibility="New and existing MSEs in manufacturing/service sector; loan through eligible lending institutions",
        best_for=("Business Expansion", "Equipment Purchase", "Working Capital", "Debt Consolidation"),
        risk_suitability=("Low", "Moderate"),
        revenue_tier=("small", "medium"),
    ),
    SchemeEntry(
        name="SBI MSME Loans",
        type="Bank Term Loan / Working Capital",
        official_link="https://sbi.co.in/web/business/sme",
        description=(
            "Comprehensive MSME loan products from State Bank of India including term loans, "
            "working capital, and overdraft facilities."
        ),
        max_amount="Based on business turnover and need",
        eligibility="MSME Udyam registration; 2+ years of ITR; satisfactory CIBIL score (700+)",
        best_for=("Business Expansion", "Equipment Purchase", "Working Capital", "Debt Consolidation"),
        risk_suitability=("Low", "Moderate"),
        revenue_tier=("small", "medium"),
    ),
    SchemeEntry(
        name="SIDBI MSME Finance",
        type="Development Finance Institution Loan",
        official_link="https://www.sidbi.in/",
        description="Direct and indirect credit from Small Industries Development Bank of India for MSMEs at competitive rates.",
        max_amount="₹10 Lakh – ₹25 Crore",
        eligibility="Registered MSME with Udyam; minimum 3 years operational history; positive net worth",
        best_for=("Equipment Purchase", "Business Expansion", "Marketing & Growth"),
        risk_suitability=("Low",),
        revenue_tier=("medium",),
    ),
    SchemeEntry(
        name="Stand-Up India Scheme",
        type="Government Loan for SC/ST/Women",
        official_link="https://www.standupmitra.in/",
        description=(
            "Loans between ₹10 Lakh and ₹1 Crore for SC/ST and women entrepreneurs for greenfield "
            "enterprises in manufacturing, services, or trading."
        ),
        max_amount="₹10 Lakh – ₹1 Crore",
        eligibility="SC/ST or women entrepreneur; 18+ years; greenfield enterprise; available through all SCBs",
        best_for=("Business Expansion", "Equipment Purchase"),
        risk_suitability=("Low", "Moderate"),
        revenue_tier=("small", "medium"),
    ),
    SchemeEntry(
        name="PSB Loans in 59 Minutes",
        type="Fast-Track Bank Loan",
        official_link="https://www.psbloansin59minutes.com/",
        description=(
            "In-principle approval for MSME loans up to ₹5 Crore in 59 minutes through an online "
            "platform connected to all major PSBs."
        ),
        max_amount="Up to ₹5 Crore",
        eligibility="Business vintage 3+ years; GST registered; ITR for last 2 years; minimum turnover ₹10 Lakh",
        best_for=("Working Capital", "Business Expansion", "Equipment Purchase"),
        risk_suitability=("Low", "Moderate"),
        revenue_tier=("small", "medium"),
    ),
    SchemeEntry(
        name="NBFC Working Capital Loan",
        type="NBFC Short-Term Finance",
        official_link="",
        description=(
            "Short-term working capital loans from Non-Banking Financial Companies. Faster approval "
            "but typically higher interest rates than banks."
        ),
        max_amount="Varies by NBFC (typically ₹1 Lakh – ₹50 Lakh)",
        eligibility="Business operational for 1+ year; basic documentation; flexible credit score requirements",
        best_for=("Working Capital", "Inventory Financing"),
        risk_suitability=("High", "Moderate"),
        revenue_tier=("micro", "small"),
    ),
)

# (low, high) multipliers of monthly revenue, by readiness classification
AMOUNT_MULTIPLIERS = {
    "High Risk": (0.5, 1.0),
    "Weak": (1.0, 2.0),
    "Moderate": (2.0, 3.0),
    "Strong": (3.0, 4.0),
}

RISK_MATCH_POINTS = 3
TIER_MATCH_POINTS = 3
GOAL_MATCH_POINTS = 4
PARTIAL_GOAL_POINTS = 1
QUALIFYING_SCORE = 3


def get_revenue_tier(revenue: float) -> str:
    """Monthly revenue band: micro (<₹5L), small (<₹25L), medium (₹25L+)"""
    if revenue < 500_000:
        return "micro"
    if revenue < 2_500_000:
        return "small"
    return "medium"


def get_suggested_amount_range(revenue: float, classification: str) -> str:
    low_mult, high_mult = AMOUNT_MULTIPLIERS[classification]
    low = round_half_up(revenue * low_mult)
    high = round_half_up(revenue * high_mult)
    return f"{format_lakh_crore(low)} – {format_lakh_crore(high)}"


def get_timing(runway: Runway) -> str:
    if isinstance(runway, Stable):
        return "No urgency — plan strategically for expansion funding in the next 3–6 months"
    if runway.value < 3:
        return "Urgent — apply immediately but with conservative expectations; prioritize survival over growth"
    if runway.value < 6:
        return "Apply within the next 4–6 weeks; secure working capital before runway becomes critical"
    if runway.value <= 12:
        return "Apply within 1–3 months; you have time to prepare a strong application"
    return "Strategic timing — apply in the next 3–6 months for expansion or growth capital"


def get_primary_funding_type(classification: str, goal: str, revenue_tier: str) -> str:
    if classification == "High Risk":
        if revenue_tier == "micro":
            return "Micro-Finance / MUDRA Shishu-Kishore"
        return "NBFC Working Capital Loan"
    if classification == "Weak":
        if goal in ("Working Capital", "Inventory Financing"):
            return "MUDRA Tarun / NBFC Working Capital"
        return "CGTMSE-backed Collateral-Free Loan"
    if classification == "Moderate":
        if goal == "Equipment Purchase":
            return "SIDBI Term Loan / SBI MSME Loan"
        if goal == "Business Expansion":
            return "CGTMSE-backed Loan / PSB Loans in 59 Min"
        return "SBI MSME Loan / CGTMSE-backed Loan"
    if goal == "Equipment Purchase":
        return "SIDBI Finance / SBI MSME Term Loan"
    if goal == "Business Expansion":
        return "PSB Loans in 59 Min / SIDBI Finance"
    return "SBI MSME Loan / PSB Loans in 59 Minutes"


def get_primary_reason(classification: str, goal: str, revenue: float) -> str:
    revenue_label = format_lakh_crore(revenue)
    if classification == "High Risk":
        return (
            "Given the high-risk financial profile, the priority is to secure small, accessible working capital. "
            "MUDRA and NBFC loans have lenient eligibility and can provide immediate relief. "
            "Avoid over-leveraging at this stage."
        )
    if classification == "Weak":
        return (
            f"With a weak financial profile and monthly revenue of {revenue_label}, collateral-free schemes like "
            "CGTMSE are ideal as they reduce lender risk. Focus on building a stronger credit history before "
            "pursuing larger funding."
        )
    if classification == "Moderate":
        return (
            f"Your moderate financial health and {revenue_label} monthly revenue make you eligible for mainstream "
            "MSME lending. Government-backed schemes offer competitive rates. Apply with strong documentation "
            "to maximize approval chances."
        )
    return (
        f"Strong financial health with {revenue_label} monthly revenue positions you well for premium lending "
        f"products. You can negotiate favorable terms. Consider strategic timing to align funding with your "
        f"{goal.lower()} plans."
    )


def _words(text: str) -> set:
    return {word for word in re.split(r"[^a-z0-9]+", text.lower()) if word}


def has_partial_goal_match(scheme: SchemeEntry, goal: str) -> bool:
    """Loose topical match: a goal tag's first word appears among the goal's words"""
    goal_words = _words(goal)
    for tag in scheme.best_for:
        tag_words = re.split(r"[^a-z0-9]+", tag.lower())
        if tag_words and tag_words[0] in goal_words:
            return True
    return False


def score_scheme(scheme: SchemeEntry, risk_level: str, revenue_tier: str, goal: str) -> int:
    score = 0
    if risk_level in scheme.risk_suitability:
        score += RISK_MATCH_POINTS
    if revenue_tier in scheme.revenue_tier:
        score += TIER_MATCH_POINTS
    if goal in scheme.best_for:
        score += GOAL_MATCH_POINTS
    elif has_partial_goal_match(scheme, goal):
        score += PARTIAL_GOAL_POINTS
    return score


def select_schemes(risk_level: str, revenue_tier: str, goal: str) -> List[SchemeEntry]:
    """
    Rank the catalog and pick 2-3 schemes.

    Takes the top 3 scoring at least 3 points; if fewer than 2 qualify, falls
    back to the top 2 regardless of score. Ties keep catalog order.
    """
    ranked = sorted(
        SCHEME_CATALOG,
        key=lambda scheme: score_scheme(scheme, risk_level, revenue_tier, goal),
        reverse=True,
    )
    qualifying = [
        scheme for scheme in ranked[:3]
        if score_scheme(scheme, risk_level, revenue_tier, goal) >= QUALIFYING_SCORE
    ]
    if len(qualifying) >= 2:
        return qualifying
    return ranked[:2]


def explain_suitability(scheme: SchemeEntry, risk_level: str, goal: str) -> str:
    goal_match = goal in scheme.best_for
    risk_match = risk_level in scheme.risk_suitability
    if goal_match and risk_match:
        return f"Directly matches your {goal.lower()} goal and {risk_level.lower()}-risk profile. {scheme.description}"
    if goal_match:
        return f"Well-suited for your {goal.lower()} needs. {scheme.description}"
    if risk_match:
        return f"Compatible with your {risk_level.lower()}-risk financial profile. {scheme.description}"
    return scheme.description


def recommend_funding(
    metrics: FinancialMetrics,
    readiness: FundingReadiness,
    revenue: float,
    goal: str,
) -> SmartFundingRecommendation:
    """
    Main entry point: primary recommendation plus 2-3 ranked scheme matches.

    Scheme scoring:
    - +3: scheme suits the computed risk level
    - +3: scheme targets the revenue tier
    - +4: scheme lists the exact goal
    - +1: no exact goal, but a loosely related goal tag
    """
    revenue = sanitize_amount(revenue)
    goal = goal or ""
    revenue_tier = get_revenue_tier(revenue)
    classification = readiness.classification

    primary = PrimaryRecommendation(
        funding_type=get_primary_funding_type(classification, goal, revenue_tier),
        suggested_amount_range=get_suggested_amount_range(revenue, classification),
        best_timing=get_timing(metrics.runway),
        reason=get_primary_reason(classification, goal, revenue),
    )

    options = [
        FundingOption(
            name=scheme.name,
            type=scheme.type,
            official_link=scheme.official_link,
            amount_range=scheme.max_amount,
            why_suitable=explain_suitability(scheme, metrics.risk_level, goal),
            basic_eligibility=scheme.eligibility,
        )
        for scheme in select_schemes(metrics.risk_level, revenue_tier, goal)
    ]

    return SmartFundingRecommendation(primary_recommendation=primary, funding_options=options)
