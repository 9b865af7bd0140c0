"""Analysis pipeline - runs every calculator over one financial snapshot"""

from dataclasses import asdict
from typing import Any, Dict

from finpilot.domain.funding import recommend_funding
from finpilot.domain.metrics import compute_metrics, sanitize_amount
from finpilot.domain.models import (
    FinancialAnalysis,
    FinancialInput,
    FinancialMetrics,
    Stable,
    SummaryRequest,
)
from finpilot.domain.rejection import analyze_rejection_risk
from finpilot.domain.roadmap import build_improvement_roadmap
from finpilot.domain.scoring import score_readiness


def sanitize_input(data: FinancialInput) -> FinancialInput:
    return FinancialInput(
        revenue=sanitize_amount(data.revenue),
        expenses=sanitize_amount(data.expenses),
        cash=sanitize_amount(data.cash),
        debt=sanitize_amount(data.debt),
        goal=data.goal or "",
    )


def build_analysis(data: FinancialInput, funding_amount: float = 0.0) -> FinancialAnalysis:
    """
    Main entry point: metrics -> readiness -> {funding, rejection, roadmap}.

    Flow:
    1. Sanitize inputs and compute metrics
    2. Score readiness from metrics and revenue
    3. Run the three rule engines independently off (1) and (2)
    """
    data = sanitize_input(data)
    funding_amount = sanitize_amount(funding_amount)

    metrics = compute_metrics(data.revenue, data.expenses, data.cash, data.debt)
    readiness = score_readiness(metrics, data.revenue)

    return FinancialAnalysis(
        input=data,
        funding_amount=funding_amount,
        metrics=metrics,
        readiness=readiness,
        recommendation=recommend_funding(metrics, readiness, data.revenue, data.goal),
        rejection=analyze_rejection_risk(
            metrics,
            readiness,
            data.revenue,
            data.expenses,
            data.cash,
            data.debt,
            funding_amount,
            data.goal,
        ),
        roadmap=build_improvement_roadmap(
            metrics,
            readiness,
            data.revenue,
            data.expenses,
            data.cash,
            data.debt,
            data.goal,
        ),
    )


def summary_request(analysis: FinancialAnalysis) -> SummaryRequest:
    return SummaryRequest(
        financial_input=analysis.input,
        metrics=analysis.metrics,
        readiness_score=analysis.readiness.score,
    )


def metrics_to_dict(metrics: FinancialMetrics) -> Dict[str, Any]:
    """Flatten the runway variant to a number or the "stable" sentinel"""
    runway = metrics.runway
    return {
        "burn_rate": metrics.burn_rate,
        "runway_months": "stable" if isinstance(runway, Stable) else runway.value,
        "debt_ratio": metrics.debt_ratio,
        "risk_level": metrics.risk_level,
    }


def analysis_to_payload(analysis: FinancialAnalysis) -> Dict[str, Any]:
    """JSON-safe dict of the full bundle, used for API responses and storage"""
    return {
        "input": asdict(analysis.input),
        "funding_amount": analysis.funding_amount,
        "metrics": metrics_to_dict(analysis.metrics),
        "readiness": asdict(analysis.readiness),
        "recommendation": asdict(analysis.recommendation),
        "rejection": asdict(analysis.rejection),
        "roadmap": asdict(analysis.roadmap),
    }
