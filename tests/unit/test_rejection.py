"""Unit tests for the rejection-risk rule engine"""

from finpilot.domain.metrics import compute_metrics
from finpilot.domain.models import FinancialInput, RejectionRiskItem
from finpilot.domain.rejection import (
    RISK_RULES,
    STRONG_PROFILE,
    analyze_rejection_risk,
    determine_overall_risk,
)
from finpilot.domain.scoring import score_readiness


def _analyze(profile: FinancialInput, funding_amount: float = 0):
    metrics = compute_metrics(profile.revenue, profile.expenses, profile.cash, profile.debt)
    readiness = score_readiness(metrics, profile.revenue)
    return analyze_rejection_risk(
        metrics,
        readiness,
        profile.revenue,
        profile.expenses,
        profile.cash,
        profile.debt,
        funding_amount,
        profile.goal,
    )


def _item(severity):
    return RejectionRiskItem(risk_title="t", severity=severity, why_it_matters="w", how_to_improve="h")


def test_clean_profile_reports_strong_profile(strong_profile):
    result = _analyze(strong_profile)

    assert result.rejection_analysis == [STRONG_PROFILE]
    assert result.overall_risk_level == "Low"
    assert result.approval_probability.startswith("Good")


def test_distressed_profile_top_three_risks(distressed_profile):
    result = _analyze(distressed_profile)
    titles = [risk.risk_title for risk in result.rejection_analysis]

    assert titles == [
        "Negative or Zero Monthly Surplus",
        "Dangerously High Debt-to-Revenue Ratio",
        "Critically Low Cash Runway (<3 Months)",
    ]
    assert all(risk.severity == "High" for risk in result.rejection_analysis)
    assert result.overall_risk_level == "High"
    assert result.approval_probability.startswith("Low")


def test_zero_revenue_is_always_surfaced(pre_revenue_profile):
    result = _analyze(pre_revenue_profile)
    first = result.rejection_analysis[0]

    assert first.risk_title == "No Reported Revenue"
    assert first.severity == "High"


def test_never_more_than_three_risks(distressed_profile):
    # Also trips the excessive funding request rule
    result = _analyze(distressed_profile, funding_amount=50_000_000)
    assert len(result.rejection_analysis) == 3


def test_excessive_funding_request():
    profile = FinancialInput(revenue=500000, expenses=400000, cash=2000000, debt=0, goal="Business Expansion")
    result = _analyze(profile, funding_amount=7_000_000)

    titles = [risk.risk_title for risk in result.rejection_analysis]
    assert titles == ["Funding Request Exceeds Annual Revenue"]
    assert "₹30,00,000" in result.rejection_analysis[0].how_to_improve
    assert result.overall_risk_level == "Medium"


def test_large_funding_relative_to_revenue():
    profile = FinancialInput(revenue=500000, expenses=400000, cash=2000000, debt=0, goal="Business Expansion")
    result = _analyze(profile, funding_amount=4_000_000)

    assert [risk.risk_title for risk in result.rejection_analysis] == [
        "Funding Request is Large Relative to Monthly Revenue"
    ]
    assert result.rejection_analysis[0].severity == "Medium"


def test_moderate_profile_risks(moderate_profile):
    """Deficit with 10 month runway and debt ratio 0.28"""
    result = _analyze(moderate_profile)
    titles = [risk.risk_title for risk in result.rejection_analysis]

    assert titles[0] == "Negative or Zero Monthly Surplus"
    assert "Moderate Existing Debt Obligations" in titles


def test_rule_priorities_are_unique_and_ordered():
    priorities = [rule.priority for rule in RISK_RULES]
    assert priorities == sorted(priorities)
    assert len(set(priorities)) == len(priorities)
    assert RISK_RULES[0].id == "zero_revenue"


def test_overall_risk_levels():
    assert determine_overall_risk([_item("High"), _item("High")]) == "High"
    assert determine_overall_risk([_item("High"), _item("Low")]) == "Medium"
    assert determine_overall_risk([_item("Medium"), _item("Medium")]) == "Medium"
    assert determine_overall_risk([_item("Medium"), _item("Low")]) == "Low"


def test_rejection_is_deterministic(weak_profile):
    assert _analyze(weak_profile, 1_000_000) == _analyze(weak_profile, 1_000_000)
