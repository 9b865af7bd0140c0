"""Unit tests for scheme matching and the primary funding recommendation"""

import pytest
from finpilot.domain.funding import (
    SCHEME_CATALOG,
    get_primary_funding_type,
    get_revenue_tier,
    get_suggested_amount_range,
    get_timing,
    has_partial_goal_match,
    recommend_funding,
    score_scheme,
    select_schemes,
)
from finpilot.domain.metrics import compute_metrics
from finpilot.domain.models import FinancialInput, Months, STABLE
from finpilot.domain.scoring import score_readiness


def _scheme(name):
    return next(scheme for scheme in SCHEME_CATALOG if scheme.name == name)


def _recommend(profile: FinancialInput):
    metrics = compute_metrics(profile.revenue, profile.expenses, profile.cash, profile.debt)
    readiness = score_readiness(metrics, profile.revenue)
    return recommend_funding(metrics, readiness, profile.revenue, profile.goal)


def test_strong_profile_recommendation(strong_profile):
    result = _recommend(strong_profile)
    primary = result.primary_recommendation

    assert primary.funding_type == "SBI MSME Loan / PSB Loans in 59 Minutes"
    assert primary.suggested_amount_range == "₹15.0 L – ₹20.0 L"
    assert primary.best_timing.startswith("No urgency")
    assert [option.name for option in result.funding_options] == [
        "PM MUDRA Yojana — Tarun",
        "CGTMSE-backed MSME Loan",
        "SBI MSME Loans",
    ]


def test_distressed_micro_business_gets_micro_finance(distressed_profile):
    result = _recommend(distressed_profile)

    assert result.primary_recommendation.funding_type == "Micro-Finance / MUDRA Shishu-Kishore"
    assert result.primary_recommendation.best_timing.startswith("Urgent")
    assert [option.name for option in result.funding_options] == [
        "PM MUDRA Yojana — Shishu",
        "PM MUDRA Yojana — Kishore",
        "NBFC Working Capital Loan",
    ]


def test_options_always_two_or_three(strong_profile, moderate_profile, weak_profile, distressed_profile, pre_revenue_profile):
    for profile in (strong_profile, moderate_profile, weak_profile, distressed_profile, pre_revenue_profile):
        assert 2 <= len(_recommend(profile).funding_options) <= 3


def test_option_fields_come_from_catalog(strong_profile):
    option = _recommend(strong_profile).funding_options[0]
    scheme = _scheme(option.name)

    assert option.official_link == scheme.official_link
    assert option.amount_range == scheme.max_amount
    assert option.basic_eligibility == scheme.eligibility
    assert option.why_suitable.startswith("Directly matches your working capital goal")


@pytest.mark.parametrize(
    "revenue,tier",
    [(0, "micro"), (499999, "micro"), (500000, "small"), (2499999, "small"), (2500000, "medium")],
)
def test_revenue_tiers(revenue, tier):
    assert get_revenue_tier(revenue) == tier


def test_amount_range_uses_crore_labels():
    assert get_suggested_amount_range(5_000_000, "Strong") == "₹1.5 Cr – ₹2.0 Cr"


def test_amount_range_small_amounts_use_full_rupees():
    assert get_suggested_amount_range(50000, "High Risk") == "₹25,000 – ₹50,000"


@pytest.mark.parametrize(
    "runway,prefix",
    [
        (STABLE, "No urgency"),
        (Months(2.9), "Urgent"),
        (Months(3.0), "Apply within the next 4–6 weeks"),
        (Months(12.0), "Apply within 1–3 months"),
        (Months(12.5), "Strategic timing"),
    ],
)
def test_timing(runway, prefix):
    assert get_timing(runway).startswith(prefix)


def test_primary_type_depends_on_goal():
    assert get_primary_funding_type("Moderate", "Equipment Purchase", "small") == "SIDBI Term Loan / SBI MSME Loan"
    assert get_primary_funding_type("Weak", "Inventory Financing", "micro") == "MUDRA Tarun / NBFC Working Capital"
    assert get_primary_funding_type("High Risk", "Working Capital", "medium") == "NBFC Working Capital Loan"


def test_exact_goal_match_outweighs_partial():
    tarun = _scheme("PM MUDRA Yojana — Tarun")

    assert score_scheme(tarun, "Low", "small", "Working Capital") == 10
    # No exact tag, but "working" is shared with the goal
    assert score_scheme(tarun, "Low", "small", "Working capital for festive stock") == 7


def test_partial_goal_match_uses_first_word_of_tag():
    assert has_partial_goal_match(_scheme("PM MUDRA Yojana — Kishore"), "Marketing campaign")
    assert not has_partial_goal_match(_scheme("PM MUDRA Yojana — Shishu"), "Marketing campaign")
    # "capital" is not the first word of "Working Capital"
    assert not has_partial_goal_match(_scheme("PM MUDRA Yojana — Shishu"), "Capital")


def test_select_schemes_falls_back_to_top_two():
    """Nothing qualifies -> the top 2 in catalog order"""
    selected = select_schemes("Unknown", "none", "")
    assert [scheme.name for scheme in selected] == [SCHEME_CATALOG[0].name, SCHEME_CATALOG[1].name]


def test_recommendation_is_deterministic(moderate_profile):
    assert _recommend(moderate_profile) == _recommend(moderate_profile)
