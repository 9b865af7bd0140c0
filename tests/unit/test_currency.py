"""Unit tests for INR formatting"""

import pytest
from finpilot.utils.currency import format_inr, format_lakh_crore, round_half_up


@pytest.mark.parametrize(
    "amount,expected",
    [
        (0, "₹0"),
        (999, "₹999"),
        (1000, "₹1,000"),
        (100000, "₹1,00,000"),
        (2500000, "₹25,00,000"),
        (1234567, "₹12,34,567"),
        (123456789, "₹12,34,56,789"),
        (-50000, "-₹50,000"),
        (1500.5, "₹1,500.5"),
        (1500.25, "₹1,500.25"),
    ],
)
def test_format_inr(amount, expected):
    assert format_inr(amount) == expected


@pytest.mark.parametrize(
    "amount,expected",
    [
        (50000, "₹50,000"),
        (100000, "₹1.0 L"),
        (1500000, "₹15.0 L"),
        (9999999, "₹100.0 L"),
        (10000000, "₹1.0 Cr"),
        (25000000, "₹2.5 Cr"),
    ],
)
def test_format_lakh_crore(amount, expected):
    assert format_lakh_crore(amount) == expected


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(3.333, 1) == 3.3


def test_round_half_up_leaves_unscalable_values_alone():
    assert round_half_up(float("inf")) == float("inf")
    assert round_half_up(1e307, 2) == 1e307


def test_format_inr_huge_amount():
    assert format_inr(1e307).startswith("₹1")
    assert format_inr(1e15) == "₹1,00,00,00,00,00,00,000"
