"""Unit tests for loan application letter generation"""

from datetime import date

from finpilot.domain.loan_letter import (
    RESTRUCTURING_EMI,
    calculate_loan_figures,
    generate_loan_letter,
)
from finpilot.domain.metrics import MAX_AMOUNT
from finpilot.domain.models import LoanApplicationInput
from finpilot.utils.date_utils import format_letter_date

LETTER_DATE = date(2026, 10, 19)


def _application(**overrides) -> LoanApplicationInput:
    fields = dict(
        business_name="Sharma Textiles",
        industry="Textile Manufacturing",
        revenue=500000,
        expenses=350000,
        cash=800000,
        debt=200000,
        funding_amount=1500000,
        funding_purpose="Equipment Purchase",
    )
    fields.update(overrides)
    return LoanApplicationInput(**fields)


def test_surplus_figures():
    calc = calculate_loan_figures(500000, 350000)

    assert calc.annual_revenue == 6000000
    assert calc.monthly_surplus == 150000
    assert calc.is_deficit is False
    assert calc.estimated_emi == "₹60,000"


def test_break_even_counts_as_deficit():
    calc = calculate_loan_figures(300000, 300000)

    assert calc.is_deficit is True
    assert calc.estimated_emi == RESTRUCTURING_EMI


def test_deficit_letter_mentions_break_even():
    letter = generate_loan_letter(_application(revenue=200000, expenses=260000), letter_date=LETTER_DATE)

    assert letter.calculations.estimated_emi == "Subject to financial restructuring"
    assert "break-even" in letter.sections.repayment_capability
    assert "Business currently operates at break-even or deficit" in letter.sections.financial_summary


def test_letter_structure():
    letter = generate_loan_letter(_application(), letter_date=LETTER_DATE)

    assert letter.date == "19 October, 2026"
    assert letter.subject == "Application for Business Loan of ₹15,00,000"
    assert letter.business_name == "Sharma Textiles"
    text = letter.full_letter_text
    assert text.startswith("Date: 19 October, 2026")
    assert "Dear Sir/Madam" in text
    assert "Yours faithfully" in text
    assert "For Sharma Textiles" in text
    for heading in (
        "1. BUSINESS INTRODUCTION",
        "2. FUNDING REQUIREMENT",
        "3. FINANCIAL SUMMARY",
        "4. REPAYMENT CAPABILITY",
        "5. REQUEST FOR CONSIDERATION",
    ):
        assert heading in text


def test_sections_embed_figures():
    letter = generate_loan_letter(_application(), letter_date=LETTER_DATE)

    assert "Textile Manufacturing" in letter.sections.business_introduction
    assert "₹15,00,000" in letter.sections.funding_requirement
    assert "• Annual Revenue: ₹60,00,000" in letter.sections.financial_summary
    assert "₹60,000" in letter.sections.repayment_capability
    assert "₹2,00,000" in letter.sections.repayment_capability


def test_blank_fields_become_placeholders():
    letter = generate_loan_letter(
        _application(business_name="  ", industry="", funding_purpose=""), letter_date=LETTER_DATE
    )

    assert letter.business_name == "[Business Name]"
    assert "[Industry]" in letter.sections.business_introduction
    assert "[Purpose]" in letter.sections.funding_requirement


def test_letter_is_reproducible_with_fixed_date():
    assert generate_loan_letter(_application(), LETTER_DATE) == generate_loan_letter(_application(), LETTER_DATE)


def test_invalid_amounts_are_treated_as_zero():
    letter = generate_loan_letter(_application(revenue=-1, funding_amount=float("nan")), letter_date=LETTER_DATE)

    assert letter.calculations.annual_revenue == 0
    assert letter.subject == "Application for Business Loan of ₹0"


def test_huge_amounts_saturate():
    letter = generate_loan_letter(_application(revenue=1e307, funding_amount=1e307), letter_date=LETTER_DATE)

    assert letter.calculations.annual_revenue == MAX_AMOUNT * 12
    assert letter.subject == "Application for Business Loan of ₹1,00,00,00,00,00,00,000"


def test_format_letter_date():
    assert format_letter_date(date(2025, 1, 5)) == "5 January, 2025"
