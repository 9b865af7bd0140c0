"""Loan application letter generator - formal, bank-ready letter from raw inputs"""

from datetime import date

from finpilot.domain.metrics import sanitize_amount
from finpilot.domain.models import (
    FormalLoanApplication,
    LoanApplicationInput,
    LoanCalculations,
    LoanLetterSections,
)
from finpilot.utils.currency import format_inr, round_half_up
from finpilot.utils.date_utils import format_letter_date

RESTRUCTURING_EMI = "Subject to financial restructuring"
DEFICIT_STATEMENT = "Business currently operates at break-even or deficit"
EMI_SURPLUS_SHARE = 0.4

NAME_PLACEHOLDER = "[Business Name]"
INDUSTRY_PLACEHOLDER = "[Industry]"
PURPOSE_PLACEHOLDER = "[Purpose]"

LETTER_TEMPLATE = """Date: {date}

To
The Branch Manager
[Bank / Financial Institution Name]
[Branch Address]

Subject: {subject}

Dear Sir/Madam,

1. BUSINESS INTRODUCTION

{business_introduction}

2. FUNDING REQUIREMENT

{funding_requirement}

3. FINANCIAL SUMMARY

{financial_summary}

4. REPAYMENT CAPABILITY

{repayment_capability}

5. REQUEST FOR CONSIDERATION

{request_for_consideration}

Thank you for your time and consideration.

Yours faithfully,

For {business_name}
Authorized Signatory
Name: ____________
Contact: ____________"""


def calculate_loan_figures(revenue: float, expenses: float) -> LoanCalculations:
    """Annual revenue, surplus and an affordable EMI (40% of surplus)"""
    monthly_surplus = revenue - expenses
    is_deficit = monthly_surplus <= 0
    estimated_emi = RESTRUCTURING_EMI if is_deficit else format_inr(round_half_up(monthly_surplus * EMI_SURPLUS_SHARE))
    return LoanCalculations(
        annual_revenue=revenue * 12,
        monthly_surplus=monthly_surplus,
        is_deficit=is_deficit,
        estimated_emi=estimated_emi,
    )


def _financial_summary(revenue, expenses, cash, debt, calc: LoanCalculations) -> str:
    if calc.is_deficit:
        surplus_line = DEFICIT_STATEMENT
        surplus_statement = (
            f"The business currently operates at break-even or deficit, with monthly expenses of "
            f"{format_inr(expenses)} against revenue of {format_inr(revenue)}."
        )
    else:
        surplus_line = format_inr(calc.monthly_surplus)
        surplus_statement = (
            f"The business generates a monthly surplus of {format_inr(calc.monthly_surplus)} after meeting all "
            "operational expenses."
        )
    return (
        "The following figures represent the current financial position of the business:\n\n"
        f"• Annual Revenue: {format_inr(calc.annual_revenue)}\n"
        f"• Monthly Revenue: {format_inr(revenue)}\n"
        f"• Monthly Expenses: {format_inr(expenses)}\n"
        f"• Monthly Surplus: {surplus_line}\n"
        f"• Existing Debt: {format_inr(debt)}\n"
        f"• Current Cash Balance: {format_inr(cash)}\n\n"
        f"{surplus_statement} These figures are based on actual operational data and reflect the genuine "
        "financial health of the business."
    )


def _repayment_capability(cash, debt, funding_amount, purpose, calc: LoanCalculations) -> str:
    if calc.is_deficit:
        return (
            "At present, the business operates at or near break-even. Should the requested funding of "
            f"{format_inr(funding_amount)} be deployed as planned for {purpose.lower()}, we anticipate improved "
            "revenue performance. Repayment structuring may need to accommodate the current cash flow position, "
            "and we are open to discussing flexible repayment terms with your institution."
        )
    debt_note = (
        f" Current existing debt of {format_inr(debt)} is being serviced from operational cash flow."
        if debt > 0
        else ""
    )
    return (
        f"Based on the current financial performance, the business generates a monthly surplus of "
        f"{format_inr(calc.monthly_surplus)}. At an estimated comfortable EMI of {calc.estimated_emi} "
        "(approximately 40% of monthly surplus), the business expects to comfortably service loan repayments "
        f"while maintaining adequate operational cash reserves of {format_inr(cash)}.{debt_note}"
    )


def generate_loan_letter(application: LoanApplicationInput, letter_date: date | None = None) -> FormalLoanApplication:
    """
    Main entry point: assemble a five-section formal loan application.

    Blank business name, industry or purpose are replaced with bracketed
    placeholders. Pass `letter_date` for reproducible output; it defaults to today.
    """
    revenue = sanitize_amount(application.revenue)
    expenses = sanitize_amount(application.expenses)
    cash = sanitize_amount(application.cash)
    debt = sanitize_amount(application.debt)
    funding_amount = sanitize_amount(application.funding_amount)
    business_name = (application.business_name or "").strip() or NAME_PLACEHOLDER
    industry = (application.industry or "").strip() or INDUSTRY_PLACEHOLDER
    purpose = (application.funding_purpose or "").strip() or PURPOSE_PLACEHOLDER

    calc = calculate_loan_figures(revenue, expenses)
    formatted_date = format_letter_date(letter_date)
    subject = f"Application for Business Loan of {format_inr(funding_amount)}"

    sections = LoanLetterSections(
        business_introduction=(
            f"We, {business_name}, are an enterprise operating in the {industry} sector. Our business is seeking "
            "financial assistance to support operational requirements and growth objectives. This application is "
            "submitted to request your esteemed institution's consideration for a business loan facility to "
            "strengthen our working operations and future plans."
        ),
        funding_requirement=(
            f"We hereby request a business loan of {format_inr(funding_amount)} for the purpose of {purpose}. This "
            "funding will be utilized exclusively for the stated purpose and is expected to contribute positively "
            "to the operational efficiency and revenue growth of the business."
        ),
        financial_summary=_financial_summary(revenue, expenses, cash, debt, calc),
        repayment_capability=_repayment_capability(cash, debt, funding_amount, purpose, calc),
        request_for_consideration=(
            "We kindly request your esteemed institution to consider this loan application favorably. We are "
            "willing to provide any additional documentation, financial statements, or information as may be "
            "required during the evaluation process. We look forward to a positive response and are available to "
            "discuss the application at your earliest convenience."
        ),
    )

    full_letter_text = LETTER_TEMPLATE.format(
        date=formatted_date,
        subject=subject,
        business_introduction=sections.business_introduction,
        funding_requirement=sections.funding_requirement,
        financial_summary=sections.financial_summary,
        repayment_capability=sections.repayment_capability,
        request_for_consideration=sections.request_for_consideration,
        business_name=business_name,
    )

    return FormalLoanApplication(
        date=formatted_date,
        subject=subject,
        sections=sections,
        calculations=calc,
        business_name=business_name,
        full_letter_text=full_letter_text,
    )
