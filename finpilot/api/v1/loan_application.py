"""POST /v1/loan-application - Formal loan application letter"""

from dataclasses import asdict

from fastapi import APIRouter

from finpilot.api.v1.schemas import LoanApplicationRequest, LoanApplicationResponse
from finpilot.domain.loan_letter import generate_loan_letter
from finpilot.domain.models import LoanApplicationInput
from finpilot.infrastructure.observability.metrics import record_loan_letter

router = APIRouter()


@router.post("/loan-application", response_model=LoanApplicationResponse)
def create_loan_application(request_body: LoanApplicationRequest):
    """
    Draft a bank-ready loan application letter.

    Returns:
        Letter sections, computed figures (surplus, EMI) and the assembled text
    """
    letter = generate_loan_letter(LoanApplicationInput(**request_body.model_dump()))
    record_loan_letter(letter.calculations.is_deficit)
    return LoanApplicationResponse(**asdict(letter))
