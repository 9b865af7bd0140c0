"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional, Union

from finpilot.domain.metrics import MAX_AMOUNT
from finpilot.domain.models import FundingGoal


class AnalysisRequest(BaseModel):
    """Request body for POST /v1/analysis"""

    user_id: Optional[str] = Field(None, min_length=1, description="Persist the analysis under this user")
    revenue: float = Field(..., ge=0, le=MAX_AMOUNT, description="Monthly revenue in INR")
    expenses: float = Field(..., ge=0, le=MAX_AMOUNT, description="Monthly expenses in INR")
    cash: float = Field(..., ge=0, le=MAX_AMOUNT, description="Cash balance in INR")
    debt: float = Field(..., ge=0, le=MAX_AMOUNT, description="Outstanding debt in INR")
    goal: FundingGoal
    funding_amount: float = Field(0, ge=0, le=MAX_AMOUNT, description="Requested funding in INR, 0 if undecided")


class FinancialInputSchema(BaseModel):
    revenue: float
    expenses: float
    cash: float
    debt: float
    goal: str


class MetricsSchema(BaseModel):
    burn_rate: float
    runway_months: Union[Literal["stable"], float]
    debt_ratio: float
    risk_level: str


class ReadinessFactorSchema(BaseModel):
    points: int
    max: int
    reason: str


class ReadinessBreakdownSchema(BaseModel):
    runway: ReadinessFactorSchema
    cashflow: ReadinessFactorSchema
    debt: ReadinessFactorSchema


class ReadinessSchema(BaseModel):
    score: int
    classification: str
    breakdown: ReadinessBreakdownSchema
    calculation_summary: str
    professional_explanation: str


class PrimaryRecommendationSchema(BaseModel):
    funding_type: str
    suggested_amount_range: str
    best_timing: str
    reason: str


class FundingOptionSchema(BaseModel):
    name: str
    type: str
    official_link: str
    amount_range: str
    why_suitable: str
    basic_eligibility: str


class RecommendationSchema(BaseModel):
    primary_recommendation: PrimaryRecommendationSchema
    funding_options: List[FundingOptionSchema]


class RejectionRiskSchema(BaseModel):
    risk_title: str
    severity: str
    why_it_matters: str
    how_to_improve: str


class RejectionSchema(BaseModel):
    rejection_analysis: List[RejectionRiskSchema]
    overall_risk_level: str
    approval_probability: str


class RoadmapActionSchema(BaseModel):
    priority: str
    action_title: str
    what_to_do: str
    why_it_matters: str
    expected_impact: str


class RoadmapSchema(BaseModel):
    financial_roadmap: List[RoadmapActionSchema]
    readiness_summary: str


class AnalysisResponse(BaseModel):
    """Response for POST /v1/analysis and GET /v1/analysis/{analysis_id}"""

    analysis_id: Optional[str] = None
    created_at: Optional[str] = None
    input: FinancialInputSchema
    funding_amount: float
    metrics: MetricsSchema
    readiness: ReadinessSchema
    recommendation: RecommendationSchema
    rejection: RejectionSchema
    roadmap: RoadmapSchema
    summary: Optional[str] = None
    summary_source: Optional[str] = None  # remote | fallback, absent for stored analyses


class LoanApplicationRequest(BaseModel):
    """Request body for POST /v1/loan-application"""

    business_name: str = ""
    industry: str = ""
    revenue: float = Field(..., ge=0, le=MAX_AMOUNT)
    expenses: float = Field(..., ge=0, le=MAX_AMOUNT)
    cash: float = Field(0, ge=0, le=MAX_AMOUNT)
    debt: float = Field(0, ge=0, le=MAX_AMOUNT)
    funding_amount: float = Field(..., ge=0, le=MAX_AMOUNT)
    funding_purpose: str = ""


class LoanSectionsSchema(BaseModel):
    business_introduction: str
    funding_requirement: str
    financial_summary: str
    repayment_capability: str
    request_for_consideration: str


class LoanCalculationsSchema(BaseModel):
    annual_revenue: float
    monthly_surplus: float
    is_deficit: bool
    estimated_emi: str


class LoanApplicationResponse(BaseModel):
    """Response for POST /v1/loan-application"""

    date: str
    subject: str
    sections: LoanSectionsSchema
    calculations: LoanCalculationsSchema
    business_name: str
    full_letter_text: str


class HistoryItem(BaseModel):
    """Single analysis in history"""

    analysis_id: str
    goal: str
    readiness_score: int
    classification: str
    risk_level: str
    summary: Optional[str] = None
    created_at: str


class HistoryResponse(BaseModel):
    """Response for GET /v1/analysis/history"""

    user_id: str
    analyses: List[HistoryItem]
