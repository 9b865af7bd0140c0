"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Union


class FundingGoal(str, Enum):
    """Funding purposes a business can select"""

    WORKING_CAPITAL = "Working Capital"
    EQUIPMENT_PURCHASE = "Equipment Purchase"
    BUSINESS_EXPANSION = "Business Expansion"
    INVENTORY_FINANCING = "Inventory Financing"
    DEBT_CONSOLIDATION = "Debt Consolidation"
    MARKETING_GROWTH = "Marketing & Growth"


@dataclass(frozen=True)
class FinancialInput:
    """Monthly financial snapshot supplied by the business (amounts in INR)"""

    revenue: float
    expenses: float
    cash: float
    debt: float
    goal: str


@dataclass(frozen=True)
class Stable:
    """Runway variant: burn rate is zero, cash is not being depleted"""

    def __str__(self) -> str:
        return "stable"


@dataclass(frozen=True)
class Months:
    """Runway variant: months of cash left at the current burn rate"""

    value: float

    def __str__(self) -> str:
        return f"{self.value:.1f}"


Runway = Union[Stable, Months]

STABLE = Stable()


@dataclass(frozen=True)
class FinancialMetrics:
    """Derived risk metrics used by every downstream calculator"""

    burn_rate: float
    runway: Runway
    debt_ratio: float  # 0 - 99.99, saturated
    risk_level: str  # "Low" | "Moderate" | "High"


@dataclass(frozen=True)
class ReadinessFactor:
    """One tiered component of the readiness score"""

    points: int
    max: int
    reason: str


@dataclass(frozen=True)
class ReadinessBreakdown:
    runway: ReadinessFactor
    cashflow: ReadinessFactor
    debt: ReadinessFactor


@dataclass(frozen=True)
class FundingReadiness:
    """0-100 readiness score with breakdown and classification"""

    score: int
    classification: str  # "Strong" | "Moderate" | "Weak" | "High Risk"
    breakdown: ReadinessBreakdown
    calculation_summary: str
    professional_explanation: str


@dataclass(frozen=True)
class SchemeEntry:
    """Static catalog entry for a government or bank funding scheme"""

    name: str
    type: str
    official_link: str
    description: str
    max_amount: str
    eligibility: str
    best_for: tuple  # goal tags
    risk_suitability: tuple  # "Low" | "Moderate" | "High"
    revenue_tier: tuple  # "micro" | "small" | "medium"


@dataclass(frozen=True)
class FundingOption:
    name: str
    type: str
    official_link: str
    amount_range: str
    why_suitable: str
    basic_eligibility: str


@dataclass(frozen=True)
class PrimaryRecommendation:
    funding_type: str
    suggested_amount_range: str
    best_timing: str
    reason: str


@dataclass(frozen=True)
class SmartFundingRecommendation:
    """Primary recommendation plus 2-3 ranked matching schemes"""

    primary_recommendation: PrimaryRecommendation
    funding_options: List[FundingOption]


@dataclass(frozen=True)
class RejectionRiskItem:
    risk_title: str
    severity: str  # "High" | "Medium" | "Low"
    why_it_matters: str
    how_to_improve: str


@dataclass(frozen=True)
class RejectionAnalysis:
    """Up to 3 prioritized rejection risks and an overall verdict"""

    rejection_analysis: List[RejectionRiskItem]
    overall_risk_level: str  # "High" | "Medium" | "Low"
    approval_probability: str


@dataclass(frozen=True)
class RoadmapAction:
    priority: str  # "High" | "Medium" | "Low"
    action_title: str
    what_to_do: str
    why_it_matters: str
    expected_impact: str


@dataclass(frozen=True)
class FinancialRoadmap:
    """Exactly 3 improvement actions and a readiness narrative"""

    financial_roadmap: List[RoadmapAction]
    readiness_summary: str


@dataclass(frozen=True)
class LoanApplicationInput:
    """Business details used to draft a loan application letter"""

    business_name: str
    industry: str
    revenue: float
    expenses: float
    cash: float
    debt: float
    funding_amount: float
    funding_purpose: str


@dataclass(frozen=True)
class LoanCalculations:
    annual_revenue: float
    monthly_surplus: float
    is_deficit: bool
    estimated_emi: str


@dataclass(frozen=True)
class LoanLetterSections:
    business_introduction: str
    funding_requirement: str
    financial_summary: str
    repayment_capability: str
    request_for_consideration: str


@dataclass(frozen=True)
class FormalLoanApplication:
    """Structured formal loan letter with its computed figures"""

    date: str
    subject: str
    sections: LoanLetterSections
    calculations: LoanCalculations
    business_name: str
    full_letter_text: str


@dataclass(frozen=True)
class FinancialAnalysis:
    """Complete deterministic output bundle for one analysis request"""

    input: FinancialInput
    funding_amount: float
    metrics: FinancialMetrics
    readiness: FundingReadiness
    recommendation: SmartFundingRecommendation
    rejection: RejectionAnalysis
    roadmap: FinancialRoadmap


@dataclass(frozen=True)
class SummaryRequest:
    """Inputs handed to the remote summary service"""

    financial_input: FinancialInput
    metrics: FinancialMetrics
    readiness_score: int

