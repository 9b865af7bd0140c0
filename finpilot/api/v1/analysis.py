"""POST /v1/analysis - MSME funding readiness analysis endpoint"""

import time
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finpilot.api.v1.schemas import AnalysisRequest, AnalysisResponse
from finpilot.api.dependencies import get_request_id, get_summary_provider
from finpilot.infrastructure.database.session import get_db
from finpilot.infrastructure.database.repositories import AnalysisRepository
from finpilot.domain.analysis import build_analysis, analysis_to_payload, summary_request
from finpilot.domain.models import FinancialInput
from finpilot.domain.summary import SummaryProvider, SOURCE_FALLBACK, resolve_summary
from finpilot.infrastructure.observability.metrics import record_analysis, record_summary_fallback
from finpilot.infrastructure.observability.logging import log_analysis

router = APIRouter()


@router.post("/analysis", response_model=AnalysisResponse)
async def create_analysis(
    request_body: AnalysisRequest,
    request: Request,
    db: Session = Depends(get_db),
    summary_provider: Optional[SummaryProvider] = Depends(get_summary_provider),
):
    """
    Run the full readiness analysis for one monthly financial snapshot.

    Flow:
    1. Compute metrics and readiness score
    2. Build funding recommendation, rejection risks and roadmap
    3. Resolve the executive summary (remote, or local fallback)
    4. Persist the analysis when a user_id is supplied
    5. Return the complete bundle
    """
    start_time = time.time()
    request_id = get_request_id(request)

    # 1-2. Deterministic pipeline
    analysis = build_analysis(
        FinancialInput(
            revenue=request_body.revenue,
            expenses=request_body.expenses,
            cash=request_body.cash,
            debt=request_body.debt,
            goal=request_body.goal.value,
        ),
        funding_amount=request_body.funding_amount,
    )
    payload = analysis_to_payload(analysis)

    # 3. Summary never fails the request
    summary, summary_source = await resolve_summary(
        summary_provider, summary_request(analysis), analysis.readiness
    )
    if summary_source == SOURCE_FALLBACK:
        record_summary_fallback(provider_configured=summary_provider is not None)

    # 4. Persist analysis
    analysis_id = None
    created_at = None
    if request_body.user_id:
        try:
            analysis_repo = AnalysisRepository(db)
            record = analysis_repo.create_analysis(
                user_id=request_body.user_id,
                analysis=analysis,
                payload=payload,
                summary=summary,
            )
            db.commit()
        except Exception as e:
            db.rollback()
            logging.error(f"Failed to persist analysis: {e}", extra={"request_id": request_id})
            raise HTTPException(status_code=500, detail="Internal server error")
        analysis_id = str(record.id)
        created_at = record.created_at.isoformat()

    # Record metrics and logs
    duration_ms = (time.time() - start_time) * 1000
    record_analysis(
        analysis.readiness.classification,
        analysis.readiness.score,
        analysis.rejection.overall_risk_level,
    )
    log_analysis(
        request_id,
        request_body.user_id,
        analysis.readiness.score,
        analysis.readiness.classification,
        analysis.rejection.overall_risk_level,
        summary_source,
        duration_ms,
    )

    return AnalysisResponse(
        analysis_id=analysis_id,
        created_at=created_at,
        summary=summary,
        summary_source=summary_source,
        **payload,
    )
