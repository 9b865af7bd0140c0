"""Stored analyses - history listing, lookup and deletion"""

import uuid
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from starlette.responses import Response

from finpilot.api.v1.schemas import AnalysisResponse, HistoryResponse, HistoryItem
from finpilot.domain.exceptions import AnalysisNotFoundError
from finpilot.infrastructure.database.session import get_db
from finpilot.infrastructure.database.repositories import AnalysisRepository

router = APIRouter()


def _parse_analysis_id(analysis_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(analysis_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid analysis ID format")


# Registered before /analysis/{analysis_id} so "history" is not parsed as an id
@router.get("/analysis/history", response_model=HistoryResponse)
def get_analysis_history(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent analyses for a user, newest first.

    Returns:
        Headline results (score, classification, risk) per analysis
    """
    analysis_repo = AnalysisRepository(db)
    records = analysis_repo.get_analyses_by_user(user_id, limit=limit)

    history_items = [
        HistoryItem(
            analysis_id=str(r.id),
            goal=r.goal,
            readiness_score=r.readiness_score,
            classification=r.classification,
            risk_level=r.risk_level,
            summary=r.summary,
            created_at=r.created_at.isoformat(),
        )
        for r in records
    ]

    return HistoryResponse(user_id=user_id, analyses=history_items)


@router.get("/analysis/{analysis_id}", response_model=AnalysisResponse)
def get_analysis(analysis_id: str, db: Session = Depends(get_db)):
    """Retrieve one stored analysis with its full payload"""
    analysis_uuid = _parse_analysis_id(analysis_id)

    try:
        record = AnalysisRepository(db).get_analysis(analysis_uuid)
    except AnalysisNotFoundError:
        raise HTTPException(status_code=404, detail="Analysis not found")

    return AnalysisResponse(
        analysis_id=str(record.id),
        created_at=record.created_at.isoformat(),
        summary=record.summary,
        **record.payload,
    )


@router.delete("/analysis/{analysis_id}", status_code=204)
def delete_analysis(analysis_id: str, db: Session = Depends(get_db)):
    analysis_uuid = _parse_analysis_id(analysis_id)

    try:
        AnalysisRepository(db).delete_analysis(analysis_uuid)
        db.commit()
    except AnalysisNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Analysis not found")

    return Response(status_code=204)
