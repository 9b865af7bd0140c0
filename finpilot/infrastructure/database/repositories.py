"""Data access layer for stored analyses"""

import uuid
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from finpilot.domain.exceptions import AnalysisNotFoundError
from finpilot.domain.models import FinancialAnalysis
from finpilot.infrastructure.database.models import FinancialAnalysisRecord


class AnalysisRepository:
    """Repository for financial analyses; payloads are stored opaquely"""

    def __init__(self, db: Session):
        self.db = db

    def create_analysis(
        self,
        user_id: str,
        analysis: FinancialAnalysis,
        payload: Dict[str, Any],
        summary: str,
    ) -> FinancialAnalysisRecord:
        """Persist analysis to database"""
        record = FinancialAnalysisRecord(
            user_id=user_id,
            revenue=analysis.input.revenue,
            expenses=analysis.input.expenses,
            cash=analysis.input.cash,
            debt=analysis.input.debt,
            goal=analysis.input.goal,
            funding_amount=analysis.funding_amount,
            readiness_score=analysis.readiness.score,
            classification=analysis.readiness.classification,
            risk_level=analysis.metrics.risk_level,
            payload=payload,
            summary=summary,
        )
        self.db.add(record)
        self.db.flush()  # Get ID and created_at without committing
        self.db.refresh(record)
        return record

    def get_analyses_by_user(self, user_id: str, limit: int = 20) -> List[FinancialAnalysisRecord]:
        """Fetch recent analyses for a user, newest first"""
        return (
            self.db.query(FinancialAnalysisRecord)
            .filter(FinancialAnalysisRecord.user_id == user_id)
            .order_by(FinancialAnalysisRecord.created_at.desc())
            .limit(limit)
            .all()
        )

    def get_analysis(self, analysis_id: uuid.UUID) -> FinancialAnalysisRecord:
        """
        Fetch one analysis.

        Raises:
            AnalysisNotFoundError: When no analysis has this id
        """
        record = (
            self.db.query(FinancialAnalysisRecord)
            .filter(FinancialAnalysisRecord.id == analysis_id)
            .first()
        )
        if record is None:
            raise AnalysisNotFoundError(f"Analysis {analysis_id} not found")
        return record

    def delete_analysis(self, analysis_id: uuid.UUID) -> None:
        record = self.get_analysis(analysis_id)
        self.db.delete(record)
        self.db.flush()
