"""SQLAlchemy ORM models for persisted analyses"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Float, DateTime, Integer, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FinancialAnalysisRecord(Base):
    """Stored analysis: raw inputs, headline results, and the full payload"""

    __tablename__ = "financial_analysis"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    revenue = Column(Float, nullable=False)
    expenses = Column(Float, nullable=False)
    cash = Column(Float, nullable=False)
    debt = Column(Float, nullable=False)
    goal = Column(Text, nullable=False)
    funding_amount = Column(Float, nullable=False, default=0.0)
    readiness_score = Column(Integer, nullable=False)
    classification = Column(Text, nullable=False)
    risk_level = Column(Text, nullable=False)
    payload = Column(JSON, nullable=False)
    summary = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())
