"""Pytest fixtures for testing"""

import pytest
from typing import Generator, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finpilot.api.main import create_app
from finpilot.api.dependencies import get_summary_provider
from finpilot.infrastructure.database.models import Base
from finpilot.infrastructure.database.session import get_db
from finpilot.domain.exceptions import SummaryServiceError
from finpilot.domain.models import FinancialInput, SummaryRequest


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class StaticSummaryProvider:
    """Summary provider returning canned text, or failing on demand"""

    def __init__(self, text: str = "Healthy business with steady surplus.", fail: bool = False):
        self.text = text
        self.fail = fail
        self.requests: list[SummaryRequest] = []

    async def generate_summary(self, request: SummaryRequest) -> str:
        self.requests.append(request)
        if self.fail:
            raise SummaryServiceError("summary service down")
        return self.text


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_summary_provider():
    return StaticSummaryProvider


@pytest.fixture
def summary_provider() -> Optional[StaticSummaryProvider]:
    """No remote summary by default; tests override to inject one"""
    return None


@pytest.fixture
def client(db: Session, summary_provider: Optional[StaticSummaryProvider]) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_summary_provider] = lambda: summary_provider
    return TestClient(app)


@pytest.fixture
def strong_profile() -> FinancialInput:
    """Cash-flow positive, low debt"""
    return FinancialInput(revenue=500000, expenses=400000, cash=2000000, debt=500000, goal="Working Capital")


@pytest.fixture
def moderate_profile() -> FinancialInput:
    return FinancialInput(revenue=300000, expenses=350000, cash=500000, debt=1000000, goal="Equipment Purchase")


@pytest.fixture
def weak_profile() -> FinancialInput:
    return FinancialInput(revenue=200000, expenses=280000, cash=400000, debt=800000, goal="Business Expansion")


@pytest.fixture
def distressed_profile() -> FinancialInput:
    """Deficit, extreme leverage, under 3 months of runway"""
    return FinancialInput(revenue=100000, expenses=200000, cash=200000, debt=2000000, goal="Working Capital")


@pytest.fixture
def pre_revenue_profile() -> FinancialInput:
    return FinancialInput(revenue=0, expenses=100000, cash=50000, debt=500000, goal="Working Capital")
