"""Integration tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient

STRONG_REQUEST = {
    "revenue": 500000,
    "expenses": 400000,
    "cash": 2000000,
    "debt": 500000,
    "goal": "Working Capital",
}

DISTRESSED_REQUEST = {
    "revenue": 100000,
    "expenses": 200000,
    "cash": 200000,
    "debt": 2000000,
    "goal": "Working Capital",
}


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"]


def test_request_id_is_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/analysis", json=STRONG_REQUEST)
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "finpilot_analysis_total" in response.text


def test_anonymous_analysis(client: TestClient):
    """Test POST /v1/analysis without user_id: nothing is stored"""
    response = client.post("/v1/analysis", json=STRONG_REQUEST)

    assert response.status_code == 200
    data = response.json()
    assert data["analysis_id"] is None
    assert data["metrics"]["runway_months"] == "stable"
    assert data["metrics"]["debt_ratio"] == 0.08
    assert data["readiness"]["score"] == 100
    assert data["readiness"]["classification"] == "Strong"
    assert data["rejection"]["overall_risk_level"] == "Low"
    assert len(data["roadmap"]["financial_roadmap"]) == 3
    assert data["summary_source"] == "fallback"
    assert data["summary"].startswith("Funding readiness score 100/100")


def test_distressed_analysis(client: TestClient):
    response = client.post("/v1/analysis", json={**DISTRESSED_REQUEST, "funding_amount": 500000})

    assert response.status_code == 200
    data = response.json()
    assert data["metrics"]["runway_months"] == 2.0
    assert data["readiness"]["score"] == 15
    assert data["readiness"]["classification"] == "High Risk"
    assert data["rejection"]["overall_risk_level"] == "High"
    assert data["funding_amount"] == 500000


class TestRemoteSummary:
    @pytest.fixture
    def summary_provider(self, make_summary_provider):
        return make_summary_provider(text="Cash-generative business with low leverage.")

    def test_remote_summary_is_used(self, client: TestClient, summary_provider):
        response = client.post("/v1/analysis", json=STRONG_REQUEST)

        data = response.json()
        assert data["summary"] == "Cash-generative business with low leverage."
        assert data["summary_source"] == "remote"
        assert summary_provider.requests[0].readiness_score == 100


class TestFailingSummary:
    @pytest.fixture
    def summary_provider(self, make_summary_provider):
        return make_summary_provider(fail=True)

    def test_summary_failure_falls_back(self, client: TestClient):
        response = client.post("/v1/analysis", json=STRONG_REQUEST)

        assert response.status_code == 200
        assert response.json()["summary_source"] == "fallback"


@pytest.mark.parametrize(
    "payload",
    [
        {**STRONG_REQUEST, "revenue": -1},
        {**STRONG_REQUEST, "goal": "Buy a yacht"},
        {key: value for key, value in STRONG_REQUEST.items() if key != "cash"},
        {**STRONG_REQUEST, "user_id": ""},
        {**STRONG_REQUEST, "revenue": 1e307},
        {**STRONG_REQUEST, "funding_amount": 1e16},
    ],
)
def test_analysis_validation(client: TestClient, payload):
    response = client.post("/v1/analysis", json=payload)
    assert response.status_code == 422


def test_stored_analysis_round_trip(client: TestClient):
    """Test POST /v1/analysis with user_id, then GET /v1/analysis/{analysis_id}"""
    created = client.post("/v1/analysis", json={**STRONG_REQUEST, "user_id": "msme_001"}).json()
    analysis_id = created["analysis_id"]
    assert analysis_id is not None
    assert created["created_at"] is not None

    response = client.get(f"/v1/analysis/{analysis_id}")

    assert response.status_code == 200
    stored = response.json()
    assert stored["analysis_id"] == analysis_id
    assert stored["readiness"] == created["readiness"]
    assert stored["recommendation"] == created["recommendation"]
    assert stored["summary"] == created["summary"]
    assert stored["summary_source"] is None


def test_get_analysis_not_found(client: TestClient):
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    response = client.get(f"/v1/analysis/{fake_uuid}")
    assert response.status_code == 404


def test_get_analysis_invalid_id(client: TestClient):
    response = client.get("/v1/analysis/not-a-uuid")
    assert response.status_code == 400


def test_get_history_endpoint(client: TestClient):
    """Test GET /v1/analysis/history returns newest first"""
    client.post("/v1/analysis", json={**STRONG_REQUEST, "user_id": "test_user"})
    client.post("/v1/analysis", json={**DISTRESSED_REQUEST, "user_id": "test_user"})
    client.post("/v1/analysis", json={**STRONG_REQUEST, "user_id": "someone_else"})

    response = client.get("/v1/analysis/history?user_id=test_user")

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "test_user"
    assert [item["readiness_score"] for item in data["analyses"]] == [15, 100]
    assert data["analyses"][0]["classification"] == "High Risk"
    assert data["analyses"][0]["goal"] == "Working Capital"


def test_history_requires_user_id(client: TestClient):
    assert client.get("/v1/analysis/history").status_code == 422


def test_delete_analysis(client: TestClient):
    analysis_id = client.post("/v1/analysis", json={**STRONG_REQUEST, "user_id": "msme_002"}).json()["analysis_id"]

    response = client.delete(f"/v1/analysis/{analysis_id}")
    assert response.status_code == 204

    assert client.get(f"/v1/analysis/{analysis_id}").status_code == 404
    assert client.delete(f"/v1/analysis/{analysis_id}").status_code == 404


def test_loan_application_endpoint(client: TestClient):
    response = client.post(
        "/v1/loan-application",
        json={
            "business_name": "Sharma Textiles",
            "industry": "Textile Manufacturing",
            "revenue": 500000,
            "expenses": 350000,
            "cash": 800000,
            "debt": 200000,
            "funding_amount": 1500000,
            "funding_purpose": "Equipment Purchase",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["subject"] == "Application for Business Loan of ₹15,00,000"
    assert data["calculations"]["estimated_emi"] == "₹60,000"
    assert data["calculations"]["is_deficit"] is False
    assert "Dear Sir/Madam" in data["full_letter_text"]


def test_loan_application_deficit(client: TestClient):
    response = client.post(
        "/v1/loan-application",
        json={"revenue": 200000, "expenses": 250000, "funding_amount": 500000},
    )

    data = response.json()
    assert data["business_name"] == "[Business Name]"
    assert data["calculations"]["estimated_emi"] == "Subject to financial restructuring"
    assert "break-even" in data["sections"]["repayment_capability"]


def test_loan_application_rejects_oversized_amounts(client: TestClient):
    response = client.post(
        "/v1/loan-application",
        json={"revenue": 1e307, "expenses": 0, "funding_amount": 500000},
    )
    assert response.status_code == 422
