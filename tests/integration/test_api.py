"""Integration tests for API endpoints"""

import json

import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from credit_dashboard.infrastructure.clients.profiles import ProfileGenerator

pytestmark = pytest.mark.integration


@pytest.fixture
def weak_payload(profile_payload):
    """Profile that every rejection rule fires on"""
    return profile_payload(
        id="user-2",
        name="Weak User",
        currentCreditScore=560,
        debtToIncomeRatio=0.55,
        paymentHistory={"onTime": 40, "late": 30, "missed": 10},
        creditUtilization=85,
        accountAge=36,
        riskLevel="high",
        creditHistory=[],
    )


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "credit_recommendation_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    minted = client.get("/health")
    assert minted.headers["X-Request-ID"]


class TestPortfolio:
    def test_generate_data_falls_back_on_unusable_ai_output(self, client: TestClient):
        """The scripted AI reply is prose, so profiles come from the local generator"""
        response = client.get("/v1/generate-data", params={"count": 5})

        assert response.status_code == 200
        users = response.json()["users"]
        assert [u["id"] for u in users] == [f"user-{i}" for i in range(1, 6)]
        assert "currentCreditScore" in users[0]
        assert "paymentHistory" in users[0]

    def test_generate_data_uses_ai_profiles(self, client: TestClient, fake_ai):
        fake_ai.content = '[{"id": "ai-1", "name": "Ada Lovelace", "currentCreditScore": 760, "riskLevel": "low"}]'

        response = client.post("/v1/generate-data", json={"count": 1})

        assert response.status_code == 200
        assert response.json()["users"][0]["name"] == "Ada Lovelace"
        assert "Generate exactly 1 realistic" in fake_ai.last_user_prompt

    def test_generate_data_default_body(self, client: TestClient, fake_ai):
        response = client.post("/v1/generate-data")

        assert response.status_code == 200
        assert len(response.json()["users"]) == 50

    @pytest.mark.parametrize("count", [0, 201])
    def test_generate_data_validates_count(self, client: TestClient, count):
        assert client.get("/v1/generate-data", params={"count": count}).status_code == 422
        assert client.post("/v1/generate-data", json={"count": count}).status_code == 422

    @patch.object(ProfileGenerator, "generate", new_callable=AsyncMock)
    def test_generate_data_failure(self, mock_generate: AsyncMock, client: TestClient):
        mock_generate.side_effect = RuntimeError("disk full")

        response = client.get("/v1/generate-data", params={"count": 3})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to generate data"

    def test_users_are_stored_in_generation_order(self, client: TestClient):
        generated = client.get("/v1/generate-data", params={"count": 4}).json()["users"]

        response = client.get("/v1/users")

        assert response.status_code == 200
        assert [u["id"] for u in response.json()["users"]] == [u["id"] for u in generated]

    def test_regeneration_replaces_portfolio(self, client: TestClient):
        client.get("/v1/generate-data", params={"count": 6})
        client.get("/v1/generate-data", params={"count": 2})

        assert len(client.get("/v1/users").json()["users"]) == 2

    def test_get_user_with_recommendation(self, client: TestClient):
        client.get("/v1/generate-data", params={"count": 3})

        response = client.get("/v1/users/user-2")

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == "user-2"
        assert data["recommendation"]["userId"] == "user-2"
        assert data["recommendation"]["recommendation"] in ("approve", "conditional", "reject")

    def test_get_unknown_user(self, client: TestClient):
        response = client.get("/v1/users/nobody")

        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"

    def test_empty_dashboard(self, client: TestClient):
        response = client.get("/v1/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["metrics"]["totalUsers"] == 0
        assert data["metrics"]["approvalRate"] == 0
        assert data["breakdown"] == {"approved": 0, "conditional": 0, "rejected": 0}
        assert [b["count"] for b in data["scoreDistribution"]] == [0, 0, 0, 0, 0]
        assert data["recentActivity"] == []
        assert data["topRiskUsers"] == []

    def test_dashboard_summarizes_stored_portfolio(self, client: TestClient):
        client.get("/v1/generate-data", params={"count": 5})

        data = client.get("/v1/dashboard").json()

        assert data["metrics"]["totalUsers"] == 5
        breakdown = data["breakdown"]
        assert breakdown["approved"] + breakdown["conditional"] + breakdown["rejected"] == 5
        assert sum(b["count"] for b in data["scoreDistribution"]) == 5
        risk = data["metrics"]["riskDistribution"]
        assert risk["low"] + risk["medium"] + risk["high"] == 5
        # every generated user has history, so each contributes two items
        assert len(data["recentActivity"]) == 10
        assert data["recentActivity"][0]["type"] == "recommendation"
        assert len(data["topRiskUsers"]) <= 5
        assert all(u["riskLevel"] == "high" for u in data["topRiskUsers"])

    def test_dashboard_lists_riskiest_users(self, client: TestClient, fake_ai):
        scores = [640, 420, 700, 510, 380, 600, 455]
        profiles = [
            {"id": f"r{i}", "name": f"Risky {i}", "currentCreditScore": s, "riskLevel": "high"}
            for i, s in enumerate(scores)
        ]
        profiles.append({"id": "safe", "name": "Safe", "currentCreditScore": 350, "riskLevel": "low"})
        fake_ai.content = json.dumps(profiles)
        client.get("/v1/generate-data", params={"count": len(profiles)})

        top = client.get("/v1/dashboard").json()["topRiskUsers"]

        assert [u["currentCreditScore"] for u in top] == [380, 420, 455, 510, 600]
        assert "safe" not in [u["id"] for u in top]


class TestRecommendations:
    def test_scores_each_user_in_order(self, client: TestClient, profile_payload, weak_payload):
        response = client.post("/v1/recommendations", json={"users": [profile_payload(), weak_payload]})

        assert response.status_code == 200
        approved, rejected = response.json()["recommendations"]

        assert approved["userId"] == "user-1"
        assert approved["recommendation"] == "approve"
        assert approved["recommendedAmount"] == 2500
        assert approved["confidence"] == 100
        assert approved["riskFactors"] == []

        assert rejected["userId"] == "user-2"
        assert rejected["recommendation"] == "reject"
        assert "recommendedAmount" not in rejected
        assert rejected["confidence"] == -35
        assert "High risk profile" in rejected["riskFactors"]

    def test_snake_case_input_is_accepted(self, client: TestClient, profile_payload):
        body = profile_payload()
        body["current_credit_score"] = body.pop("currentCreditScore")

        response = client.post("/v1/recommendations", json={"users": [body]})

        assert response.status_code == 200

    def test_invalid_profile(self, client: TestClient, profile_payload):
        response = client.post("/v1/recommendations", json={"users": [profile_payload(riskLevel="extreme")]})

        assert response.status_code == 422

    def test_history(self, client: TestClient, profile_payload, weak_payload):
        client.post("/v1/recommendations", json={"users": [profile_payload()]})
        client.post("/v1/recommendations", json={"users": [profile_payload(), weak_payload]})

        response = client.get("/v1/recommendations/history", params={"user_id": "user-1"})

        assert response.status_code == 200
        data = response.json()
        assert data["userId"] == "user-1"
        assert len(data["recommendations"]) == 2
        item = data["recommendations"][0]
        assert item["recommendation"] == "approve"
        assert item["recommendedAmount"] == 2500
        assert item["recommendationId"]
        assert item["createdAt"]

    def test_history_of_reject_has_no_amount(self, client: TestClient, weak_payload):
        client.post("/v1/recommendations", json={"users": [weak_payload]})

        item = client.get("/v1/recommendations/history", params={"user_id": "user-2"}).json()["recommendations"][0]

        assert item["recommendation"] == "reject"
        assert "recommendedAmount" not in item

    def test_portfolio_metrics(self, client: TestClient, profile_payload, weak_payload):
        response = client.post("/v1/metrics", json={"users": [profile_payload(), weak_payload]})

        assert response.status_code == 200
        data = response.json()
        assert data["metrics"] == {
            "totalUsers": 2,
            "averageCreditScore": 670,
            "approvalRate": 50,
            "totalDebt": 90000.0,
            "averageDebtToIncome": 0.4,
            "riskDistribution": {"low": 1, "medium": 0, "high": 1},
        }
        assert data["breakdown"] == {"approved": 1, "conditional": 0, "rejected": 1}

    def test_empty_portfolio_metrics(self, client: TestClient):
        data = client.post("/v1/metrics", json={"users": []}).json()

        assert data["metrics"]["totalUsers"] == 0
        assert data["metrics"]["averageCreditScore"] == 0

    def test_infinite_income_is_scored(self, client: TestClient, profile_payload):
        body = json.dumps({"users": [profile_payload(monthlyIncome=float("inf"))]})

        response = client.post("/v1/recommendations", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 200
        rec = response.json()["recommendations"][0]
        assert rec["recommendation"] == "approve"
        assert rec.get("recommendedAmount") is None
        assert rec["confidence"] == 100

    def test_nan_debt_to_income_metrics(self, client: TestClient, profile_payload):
        body = json.dumps({"users": [profile_payload(debtToIncomeRatio=float("nan"))]})

        response = client.post("/v1/metrics", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 200
        metrics = response.json()["metrics"]
        assert metrics["totalUsers"] == 1
        assert metrics["averageDebtToIncome"] is None


class TestInsights:
    def test_analyze(self, client: TestClient, fake_ai, profile_payload):
        response = client.post("/v1/ai/analyze", json={"userData": profile_payload()})

        assert response.status_code == 200
        assert response.json() == {"analysis": "Generated commentary."}
        assert "- Name: Test User" in fake_ai.last_user_prompt
        assert fake_ai.requests[-1]["headers"]["api-key"] == "test-key"

    def test_empty_reply_uses_fallback_text(self, client: TestClient, fake_ai, profile_payload):
        fake_ai.content = ""

        response = client.post("/v1/ai/predict", json={"userData": profile_payload()})

        assert response.json() == {"prediction": "Unable to generate prediction at this time."}

    def test_ai_failure_is_503(self, client: TestClient, fake_ai, profile_payload):
        fake_ai.status_code = 500

        response = client.post("/v1/ai/anomalies", json={"userData": profile_payload()})

        assert response.status_code == 503
        assert response.json()["detail"] == "AI service unavailable"

    def test_advice(self, client: TestClient, fake_ai, profile_payload):
        recommendation = {
            "userId": "user-1",
            "userName": "Test User",
            "recommendation": "conditional",
            "recommendedAmount": 1500,
            "reasoning": ["Fair credit score"],
            "confidence": 45,
            "riskFactors": ["Medium risk profile"],
        }

        response = client.post("/v1/ai/advice", json={"userData": profile_payload(), "recommendation": recommendation})

        assert response.status_code == 200
        assert response.json()["advice"] == "Generated commentary."
        assert "- Recommended Amount: $1,500" in fake_ai.last_user_prompt

    def test_explain_risk(self, client: TestClient, fake_ai, profile_payload):
        response = client.post(
            "/v1/ai/explain-risk",
            json={"userData": profile_payload(), "riskFactors": ["High debt burden"]},
        )

        assert response.status_code == 200
        assert "explanation" in response.json()
        assert "1. High debt burden" in fake_ai.last_user_prompt

    def test_chat_with_user_context(self, client: TestClient, fake_ai, profile_payload):
        response = client.post(
            "/v1/ai/chat",
            json={"question": "Can this user borrow more?", "context": {"user": profile_payload()}},
        )

        assert response.status_code == 200
        assert response.json() == {"answer": "Generated commentary."}
        assert "**User Profile Context:**" in fake_ai.last_user_prompt
        assert fake_ai.requests[-1]["body"]["max_tokens"] == 1000

    def test_chat_with_generic_context(self, client: TestClient, fake_ai):
        response = client.post("/v1/ai/chat", json={"question": "Summarize", "context": {"totalUsers": 3}})

        assert response.status_code == 200
        assert "**Context Data:**" in fake_ai.last_user_prompt

    def test_chat_with_invalid_user_context(self, client: TestClient, fake_ai):
        response = client.post("/v1/ai/chat", json={"question": "Why?", "context": {"user": {"id": "x"}}})

        assert response.status_code == 422
        assert fake_ai.requests == []

    def test_chat_requires_question(self, client: TestClient):
        assert client.post("/v1/ai/chat", json={"question": ""}).status_code == 422


class TestReports:
    def test_generate_report(self, client: TestClient, fake_ai, profile_payload, weak_payload):
        fake_ai.content = "# Risk Assessment\n..."

        response = client.post(
            "/v1/reports/generate",
            json={"reportType": "risk-assessment", "users": [profile_payload(), weak_payload]},
        )

        assert response.status_code == 200
        assert response.json() == {"reportType": "risk-assessment", "report": "# Risk Assessment\n..."}
        assert "High-Risk User 1:\n- Name: Weak User" in fake_ai.last_user_prompt
        assert fake_ai.requests[-1]["body"]["max_tokens"] == 4000

    def test_unknown_report_type(self, client: TestClient, fake_ai, profile_payload):
        response = client.post("/v1/reports/generate", json={"reportType": "quarterly", "users": [profile_payload()]})

        assert response.status_code == 400
        assert fake_ai.requests == []

    def test_report_ai_failure(self, client: TestClient, fake_ai, profile_payload):
        fake_ai.status_code = 503

        response = client.post("/v1/reports/generate", json={"reportType": "credit-score", "users": [profile_payload()]})

        assert response.status_code == 503
