"""Pytest fixtures for testing"""

import json
from typing import Any, Callable, Dict, Generator, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from credit_dashboard.api.main import create_app
from credit_dashboard.api.dependencies import get_ai_client
from credit_dashboard.domain.models import PaymentHistory, UserCreditProfile
from credit_dashboard.infrastructure.clients.ai import AIClient
from credit_dashboard.infrastructure.database.models import Base
from credit_dashboard.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_AI_ENDPOINT = "https://ai.test/openai/deployments/chat/completions"


class FakeAI:
    """Scripted chat-completion endpoint backed by httpx.MockTransport"""

    def __init__(self):
        self.content: Optional[str] = "Generated commentary."
        self.status_code = 200
        self.requests: List[Dict[str, Any]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append({"headers": dict(request.headers), "body": json.loads(request.content)})
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "boom"})
        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": self.content}}]})

    def client(self) -> AIClient:
        return AIClient(
            endpoint=TEST_AI_ENDPOINT,
            api_key="test-key",
            transport=httpx.MockTransport(self.handler),
        )

    @property
    def last_user_prompt(self) -> str:
        return self.requests[-1]["body"]["messages"][-1]["content"]


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
def fake_ai() -> FakeAI:
    return FakeAI()


@pytest.fixture
def client(db: Session, fake_ai: FakeAI) -> TestClient:
    """Create FastAPI test client with test database and scripted AI endpoint"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_client] = fake_ai.client
    return TestClient(app)


@pytest.fixture
def make_profile() -> Callable[..., UserCreditProfile]:
    """Factory for a strong profile; override any field by keyword"""

    def _make(**overrides) -> UserCreditProfile:
        fields = dict(
            id="user-1",
            name="Test User",
            email="test@example.com",
            current_credit_score=780,
            debt_to_income_ratio=0.25,
            total_debt=45000,
            monthly_income=5000,
            payment_history=PaymentHistory(on_time=95, late=3, missed=0),
            account_age=72,
            credit_utilization=20,
            risk_level="low",
        )
        fields.update(overrides)
        return UserCreditProfile(**fields)

    return _make


@pytest.fixture
def profile_payload() -> Callable[..., Dict[str, Any]]:
    """Factory for a camelCase profile body as sent by the dashboard"""

    def _payload(**overrides) -> Dict[str, Any]:
        body = {
            "id": "user-1",
            "name": "Test User",
            "email": "test@example.com",
            "currentCreditScore": 780,
            "debtToIncomeRatio": 0.25,
            "totalDebt": 45000,
            "monthlyIncome": 5000,
            "paymentHistory": {"onTime": 95, "late": 3, "missed": 0},
            "accountAge": 72,
            "creditUtilization": 20,
            "riskLevel": "low",
            "status": "active",
            "creditHistory": [
                {
                    "date": "2026-08-01T00:00:00+00:00",
                    "creditScore": 770,
                    "paymentStatus": "on-time",
                    "amount": 1200,
                    "event": "Payment 1",
                },
                {
                    "date": "2026-09-01T00:00:00+00:00",
                    "creditScore": 775,
                    "paymentStatus": "late",
                    "amount": 900,
                    "event": "Payment 2",
                },
            ],
        }
        body.update(overrides)
        return body

    return _payload
