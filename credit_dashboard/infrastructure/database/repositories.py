"""Data access layer for portfolio profiles and recommendations"""

from datetime import datetime
from typing import Any, Dict, List, Sequence
from sqlalchemy.orm import Session
from credit_dashboard.infrastructure.database.models import CreditProfileRecord, RecommendationRecord
from credit_dashboard.domain.exceptions import ProfileNotFoundError
from credit_dashboard.domain.models import (
    CreditHistoryEntry,
    LoanRecommendation,
    PaymentHistory,
    UserCreditProfile,
)


def profile_to_payload(profile: UserCreditProfile) -> Dict[str, Any]:
    """Serialize a profile to a JSON-compatible dict"""
    return {
        "id": profile.id,
        "name": profile.name,
        "email": profile.email,
        "current_credit_score": profile.current_credit_score,
        "debt_to_income_ratio": profile.debt_to_income_ratio,
        "total_debt": profile.total_debt,
        "monthly_income": profile.monthly_income,
        "payment_history": {
            "on_time": profile.payment_history.on_time,
            "late": profile.payment_history.late,
            "missed": profile.payment_history.missed,
        },
        "account_age": profile.account_age,
        "credit_utilization": profile.credit_utilization,
        "risk_level": profile.risk_level,
        "status": profile.status,
        "credit_history": [
            {
                "date": entry.date.isoformat(),
                "credit_score": entry.credit_score,
                "payment_status": entry.payment_status,
                "amount": entry.amount,
                "event": entry.event,
            }
            for entry in profile.credit_history
        ],
        "last_updated": profile.last_updated.isoformat() if profile.last_updated else None,
    }


def profile_from_payload(payload: Dict[str, Any]) -> UserCreditProfile:
    """Inverse of profile_to_payload"""
    last_updated = payload.get("last_updated")
    return UserCreditProfile(
        id=payload["id"],
        name=payload["name"],
        email=payload.get("email", ""),
        current_credit_score=payload["current_credit_score"],
        debt_to_income_ratio=payload["debt_to_income_ratio"],
        total_debt=payload["total_debt"],
        monthly_income=payload["monthly_income"],
        payment_history=PaymentHistory(**payload["payment_history"]),
        account_age=payload["account_age"],
        credit_utilization=payload["credit_utilization"],
        risk_level=payload["risk_level"],
        status=payload.get("status", "active"),
        credit_history=[
            CreditHistoryEntry(
                date=datetime.fromisoformat(entry["date"]),
                credit_score=entry["credit_score"],
                payment_status=entry["payment_status"],
                amount=entry["amount"],
                event=entry["event"],
            )
            for entry in payload.get("credit_history", [])
        ],
        last_updated=datetime.fromisoformat(last_updated) if last_updated else None,
    )


class ProfileRepository:
    """Repository for the current portfolio snapshot"""

    def __init__(self, db: Session):
        self.db = db

    def replace_portfolio(self, profiles: Sequence[UserCreditProfile]) -> None:
        """Swap the stored portfolio for `profiles`; later duplicates of an id win"""
        self.db.query(CreditProfileRecord).delete()
        records: Dict[str, CreditProfileRecord] = {}
        for position, profile in enumerate(profiles):
            records[profile.id] = CreditProfileRecord(
                user_id=profile.id,
                position=position,
                name=profile.name,
                credit_score=profile.current_credit_score,
                risk_level=profile.risk_level,
                payload=profile_to_payload(profile),
            )
        self.db.add_all(records.values())
        self.db.flush()

    def list_profiles(self) -> List[UserCreditProfile]:
        """Stored profiles in generation order"""
        records = self.db.query(CreditProfileRecord).order_by(CreditProfileRecord.position).all()
        return [profile_from_payload(r.payload) for r in records]

    def get_profile(self, user_id: str) -> UserCreditProfile:
        """
        Raises:
            ProfileNotFoundError: If no profile with this id is stored
        """
        record = self.db.get(CreditProfileRecord, user_id)
        if record is None:
            raise ProfileNotFoundError(f"Profile not found: {user_id}")
        return profile_from_payload(record.payload)


class RecommendationRepository:
    """Repository for served loan recommendations"""

    def __init__(self, db: Session):
        self.db = db

    def create_recommendation(self, recommendation: LoanRecommendation) -> RecommendationRecord:
        """Persist a recommendation to the history"""
        record = RecommendationRecord(
            user_id=recommendation.user_id,
            recommendation=recommendation.recommendation,
            recommended_amount=recommendation.recommended_amount,
            confidence=recommendation.confidence,
            reasoning=list(recommendation.reasoning),
            risk_factors=list(recommendation.risk_factors),
            evaluated_at=recommendation.timestamp,
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return record

    def get_recommendations_by_user(self, user_id: str, limit: int = 10) -> List[RecommendationRecord]:
        """Fetch recent recommendations for a user"""
        return (
            self.db.query(RecommendationRecord)
            .filter(RecommendationRecord.user_id == user_id)
            .order_by(RecommendationRecord.created_at.desc(), RecommendationRecord.evaluated_at.desc())
            .limit(limit)
            .all()
        )
