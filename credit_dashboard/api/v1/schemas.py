"""Pydantic schemas for API request/response validation

Field names are camelCase on the wire; snake_case is accepted on input.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from credit_dashboard.config import settings
from credit_dashboard.domain.models import (
    CreditHistoryEntry,
    CreditMetrics,
    DistributionBucket,
    LoanRecommendation,
    PaymentHistory,
    RecentActivity,
    RecommendationBreakdown,
    UserCreditProfile,
)
from credit_dashboard.utils.date_utils import utc_now
from credit_dashboard.utils.number_utils import finite_or_none

# Inputs accept inf/NaN; outputs send them as null
Number = Annotated[float, PlainSerializer(finite_or_none, return_type=Any)]
Amount = Annotated[Union[int, float], PlainSerializer(finite_or_none, return_type=Any)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaymentHistorySchema(CamelModel):
    on_time: int
    late: int
    missed: int


class CreditHistorySchema(CamelModel):
    """Single historical score/payment record"""

    date: datetime
    credit_score: int
    payment_status: Literal["on-time", "late", "missed"]
    amount: Number
    event: str = ""


class UserProfileSchema(CamelModel):
    """Credit profile as exchanged with the dashboard"""

    id: str = Field(..., min_length=1, description="User identifier")
    name: str
    email: str = ""
    current_credit_score: int
    debt_to_income_ratio: Number
    total_debt: Number
    monthly_income: Number
    payment_history: PaymentHistorySchema
    account_age: int = Field(..., description="Account age in months")
    credit_utilization: Number = Field(..., description="Credit utilization percentage")
    risk_level: Literal["low", "medium", "high"]
    status: Literal["active", "inactive", "flagged"] = "active"
    credit_history: List[CreditHistorySchema] = []
    last_updated: Optional[datetime] = None

    def to_domain(self) -> UserCreditProfile:
        return UserCreditProfile(
            id=self.id,
            name=self.name,
            email=self.email,
            current_credit_score=self.current_credit_score,
            debt_to_income_ratio=self.debt_to_income_ratio,
            total_debt=self.total_debt,
            monthly_income=self.monthly_income,
            payment_history=PaymentHistory(
                on_time=self.payment_history.on_time,
                late=self.payment_history.late,
                missed=self.payment_history.missed,
            ),
            account_age=self.account_age,
            credit_utilization=self.credit_utilization,
            risk_level=self.risk_level,
            status=self.status,
            credit_history=[
                CreditHistoryEntry(
                    date=h.date,
                    credit_score=h.credit_score,
                    payment_status=h.payment_status,
                    amount=h.amount,
                    event=h.event,
                )
                for h in self.credit_history
            ],
            last_updated=self.last_updated,
        )

    @classmethod
    def from_domain(cls, profile: UserCreditProfile) -> "UserProfileSchema":
        return cls(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            current_credit_score=profile.current_credit_score,
            debt_to_income_ratio=profile.debt_to_income_ratio,
            total_debt=profile.total_debt,
            monthly_income=profile.monthly_income,
            payment_history=PaymentHistorySchema(
                on_time=profile.payment_history.on_time,
                late=profile.payment_history.late,
                missed=profile.payment_history.missed,
            ),
            account_age=profile.account_age,
            credit_utilization=profile.credit_utilization,
            risk_level=profile.risk_level,
            status=profile.status,
            credit_history=[
                CreditHistorySchema(
                    date=h.date,
                    credit_score=h.credit_score,
                    payment_status=h.payment_status,
                    amount=h.amount,
                    event=h.event,
                )
                for h in profile.credit_history
            ],
            last_updated=profile.last_updated,
        )


class LoanRecommendationSchema(CamelModel):
    """Loan recommendation; recommendedAmount is absent for rejections"""

    user_id: str
    user_name: str
    recommendation: Literal["approve", "conditional", "reject"]
    recommended_amount: Optional[Amount] = None
    reasoning: List[str] = []
    confidence: int
    risk_factors: List[str] = []
    timestamp: Optional[datetime] = None

    def to_domain(self) -> LoanRecommendation:
        return LoanRecommendation(
            user_id=self.user_id,
            user_name=self.user_name,
            recommendation=self.recommendation,
            recommended_amount=self.recommended_amount,
            reasoning=list(self.reasoning),
            confidence=self.confidence,
            risk_factors=list(self.risk_factors),
            timestamp=self.timestamp or utc_now(),
        )

    @classmethod
    def from_domain(cls, recommendation: LoanRecommendation) -> "LoanRecommendationSchema":
        return cls(
            user_id=recommendation.user_id,
            user_name=recommendation.user_name,
            recommendation=recommendation.recommendation,
            recommended_amount=recommendation.recommended_amount,
            reasoning=recommendation.reasoning,
            confidence=recommendation.confidence,
            risk_factors=recommendation.risk_factors,
            timestamp=recommendation.timestamp,
        )


class RiskDistributionSchema(CamelModel):
    low: int
    medium: int
    high: int


class CreditMetricsSchema(CamelModel):
    """Portfolio-level aggregates"""

    total_users: int
    average_credit_score: int
    approval_rate: int
    total_debt: Number
    average_debt_to_income: Number
    risk_distribution: RiskDistributionSchema

    @classmethod
    def from_domain(cls, metrics: CreditMetrics) -> "CreditMetricsSchema":
        return cls(
            total_users=metrics.total_users,
            average_credit_score=metrics.average_credit_score,
            approval_rate=metrics.approval_rate,
            total_debt=metrics.total_debt,
            average_debt_to_income=metrics.average_debt_to_income,
            risk_distribution=RiskDistributionSchema(
                low=metrics.risk_distribution.low,
                medium=metrics.risk_distribution.medium,
                high=metrics.risk_distribution.high,
            ),
        )


class RecommendationBreakdownSchema(CamelModel):
    approved: int
    conditional: int
    rejected: int

    @classmethod
    def from_domain(cls, breakdown: RecommendationBreakdown) -> "RecommendationBreakdownSchema":
        return cls(
            approved=breakdown.approved,
            conditional=breakdown.conditional,
            rejected=breakdown.rejected,
        )


class DistributionBucketSchema(CamelModel):
    label: str
    count: int

    @classmethod
    def from_domain(cls, bucket: DistributionBucket) -> "DistributionBucketSchema":
        return cls(label=bucket.label, count=bucket.count)


class RecentActivitySchema(CamelModel):
    id: str
    user_id: str
    user_name: str
    type: str
    description: str
    timestamp: datetime
    impact: Optional[str] = None

    @classmethod
    def from_domain(cls, activity: RecentActivity) -> "RecentActivitySchema":
        return cls(
            id=activity.id,
            user_id=activity.user_id,
            user_name=activity.user_name,
            type=activity.type,
            description=activity.description,
            timestamp=activity.timestamp,
            impact=activity.impact,
        )


class GenerateDataRequest(CamelModel):
    """Request body for POST /v1/generate-data"""

    count: int = Field(
        default=settings.default_profile_count,
        ge=1,
        le=settings.max_profile_count,
        description="Number of profiles to generate",
    )


class UsersResponse(CamelModel):
    """Response for profile listings and generation"""

    users: List[UserProfileSchema]


class UserDetailResponse(CamelModel):
    """Response for GET /v1/users/{user_id}"""

    user: UserProfileSchema
    recommendation: LoanRecommendationSchema


class PortfolioRequest(CamelModel):
    """Request body carrying a list of profiles"""

    users: List[UserProfileSchema]

    def to_domain(self) -> List[UserCreditProfile]:
        return [u.to_domain() for u in self.users]


class RecommendationsResponse(CamelModel):
    """Response for POST /v1/recommendations"""

    recommendations: List[LoanRecommendationSchema]


class MetricsResponse(CamelModel):
    """Response for POST /v1/metrics"""

    metrics: CreditMetricsSchema
    breakdown: RecommendationBreakdownSchema
    score_distribution: List[DistributionBucketSchema]


class DashboardResponse(MetricsResponse):
    """Response for GET /v1/dashboard"""

    recent_activity: List[RecentActivitySchema]
    top_risk_users: List[UserProfileSchema]


class RecommendationHistoryItem(CamelModel):
    """Single stored recommendation"""

    recommendation_id: str
    recommendation: str
    recommended_amount: Optional[Amount] = None
    confidence: int
    risk_factors: List[str]
    created_at: str


class RecommendationHistoryResponse(CamelModel):
    """Response for GET /v1/recommendations/history"""

    user_id: str
    recommendations: List[RecommendationHistoryItem]


class UserDataRequest(CamelModel):
    """Request body for single-profile AI insights"""

    user_data: UserProfileSchema


class AdviceRequest(UserDataRequest):
    recommendation: LoanRecommendationSchema


class ExplainRiskRequest(UserDataRequest):
    risk_factors: List[str]


class AnalysisResponse(CamelModel):
    analysis: str


class AdviceResponse(CamelModel):
    advice: str


class ExplanationResponse(CamelModel):
    explanation: str


class PredictionResponse(CamelModel):
    prediction: str


class AnomaliesResponse(CamelModel):
    anomalies: str


class ChatRequest(CamelModel):
    """Request body for POST /v1/ai/chat

    `context` is either {"user": profile, "recommendation": recommendation?}
    or arbitrary portfolio data that is quoted verbatim.
    """

    question: str = Field(..., min_length=1)
    context: Optional[Dict[str, Any]] = None


class ChatResponse(CamelModel):
    answer: str


class ReportRequest(CamelModel):
    """Request body for POST /v1/reports/generate"""

    report_type: str = Field(..., description="credit-score, risk-assessment or financial-action")
    users: List[UserProfileSchema]


class ReportResponse(CamelModel):
    report_type: str
    report: str
