"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

APPROVE = "approve"
CONDITIONAL = "conditional"
REJECT = "reject"

RISK_LEVELS = ("low", "medium", "high")
PROFILE_STATUSES = ("active", "inactive", "flagged")
PAYMENT_STATUSES = ("on-time", "late", "missed")


@dataclass(frozen=True)
class PaymentHistory:
    """Payment counts reported for a user"""

    on_time: int
    late: int
    missed: int

    @property
    def total(self) -> int:
        return self.on_time + self.late + self.missed


@dataclass(frozen=True)
class CreditHistoryEntry:
    """One historical score/payment record"""

    date: datetime
    credit_score: int
    payment_status: str  # "on-time", "late" or "missed"
    amount: float
    event: str


@dataclass(frozen=True)
class UserCreditProfile:
    """Credit attributes of a single user, supplied by the data generator"""

    id: str
    name: str
    current_credit_score: int
    debt_to_income_ratio: float
    total_debt: float
    monthly_income: float
    payment_history: PaymentHistory
    account_age: int  # months
    credit_utilization: float  # percentage
    risk_level: str  # "low", "medium" or "high"
    email: str = ""
    status: str = "active"
    credit_history: List[CreditHistoryEntry] = field(default_factory=list)
    last_updated: Optional[datetime] = None


@dataclass
class LoanRecommendation:
    """Output of the scoring engine for one user"""

    user_id: str
    user_name: str
    recommendation: str  # "approve", "conditional" or "reject"
    recommended_amount: Optional[Union[int, float]]  # None when rejected; inf/NaN income passes through
    reasoning: List[str]
    confidence: int
    risk_factors: List[str]
    timestamp: datetime


@dataclass
class RiskDistribution:
    """User counts per upstream risk label"""

    low: int = 0
    medium: int = 0
    high: int = 0


@dataclass
class CreditMetrics:
    """Portfolio-level aggregates"""

    total_users: int
    average_credit_score: int
    approval_rate: int
    total_debt: float
    average_debt_to_income: float
    risk_distribution: RiskDistribution


@dataclass
class RecommendationBreakdown:
    """Recommendation counts per decision"""

    approved: int = 0
    conditional: int = 0
    rejected: int = 0


@dataclass
class DistributionBucket:
    """Named range of credit scores and how many users fall into it"""

    label: str
    count: int


@dataclass
class RecentActivity:
    """Dashboard activity feed item"""

    id: str
    user_id: str
    user_name: str
    type: str  # "recommendation" or "score_change"
    description: str
    timestamp: datetime
    impact: Optional[str] = None  # "positive", "negative" or "neutral"
