"""Portfolio aggregation over user profiles and their recommendations"""

from typing import List, Optional, Sequence

from credit_dashboard.domain.models import (
    APPROVE,
    CONDITIONAL,
    REJECT,
    CreditMetrics,
    DistributionBucket,
    LoanRecommendation,
    RecommendationBreakdown,
    RiskDistribution,
    UserCreditProfile,
)
from credit_dashboard.domain.scoring import generate_recommendation
from credit_dashboard.utils.number_utils import round_half_up, round_to_cents

# (label, inclusive lower bound, exclusive upper bound)
SCORE_RANGES = [
    ("300-579", None, 580),
    ("580-669", 580, 670),
    ("670-739", 670, 740),
    ("740-799", 740, 800),
    ("800-850", 800, None),
]

CREDIT_GRADES = [
    ("Excellent (750+)", 750, None),
    ("Good (700-749)", 700, 750),
    ("Fair (650-699)", 650, 700),
    ("Poor (<650)", None, 650),
]


def calculate_metrics(users: Sequence[UserCreditProfile]) -> CreditMetrics:
    """
    Reduce a portfolio to its headline metrics.

    Every user is scored once to derive the approval rate. An empty
    portfolio yields all-zero metrics.
    """
    total_users = len(users)
    if total_users == 0:
        return CreditMetrics(
            total_users=0,
            average_credit_score=0,
            approval_rate=0,
            total_debt=0,
            average_debt_to_income=0,
            risk_distribution=RiskDistribution(),
        )

    total_score = sum(u.current_credit_score for u in users)
    recommendations = [generate_recommendation(u) for u in users]
    approved = sum(1 for r in recommendations if r.recommendation == APPROVE)
    total_dti = sum(u.debt_to_income_ratio for u in users)

    return CreditMetrics(
        total_users=total_users,
        average_credit_score=round_half_up(total_score / total_users),
        approval_rate=round_half_up(approved / total_users * 100),
        total_debt=sum(u.total_debt for u in users),
        average_debt_to_income=round_to_cents(total_dti / total_users),
        risk_distribution=RiskDistribution(
            low=sum(1 for u in users if u.risk_level == "low"),
            medium=sum(1 for u in users if u.risk_level == "medium"),
            high=sum(1 for u in users if u.risk_level == "high"),
        ),
    )


def summarize_recommendations(recommendations: Sequence[LoanRecommendation]) -> RecommendationBreakdown:
    """Count recommendations per decision"""
    return RecommendationBreakdown(
        approved=sum(1 for r in recommendations if r.recommendation == APPROVE),
        conditional=sum(1 for r in recommendations if r.recommendation == CONDITIONAL),
        rejected=sum(1 for r in recommendations if r.recommendation == REJECT),
    )


def _in_range(score: int, lower: Optional[int], upper: Optional[int]) -> bool:
    return (lower is None or score >= lower) and (upper is None or score < upper)


def _bucket(users: Sequence[UserCreditProfile], ranges) -> List[DistributionBucket]:
    return [
        DistributionBucket(
            label=label,
            count=sum(1 for u in users if _in_range(u.current_credit_score, lower, upper)),
        )
        for label, lower, upper in ranges
    ]


def credit_score_distribution(users: Sequence[UserCreditProfile]) -> List[DistributionBucket]:
    """Histogram of current scores using the dashboard's chart ranges"""
    return _bucket(users, SCORE_RANGES)


def credit_grade_distribution(users: Sequence[UserCreditProfile]) -> List[DistributionBucket]:
    """Users per credit grade, as quoted in the financial action report"""
    return _bucket(users, CREDIT_GRADES)


def top_risk_users(users: Sequence[UserCreditProfile], limit: int = 5) -> List[UserCreditProfile]:
    """High-risk users with the lowest scores first, at most `limit`"""
    high_risk = [u for u in users if u.risk_level == "high"]
    return sorted(high_risk, key=lambda u: u.current_credit_score)[:limit]
