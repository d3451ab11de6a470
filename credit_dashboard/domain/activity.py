"""Recent activity feed derived from a portfolio"""

from datetime import datetime
from typing import List, Optional, Sequence

from credit_dashboard.domain.models import APPROVE, REJECT, RecentActivity, UserCreditProfile
from credit_dashboard.domain.scoring import generate_recommendation
from credit_dashboard.utils.date_utils import ensure_utc, utc_now

IMPACT_BY_DECISION = {APPROVE: "positive", REJECT: "negative"}


def _score_impact(history_score: int, current_score: int) -> str:
    if history_score > current_score:
        return "positive"
    if history_score < current_score:
        return "negative"
    return "neutral"


def build_recent_activity(
    users: Sequence[UserCreditProfile],
    limit: int = 20,
    now: Optional[datetime] = None,
) -> List[RecentActivity]:
    """
    Build the dashboard activity feed for the first `limit` users.

    Each user contributes a recommendation item and, when they have credit
    history, a score change item taken from the latest history entry.
    Items are returned newest first.
    """
    now = now or utc_now()
    activities: List[RecentActivity] = []

    for user in users[:limit]:
        recommendation = generate_recommendation(user, now=now)
        activities.append(
            RecentActivity(
                id=f"activity-{user.id}-rec",
                user_id=user.id,
                user_name=user.name,
                type="recommendation",
                description=f"Loan increment {recommendation.recommendation} for {user.name}",
                timestamp=now,
                impact=IMPACT_BY_DECISION.get(recommendation.recommendation, "neutral"),
            )
        )

        if user.credit_history:
            latest = user.credit_history[-1]
            activities.append(
                RecentActivity(
                    id=f"activity-{user.id}-score",
                    user_id=user.id,
                    user_name=user.name,
                    type="score_change",
                    description=f"Credit score updated to {latest.credit_score}",
                    timestamp=ensure_utc(latest.date),
                    impact=_score_impact(latest.credit_score, user.current_credit_score),
                )
            )

    # Stable sort keeps user order for equal timestamps
    activities.sort(key=lambda a: a.timestamp, reverse=True)
    return activities
