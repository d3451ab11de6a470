"""Unit tests for the dashboard activity feed"""

from datetime import datetime, timezone

from credit_dashboard.domain.activity import build_recent_activity
from credit_dashboard.domain.models import CreditHistoryEntry

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def _entry(score, day):
    return CreditHistoryEntry(
        date=datetime(2026, 9, day),
        credit_score=score,
        payment_status="on-time",
        amount=1000,
        event="Payment",
    )


def test_user_without_history_gets_one_item(make_profile):
    activities = build_recent_activity([make_profile()], now=NOW)

    assert len(activities) == 1
    item = activities[0]
    assert item.id == "activity-user-1-rec"
    assert item.type == "recommendation"
    assert item.description == "Loan increment approve for Test User"
    assert item.impact == "positive"
    assert item.timestamp == NOW


def test_score_change_uses_latest_history_entry(make_profile):
    user = make_profile(credit_history=[_entry(700, 1), _entry(790, 15)])

    activities = build_recent_activity([user], now=NOW)

    score_item = activities[1]
    assert score_item.id == "activity-user-1-score"
    assert score_item.description == "Credit score updated to 790"
    assert score_item.timestamp == datetime(2026, 9, 15, tzinfo=timezone.utc)
    # history score above the current 780
    assert score_item.impact == "positive"


def test_score_change_impact(make_profile):
    lower = make_profile(id="a", credit_history=[_entry(700, 1)])
    equal = make_profile(id="b", credit_history=[_entry(780, 2)])

    impacts = {a.id: a.impact for a in build_recent_activity([lower, equal], now=NOW)}

    assert impacts["activity-a-score"] == "negative"
    assert impacts["activity-b-score"] == "neutral"


def test_recommendation_impact_by_decision(make_profile):
    users = [
        make_profile(id="ok"),
        make_profile(id="maybe", risk_level="medium"),
        make_profile(id="no", risk_level="high"),
    ]

    impacts = {a.user_id: a.impact for a in build_recent_activity(users, now=NOW)}

    assert impacts == {"ok": "positive", "maybe": "neutral", "no": "negative"}


def test_feed_is_newest_first_and_limited(make_profile):
    users = [make_profile(id=f"u{i}", credit_history=[_entry(700, i + 1)]) for i in range(5)]

    activities = build_recent_activity(users, limit=3, now=NOW)

    assert len(activities) == 6
    timestamps = [a.timestamp for a in activities]
    assert timestamps == sorted(timestamps, reverse=True)
    assert {a.user_id for a in activities} == {"u0", "u1", "u2"}
    assert activities[3].id == "activity-u2-score"
