"""Synthetic credit profiles: local generation and normalization of AI output"""

import math
import random
from datetime import datetime
from typing import Any, Dict, List, Optional

from credit_dashboard.domain.models import (
    PAYMENT_STATUSES,
    PROFILE_STATUSES,
    RISK_LEVELS,
    CreditHistoryEntry,
    PaymentHistory,
    UserCreditProfile,
)
from credit_dashboard.utils.date_utils import ensure_utc, subtract_months, utc_now
from credit_dashboard.utils.number_utils import clamp, round_to_cents

FALLBACK_NAMES = [
    "John Smith", "Sarah Johnson", "Michael Brown", "Emily Davis", "David Wilson",
    "Jessica Martinez", "Christopher Anderson", "Amanda Taylor", "Matthew Thomas", "Ashley Jackson",
    "James White", "Lauren Harris", "Robert Martin", "Megan Thompson", "Daniel Garcia",
    "Nicole Rodriguez", "William Lewis", "Stephanie Walker", "Joseph Hall", "Rachel Young",
    "Charles Allen", "Michelle King", "Thomas Wright", "Kimberly Lopez", "Christopher Hill",
    "Jennifer Scott", "Daniel Green", "Lisa Adams", "Mark Baker", "Angela Gonzalez",
    "Paul Nelson", "Samantha Carter", "Steven Mitchell", "Brittany Perez", "Kevin Roberts",
    "Amanda Turner", "Brian Phillips", "Melissa Campbell", "Jason Parker", "Heather Evans",
    "Ryan Edwards", "Tiffany Collins", "Justin Stewart", "Rebecca Sanchez", "Brandon Morris",
    "Crystal Rogers", "Eric Reed", "Danielle Cook", "Kyle Morgan", "Amber Bell",
]

# Weighted draws: repeated entries make a value more likely
STATUS_CHOICES = ["active", "active", "active", "inactive", "flagged"]
PAYMENT_STATUS_CHOICES = ["on-time", "on-time", "on-time", "late", "missed"]


def classify_risk_level(credit_score: int, debt_to_income: float, payment_history: PaymentHistory) -> str:
    """
    Label a generated profile.

    - high:   score < 580, DTI > 0.5 or more than 5 missed payments
    - medium: score < 670, DTI > 0.4 or more than 10 late payments
    - low:    otherwise
    """
    if credit_score < 580 or debt_to_income > 0.5 or payment_history.missed > 5:
        return "high"
    if credit_score < 670 or debt_to_income > 0.4 or payment_history.late > 10:
        return "medium"
    return "low"


def _rand(rng: random.Random, low: int, span: int) -> int:
    """Integer in [low, low + span)"""
    return rng.randrange(span) + low


def _generate_history(rng: random.Random, credit_score: int, now: datetime) -> List[CreditHistoryEntry]:
    months = _rand(rng, 12, 12)
    history = []
    for j in range(months):
        variation = _rand(rng, -25, 50)
        history.append(
            CreditHistoryEntry(
                date=subtract_months(now, months - j),
                credit_score=int(clamp(credit_score + variation, 300, 850)),
                payment_status=rng.choice(PAYMENT_STATUS_CHOICES),
                amount=_rand(rng, 500, 5000),
                event=f"Payment {j + 1}",
            )
        )
    return history


def generate_fallback_profiles(
    count: int,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> List[UserCreditProfile]:
    """Generate `count` profiles locally; pass a seeded rng for reproducible output"""
    rng = rng or random.Random()
    now = now or utc_now()
    users = []

    for i in range(count):
        credit_score = _rand(rng, 300, 550)
        monthly_income = _rand(rng, 3000, 12000)
        total_debt = _rand(rng, 10000, 190000)
        debt_to_income = total_debt / (monthly_income * 12)
        account_age = _rand(rng, 6, 114)
        credit_utilization = _rand(rng, 10, 80)
        payment_history = PaymentHistory(
            on_time=_rand(rng, 10, 90),
            late=rng.randrange(20),
            missed=rng.randrange(10),
        )

        users.append(
            UserCreditProfile(
                id=f"user-{i + 1}",
                name=FALLBACK_NAMES[i % len(FALLBACK_NAMES)],
                email=f"user{i + 1}@example.com",
                current_credit_score=credit_score,
                credit_history=_generate_history(rng, credit_score, now),
                debt_to_income_ratio=round_to_cents(debt_to_income),
                total_debt=total_debt,
                monthly_income=monthly_income,
                payment_history=payment_history,
                account_age=account_age,
                credit_utilization=credit_utilization,
                risk_level=classify_risk_level(credit_score, debt_to_income, payment_history),
                status=rng.choice(STATUS_CHOICES),
                last_updated=now,
            )
        )

    return users


def _number(value: Any, default: float) -> float:
    """Coerce to a finite non-zero float, falling back to `default`"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number) or number == 0:
        return default
    return number


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value:
        return None
    try:
        return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None


def _parse_history(raw_history: Any) -> List[CreditHistoryEntry]:
    if not isinstance(raw_history, list):
        return []

    entries = []
    for item in raw_history:
        if not isinstance(item, dict):
            continue
        date = _parse_datetime(item.get("date"))
        if date is None:
            continue
        status = item.get("paymentStatus")
        entries.append(
            CreditHistoryEntry(
                date=date,
                credit_score=int(_number(item.get("creditScore"), 0)),
                payment_status=status if status in PAYMENT_STATUSES else "on-time",
                amount=_number(item.get("amount"), 0),
                event=str(item.get("event") or ""),
            )
        )
    return entries


def normalize_profile(raw: Dict[str, Any], index: int, now: Optional[datetime] = None) -> UserCreditProfile:
    """
    Turn one AI-generated profile object (camelCase keys) into a domain profile.

    Numeric fields are clamped to the generator's documented ranges; missing,
    zero or non-numeric values take a default. `index` is zero-based and only
    used for default identifiers.
    """
    n = index + 1
    payments = raw.get("paymentHistory")
    payments = payments if isinstance(payments, dict) else {}
    risk_level = raw.get("riskLevel")
    status = raw.get("status")

    return UserCreditProfile(
        id=str(raw.get("id") or f"user-{n}"),
        name=str(raw.get("name") or f"User {n}"),
        email=str(raw.get("email") or f"user{n}@example.com"),
        current_credit_score=int(clamp(_number(raw.get("currentCreditScore"), 650), 300, 850)),
        credit_history=_parse_history(raw.get("creditHistory")),
        debt_to_income_ratio=clamp(_number(raw.get("debtToIncomeRatio"), 0.3), 0.1, 0.8),
        total_debt=clamp(_number(raw.get("totalDebt"), 50000), 10000, 200000),
        monthly_income=clamp(_number(raw.get("monthlyIncome"), 5000), 3000, 15000),
        payment_history=PaymentHistory(
            on_time=int(_number(payments.get("onTime"), 0)),
            late=int(_number(payments.get("late"), 0)),
            missed=int(_number(payments.get("missed"), 0)),
        ),
        account_age=int(clamp(_number(raw.get("accountAge"), 24), 6, 120)),
        credit_utilization=clamp(_number(raw.get("creditUtilization"), 30), 10, 90),
        risk_level=risk_level if risk_level in RISK_LEVELS else "medium",
        status=status if status in PROFILE_STATUSES else "active",
        last_updated=_parse_datetime(raw.get("lastUpdated")) or now or utc_now(),
    )
