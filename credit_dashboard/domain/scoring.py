"""Loan recommendation engine - core business logic for credit increments

The evaluation is an ordered pipeline of pure steps over an immutable
ScoringState. Each step may only move the recommendation towards a worse
outcome (approve -> conditional -> reject); a reject is never undone.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional, Tuple

from credit_dashboard.domain.models import (
    APPROVE,
    CONDITIONAL,
    REJECT,
    LoanRecommendation,
    UserCreditProfile,
)
from credit_dashboard.utils.date_utils import utc_now
from credit_dashboard.utils.number_utils import clamp, round_half_up


@dataclass(frozen=True)
class ScoringState:
    """Accumulator threaded through the scoring steps"""

    recommendation: str = APPROVE
    amount: float = 0.0
    confidence: int = 100
    reasoning: Tuple[str, ...] = ()
    risk_factors: Tuple[str, ...] = ()

    def advance(self, reason: Optional[str] = None, risk: Optional[str] = None, **changes) -> "ScoringState":
        """Return a new state with the reason/risk appended and the given fields replaced"""
        reasoning = self.reasoning + (reason,) if reason else self.reasoning
        risk_factors = self.risk_factors + (risk,) if risk else self.risk_factors
        return replace(self, reasoning=reasoning, risk_factors=risk_factors, **changes)

    def soften(self) -> str:
        """approve -> conditional; conditional and reject are kept"""
        return CONDITIONAL if self.recommendation == APPROVE else self.recommendation

    def restrict(self) -> str:
        """Anything but reject becomes conditional"""
        return self.recommendation if self.recommendation == REJECT else CONDITIONAL


ScoringStep = Callable[[UserCreditProfile, ScoringState], ScoringState]


def assess_credit_score(user: UserCreditProfile, state: ScoringState) -> ScoringState:
    """
    Credit score tiers, evaluated high to low.

    - 750+:    amount = 50% of monthly income
    - 700-749: amount = 40%
    - 650-699: amount = 30%, conditional, -20 confidence
    - 580-649: amount = 20%, conditional, -40 confidence
    - <580:    reject, confidence set to 20
    """
    score = user.current_credit_score
    income = user.monthly_income

    if score >= 750:
        return state.advance("Excellent credit score", amount=income * 0.5)
    elif score >= 700:
        return state.advance("Good credit score", amount=income * 0.4)
    elif score >= 650:
        return state.advance(
            "Fair credit score",
            amount=income * 0.3,
            recommendation=CONDITIONAL,
            confidence=state.confidence - 20,
        )
    elif score >= 580:
        return state.advance(
            "Below average credit score",
            "Low credit score",
            amount=income * 0.2,
            recommendation=CONDITIONAL,
            confidence=state.confidence - 40,
        )
    else:
        return state.advance(
            "Poor credit score",
            "Very low credit score",
            recommendation=REJECT,
            confidence=20,
        )


def assess_debt_to_income(user: UserCreditProfile, state: ScoringState) -> ScoringState:
    """Debt-to-income bands: <0.3, <0.4, <0.5, and 0.5+ (reject)"""
    ratio = user.debt_to_income_ratio

    if ratio < 0.3:
        return state.advance(
            "Low debt-to-income ratio",
            amount=max(state.amount, user.monthly_income * 0.3),
        )
    elif ratio < 0.4:
        return state.advance("Moderate debt-to-income ratio", confidence=state.confidence - 10)
    elif ratio < 0.5:
        return state.advance(
            "High debt-to-income ratio",
            "High debt burden",
            amount=state.amount * 0.7,
            confidence=state.confidence - 20,
            recommendation=state.soften(),
        )
    else:
        return state.advance(
            "Very high debt-to-income ratio",
            "Excessive debt burden",
            recommendation=REJECT,
            confidence=min(state.confidence, 30),
        )


def on_time_rate(user: UserCreditProfile) -> float:
    """Share of on-time payments; 0 when no payments are recorded"""
    total = user.payment_history.total
    return user.payment_history.on_time / total if total > 0 else 0.0


def assess_payment_history(user: UserCreditProfile, state: ScoringState) -> ScoringState:
    """On-time payment rate bands: 95%+, 85%+, 70%+, below 70%"""
    rate = on_time_rate(user)

    if rate >= 0.95:
        return state.advance("Excellent payment history")
    elif rate >= 0.85:
        return state.advance("Good payment history", confidence=state.confidence - 5)
    elif rate >= 0.7:
        return state.advance(
            "Fair payment history",
            "Some late payments",
            confidence=state.confidence - 15,
            recommendation=state.soften(),
        )
    else:
        return state.advance(
            "Poor payment history",
            "Frequent late or missed payments",
            confidence=state.confidence - 30,
            recommendation=state.restrict(),
        )


def assess_missed_payments(user: UserCreditProfile, state: ScoringState) -> ScoringState:
    """More than five missed payments rejects regardless of the payment band"""
    if user.payment_history.missed > 5:
        return state.advance(
            risk="Multiple missed payments",
            recommendation=REJECT,
            confidence=min(state.confidence, 25),
        )
    return state


def assess_credit_utilization(user: UserCreditProfile, state: ScoringState) -> ScoringState:
    utilization = user.credit_utilization

    if utilization < 30:
        return state.advance("Low credit utilization")
    elif utilization < 50:
        return state.advance("Moderate credit utilization", confidence=state.confidence - 5)
    elif utilization < 70:
        return state.advance(
            "High credit utilization",
            "High credit card usage",
            confidence=state.confidence - 15,
            recommendation=state.soften(),
        )
    else:
        return state.advance(
            "Very high credit utilization",
            "Excessive credit card usage",
            confidence=state.confidence - 25,
            recommendation=state.restrict(),
        )


def assess_account_age(user: UserCreditProfile, state: ScoringState) -> ScoringState:
    """60+ months is a long history, under 24 is short; 24-59 records nothing"""
    if user.account_age >= 60:
        return state.advance("Long credit history")
    elif user.account_age < 24:
        return state.advance(
            "Short credit history",
            "Limited credit history",
            confidence=state.confidence - 10,
        )
    return state


def assess_risk_level(user: UserCreditProfile, state: ScoringState) -> ScoringState:
    if user.risk_level == "high":
        return state.advance(
            risk="High risk profile",
            recommendation=REJECT,
            confidence=min(state.confidence, 20),
        )
    elif user.risk_level == "medium":
        return state.advance(
            risk="Medium risk profile",
            recommendation=state.soften(),
            confidence=state.confidence - 15,
        )
    return state


SCORING_STEPS: Tuple[ScoringStep, ...] = (
    assess_credit_score,
    assess_debt_to_income,
    assess_payment_history,
    assess_missed_payments,
    assess_credit_utilization,
    assess_account_age,
    assess_risk_level,
)


def run_scoring_steps(user: UserCreditProfile) -> ScoringState:
    """Apply every scoring step in order, starting from a fresh approve state"""
    state = ScoringState()
    for step in SCORING_STEPS:
        state = step(user, state)
    return state


def generate_recommendation(user: UserCreditProfile, now: Optional[datetime] = None) -> LoanRecommendation:
    """
    Main entry point: score one user and build the loan recommendation.

    Rejections carry no amount and keep the raw confidence produced by the
    steps. Other outcomes get the amount rounded to whole currency units and
    confidence clamped to 0-100.
    """
    state = run_scoring_steps(user)

    if state.recommendation == REJECT:
        amount = None
        confidence = state.confidence
    else:
        amount = round_half_up(state.amount)
        confidence = int(clamp(state.confidence, 0, 100))

    return LoanRecommendation(
        user_id=user.id,
        user_name=user.name,
        recommendation=state.recommendation,
        recommended_amount=amount,
        reasoning=list(state.reasoning),
        confidence=confidence,
        risk_factors=list(state.risk_factors),
        timestamp=now or utc_now(),
    )
