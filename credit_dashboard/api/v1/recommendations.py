"""Scoring endpoints - per-user recommendations, history, portfolio metrics"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from credit_dashboard.api.v1.schemas import (
    CreditMetricsSchema,
    DistributionBucketSchema,
    LoanRecommendationSchema,
    MetricsResponse,
    PortfolioRequest,
    RecommendationBreakdownSchema,
    RecommendationHistoryItem,
    RecommendationHistoryResponse,
    RecommendationsResponse,
)
from credit_dashboard.api.dependencies import get_request_id
from credit_dashboard.domain.metrics import calculate_metrics, credit_score_distribution, summarize_recommendations
from credit_dashboard.domain.scoring import generate_recommendation
from credit_dashboard.infrastructure.database.repositories import RecommendationRepository
from credit_dashboard.infrastructure.database.session import get_db
from credit_dashboard.infrastructure.observability.metrics import record_recommendation
from credit_dashboard.infrastructure.observability.logging import log_recommendation
from credit_dashboard.utils.number_utils import round_half_up

router = APIRouter()


@router.post("/recommendations", response_model=RecommendationsResponse, response_model_exclude_none=True)
def create_recommendations(
    request_body: PortfolioRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Score every submitted profile and record the outcome.

    Flow:
    1. Evaluate each user with the scoring engine (input order preserved)
    2. Persist each recommendation to the history
    3. Record metrics and logs per user
    """
    request_id = get_request_id(request)

    try:
        repo = RecommendationRepository(db)
        recommendations = []
        for user in request_body.to_domain():
            start_time = time.time()
            recommendation = generate_recommendation(user)
            repo.create_recommendation(recommendation)

            duration_ms = (time.time() - start_time) * 1000
            record_recommendation(recommendation.recommendation, recommendation.recommended_amount)
            log_recommendation(
                request_id,
                user.id,
                recommendation.recommendation,
                recommendation.confidence,
                duration_ms,
            )
            recommendations.append(recommendation)

        db.commit()

        return RecommendationsResponse(
            recommendations=[LoanRecommendationSchema.from_domain(r) for r in recommendations]
        )

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/recommendations/history",
    response_model=RecommendationHistoryResponse,
    response_model_exclude_none=True,
)
def get_recommendation_history(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent recommendations served for a user.

    Returns:
        Up to 20 recommendations, newest first
    """
    records = RecommendationRepository(db).get_recommendations_by_user(user_id, limit=20)

    items = [
        RecommendationHistoryItem(
            recommendation_id=str(r.id),
            recommendation=r.recommendation,
            recommended_amount=round_half_up(r.recommended_amount) if r.recommended_amount is not None else None,
            confidence=r.confidence,
            risk_factors=r.risk_factors,
            created_at=r.created_at.isoformat(),
        )
        for r in records
    ]

    return RecommendationHistoryResponse(user_id=user_id, recommendations=items)


@router.post("/metrics", response_model=MetricsResponse)
def create_metrics(request_body: PortfolioRequest):
    """Aggregate the submitted profiles into portfolio metrics"""
    users = request_body.to_domain()
    recommendations = [generate_recommendation(u) for u in users]

    return MetricsResponse(
        metrics=CreditMetricsSchema.from_domain(calculate_metrics(users)),
        breakdown=RecommendationBreakdownSchema.from_domain(summarize_recommendations(recommendations)),
        score_distribution=[DistributionBucketSchema.from_domain(b) for b in credit_score_distribution(users)],
    )
