"""Portfolio endpoints - profile generation, stored users, dashboard summary"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from credit_dashboard.api.v1.schemas import (
    DashboardResponse,
    DistributionBucketSchema,
    GenerateDataRequest,
    LoanRecommendationSchema,
    RecentActivitySchema,
    RecommendationBreakdownSchema,
    CreditMetricsSchema,
    UserDetailResponse,
    UserProfileSchema,
    UsersResponse,
)
from credit_dashboard.api.dependencies import get_profile_generator, get_request_id
from credit_dashboard.config import settings
from credit_dashboard.domain.activity import build_recent_activity
from credit_dashboard.domain.exceptions import ProfileNotFoundError
from credit_dashboard.domain.metrics import (
    calculate_metrics,
    credit_score_distribution,
    summarize_recommendations,
    top_risk_users,
)
from credit_dashboard.domain.scoring import generate_recommendation
from credit_dashboard.infrastructure.clients.profiles import ProfileGenerator
from credit_dashboard.infrastructure.database.repositories import ProfileRepository
from credit_dashboard.infrastructure.database.session import get_db

router = APIRouter()


async def _generate_portfolio(count: int, request: Request, db: Session, generator: ProfileGenerator) -> UsersResponse:
    """
    Generate a fresh portfolio and make it the stored one.

    Flow:
    1. Fetch profiles from the AI endpoint (local fallback on failure)
    2. Replace the stored portfolio snapshot
    3. Return the profiles
    """
    request_id = get_request_id(request)

    try:
        users = await generator.generate(count)
        ProfileRepository(db).replace_portfolio(users)
        db.commit()

        logging.info(
            "Portfolio generated",
            extra={"request_id": request_id, "step": "portfolio_generated", "user_count": len(users)},
        )
        return UsersResponse(users=[UserProfileSchema.from_domain(u) for u in users])

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to generate data")


@router.get("/generate-data", response_model=UsersResponse, response_model_exclude_none=True)
async def generate_data(
    request: Request,
    count: int = Query(settings.default_profile_count, ge=1, le=settings.max_profile_count),
    db: Session = Depends(get_db),
    generator: ProfileGenerator = Depends(get_profile_generator),
):
    """Generate `count` synthetic profiles and store them as the current portfolio"""
    return await _generate_portfolio(count, request, db, generator)


@router.post("/generate-data", response_model=UsersResponse, response_model_exclude_none=True)
async def generate_data_from_body(
    request: Request,
    request_body: GenerateDataRequest = GenerateDataRequest(),
    db: Session = Depends(get_db),
    generator: ProfileGenerator = Depends(get_profile_generator),
):
    """Same as GET, with the count in the JSON body"""
    return await _generate_portfolio(request_body.count, request, db, generator)


@router.get("/users", response_model=UsersResponse, response_model_exclude_none=True)
def list_users(db: Session = Depends(get_db)):
    """Stored portfolio profiles in generation order"""
    users = ProfileRepository(db).list_profiles()
    return UsersResponse(users=[UserProfileSchema.from_domain(u) for u in users])


@router.get("/users/{user_id}", response_model=UserDetailResponse, response_model_exclude_none=True)
def get_user(user_id: str, db: Session = Depends(get_db)):
    """
    Retrieve one stored profile with its current recommendation.

    Returns:
        Profile and a freshly computed recommendation
    """
    try:
        user = ProfileRepository(db).get_profile(user_id)
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")

    return UserDetailResponse(
        user=UserProfileSchema.from_domain(user),
        recommendation=LoanRecommendationSchema.from_domain(generate_recommendation(user)),
    )


@router.get("/dashboard", response_model=DashboardResponse, response_model_exclude_none=True)
def get_dashboard(db: Session = Depends(get_db)):
    """Metrics, decision mix, score histogram, activity feed and riskiest users of the stored portfolio"""
    users = ProfileRepository(db).list_profiles()
    recommendations = [generate_recommendation(u) for u in users]

    return DashboardResponse(
        metrics=CreditMetricsSchema.from_domain(calculate_metrics(users)),
        breakdown=RecommendationBreakdownSchema.from_domain(summarize_recommendations(recommendations)),
        score_distribution=[DistributionBucketSchema.from_domain(b) for b in credit_score_distribution(users)],
        recent_activity=[RecentActivitySchema.from_domain(a) for a in build_recent_activity(users)],
        top_risk_users=[UserProfileSchema.from_domain(u) for u in top_risk_users(users)],
    )
