"""POST /v1/ai/* - AI-generated commentary on a credit profile"""

import time
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from credit_dashboard.api.v1.schemas import (
    AdviceRequest,
    AdviceResponse,
    AnalysisResponse,
    AnomaliesResponse,
    ChatRequest,
    ChatResponse,
    ExplainRiskRequest,
    ExplanationResponse,
    LoanRecommendationSchema,
    PredictionResponse,
    UserDataRequest,
    UserProfileSchema,
)
from credit_dashboard.api.dependencies import get_ai_client, get_request_id
from credit_dashboard.config import settings
from credit_dashboard.domain import prompts
from credit_dashboard.domain.exceptions import AIServiceError
from credit_dashboard.infrastructure.clients.ai import AIClient
from credit_dashboard.infrastructure.observability.logging import log_ai_completion

router = APIRouter()


async def _ask(
    ai_client: AIClient,
    prompt: prompts.Prompt,
    operation: str,
    fallback: str,
    request_id: str,
    max_tokens: Optional[int] = None,
) -> str:
    """Run one completion; an empty reply becomes `fallback`, failures become 503"""
    system_prompt, user_prompt = prompt
    start_time = time.time()
    try:
        content = await ai_client.complete(
            user_prompt,
            system_prompt=system_prompt,
            max_tokens=max_tokens or settings.ai_max_tokens,
            operation=operation,
        )
    except AIServiceError as e:
        logging.error(f"AI service error: {e}", extra={"request_id": request_id, "operation": operation})
        raise HTTPException(status_code=503, detail="AI service unavailable")

    log_ai_completion(request_id, operation, len(content), (time.time() - start_time) * 1000)
    return content or fallback


@router.post("/ai/analyze", response_model=AnalysisResponse)
async def analyze_profile(
    request_body: UserDataRequest,
    request: Request,
    ai_client: AIClient = Depends(get_ai_client),
):
    """Narrative credit-health analysis of one profile"""
    analysis = await _ask(
        ai_client,
        prompts.analysis_prompt(request_body.user_data.to_domain()),
        "analyze",
        "Unable to generate analysis at this time.",
        get_request_id(request),
    )
    return AnalysisResponse(analysis=analysis)


@router.post("/ai/advice", response_model=AdviceResponse)
async def financial_advice(
    request_body: AdviceRequest,
    request: Request,
    ai_client: AIClient = Depends(get_ai_client),
):
    """Personalized advice given a profile and its loan recommendation"""
    advice = await _ask(
        ai_client,
        prompts.advice_prompt(request_body.user_data.to_domain(), request_body.recommendation.to_domain()),
        "advice",
        "Unable to generate advice at this time.",
        get_request_id(request),
    )
    return AdviceResponse(advice=advice)


@router.post("/ai/explain-risk", response_model=ExplanationResponse)
async def explain_risk(
    request_body: ExplainRiskRequest,
    request: Request,
    ai_client: AIClient = Depends(get_ai_client),
):
    """Plain-language explanation of the listed risk factors"""
    explanation = await _ask(
        ai_client,
        prompts.risk_explanation_prompt(request_body.user_data.to_domain(), request_body.risk_factors),
        "explain_risk",
        "Unable to generate explanation at this time.",
        get_request_id(request),
    )
    return ExplanationResponse(explanation=explanation)


@router.post("/ai/predict", response_model=PredictionResponse)
async def predict_trend(
    request_body: UserDataRequest,
    request: Request,
    ai_client: AIClient = Depends(get_ai_client),
):
    """Credit score forecast for the next 6-12 months"""
    prediction = await _ask(
        ai_client,
        prompts.trend_prediction_prompt(request_body.user_data.to_domain()),
        "predict",
        "Unable to generate prediction at this time.",
        get_request_id(request),
    )
    return PredictionResponse(prediction=prediction)


@router.post("/ai/anomalies", response_model=AnomaliesResponse)
async def detect_anomalies(
    request_body: UserDataRequest,
    request: Request,
    ai_client: AIClient = Depends(get_ai_client),
):
    """Unusual patterns or red flags in a profile's history"""
    anomalies = await _ask(
        ai_client,
        prompts.anomaly_prompt(request_body.user_data.to_domain()),
        "anomalies",
        "Unable to generate anomaly analysis at this time.",
        get_request_id(request),
    )
    return AnomaliesResponse(anomalies=anomalies)


@router.post("/ai/chat", response_model=ChatResponse)
async def chat(
    request_body: ChatRequest,
    request: Request,
    ai_client: AIClient = Depends(get_ai_client),
):
    """
    Answer a free-form question.

    A context with a "user" key is validated as a profile (plus optional
    "recommendation"); any other context is quoted as JSON.
    """
    context = request_body.context or {}
    user = recommendation = None

    if context.get("user") is not None:
        try:
            user = UserProfileSchema.model_validate(context["user"]).to_domain()
            if context.get("recommendation") is not None:
                recommendation = LoanRecommendationSchema.model_validate(context["recommendation"]).to_domain()
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=f"Invalid chat context: {e.error_count()} errors")

    answer = await _ask(
        ai_client,
        prompts.chat_prompt(request_body.question, user=user, recommendation=recommendation, context=context),
        "chat",
        "",
        get_request_id(request),
        max_tokens=settings.chat_max_tokens,
    )
    return ChatResponse(answer=answer)
