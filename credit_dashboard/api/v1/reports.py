"""POST /v1/reports/generate - AI-written portfolio reports"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from credit_dashboard.api.v1.schemas import ReportRequest, ReportResponse
from credit_dashboard.api.dependencies import get_ai_client, get_request_id
from credit_dashboard.config import settings
from credit_dashboard.domain.exceptions import AIServiceError, UnknownReportTypeError
from credit_dashboard.domain.metrics import calculate_metrics
from credit_dashboard.domain.prompts import ReportData, report_prompt
from credit_dashboard.domain.scoring import generate_recommendation
from credit_dashboard.infrastructure.clients.ai import AIClient
from credit_dashboard.infrastructure.observability.logging import log_ai_completion

router = APIRouter()


@router.post("/reports/generate", response_model=ReportResponse)
async def generate_report(
    request_body: ReportRequest,
    request: Request,
    ai_client: AIClient = Depends(get_ai_client),
):
    """
    Generate a portfolio report.

    Metrics and recommendations are recomputed from the submitted users so
    the report always quotes the engine's own figures.
    """
    request_id = get_request_id(request)
    users = [u.to_domain() for u in request_body.users]
    data = ReportData(
        users=users,
        metrics=calculate_metrics(users),
        recommendations=[generate_recommendation(u) for u in users],
    )

    operation = f"report_{request_body.report_type}"
    start_time = time.time()

    try:
        system_prompt, user_prompt = report_prompt(request_body.report_type, data)
        report = await ai_client.complete(
            user_prompt,
            system_prompt=system_prompt,
            max_tokens=settings.report_max_tokens,
            operation=operation,
        )
        log_ai_completion(request_id, operation, len(report), (time.time() - start_time) * 1000)
        return ReportResponse(report_type=request_body.report_type, report=report)

    except UnknownReportTypeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except AIServiceError as e:
        logging.error(f"AI service error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="AI service unavailable")
