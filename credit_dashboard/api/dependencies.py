"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from credit_dashboard.config import settings
from credit_dashboard.infrastructure.clients.ai import AIClient
from credit_dashboard.infrastructure.clients.profiles import ProfileGenerator


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_ai_client() -> AIClient:
    """Provide AI completion client configured from settings"""
    return AIClient(
        endpoint=settings.ai_endpoint,
        api_key=settings.ai_api_key,
        timeout=settings.http_timeout_seconds,
        temperature=settings.ai_temperature,
    )


def get_profile_generator(ai_client: AIClient = Depends(get_ai_client)) -> ProfileGenerator:
    """Provide profile generator backed by the AI client"""
    return ProfileGenerator(
        ai_client,
        max_tokens=settings.generation_max_tokens,
        seed=settings.fallback_seed,
    )
