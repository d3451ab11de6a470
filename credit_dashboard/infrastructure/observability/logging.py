"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "credit-dashboard"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = SERVICE_NAME, **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = SERVICE_NAME) -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_recommendation(
    request_id: str,
    user_id: str,
    recommendation: str,
    confidence: int,
    duration_ms: float,
) -> None:
    """Log structured recommendation outcome for analysis"""
    logging.info(
        "Recommendation completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "recommendation_complete",
            "recommendation_outcome": recommendation,
            "confidence": confidence,
            "duration_ms": duration_ms,
        },
    )


def log_ai_completion(request_id: str, operation: str, characters: int, duration_ms: float) -> None:
    """Log a finished AI narrative call; the text itself is not logged"""
    logging.info(
        "AI completion served",
        extra={
            "request_id": request_id,
            "step": "ai_complete",
            "operation": operation,
            "response_chars": characters,
            "duration_ms": duration_ms,
        },
    )
