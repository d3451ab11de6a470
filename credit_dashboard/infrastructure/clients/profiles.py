"""Profile source: AI-generated credit profiles with a local fallback"""

import json
import logging
import random
from typing import List, Optional

from credit_dashboard.domain.exceptions import AIServiceError, InvalidProfileDataError
from credit_dashboard.domain.models import UserCreditProfile
from credit_dashboard.domain.prompts import profile_generation_prompt
from credit_dashboard.domain.synthetic import generate_fallback_profiles, normalize_profile
from credit_dashboard.infrastructure.clients.ai import AIClient
from credit_dashboard.infrastructure.observability.metrics import profile_fallback_counter

logger = logging.getLogger(__name__)


def parse_profiles(content: str, count: int) -> List[UserCreditProfile]:
    """
    Parse a completion that should be a JSON array of profile objects.

    Raises:
        InvalidProfileDataError: If the text is not a non-empty JSON array of objects
    """
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidProfileDataError(f"Completion is not valid JSON: {e}") from e

    if not isinstance(payload, list) or not payload:
        raise InvalidProfileDataError("Completion is not a non-empty JSON array")
    if not all(isinstance(item, dict) for item in payload):
        raise InvalidProfileDataError("Completion array contains non-object items")

    return [normalize_profile(raw, index) for index, raw in enumerate(payload[:count])]


class ProfileGenerator:
    """Generate a portfolio of synthetic credit profiles"""

    def __init__(self, ai_client: AIClient, max_tokens: int = 4000, seed: Optional[int] = None):
        self.ai_client = ai_client
        self.max_tokens = max_tokens
        self.seed = seed

    async def generate(self, count: int) -> List[UserCreditProfile]:
        """Ask the AI endpoint for `count` profiles; fall back to local generation on any failure"""
        try:
            content = await self.ai_client.complete(
                profile_generation_prompt(count),
                max_tokens=self.max_tokens,
                operation="generate_profiles",
            )
            return parse_profiles(content, count)
        except (AIServiceError, InvalidProfileDataError) as e:
            logger.warning(f"Falling back to local profile generation: {e}", extra={"count": count})
            profile_fallback_counter.inc()
            return generate_fallback_profiles(count, rng=random.Random(self.seed))
