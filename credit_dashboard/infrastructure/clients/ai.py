"""Chat-completion HTTP client for the AI narrative endpoints"""

from typing import Dict, List, Optional

import httpx

from credit_dashboard.domain.exceptions import AIServiceError
from credit_dashboard.infrastructure.observability.metrics import ai_failure_counter, ai_latency_histogram


class AIClient:
    """
    Client for an Azure-style chat-completion endpoint.

    Endpoint and key are passed in explicitly; the client never reads
    global configuration. An empty endpoint or key makes every call fail
    with AIServiceError.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        timeout: float = 30.0,
        temperature: float = 0.7,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout
        self.temperature = temperature
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.endpoint and self.api_key)

    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 2000,
        operation: str = "completion",
    ) -> str:
        """
        Send one chat turn and return the stripped reply text ("" if the model returned nothing).

        Raises:
            AIServiceError: When unconfigured, on timeout, HTTP errors, or an invalid response body
        """
        if not self.configured:
            ai_failure_counter.labels(operation=operation).inc()
            raise AIServiceError("AI endpoint is not configured")

        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with ai_latency_histogram.labels(operation=operation).time():
                    response = await client.post(
                        self.endpoint,
                        headers={"api-key": self.api_key},
                        json={
                            "messages": messages,
                            "temperature": self.temperature,
                            "max_tokens": max_tokens,
                        },
                    )
                    response.raise_for_status()
                    data = response.json()

                content = data["choices"][0]["message"].get("content") or ""
                return content.strip()

            except httpx.TimeoutException as e:
                ai_failure_counter.labels(operation=operation).inc()
                raise AIServiceError(f"AI endpoint timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                ai_failure_counter.labels(operation=operation).inc()
                raise AIServiceError(f"AI endpoint error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                ai_failure_counter.labels(operation=operation).inc()
                raise AIServiceError(f"AI endpoint unreachable: {e}") from e
            except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
                ai_failure_counter.labels(operation=operation).inc()
                raise AIServiceError(f"Invalid completion payload: {e}") from e
