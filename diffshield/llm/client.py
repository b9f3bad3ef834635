"""
LLM Client
==========
Asynchronous client for the MiniMax chat completion API.

Request Contract:
    - POST to MINIMAX_API_URL
    - Headers: Authorization: Bearer <api_key>, Content-Type: application/json
    - Body: {model, messages: [{role: "user", content}], groupId,
      temperature, max_tokens}
    - Only choices[0].message.content of the response is read

Single Attempt:
    - Exactly one request per call. No retries, no backoff; a failed
      attempt is reported to the caller, which decides whether to run a
      different strategy.
    - No timeout is imposed unless LLM_TIMEOUT_SECONDS is configured.

Failure Policy:
    - complete() never raises. Non-2xx responses and transport errors are
      logged and returned as ChatCompletion(success=False, reason=...).
    - Credentials are passed per call and never stored on the client.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from diffshield.core.config import (
    LLM_TIMEOUT_SECONDS,
    MINIMAX_API_URL,
    MINIMAX_MODEL,
    MiniMaxConfig,
)
from diffshield.core.constants import REVIEW_TEMPERATURE
from diffshield.utils.failure_reasons import HTTP_ERROR, TRANSPORT_FAILURE

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Completion Result
# ---------------------------------------------------------------------------
@dataclass
class ChatCompletion:
    """Outcome of one completion request."""
    content: str = ""
    success: bool = True
    status_code: int = 0
    reason: str = ""
    error: str = ""


def extract_message_content(data: Any) -> str:
    """Return choices[0].message.content, or "" when any part is missing."""
    try:
        choices = data.get("choices") or []
        if choices:
            content = (choices[0].get("message") or {}).get("content")
            return content if isinstance(content, str) else ""
    except (AttributeError, IndexError, KeyError, TypeError):
        pass
    return ""


# ---------------------------------------------------------------------------
# MiniMax Client
# ---------------------------------------------------------------------------
class MiniMaxClient:
    """
    Async HTTP client for MiniMax chat completions.

    Usage:
        client = MiniMaxClient()
        completion = await client.complete(prompt, config, max_tokens=2000)

    Parameters
    ----------
    api_url : str
        Completion endpoint.
    model : str
        Model name sent in the request body.
    timeout : float or None
        Request timeout in seconds; None disables the timeout.
    http_client : httpx.AsyncClient or None
        Shared client owned by the caller. When omitted, a client is opened
        and closed around each request.
    """

    def __init__(
        self,
        api_url: str = MINIMAX_API_URL,
        model: str = MINIMAX_MODEL,
        timeout: Optional[float] = LLM_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        self._http = http_client

    def build_payload(
        self,
        prompt: str,
        config: MiniMaxConfig,
        max_tokens: int,
        temperature: float = REVIEW_TEMPERATURE,
    ) -> dict:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "groupId": config.group_id,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

    async def _post(self, payload: dict, headers: dict) -> httpx.Response:
        if self._http is not None:
            return await self._http.post(self.api_url, json=payload, headers=headers)
        async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout)) as http:
            return await http.post(self.api_url, json=payload, headers=headers)

    async def complete(
        self,
        prompt: str,
        config: MiniMaxConfig,
        max_tokens: int,
        temperature: float = REVIEW_TEMPERATURE,
    ) -> ChatCompletion:
        """
        Send a single user message and return the model's text.

        Parameters
        ----------
        prompt : str
            The full user prompt.
        config : MiniMaxConfig
            Credentials for this call.
        max_tokens : int
            Token ceiling for the response.
        temperature : float
            Sampling temperature.

        Returns
        -------
        ChatCompletion
            success=True with content (possibly "") on a 2xx response,
            success=False with reason HTTP_ERROR or TRANSPORT_FAILURE otherwise.
        """
        headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(prompt, config, max_tokens, temperature)

        try:
            logger.info("MiniMax request: model=%s, max_tokens=%d", self.model, max_tokens)
            resp = await self._post(payload, headers)
        except httpx.HTTPError as e:
            logger.error("MiniMax transport error: %s", e)
            return ChatCompletion(success=False, reason=TRANSPORT_FAILURE, error=str(e))
        except Exception as e:
            logger.error("MiniMax request failed: %s", e, exc_info=True)
            return ChatCompletion(success=False, reason=TRANSPORT_FAILURE, error=str(e))

        status = resp.status_code
        if not 200 <= status < 300:
            logger.error("MiniMax API error: HTTP %d", status)
            return ChatCompletion(
                success=False,
                status_code=status,
                reason=HTTP_ERROR,
                error=f"HTTP {status}",
            )

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("MiniMax returned a non-JSON body: %s", e)
            return ChatCompletion(
                success=False,
                status_code=status,
                reason=TRANSPORT_FAILURE,
                error=f"Invalid response body: {e}",
            )

        content = extract_message_content(data)
        logger.info("MiniMax response: %d chars", len(content))
        return ChatCompletion(content=content, status_code=status)
