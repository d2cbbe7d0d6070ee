"""Client for OpenAI-compatible chat completion endpoints."""

import logging
from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from clauseguard.api.policy_analyzer.errors import ConfigurationError, TransportError
from clauseguard.api.policy_analyzer.models import LLMSettings

logger = logging.getLogger(__name__)

TEMPERATURE = 0.3
MAX_TOKENS = 4096
COMPLETIONS_PATH = "/chat/completions"

HTTP_ERROR_MESSAGES: dict[int, str] = {
    400: "Bad request - check your API endpoint and model name",
    401: "Invalid API key - please check your API key in settings",
    403: "Access denied - your API key may not have permission for this model",
    404: "Not found - check your API endpoint URL",
    429: "Rate limit exceeded - please wait a moment and try again",
    500: "Server error - the API service is having issues",
    502: "Bad gateway - the API service is temporarily unavailable",
    503: "Service unavailable - the API service is temporarily down",
}
UNREACHABLE_MESSAGE = "Could not reach the API endpoint - check your endpoint URL and network connection"
INVALID_ENDPOINT_MESSAGE = "Invalid API endpoint URL - check your endpoint in settings"


def require_settings(settings: LLMSettings | Mapping[str, Any] | None) -> LLMSettings:
    """Return *settings* as LLMSettings, or raise ConfigurationError if any field is missing."""
    if settings is None:
        raise ConfigurationError()
    if not isinstance(settings, LLMSettings):
        try:
            settings = LLMSettings.model_validate(dict(settings))
        except ValidationError as e:
            raise ConfigurationError() from e
    missing = settings.missing_fields()
    if missing:
        logger.info("LLM settings incomplete, missing: %s", ", ".join(missing))
        raise ConfigurationError()
    return settings


def completions_url(endpoint: str) -> str:
    """Append ``/chat/completions`` to the base URL unless it is already there."""
    url = endpoint.strip()
    if url.endswith(COMPLETIONS_PATH):
        return url
    if url.endswith("/"):
        url = url[:-1]
    return url + COMPLETIONS_PATH


def build_payload(model: str, system_prompt: str, user_prompt: str) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": TEMPERATURE,
        "max_tokens": MAX_TOKENS,
        "response_format": {"type": "json_object"},
    }


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    """Body as a dict; anything that is not a JSON object counts as empty."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def error_message(status_code: int, body: Mapping[str, Any]) -> str:
    """
    User-facing message for a failed request, by priority: message in the
    error body, the status-code table, then a generic fallback.
    """
    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
        return error["message"]
    if isinstance(error, str) and error:
        return error
    message = body.get("message")
    if isinstance(message, str) and message:
        return message
    if status_code in HTTP_ERROR_MESSAGES:
        return HTTP_ERROR_MESSAGES[status_code]
    return f"Request failed ({status_code})"


def _first(items: Any) -> Any:
    if isinstance(items, list) and items:
        return items[0]
    return None


def extract_reply_text(data: Mapping[str, Any]) -> str:
    """
    Reply text from an OpenAI-style ``choices[0].message.content`` or a
    Gemini-style ``candidates[0].content.parts[0].text``; "" if neither is present.
    """
    choice = _first(data.get("choices"))
    if isinstance(choice, dict) and isinstance(choice.get("message"), dict):
        content = choice["message"].get("content")
        if isinstance(content, str) and content:
            return content

    candidate = _first(data.get("candidates"))
    if isinstance(candidate, dict) and isinstance(candidate.get("content"), dict):
        part = _first(candidate["content"].get("parts"))
        if isinstance(part, dict):
            text = part.get("text")
            if isinstance(text, str) and text:
                return text

    return ""


class LLMInvoker:
    """
    Sends one system+user prompt pair per ``invoke`` call, with no retries.

    Pass an ``httpx.AsyncClient`` to share a connection pool (or a mock
    transport in tests). Otherwise use the invoker as an async context
    manager to keep one client open across several calls, or let each call
    open its own.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, *, timeout: float | None = None) -> None:
        self._client = client
        self._timeout = timeout
        self._owns_client = False

    async def __aenter__(self) -> "LLMInvoker":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    async def _post(self, url: str, payload: dict[str, Any], headers: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(url, json=payload, headers=headers)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(url, json=payload, headers=headers)

    async def invoke(
        self,
        settings: LLMSettings | Mapping[str, Any] | None,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Return the raw reply text. Raises ConfigurationError or TransportError."""
        settings = require_settings(settings)
        url = completions_url(settings.endpoint)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {settings.api_key}",
        }
        payload = build_payload(settings.model, system_prompt, user_prompt)

        try:
            response = await self._post(url, payload, headers)
        except httpx.InvalidURL as e:
            logger.warning("LLM endpoint %s is not a valid URL: %s", url, e)
            raise TransportError(INVALID_ENDPOINT_MESSAGE) from e
        except httpx.RequestError as e:
            logger.warning("LLM request to %s failed: %s", url, e)
            raise TransportError(UNREACHABLE_MESSAGE) from e

        if not response.is_success:
            message = error_message(response.status_code, _json_or_empty(response))
            logger.warning("LLM request to %s returned %d: %s", url, response.status_code, message)
            raise TransportError(message, status_code=response.status_code)

        text = extract_reply_text(_json_or_empty(response))
        if not text:
            logger.warning("LLM response from %s had no recognizable reply text", url)
        return text
