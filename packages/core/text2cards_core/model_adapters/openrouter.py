"""OpenRouter chat-completion invoker."""

import asyncio
from typing import Any

import httpx

from text2cards_core.errors import (
    EmptyModelResponseError,
    MalformedModelResponseError,
    MissingCredentialError,
    ModelHTTPError,
    ModelTimeoutError,
)
from text2cards_core.generation.prompts import FLASHCARD_RESPONSE_FORMAT
from text2cards_core.model_adapters.base import BaseModelInvoker, RawModelOutput
from text2cards_core.settings import (
    DEFAULT_OPENROUTER_MODEL,
    DEFAULT_OPENROUTER_URL,
    DEFAULT_REQUEST_TIMEOUT,
)
from text2cards_core.utils.logging import get_logger

logger = get_logger(__name__)


def _extract_content(data: Any) -> str | list[Any] | dict[str, Any]:
    """Pull the first choice's message content out of a completion body."""
    if not isinstance(data, dict):
        raise MalformedModelResponseError(
            f"Unexpected completion body of type {type(data).__name__}"
        )

    choices = data.get("choices") or []
    first = choices[0] if isinstance(choices, list) and choices else None
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not content:
        raise EmptyModelResponseError()
    return content


class OpenRouterInvoker(BaseModelInvoker):
    """Invoker for the OpenRouter chat-completion endpoint.

    Performs a single attempt per call. The request carries a JSON-schema
    response format hint which the remote model may or may not honour.
    """

    def __init__(
        self,
        api_key: str | None,
        site_url: str,
        model_name: str = DEFAULT_OPENROUTER_MODEL,
        api_url: str = DEFAULT_OPENROUTER_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the OpenRouter invoker.

        Args:
            api_key: Provider credential; checked on each call
            site_url: Referer URL used by the provider for attribution
            model_name: Model identifier to request
            api_url: Chat-completion endpoint
            timeout: Upper bound for one request in seconds
            client: Optional preconfigured HTTP client
        """
        self.api_key = api_key
        self.site_url = site_url
        self.model_name = model_name
        self.api_url = api_url
        self.timeout = timeout

        self._client = client
        logger.info(f"Initialized OpenRouter invoker (model={model_name})")

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def build_payload(self, prompt: str, source_text: str) -> dict[str, Any]:
        """Build the chat-completion request body."""
        return {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": prompt},
                {"role": "user", "content": source_text},
            ],
            "response_format": FLASHCARD_RESPONSE_FORMAT,
        }

    async def invoke(self, prompt: str, source_text: str) -> RawModelOutput:
        """Send one chat-completion request.

        Raises:
            MissingCredentialError: If no API key is configured
            ModelHTTPError: On a non-2xx response
            ModelTimeoutError: If the request exceeds the timeout
            EmptyModelResponseError: If the completion has no content
            MalformedModelResponseError: If the body is not a completion
            httpx.HTTPError: On network failures
        """
        if not self.api_key:
            raise MissingCredentialError()

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": self.site_url,
        }
        payload = self.build_payload(prompt, source_text)

        logger.debug(f"Sending chat completion request to {self.api_url}")
        try:
            response = await asyncio.wait_for(
                self.client.post(self.api_url, json=payload, headers=headers),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.error(f"Model request timed out after {self.timeout}s")
            raise ModelTimeoutError(self.timeout) from e

        logger.debug(f"Model provider responded with status {response.status_code}")
        if not response.is_success:
            logger.error(
                f"OpenRouter API error: status={response.status_code}, body={response.text[:200]}"
            )
            raise ModelHTTPError(
                response.status_code, response.reason_phrase, response.text
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedModelResponseError(
                "Model provider returned a non-JSON body"
            ) from e

        content = _extract_content(data)
        model = data.get("model") or self.model_name
        logger.debug(f"Received completion from {model}")
        return RawModelOutput(content=content, model=model)

    async def aclose(self) -> None:
        """Close the HTTP client if this invoker created one."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
