"""Model invokers for the flashcard generation pipeline.

Supported backends:
- OpenRouter: chat-completion API with a JSON-schema response hint
- Mock: deterministic placeholder output for development and tests
"""

import httpx

from text2cards_core.model_adapters.base import BaseModelInvoker, RawModelOutput
from text2cards_core.model_adapters.mock import MOCK_MODEL_NAME, MockModelInvoker
from text2cards_core.model_adapters.openrouter import OpenRouterInvoker
from text2cards_core.settings import Settings


def create_invoker(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
) -> BaseModelInvoker:
    """Create the invoker selected by the settings.

    Args:
        settings: Runtime configuration
        client: Optional HTTP client for the live invoker

    Returns:
        Mock invoker when ``use_ai_mock`` is set, OpenRouter invoker otherwise
    """
    if settings.use_ai_mock:
        return MockModelInvoker()
    return OpenRouterInvoker(
        api_key=settings.openrouter_api_key,
        site_url=settings.public_site_url,
        model_name=settings.openrouter_model,
        api_url=settings.openrouter_api_url,
        timeout=settings.request_timeout,
        client=client,
    )


async def invoke_model(
    prompt: str,
    source_text: str,
    settings: Settings,
    client: httpx.AsyncClient | None = None,
) -> RawModelOutput:
    """Invoke the configured model once for a source text."""
    invoker = create_invoker(settings, client=client)
    try:
        return await invoker.invoke(prompt, source_text)
    finally:
        if client is None:
            await invoker.aclose()


__all__ = [
    "BaseModelInvoker",
    "MOCK_MODEL_NAME",
    "MockModelInvoker",
    "OpenRouterInvoker",
    "RawModelOutput",
    "create_invoker",
    "invoke_model",
]
