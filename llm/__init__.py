"""
LLM Module - Unified interface for LLM providers.

Usage:
    from llm import get_client

    client = get_client()  # Uses config settings
    response = client.generate("Your prompt here", temperature=0.2)
    print(response.content)

Supported providers:
- gemini: Google Gemini via OpenAI-compatible API
"""
from typing import Optional

from config import settings
from .base import LLMClient, LLMResponse, Message
from .gemini import GeminiClient


_PROVIDERS = {
    "gemini": GeminiClient,
}

_DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash-lite",
}


def get_client(
    provider: Optional[str] = None,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    verify_ssl: Optional[bool] = None,
) -> LLMClient:
    """
    Get an LLM client instance.

    Args:
        provider: Provider name ("gemini"). Defaults to settings.LLM_PROVIDER
        api_key: API key. Defaults to settings based on provider
        model: Model name. Defaults to settings.LLM_MODEL or provider default
        verify_ssl: Whether to verify SSL. Defaults to settings.LLM_VERIFY_SSL

    Returns:
        Configured LLMClient instance
    """
    provider = (provider or settings.LLM_PROVIDER).lower()

    if provider not in _PROVIDERS:
        raise ValueError(f"Unknown LLM provider: {provider}. Available: {list(_PROVIDERS.keys())}")

    if api_key is None:
        if provider == "gemini":
            api_key = settings.GEMINI_API_KEY
        else:
            raise ValueError(f"No API key configured for provider: {provider}")

    if not api_key:
        raise ValueError(f"API key required for provider: {provider}")

    model = model or settings.LLM_MODEL or _DEFAULT_MODELS.get(provider)

    if verify_ssl is None:
        verify_ssl = settings.LLM_VERIFY_SSL

    client_class = _PROVIDERS[provider]
    return client_class(api_key=api_key, model=model, verify_ssl=verify_ssl)


__all__ = [
    "get_client",
    "LLMClient",
    "LLMResponse",
    "Message",
    "GeminiClient",
]
