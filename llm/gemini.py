"""
Gemini Client - Google Gemini through its OpenAI-compatible endpoint.

API docs: https://ai.google.dev/gemini-api/docs/openai
"""
import time
from typing import Optional, List

import httpx
from openai import OpenAI
from loguru import logger

from .base import LLMClient, LLMResponse, Message


class GeminiClient(LLMClient):
    """
    Gemini client using the OpenAI SDK.

    Default model is gemini-2.5-flash-lite.
    """

    API_BASE = "https://generativelanguage.googleapis.com/v1beta/openai/"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash-lite",
        timeout: float = 60.0,
        verify_ssl: bool = True,
        base_url: Optional[str] = None,
    ):
        super().__init__(api_key, model)
        self.timeout = timeout

        http_client = None
        if not verify_ssl:
            http_client = httpx.Client(verify=False)
            logger.warning("SSL verification disabled for Gemini client")

        self._client = OpenAI(
            api_key=api_key,
            base_url=base_url or self.API_BASE,
            timeout=timeout,
            http_client=http_client,
        )

    def generate(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: int = 500,
        temperature: float = 0.5,
    ) -> LLMResponse:
        """Generate response from a single prompt."""
        messages = [Message(role="user", content=prompt)]
        return self.chat(messages, system=system, max_tokens=max_tokens, temperature=temperature)

    def chat(
        self,
        messages: List[Message],
        system: Optional[str] = None,
        max_tokens: int = 500,
        temperature: float = 0.5,
    ) -> LLMResponse:
        """Generate response from conversation."""
        api_messages = []
        if system:
            api_messages.append({"role": "system", "content": system})
        for msg in messages:
            api_messages.append({"role": msg.role, "content": msg.content})

        logger.debug(f"Gemini request: model={self.model}, messages={len(api_messages)}, temperature={temperature}")

        started = time.monotonic()
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=api_messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise

        choice = response.choices[0]
        usage = response.usage

        return LLMResponse(
            content=choice.message.content or "",
            model=response.model or self.model,
            usage={
                "input_tokens": usage.prompt_tokens if usage else 0,
                "output_tokens": usage.completion_tokens if usage else 0,
            },
            stop_reason=choice.finish_reason,
            latency_ms=int((time.monotonic() - started) * 1000),
        )
