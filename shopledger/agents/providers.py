"""
Chat-Completion Providers

The assistant talks to exactly one provider per process, chosen by
LLM_PROVIDER:
- gemini: Google Generative AI
- openai: any OpenAI-compatible endpoint (OpenAI itself, Groq via
  LLM_BASE_URL, a local server, ...)

Providers raise whatever their SDK raises. Classifying those errors
is the agent's job, not theirs. Neither provider retries.
"""

from abc import ABC, abstractmethod
from typing import Optional

import google.generativeai as genai
from openai import AsyncOpenAI

from shopledger.config import LLMSettings


class ProviderNotConfiguredError(Exception):
    """No API key (or an unknown provider) was configured."""
    pass


class CompletionClient(ABC):
    """One system instruction, one user prompt, one text reply."""

    @abstractmethod
    async def complete(self, system: str, prompt: str) -> Optional[str]:
        """Return the first completion's text, or None if it was empty."""
        pass


class GeminiCompletionClient(CompletionClient):
    """Google Generative AI backed completions."""

    def __init__(self, settings: LLMSettings):
        self._settings = settings
        genai.configure(api_key=settings.api_key)

    async def complete(self, system: str, prompt: str) -> Optional[str]:
        model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            system_instruction=system,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
            },
        )
        response = await model.generate_content_async(
            prompt,
            request_options={"timeout": self._settings.timeout_seconds},
        )
        try:
            return response.text.strip() or None
        except ValueError:
            # Blocked or empty candidate list
            return None


class OpenAICompletionClient(CompletionClient):
    """OpenAI-compatible chat completions."""

    def __init__(self, settings: LLMSettings):
        self._settings = settings
        self._client = AsyncOpenAI(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            max_retries=0,
        )

    async def complete(self, system: str, prompt: str) -> Optional[str]:
        response = await self._client.chat.completions.create(
            model=self._settings.model_name,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=self._settings.temperature,
            max_tokens=self._settings.max_tokens,
        )
        if not response.choices:
            return None
        content = response.choices[0].message.content
        return content.strip() if content else None


def create_completion_client(settings: LLMSettings) -> CompletionClient:
    """Build the client for the configured provider."""
    if not settings.api_key:
        raise ProviderNotConfiguredError(
            f"No API key configured for LLM provider '{settings.provider}'"
        )
    if settings.provider == "gemini":
        return GeminiCompletionClient(settings)
    if settings.provider == "openai":
        return OpenAICompletionClient(settings)
    raise ProviderNotConfiguredError(f"Unsupported LLM provider: {settings.provider}")
