"""
LLM Manager - Abstraction layer for the hosted generation endpoint.

This module provides a unified interface over OpenAI-compatible chat
completion APIs (Groq and OpenRouter). Provider failures are reported as an
unsuccessful LLMResponse carrying a typed ProviderErrorKind, so callers never
have to inspect error strings.
"""

import asyncio
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional, Any, Tuple
from dataclasses import dataclass
import aiohttp

from ..config import LLMConfig, ApiKeyStore, get_llm_config
from ..utils import get_logger

logger = get_logger(__name__)

API_KEY_TEST_PROMPT = "Say 'API key is working' if you can read this."

class ProviderErrorKind(str, Enum):
    """Classification of a failed generation call."""
    RATE_LIMITED = "rate_limited"
    AUTHENTICATION = "authentication"
    INVALID_REQUEST = "invalid_request"
    UNAVAILABLE = "unavailable"

    @property
    def is_transient(self) -> bool:
        return self is ProviderErrorKind.RATE_LIMITED

def classify_provider_error(status: Optional[int], message: str) -> ProviderErrorKind:
    """Map an HTTP status and error text onto a ProviderErrorKind."""
    lowered = (message or "").lower()
    if status == 429 or "quota" in lowered or "rate limit" in lowered:
        return ProviderErrorKind.RATE_LIMITED
    if status in (401, 403) or "invalid api key" in lowered:
        return ProviderErrorKind.AUTHENTICATION
    if status is not None and 400 <= status < 500:
        return ProviderErrorKind.INVALID_REQUEST
    return ProviderErrorKind.UNAVAILABLE

@dataclass
class LLMResponse:
    """Standardized response from LLM providers."""
    success: bool
    content: str = ""
    model: str = ""
    usage: Optional[Dict[str, int]] = None
    finish_reason: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ProviderErrorKind] = None

    @classmethod
    def failure(cls, error: str, status: Optional[int] = None, kind: Optional[ProviderErrorKind] = None) -> "LLMResponse":
        return cls(
            success=False,
            error=error,
            error_kind=kind or classify_provider_error(status, error)
        )

class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    async def generate_text(self, prompt: str, system_prompt: str = "", **kwargs) -> LLMResponse:
        """Generate text response."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""

    @abstractmethod
    def get_model_name(self) -> str:
        """Get the model name being used."""

class ChatCompletionsProvider(LLMProvider):
    """Provider speaking the OpenAI-compatible /chat/completions protocol."""

    name = "chat"
    base_url = ""

    def __init__(self, config: LLMConfig, api_key: Optional[str] = None):
        self.config = config
        self.api_key = api_key

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

    async def generate_text(self, prompt: str, system_prompt: str = "", **kwargs) -> LLMResponse:
        """Generate text response using the chat completions endpoint."""
        if not self.api_key:
            return LLMResponse.failure(
                f"{self.name} API key not configured",
                kind=ProviderErrorKind.AUTHENTICATION
            )

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": kwargs.get("model", self.config.default_model),
            "messages": messages,
            "temperature": kwargs.get("temperature", self.config.temperature),
            "max_tokens": kwargs.get("max_tokens", self.config.max_tokens)
        }

        timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    f"{self.base_url}/chat/completions",
                    headers=self._headers(),
                    json=payload
                ) as response:
                    if response.status == 200:
                        data = await response.json()
                        choice = data["choices"][0]

                        return LLMResponse(
                            success=True,
                            content=choice["message"]["content"] or "",
                            model=data.get("model", payload["model"]),
                            usage=data.get("usage", {}),
                            finish_reason=choice.get("finish_reason")
                        )

                    error_text = await response.text()
                    return LLMResponse.failure(
                        f"{self.name} API error {response.status}: {error_text}",
                        status=response.status
                    )

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error calling {self.name} API: {e}")
            return LLMResponse.failure(
                f"{self.name} API error: {e}",
                kind=ProviderErrorKind.UNAVAILABLE
            )
        except (KeyError, IndexError, ValueError) as e:
            logger.error(f"Malformed {self.name} API response: {e}")
            return LLMResponse.failure(
                f"{self.name} API returned a malformed response: {e}",
                kind=ProviderErrorKind.UNAVAILABLE
            )

    def is_available(self) -> bool:
        return bool(self.api_key)

    def get_model_name(self) -> str:
        return self.config.default_model

class GroqProvider(ChatCompletionsProvider):
    """Groq hosted models (OpenAI-compatible endpoint)."""

    name = "groq"
    base_url = "https://api.groq.com/openai/v1"

class OpenRouterProvider(ChatCompletionsProvider):
    """OpenRouter API provider for various LLM models."""

    name = "openrouter"
    base_url = "https://openrouter.ai/api/v1"

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        headers.update({
            "HTTP-Referer": "http://localhost:8501",
            "X-Title": "Email Agent"
        })
        return headers

PROVIDERS = {
    "groq": GroqProvider,
    "openrouter": OpenRouterProvider,
}

class LLMManager:
    """Builds the configured provider with the key currently held by the key store."""

    def __init__(self, config: Optional[LLMConfig] = None, api_key_store: Optional[ApiKeyStore] = None):
        self.config = config or get_llm_config()
        self.api_key_store = api_key_store or ApiKeyStore(self.config)

    def _provider_class(self):
        return PROVIDERS.get(self.config.provider, GroqProvider)

    def get_provider(self, api_key: Optional[str] = None) -> LLMProvider:
        """Get a provider bound to the given key or the stored one."""
        return self._provider_class()(self.config, api_key or self.api_key_store.get())

    def get_available_providers(self) -> List[str]:
        return [self.config.provider] if self.api_key_store.has_key else []

    def has_api_key(self) -> bool:
        return self.api_key_store.has_key

    async def generate_text(self, prompt: str, system_prompt: str = "", **kwargs) -> LLMResponse:
        """Generate text using the configured provider."""
        provider = self.get_provider()
        logger.debug(f"Generating with {provider.get_model_name()}")
        return await provider.generate_text(prompt, system_prompt, **kwargs)

    async def validate_api_key(self, api_key: str) -> Tuple[bool, Optional[str]]:
        """
        Check a key with a tiny test generation.

        Returns:
            (valid, error message)
        """
        if not api_key:
            return False, "API key is required"

        provider = self.get_provider(api_key)
        response = await provider.generate_text(API_KEY_TEST_PROMPT, max_tokens=10)

        if response.success:
            if "working" in response.content.lower():
                return True, None
            return False, "API key test failed"

        if response.error_kind is ProviderErrorKind.RATE_LIMITED:
            return False, "API key quota exceeded. Please check your provider billing."
        if response.error_kind is ProviderErrorKind.AUTHENTICATION:
            return False, "Invalid API key. Please check your API key."
        return False, "Invalid API key or insufficient quota"

    def get_provider_info(self) -> Dict[str, Any]:
        provider = self.get_provider()
        return {
            "name": self.config.provider,
            "model": provider.get_model_name(),
            "available": provider.is_available(),
            "key_source": self.api_key_store.source,
        }
