"""
AI Processing module for the Email Agent.

This module provides the hosted language model integration.
"""

from .llm_manager import (
    LLMManager,
    LLMProvider,
    LLMResponse,
    ChatCompletionsProvider,
    GroqProvider,
    OpenRouterProvider,
    ProviderErrorKind,
    classify_provider_error
)

__all__ = [
    'LLMManager',
    'LLMProvider',
    'LLMResponse',
    'ChatCompletionsProvider',
    'GroqProvider',
    'OpenRouterProvider',
    'ProviderErrorKind',
    'classify_provider_error'
]
