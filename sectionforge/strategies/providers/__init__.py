"""Concrete generation provider implementations."""

from sectionforge.strategies.providers.anthropic import AnthropicProvider
from sectionforge.strategies.providers.gemini import GeminiProvider
from sectionforge.strategies.providers.huggingface import HuggingFaceProvider
from sectionforge.strategies.providers.openai_compatible import (
    GroqProvider,
    OpenAIProvider,
    OpenRouterProvider,
)
from sectionforge.strategies.providers.registry import (
    PROVIDER_TYPES,
    CredentialRouter,
    ProviderRegistry,
    parse_list,
)

__all__ = [
    "AnthropicProvider",
    "GeminiProvider",
    "GroqProvider",
    "HuggingFaceProvider",
    "OpenAIProvider",
    "OpenRouterProvider",
    "PROVIDER_TYPES",
    "CredentialRouter",
    "ProviderRegistry",
    "parse_list",
]
