"""Providers speaking the OpenAI chat-completions wire format.

OpenAI, Groq and OpenRouter share the request and response shape and
differ only in endpoint, key prefixes and model naming.
"""

from typing import Any

from sectionforge.interfaces.provider import BaseProvider, ProviderRequest, ProviderResponseError


class OpenAICompatibleProvider(BaseProvider):
    """Chat-completions provider.

    Attributes:
        endpoint: Full chat-completions URL.
    """

    endpoint: str = ""

    def build_request(
        self,
        prompt: str,
        system_prompt: str,
        credential: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> ProviderRequest:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        return ProviderRequest(
            url=self.endpoint,
            headers={
                "Authorization": f"Bearer {credential}",
                "Content-Type": "application/json",
            },
            json={
                "model": model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
        )

    def parse_response(self, payload: Any) -> str:
        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(f"unexpected {self.name} response shape") from e
        return content or ""


class OpenAIProvider(OpenAICompatibleProvider):
    name = "openai"
    credential_prefixes = ("sk-proj-", "sk-")
    model_markers = ("gpt", "o1", "o3", "o4")
    default_model = "gpt-4o-mini"
    endpoint = "https://api.openai.com/v1/chat/completions"


class GroqProvider(OpenAICompatibleProvider):
    name = "groq"
    credential_prefixes = ("gsk_",)
    model_markers = ("llama", "mixtral", "gemma")
    default_model = "llama-3.3-70b-versatile"
    endpoint = "https://api.groq.com/openai/v1/chat/completions"


class OpenRouterProvider(OpenAICompatibleProvider):
    """OpenRouter routes to many vendors; its model names are ``vendor/model``."""

    name = "openrouter"
    credential_prefixes = ("sk-or-",)
    model_markers = ("/",)
    namespaced_models = True
    default_model = "openai/gpt-4o-mini"
    endpoint = "https://openrouter.ai/api/v1/chat/completions"
