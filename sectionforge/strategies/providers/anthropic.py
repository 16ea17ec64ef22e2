"""Anthropic Messages API provider."""

from typing import Any

from sectionforge.interfaces.provider import BaseProvider, ProviderRequest, ProviderResponseError

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(BaseProvider):
    """Provider for the Anthropic Messages API.

    The system prompt is a top-level field rather than a message.
    """

    name = "anthropic"
    credential_prefixes = ("sk-ant-",)
    model_markers = ("claude",)
    default_model = "claude-3-5-sonnet-latest"
    endpoint = "https://api.anthropic.com/v1/messages"

    def build_request(
        self,
        prompt: str,
        system_prompt: str,
        credential: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> ProviderRequest:
        body: dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if system_prompt:
            body["system"] = system_prompt

        return ProviderRequest(
            url=self.endpoint,
            headers={
                "x-api-key": credential,
                "anthropic-version": ANTHROPIC_VERSION,
                "Content-Type": "application/json",
            },
            json=body,
        )

    def parse_response(self, payload: Any) -> str:
        try:
            blocks = payload["content"]
            return "".join(b.get("text", "") for b in blocks if b.get("type") == "text")
        except (KeyError, TypeError, AttributeError) as e:
            raise ProviderResponseError("unexpected anthropic response shape") from e
