"""Google Gemini ``generateContent`` provider."""

from typing import Any

from sectionforge.interfaces.provider import BaseProvider, ProviderRequest, ProviderResponseError


class GeminiProvider(BaseProvider):
    name = "gemini"
    credential_prefixes = ("AIza",)
    model_markers = ("gemini",)
    default_model = "gemini-1.5-flash"
    base_url = "https://generativelanguage.googleapis.com/v1beta/models"

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
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        if system_prompt:
            body["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        return ProviderRequest(
            url=f"{self.base_url}/{model}:generateContent",
            headers={
                "x-goog-api-key": credential,
                "Content-Type": "application/json",
            },
            json=body,
        )

    def parse_response(self, payload: Any) -> str:
        try:
            parts = payload["candidates"][0]["content"]["parts"]
            return "".join(p.get("text", "") for p in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ProviderResponseError("unexpected gemini response shape") from e
