"""Hugging Face Inference API provider.

Text-generation models there take a single prompt rather than a
message list, so the system prompt is prepended to the user prompt.
"""

from typing import Any

from sectionforge.interfaces.provider import BaseProvider, ProviderRequest, ProviderResponseError


class HuggingFaceProvider(BaseProvider):
    name = "huggingface"
    credential_prefixes = ("hf_",)
    model_markers = ("mistralai/", "huggingface")
    namespaced_models = True
    default_model = "mistralai/Mistral-7B-Instruct-v0.3"
    base_url = "https://api-inference.huggingface.co/models"

    def build_request(
        self,
        prompt: str,
        system_prompt: str,
        credential: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> ProviderRequest:
        full_prompt = f"{system_prompt}\n\n{prompt}" if system_prompt else prompt
        return ProviderRequest(
            url=f"{self.base_url}/{model}",
            headers={
                "Authorization": f"Bearer {credential}",
                "Content-Type": "application/json",
            },
            json={
                "inputs": full_prompt,
                "parameters": {
                    "temperature": temperature,
                    "max_new_tokens": max_tokens,
                    "return_full_text": False,
                },
            },
        )

    def parse_response(self, payload: Any) -> str:
        item = payload[0] if isinstance(payload, list) and payload else payload
        if not isinstance(item, dict) or "generated_text" not in item:
            raise ProviderResponseError("unexpected huggingface response shape")
        return item["generated_text"] or ""
