"""Abstract base class for generative text providers.

Each backend is one subclass; the registry holds instances in fallback
order, so adding a backend means adding a subclass.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ProviderRequest:
    """A fully built HTTP request for one provider.

    Attributes:
        url: Endpoint URL.
        headers: Request headers, auth included.
        json: JSON body.
    """

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    json: dict[str, Any] = field(default_factory=dict)


class ProviderResponseError(ValueError):
    """The provider answered 2xx but the payload had an unexpected shape."""

    pass


class BaseProvider(ABC):
    """Abstract base class for provider descriptors.

    Attributes:
        name: Registry key, also used in the enabled-provider list.
        credential_prefixes: Fixed prefixes identifying this provider's keys.
        model_markers: Substrings identifying this provider's model names.
        namespaced_models: True when the provider expects ``vendor/model`` names;
            other providers never take such a candidate.
        default_model: Model used when no candidate matches a marker.
    """

    name: str = ""
    credential_prefixes: tuple[str, ...] = ()
    model_markers: tuple[str, ...] = ()
    namespaced_models: bool = False
    default_model: str = ""

    def matching_prefix(self, credential: str) -> str | None:
        """Return the longest of this provider's prefixes that starts the credential."""
        matches = [p for p in self.credential_prefixes if credential.startswith(p)]
        return max(matches, key=len) if matches else None

    def select_model(self, candidates: Sequence[str]) -> str:
        """Pick the first candidate containing one of this provider's markers.

        ``vendor/model`` names are left to providers with `namespaced_models`.

        Args:
            candidates: Configured model names, in configuration order.

        Returns:
            The matching model name or `default_model`.
        """
        for candidate in candidates:
            if "/" in candidate and not self.namespaced_models:
                continue
            lowered = candidate.lower()
            if any(marker in lowered for marker in self.model_markers):
                return candidate
        return self.default_model

    @abstractmethod
    def build_request(
        self,
        prompt: str,
        system_prompt: str,
        credential: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> ProviderRequest:
        """Build the provider-specific request.

        Args:
            prompt: User prompt.
            system_prompt: System instructions.
            credential: API credential for this provider.
            model: Model name.
            temperature: Sampling temperature.
            max_tokens: Completion token budget.

        Returns:
            The request to send.
        """
        ...

    @abstractmethod
    def parse_response(self, payload: Any) -> str:
        """Extract the generated text from a decoded JSON response.

        Raises:
            ProviderResponseError: If the payload shape is not recognised.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
