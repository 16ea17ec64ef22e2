"""Provider registry and credential routing.

Credentials, enabled providers and model names arrive as three
independently delimited strings with no positional contract between
them. The router maps the opaque credentials to providers using their
fixed key prefixes, falling back to positional assignment for keys
without a recognisable shape. An explicit ``{provider: credential}``
mapping, when configured, always wins.
"""

import logging
import re
from collections.abc import Iterator, Mapping, Sequence

from sectionforge.core.config import Settings
from sectionforge.interfaces.provider import BaseProvider
from sectionforge.strategies.providers.anthropic import AnthropicProvider
from sectionforge.strategies.providers.gemini import GeminiProvider
from sectionforge.strategies.providers.huggingface import HuggingFaceProvider
from sectionforge.strategies.providers.openai_compatible import (
    GroqProvider,
    OpenAIProvider,
    OpenRouterProvider,
)

logger = logging.getLogger(__name__)

PROVIDER_TYPES: tuple[type[BaseProvider], ...] = (
    OpenAIProvider,
    AnthropicProvider,
    GroqProvider,
    GeminiProvider,
    OpenRouterProvider,
    HuggingFaceProvider,
)

_LIST_SPLIT_RE = re.compile(r"[,;\s]+")


def parse_list(raw: str | None) -> list[str]:
    """Split a comma/semicolon/whitespace delimited string."""
    if not raw:
        return []
    return [item for item in _LIST_SPLIT_RE.split(raw.strip()) if item]


class CredentialRouter:
    """Maps unstructured credentials to named providers.

    Selection order for a provider:

    1. the explicit mapping entry for the provider;
    2. the first credential whose longest matching prefix belongs to it;
    3. the credential at the provider's position in the enabled list,
       unless another provider's prefix claims it;
    4. the first credential no provider's prefix claims.

    Two credentials sharing a recognisable shape can still be misrouted by
    steps 3 and 4; the explicit mapping is the unambiguous configuration.
    """

    def __init__(
        self,
        credentials: Sequence[str],
        enabled: Sequence[str],
        explicit: Mapping[str, str] | None = None,
        known_providers: Sequence[BaseProvider] | None = None,
    ) -> None:
        """Initialize the router.

        Args:
            credentials: Credentials in configuration order.
            enabled: Enabled provider names in fallback order.
            explicit: Optional provider name -> credential mapping.
            known_providers: Providers whose prefixes define ownership.
                Defaults to every built-in provider, enabled or not.
        """
        self._credentials = [c.strip() for c in credentials if c and c.strip()]
        self._enabled = [n.lower() for n in enabled]
        self._explicit = {k.lower(): v for k, v in (explicit or {}).items() if v}
        self._known = list(known_providers) if known_providers is not None else [t() for t in PROVIDER_TYPES]

    def owner_of(self, credential: str) -> str | None:
        """Return the provider whose prefix matches the credential best."""
        best_name: str | None = None
        best_length = 0
        for provider in self._known:
            prefix = provider.matching_prefix(credential)
            if prefix and len(prefix) > best_length:
                best_name, best_length = provider.name, len(prefix)
        return best_name

    def select(self, provider: BaseProvider) -> str | None:
        """Pick the credential for one provider.

        Args:
            provider: The provider to route a credential to.

        Returns:
            A credential, or None when nothing suitable is configured.
        """
        name = provider.name
        if name in self._explicit:
            return self._explicit[name]

        owners = [self.owner_of(c) for c in self._credentials]

        for credential, owner in zip(self._credentials, owners):
            if owner == name:
                return credential

        if name in self._enabled:
            index = self._enabled.index(name)
            if index < len(self._credentials) and owners[index] in (None, name):
                logger.debug(f"Assigned credential #{index} to {name} by position")
                return self._credentials[index]

        for credential, owner in zip(self._credentials, owners):
            if owner is None:
                logger.debug(f"Assigned first unclaimed credential to {name}")
                return credential

        return None


class ProviderRegistry:
    """Ordered provider descriptors; iteration order is the fallback order."""

    def __init__(
        self,
        providers: Sequence[BaseProvider],
        router: CredentialRouter,
        models: Sequence[str] = (),
    ) -> None:
        self._providers = list(providers)
        self._router = router
        self._models = list(models)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderRegistry":
        """Build the registry from the delimited configuration strings.

        Unknown provider names are logged and skipped.
        """
        available = {t.name: t for t in PROVIDER_TYPES}
        providers: list[BaseProvider] = []
        for name in parse_list(settings.ai_providers):
            provider_type = available.get(name.lower())
            if provider_type is None:
                logger.warning(f"Unknown provider '{name}' ignored. Known: {sorted(available)}")
                continue
            if any(p.name == provider_type.name for p in providers):
                continue
            providers.append(provider_type())

        router = CredentialRouter(
            credentials=parse_list(settings.ai_api_keys),
            enabled=[p.name for p in providers],
            explicit=settings.provider_credentials,
        )
        registry = cls(providers, router, parse_list(settings.ai_models))
        logger.info(f"Provider registry: {registry.names}")
        return registry

    @property
    def names(self) -> list[str]:
        return [p.name for p in self._providers]

    def credential_for(self, provider: BaseProvider) -> str | None:
        return self._router.select(provider)

    def model_for(self, provider: BaseProvider) -> str:
        return provider.select_model(self._models)

    def __iter__(self) -> Iterator[BaseProvider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)
