"""Resilient multi-provider generation client.

Providers are tried strictly one after another in registry order. A
rate-limited provider is retried with exponential backoff before the
chain moves on; any other failure moves on immediately. A single
deadline bounds the whole chain.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

import httpx

from sectionforge.core.config import Settings
from sectionforge.core.exceptions import (
    AllProvidersFailedError,
    ConfigurationError,
    ProviderAttempt,
)
from sectionforge.interfaces.provider import BaseProvider
from sectionforge.strategies.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429

SleepFunc = Callable[[float], Awaitable[None]]


class GenerationState(str, Enum):
    """Lifecycle of one `generate` call."""

    NOT_STARTED = "not_started"
    ATTEMPTING = "attempting"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"


@dataclass
class _ChainProgress:
    state: GenerationState = GenerationState.NOT_STARTED
    provider: str | None = None
    retry: int = 0

    def advance(self, state: GenerationState, provider: str | None = None, retry: int = 0) -> None:
        self.state, self.provider, self.retry = state, provider, retry
        logger.debug(f"Generation state -> {state.value} (provider={provider}, retry={retry})")


@dataclass(frozen=True)
class GenerationOutcome:
    """Successful result of a generation call.

    Attributes:
        text: Raw generated text.
        provider: Name of the provider that answered.
        model: Model used for the winning request.
        attempts: Every provider attempt in order, the winning one last.
    """

    text: str
    provider: str
    model: str
    attempts: tuple[ProviderAttempt, ...]


class ResilientGenerationClient:
    """Sends one prompt through the provider fallback chain.

    Attributes:
        registry: Providers in fallback order plus credential routing.
        max_attempts: Requests per provider before giving up on rate limits.
        base_delay: Backoff base; attempt n waits ``base_delay * 2**n``.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        http_client: httpx.AsyncClient | None = None,
        max_attempts: int = 5,
        base_delay: float = 1.0,
        request_timeout: float = 60.0,
        deadline: float = 90.0,
        temperature: float = 0.7,
        max_tokens: int = 4000,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            registry: Ordered providers and credential routing.
            http_client: Optional shared client; one is created per call if None.
            max_attempts: Requests per provider on repeated rate limits.
            base_delay: Backoff base in seconds.
            request_timeout: Per-request timeout in seconds.
            deadline: Budget in seconds for the whole fallback chain.
            temperature: Sampling temperature.
            max_tokens: Completion token budget.
            sleep: Awaitable sleep, replaceable in tests.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.registry = registry
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._http_client = http_client
        self._request_timeout = request_timeout
        self._deadline = deadline
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        registry: ProviderRegistry | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "ResilientGenerationClient":
        return cls(
            registry=registry or ProviderRegistry.from_settings(settings),
            http_client=http_client,
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
            request_timeout=settings.request_timeout,
            deadline=settings.generation_deadline,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )

    def backoff_delay(self, attempt: int) -> float:
        """Delay to wait after the rate-limited request number `attempt` (0-based)."""
        return self.base_delay * 2**attempt

    async def generate(self, prompt: str, system_prompt: str = "") -> GenerationOutcome:
        """Generate text with the first provider that answers.

        Args:
            prompt: User prompt.
            system_prompt: System instructions.

        Returns:
            The winning provider's text and the full attempt history.

        Raises:
            ConfigurationError: If no enabled provider has a credential.
            AllProvidersFailedError: If every attempted provider failed or the
                deadline expired.
        """
        attempts: list[ProviderAttempt] = []
        progress = _ChainProgress()

        if len(self.registry) == 0:
            raise ConfigurationError("No generation providers are enabled")

        outcome: GenerationOutcome | None = None
        try:
            async with asyncio.timeout(self._deadline):
                if self._http_client is not None:
                    outcome = await self._run_chain(self._http_client, prompt, system_prompt, attempts, progress)
                else:
                    async with httpx.AsyncClient(timeout=self._request_timeout) as client:
                        outcome = await self._run_chain(client, prompt, system_prompt, attempts, progress)
        except TimeoutError:
            logger.warning(f"Generation deadline of {self._deadline}s exceeded during {progress.provider}")
            attempts.append(
                ProviderAttempt(
                    provider=progress.provider or "chain",
                    outcome="failed",
                    reason="deadline exceeded",
                    attempts=progress.retry + 1 if progress.provider else 0,
                )
            )

        if outcome is not None:
            return outcome

        progress.advance(GenerationState.EXHAUSTED)
        if all(a.outcome == "skipped" for a in attempts):
            logger.error("No credential available for any enabled provider")
            raise ConfigurationError(
                "No usable credential for any enabled provider: "
                + ", ".join(a.provider for a in attempts),
                attempts,
            )

        error = AllProvidersFailedError(attempts)
        logger.error(str(error))
        raise error

    async def _run_chain(
        self,
        client: httpx.AsyncClient,
        prompt: str,
        system_prompt: str,
        attempts: list[ProviderAttempt],
        progress: _ChainProgress,
    ) -> GenerationOutcome | None:
        for provider in self.registry:
            credential = self.registry.credential_for(provider)
            if not credential:
                logger.info(f"Skipping {provider.name}: no credential configured")
                attempts.append(ProviderAttempt(provider.name, "skipped", "no credential configured"))
                continue

            model = self.registry.model_for(provider)
            text, attempt = await self._try_provider(
                client, provider, credential, model, prompt, system_prompt, progress
            )
            attempts.append(attempt)
            if text is not None:
                progress.advance(GenerationState.SUCCESS, provider.name, progress.retry)
                logger.info(f"Generated {len(text)} characters with {provider.name} ({model})")
                return GenerationOutcome(text=text, provider=provider.name, model=model, attempts=tuple(attempts))

            logger.warning(f"Provider {provider.name} failed: {attempt.reason}")

        return None

    async def _try_provider(
        self,
        client: httpx.AsyncClient,
        provider: BaseProvider,
        credential: str,
        model: str,
        prompt: str,
        system_prompt: str,
        progress: _ChainProgress,
    ) -> tuple[str | None, ProviderAttempt]:
        """Run one provider with its own retry counter.

        Returns:
            The generated text (None on failure) and the attempt record.
        """
        request = provider.build_request(
            prompt=prompt,
            system_prompt=system_prompt,
            credential=credential,
            model=model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )

        def failed(reason: str, count: int, status: int | None = None) -> tuple[None, ProviderAttempt]:
            return None, ProviderAttempt(provider.name, "failed", reason, count, status)

        for attempt in range(self.max_attempts):
            progress.advance(GenerationState.ATTEMPTING, provider.name, attempt)
            try:
                response = await client.post(
                    request.url,
                    headers=request.headers,
                    json=request.json,
                    timeout=self._request_timeout,
                )
            except httpx.HTTPError as e:
                logger.debug(f"{provider.name} transport error: {e!r}")
                return failed(f"transport error: {type(e).__name__}", attempt + 1)

            status = response.status_code
            if status == RATE_LIMIT_STATUS:
                if attempt + 1 >= self.max_attempts:
                    break
                delay = self.backoff_delay(attempt)
                logger.warning(
                    f"{provider.name} rate limited (attempt {attempt + 1}/{self.max_attempts}), "
                    f"retrying in {delay:.2f}s"
                )
                await self._sleep(delay)
                continue

            if not response.is_success:
                return failed(f"HTTP {status}", attempt + 1, status)

            try:
                text = provider.parse_response(response.json())
            except ValueError as e:
                logger.debug(f"{provider.name} returned an unusable payload: {e}")
                return failed("invalid response payload", attempt + 1, status)

            if not text or not text.strip():
                return failed("empty response", attempt + 1, status)

            return text, ProviderAttempt(provider.name, "succeeded", "ok", attempt + 1, status)

        return failed(
            f"rate limited after {self.max_attempts} attempts",
            self.max_attempts,
            RATE_LIMIT_STATUS,
        )
