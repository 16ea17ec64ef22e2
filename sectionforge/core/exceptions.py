"""Domain exceptions for section resolution and generation.

Provider-level and segment-level failures are recovered where they happen;
only exhaustion of the whole pipeline reaches the caller.
"""

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderAttempt:
    """Outcome of trying one provider in the fallback chain.

    Attributes:
        provider: Provider name.
        outcome: "skipped", "failed" or "succeeded".
        reason: Short human-readable reason (never a raw transport error).
        attempts: Number of HTTP requests issued to this provider.
        status_code: Last HTTP status received, if any.
    """

    provider: str
    outcome: str
    reason: str
    attempts: int = 0
    status_code: int | None = None

    def describe(self) -> str:
        return f"{self.provider}: {self.reason}"


class SectionForgeError(Exception):
    """Base class for all domain errors."""

    pass


class ConfigurationError(SectionForgeError):
    """No usable credential was found for any enabled provider."""

    def __init__(self, message: str, attempts: Sequence[ProviderAttempt] = ()) -> None:
        super().__init__(message)
        self.attempts: tuple[ProviderAttempt, ...] = tuple(attempts)


class NoMatchError(SectionForgeError):
    """Nothing in the catalog (or in generated output) matched the request."""

    def __init__(
        self,
        query: str,
        message: str | None = None,
        attempts: Sequence[ProviderAttempt] = (),
    ) -> None:
        self.query = query
        self.attempts: tuple[ProviderAttempt, ...] = tuple(attempts)
        detail = message or f'No sections found matching: "{query}"'
        if self.attempts:
            detail += " (providers: " + "; ".join(a.describe() for a in self.attempts) + ")"
        super().__init__(detail)


class AllProvidersFailedError(SectionForgeError):
    """Every attempted provider failed.

    Attributes:
        attempts: Ordered attempts, one per provider, with the failure reason.
    """

    def __init__(self, attempts: Sequence[ProviderAttempt]) -> None:
        self.attempts: tuple[ProviderAttempt, ...] = tuple(attempts)
        summary = "; ".join(a.describe() for a in self.attempts) or "no providers configured"
        super().__init__(f"All providers failed: {summary}")

    @property
    def providers(self) -> list[str]:
        return [a.provider for a in self.attempts]


class MalformedFragmentError(SectionForgeError):
    """A generated segment was too short or not markup; it is dropped."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"Segment {index} discarded: {reason}")
        self.index = index
        self.reason = reason


class PersistenceWarning(Warning):
    """Writing a generated section back to the catalog failed (logged only)."""

    pass
