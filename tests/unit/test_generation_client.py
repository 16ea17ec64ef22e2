"""Unit tests for the resilient generation client."""

import asyncio
import json

import httpx
import pytest

from sectionforge.core.exceptions import AllProvidersFailedError, ConfigurationError
from sectionforge.strategies.generation import GenerationState, ResilientGenerationClient
from sectionforge.strategies.providers import (
    AnthropicProvider,
    CredentialRouter,
    GroqProvider,
    OpenAIProvider,
    ProviderRegistry,
)

OPENAI_HOST = "api.openai.com"
ANTHROPIC_HOST = "api.anthropic.com"
GROQ_HOST = "api.groq.com"


def openai_reply(text: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def anthropic_reply(text: str) -> dict:
    return {"content": [{"type": "text", "text": text}]}


class ScriptedTransport:
    """Replays scripted responses per host and records every request."""

    def __init__(self, script: dict[str, list]) -> None:
        self.script = {host: list(responses) for host, responses in script.items()}
        self.calls: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.calls.append(host)
        step = self.script[host].pop(0)
        if isinstance(step, Exception):
            raise step
        status, payload = step
        return httpx.Response(status, json=payload)

    def count(self, host: str) -> int:
        return self.calls.count(host)


class FakeSleep:
    """Records requested delays instead of sleeping."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_registry(providers, credentials, explicit=None):
    router = CredentialRouter(credentials, [p.name for p in providers], explicit)
    return ProviderRegistry(providers, router)


def make_client(registry, transport, sleep=None, **kwargs):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return ResilientGenerationClient(
        registry,
        http_client=http_client,
        sleep=sleep or FakeSleep(),
        **kwargs,
    )


class TestResilientGenerationClient:
    """Test suite for ResilientGenerationClient."""

    @pytest.fixture
    def registry(self):
        return make_registry([OpenAIProvider(), AnthropicProvider()], ["sk-openai", "sk-ant-key"])

    def test_first_provider_success(self, registry):
        transport = ScriptedTransport({OPENAI_HOST: [(200, openai_reply("<div>ok</div>"))]})

        async def run_test():
            client = make_client(registry, transport)
            return await client.generate("hero", "system")

        outcome = asyncio.run(run_test())

        assert outcome.text == "<div>ok</div>"
        assert outcome.provider == "openai"
        assert outcome.model == "gpt-4o-mini"
        assert [a.outcome for a in outcome.attempts] == ["succeeded"]
        assert transport.count(ANTHROPIC_HOST) == 0

    def test_backoff_on_rate_limit_then_success(self, registry):
        transport = ScriptedTransport(
            {OPENAI_HOST: [(429, {}), (429, {}), (200, openai_reply("<div>third</div>"))]}
        )
        sleep = FakeSleep()

        async def run_test():
            client = make_client(registry, transport, sleep=sleep, base_delay=0.5)
            return await client.generate("hero")

        outcome = asyncio.run(run_test())

        assert outcome.text == "<div>third</div>"
        assert sleep.delays == [0.5, 1.0]
        assert sum(sleep.delays) == 0.5 + 1.0
        assert transport.count(OPENAI_HOST) == 3
        assert transport.count(ANTHROPIC_HOST) == 0
        assert outcome.attempts[0].attempts == 3

    def test_exhausted_retries_move_on_with_fresh_counter(self, registry):
        transport = ScriptedTransport(
            {
                OPENAI_HOST: [(429, {})] * 3,
                ANTHROPIC_HOST: [(429, {}), (200, anthropic_reply("<div>b</div>"))],
            }
        )
        sleep = FakeSleep()

        async def run_test():
            client = make_client(registry, transport, sleep=sleep, max_attempts=3, base_delay=1.0)
            return await client.generate("hero")

        outcome = asyncio.run(run_test())

        assert outcome.provider == "anthropic"
        # openai: waits after attempts 0 and 1, none after the last; anthropic restarts at 1.0
        assert sleep.delays == [1.0, 2.0, 1.0]
        assert outcome.attempts[0].reason == "rate limited after 3 attempts"
        assert outcome.attempts[0].outcome == "failed"

    def test_non_rate_limit_failure_moves_on_immediately(self, registry):
        transport = ScriptedTransport(
            {
                OPENAI_HOST: [(401, {"error": "bad key"})],
                ANTHROPIC_HOST: [(200, anthropic_reply("<div>b</div>"))],
            }
        )
        sleep = FakeSleep()

        async def run_test():
            client = make_client(registry, transport, sleep=sleep)
            return await client.generate("hero")

        outcome = asyncio.run(run_test())

        assert outcome.provider == "anthropic"
        assert sleep.delays == []
        assert outcome.attempts[0].reason == "HTTP 401"
        assert outcome.attempts[0].status_code == 401

    def test_transport_error_and_empty_response(self, registry):
        transport = ScriptedTransport(
            {
                OPENAI_HOST: [httpx.ConnectTimeout("timed out")],
                ANTHROPIC_HOST: [(200, anthropic_reply("   "))],
            }
        )

        async def run_test():
            client = make_client(registry, transport)
            await client.generate("hero")

        with pytest.raises(AllProvidersFailedError) as exc_info:
            asyncio.run(run_test())

        error = exc_info.value
        assert error.providers == ["openai", "anthropic"]
        assert [a.reason for a in error.attempts] == ["transport error: ConnectTimeout", "empty response"]
        assert "timed out" not in str(error)
        assert error.__cause__ is None

    def test_invalid_payload_is_a_failure(self, registry):
        transport = ScriptedTransport(
            {
                OPENAI_HOST: [(200, {"unexpected": True})],
                ANTHROPIC_HOST: [(200, anthropic_reply("<div>b</div>"))],
            }
        )

        async def run_test():
            client = make_client(registry, transport)
            return await client.generate("hero")

        outcome = asyncio.run(run_test())
        assert outcome.attempts[0].reason == "invalid response payload"

    def test_missing_credentials_are_skipped(self):
        registry = make_registry([OpenAIProvider(), GroqProvider()], ["gsk_only"])
        transport = ScriptedTransport({GROQ_HOST: [(200, openai_reply("<div>g</div>"))]})

        async def run_test():
            client = make_client(registry, transport)
            return await client.generate("hero")

        outcome = asyncio.run(run_test())

        assert outcome.provider == "groq"
        assert outcome.attempts[0].outcome == "skipped"
        assert transport.count(OPENAI_HOST) == 0

    def test_all_skipped_raises_configuration_error(self):
        registry = make_registry([OpenAIProvider(), AnthropicProvider()], [])
        transport = ScriptedTransport({})

        async def run_test():
            client = make_client(registry, transport)
            await client.generate("hero")

        with pytest.raises(ConfigurationError) as exc_info:
            asyncio.run(run_test())

        assert [a.outcome for a in exc_info.value.attempts] == ["skipped", "skipped"]
        assert transport.calls == []

    def test_deadline_spans_whole_chain(self, registry):
        transport = ScriptedTransport({OPENAI_HOST: [(429, {})] * 5})

        async def slow_sleep(delay: float) -> None:
            await asyncio.sleep(10)

        async def run_test():
            client = make_client(registry, transport, sleep=slow_sleep, deadline=0.05)
            await client.generate("hero")

        with pytest.raises(AllProvidersFailedError) as exc_info:
            asyncio.run(run_test())

        last = exc_info.value.attempts[-1]
        assert last.provider == "openai"
        assert last.reason == "deadline exceeded"

    def test_request_carries_prompt_and_settings(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json=openai_reply("<div>x</div>"))

        registry = make_registry([OpenAIProvider()], ["sk-abc"])

        async def run_test():
            client = make_client(registry, handler, temperature=0.3, max_tokens=123)
            await client.generate("user prompt", "system prompt")

        asyncio.run(run_test())

        assert seen["auth"] == "Bearer sk-abc"
        assert seen["body"]["temperature"] == 0.3
        assert seen["body"]["max_tokens"] == 123
        assert seen["body"]["messages"][-1]["content"] == "user prompt"

    def test_backoff_delay_formula(self, registry):
        client = ResilientGenerationClient(registry, base_delay=2.0)
        assert [client.backoff_delay(n) for n in range(4)] == [2.0, 4.0, 8.0, 16.0]

    def test_states_are_exposed(self):
        assert {s.value for s in GenerationState} == {"not_started", "attempting", "success", "exhausted"}
