"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from prompt_splicer.l1_entities.chat_message import ChatMessage
from prompt_splicer.l1_entities.config import AppConfig
from prompt_splicer.l1_entities.model_profile import MODEL_PROFILES
from prompt_splicer.l2_use_cases.ai_gateway import AIGateway, ProviderContext
from prompt_splicer.l2_use_cases.ports.llm_client import ChatResponse
from prompt_splicer.l2_use_cases.result_cache import ResultCache
from prompt_splicer.l2_use_cases.segment_store import SegmentStore
from prompt_splicer.l2_use_cases.session_persistence import SessionPersistence
from prompt_splicer.l3_interface_adapters.controllers.session_controller import SessionController
from prompt_splicer.l4_frameworks_and_drivers.infra_config import build_app_config

SEGMENTS_JSON = '[{"title": "Intro", "content": "A"}, {"title": "Body", "content": "B"}]'

# --- Protocol-conforming Fakes ---


class FakeLLMClient:
    """Fake LLM client. Returns queued responses in order, repeating the last one."""

    def __init__(self, response: str | None = SEGMENTS_JSON, finish_reason: str | None = 'stop'):
        self._responses: list[ChatResponse] = [ChatResponse(content=response, finish_reason=finish_reason)]
        self.chat_calls: list[tuple[str, list[ChatMessage], dict]] = []
        self._error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self._connectivity = (True, '')

    async def chat(self, model: str, messages: list[ChatMessage], **params: object) -> ChatResponse:
        self.chat_calls.append((model, list(messages), dict(params)))
        if self.gate is not None:
            await self.gate.wait()
        if self._error is not None:
            raise self._error
        if len(self._responses) > 1:
            return self._responses.pop(0)
        return self._responses[0]

    def check_connectivity(self) -> tuple[bool, str]:
        return self._connectivity

    def set_response(self, response: str | None, finish_reason: str | None = 'stop') -> None:
        self._responses = [ChatResponse(content=response, finish_reason=finish_reason)]

    def queue_responses(self, *responses: str) -> None:
        self._responses = [ChatResponse(content=r, finish_reason='stop') for r in responses]

    def set_error(self, error: Exception | None) -> None:
        self._error = error

    def hold(self) -> asyncio.Event:
        """Block chat() until the returned event is set."""
        self.gate = asyncio.Event()
        return self.gate


class InMemoryKeyValueStore:
    """Dict-backed KeyValueStore that can be told to fail like a full or broken disk."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.set_calls = 0

    def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise OSError('read failed')
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError('quota exceeded')
        self.set_calls += 1
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self, prefix: str = '') -> list[str]:
        return sorted(k for k in self.data if k.startswith(prefix))


class FakeClipboard:
    def __init__(self, fallback: str | None = None) -> None:
        self.copied: list[str] = []
        self._fallback = fallback

    def copy(self, text: str) -> str | None:
        self.copied.append(text)
        return self._fallback


class FakeClock:
    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# --- Standard Fixtures ---


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    d = tmp_path / 'output'
    d.mkdir()
    return d


@pytest.fixture
def default_config(tmp_output_dir: Path) -> AppConfig:
    return build_app_config({'output': {'directory': str(tmp_output_dir)}})


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(kv_store: InMemoryKeyValueStore, clock: FakeClock) -> ResultCache:
    return ResultCache(kv_store, clock=clock)


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def provider(fake_llm: FakeLLMClient) -> ProviderContext:
    return ProviderContext(client=fake_llm, profile=MODEL_PROFILES['gpt-4o-mini'])


@pytest.fixture
def fake_clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def controller(default_config, kv_store, cache, fake_llm, fake_clipboard) -> SessionController:
    ctrl = SessionController(
        config=default_config,
        store=SegmentStore(),
        gateway=AIGateway(cache, timeout_seconds=5),
        persistence=SessionPersistence(kv_store),
        clipboard=fake_clipboard,
        client_factory=lambda _creds: fake_llm,
    )
    return ctrl
