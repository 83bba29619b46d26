"""Shared fixtures for reliable-llm tests."""

from typing import List, Optional

import pytest

from reliable_llm.core.llm_provider import ChatProvider, ChatRequest, ChatResponse


class MockInnerProvider(ChatProvider):
    """Fails ``fail_until`` times with ``error_factory()``, then succeeds."""

    name = "MockProvider"

    def __init__(
        self,
        fail_until: int = 0,
        supports_tools: bool = False,
        error_factory=None,
    ):
        self.fail_until = fail_until
        self.supports_tools = supports_tools
        self.error_factory = error_factory or (lambda: RuntimeError("ProviderError"))
        self.call_count = 0
        self.closed = False
        self.calls: List[tuple] = []

    def _maybe_fail(self) -> None:
        self.call_count += 1
        if self.call_count <= self.fail_until:
            raise self.error_factory()

    def chat_with_system(self, system_prompt: Optional[str], message: str, model: str, temperature: float) -> str:
        self.calls.append((system_prompt, message, model, temperature))
        self._maybe_fail()
        return "mock response"

    def chat(self, request: ChatRequest, model: str, temperature: float) -> ChatResponse:
        self.calls.append((request, model, temperature))
        self._maybe_fail()
        return ChatResponse(content="mock chat", model=model)

    def supports_native_tools(self) -> bool:
        return self.supports_tools

    def close(self) -> None:
        self.closed = True


class KeyedProvider(MockInnerProvider):
    """MockInnerProvider that accepts credential switches in place."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.keys_set: List[str] = []

    def set_api_key(self, key: str) -> None:
        self.keys_set.append(key)


class SleepRecorder:
    """Stand-in for time.sleep that records requested waits."""

    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def waits_ms(self) -> List[int]:
        return [round(s * 1000) for s in self.calls]


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def mock_provider_factory():
    return MockInnerProvider


@pytest.fixture
def keyed_provider_factory():
    return KeyedProvider
