from __future__ import annotations

import asyncio

import pytest

from buddy.config import Settings


class StubProvider:
    """Provider double that records every message list it is sent."""

    def __init__(self, name: str, result: dict | None = None, delay: float = 0.0) -> None:
        self.name = name
        self.result = result if result is not None else {"content": f"{name} answer"}
        self.delay = delay
        self.calls: list[list[dict]] = []

    async def send(self, messages: list[dict], model: str | None = None) -> dict:
        self.calls.append(messages)
        if self.delay:
            await asyncio.sleep(self.delay)
        return dict(self.result)


class Barrier:
    """Releases waiters only once `parties` of them are in flight together."""

    def __init__(self, parties: int) -> None:
        self.parties = parties
        self.arrived = 0
        self.released = asyncio.Event()

    async def wait(self) -> None:
        self.arrived += 1
        if self.arrived >= self.parties:
            self.released.set()
        await asyncio.wait_for(self.released.wait(), timeout=1.0)


class GatedProvider(StubProvider):
    """Stub that cannot answer until every provider sharing its barrier has been called."""

    def __init__(self, name: str, barrier: Barrier, result: dict | None = None) -> None:
        super().__init__(name, result)
        self.barrier = barrier

    async def send(self, messages: list[dict], model: str | None = None) -> dict:
        self.calls.append(messages)
        await self.barrier.wait()
        return dict(self.result)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_keys={"chatgpt": "sk-openai-test", "deepseek": "sk-deepseek-test", "grok": "xai-test"})


@pytest.fixture(autouse=True)
def clear_provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OPENAI_API_KEY", "DEEPSEEK_API_KEY", "XAI_API_KEY", "BUDDY_DEFAULT_SUMMARIZER"):
        monkeypatch.delenv(name, raising=False)
