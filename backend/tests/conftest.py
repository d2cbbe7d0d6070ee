"""Shared test fixtures: in-memory Valkey double, isolated config, fake LLM invoker."""

import asyncio
import json
from typing import Callable

import pytest

from clauseguard import db
from clauseguard.api.policy_analyzer.models import LLMSettings
from clauseguard.core.config import get_settings

LLM_ENV_VARS = ("LLM_ENDPOINT", "LLM_MODEL", "LLM_API_KEY", "MAX_TEXT_LENGTH", "CHUNK_RESERVE")


class FakeValkey:
    """The slice of the redis client API the stores use, kept in a dict."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int | None] = {}
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise ConnectionError("Valkey unavailable")

    def ping(self) -> bool:
        self._check()
        return True

    def get(self, key: str) -> bytes | None:
        self._check()
        return self.data.get(key)

    def set(self, key: str, value: bytes, ex: int | None = None) -> bool:
        self._check()
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def delete(self, *keys: str) -> int:
        self._check()
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    def close(self) -> None:
        pass

    def load(self, key: str) -> dict:
        return json.loads(self.data[key].decode("utf-8"))


class FakeInvoker:
    """Stands in for LLMInvoker; ``reply`` maps the user prompt to reply text (or raises)."""

    def __init__(self, reply: Callable[[str], str], delay: float = 0.0) -> None:
        self.reply = reply
        self.delay = delay
        self.calls: list[tuple[LLMSettings, str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def invoke(self, settings: LLMSettings, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((settings, system_prompt, user_prompt))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            return self.reply(user_prompt)
        finally:
            self.in_flight -= 1


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch):
    """No LLM settings leak in from the shell environment."""
    for name in LLM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def valkey():
    fake = FakeValkey()
    db.use_client(fake)
    yield fake
    db.use_client(None)


@pytest.fixture
def llm_settings() -> LLMSettings:
    return LLMSettings(endpoint="https://llm.example.com/v1", model="test-model", api_key="sk-test")


@pytest.fixture
def make_invoker() -> Callable[..., FakeInvoker]:
    return FakeInvoker
