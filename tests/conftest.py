"""
Shared fakes for the test suite.

The remote browser, the LLM and every HTTP API are replaced in-process:
FakeRenderer serves canned HTML per URL, FakeLLM returns a canned reply and
mock_client() wraps an httpx.MockTransport handler.
"""
import asyncio
from typing import Callable, Optional

import httpx
import pytest

from config import settings
from database import close_engine, create_tables, init_engine
from factors import BaseFactorFetcher, FactorUnavailable
from llm import LLMClient, LLMResponse


class FakeRenderer:
    """Serve HTML per URL; an Exception value is raised instead."""

    def __init__(self, pages: Optional[dict] = None, default: str = ""):
        self.pages = pages or {}
        self.default = default
        self.calls: list[tuple[str, dict]] = []

    async def render(self, url: str, wait_for: Optional[str] = None, **kwargs) -> str:
        self.calls.append((url, {"wait_for": wait_for, **kwargs}))
        page = self.pages.get(url, self.default)
        if isinstance(page, Exception):
            raise page
        return page

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]


class FakeLLM(LLMClient):
    """LLM client that returns a fixed reply and records prompts."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None):
        super().__init__(api_key="test", model="fake-model")
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []
        self.calls: list[dict] = []

    def generate(self, prompt, system=None, max_tokens=500, temperature=0.0):
        self.prompts.append(prompt)
        self.calls.append({"max_tokens": max_tokens, "temperature": temperature})
        if self.error:
            raise self.error
        return LLMResponse(content=self.reply, model=self.model, usage={"input_tokens": 10, "output_tokens": 5})

    def chat(self, messages, system=None, max_tokens=500, temperature=0.0):
        return self.generate(messages[-1].content, system, max_tokens, temperature)


class StubFetcher(BaseFactorFetcher):
    """Fetcher with fixed values; None makes it unavailable."""

    def __init__(self, name: str, values: Optional[dict]):
        super().__init__()
        self.name = name
        self.values = values

    async def fetch(self) -> dict:
        if self.values is None:
            raise FactorUnavailable("stubbed out")
        return self.values


class FakeNotifier:
    def __init__(self, ok: bool = True):
        self.ok = ok
        self.sent: list[tuple[str, str, str]] = []

    async def send_news(self, site_name: str, title: str, link: str) -> bool:
        self.sent.append((site_name, title, link))
        return self.ok


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def failing_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, json={"error": "unavailable"})


@pytest.fixture(autouse=True)
def quiet_settings(monkeypatch, tmp_path):
    """No API pacing and no writes outside tmp_path."""
    monkeypatch.setattr(settings, "API_CALL_DELAY", 0)
    monkeypatch.setattr(settings, "SITE_DELAY", 0)
    monkeypatch.setattr(settings, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(settings, "LOG_DIR", tmp_path / "data" / "logs")
    monkeypatch.setattr(settings, "DATABASE_URL", "")
    monkeypatch.setattr(settings, "DATABASE_PATH", tmp_path / "data" / "test.db")


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "test-browser-key")
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-gemini-key")


@pytest.fixture
def run_db(tmp_path):
    """
    Run a coroutine factory against a fresh SQLite database.

    The engine lives for exactly one event loop, so each scenario runs inside
    a single asyncio.run.
    """
    url = f"sqlite+aiosqlite:///{tmp_path / 'scenario.db'}"

    def run(scenario):
        async def main():
            await init_engine(url)
            await create_tables()
            try:
                return await scenario()
            finally:
                await close_engine()
        return asyncio.run(main())

    return run


@pytest.fixture
def offline_db(monkeypatch, tmp_path):
    """
    Run a coroutine factory with DATABASE_URL pointing at a file SQLite cannot open.

    The engine is disposed afterwards so later scenarios get a fresh one.
    """
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'db.sqlite'}")

    def run(scenario):
        async def main():
            try:
                return await scenario()
            finally:
                await close_engine()
        return asyncio.run(main())

    return run
