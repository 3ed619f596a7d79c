"""Shared fakes for the runner and agent tests.

No real browser or model is started: ``FakePage`` records every call the
runner makes and ``FakeSession`` stands in for ``BrowserSession``.
"""
from __future__ import annotations

import os

# must be set before chat_runner.settings is imported
os.environ.setdefault("SQLITE_URL", "sqlite://")

from types import SimpleNamespace
from typing import Any

import pytest
from playwright.async_api import Error as PlaywrightError
from sqlmodel import SQLModel

from chat_runner.models import ExecutionResult
from chat_runner.persistence import ChatHistory, build_engine


class FakeLocator:
    def __init__(self, page: "FakePage", kind: str, target: Any) -> None:
        self.page = page
        self.kind = kind
        self.target = target

    @property
    def first(self) -> "FakeLocator":
        return self

    async def click(self, timeout: int) -> None:
        self.page.record("click", self.target, timeout)

    async def fill(self, value: str, timeout: int) -> None:
        self.page.record("fill", (self.target, value), timeout)

    async def wait_for(self, timeout: int) -> None:
        self.page.record("wait_for", self.target, timeout)

    async def inner_text(self, timeout: int) -> str:
        self.page.record("inner_text", self.target, timeout)
        return self.page.texts[self.target]


class FakePage:
    """Records calls; ``fail_on[name]`` makes that call raise."""

    def __init__(self, texts: dict[str, str] | None = None) -> None:
        self.calls: list[tuple[str, Any, int]] = []
        self.fail_on: dict[str, BaseException] = {}
        self.texts = texts or {"body": "Example Domain"}

    def record(self, name: str, target: Any, timeout: int) -> None:
        self.calls.append((name, target, timeout))
        if name in self.fail_on:
            raise self.fail_on[name]

    def called(self, name: str) -> list[tuple[str, Any, int]]:
        return [c for c in self.calls if c[0] == name]

    async def goto(self, url: str, timeout: int) -> None:
        self.record("goto", url, timeout)

    def get_by_text(self, pattern: Any) -> FakeLocator:
        return FakeLocator(self, "text", pattern)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, "css", selector)

    async def screenshot(self, path: str, timeout: int) -> None:
        self.record("screenshot", path, timeout)


class FakeSession:
    def __init__(self, page: FakePage | None = None, open_error: BaseException | None = None) -> None:
        self.page = page or FakePage()
        self.open_error = open_error
        self.close_error: BaseException | None = None
        self.opened = False
        self.closed = False

    async def open(self) -> FakePage:
        if self.open_error is not None:
            raise self.open_error
        self.opened = True
        return self.page

    async def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakeRunner:
    """Replays canned results instead of driving a browser."""

    def __init__(self, results: list[ExecutionResult] | None = None) -> None:
        self.results = results or []
        self.plans: list[Any] = []

    async def execute_plan(self, plan: Any) -> list[ExecutionResult]:
        self.plans.append(plan)
        return list(self.results)


class FakeLLM:
    """Returns queued replies in order, shaped like LangChain AI messages."""

    def __init__(self, *replies: str) -> None:
        self.replies = list(replies)
        self.requests: list[list[dict[str, str]]] = []

    async def ainvoke(self, messages: list[dict[str, str]]) -> SimpleNamespace:
        self.requests.append(messages)
        return SimpleNamespace(content=self.replies.pop(0))


class FailingLLM:
    async def ainvoke(self, messages: list[dict[str, str]]) -> SimpleNamespace:
        raise RuntimeError("model unavailable")


@pytest.fixture
def page() -> FakePage:
    return FakePage()


@pytest.fixture
def session(page: FakePage) -> FakeSession:
    return FakeSession(page)


@pytest.fixture
def history() -> ChatHistory:
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    return ChatHistory(engine)


@pytest.fixture
def playwright_timeout() -> PlaywrightError:
    from playwright.async_api import TimeoutError as PlaywrightTimeoutError

    return PlaywrightTimeoutError("Timeout 10000ms exceeded.")
