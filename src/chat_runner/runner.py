"""Playwright execution of validated action plans.

Each ``execute_plan`` call owns one fresh headless browser session for
its whole lifetime. Steps run strictly in order against a single page;
a failing step becomes a failed ``ExecutionResult`` and the next step
is still attempted. ``closeBrowser`` ends the plan early. The session
is closed on every exit path and close errors are only logged.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from playwright.async_api import Browser, Error as PlaywrightError, Page, Playwright, async_playwright

from chat_runner.models import ActionPlan, ExecutionResult
from chat_runner.settings import settings
from chat_runner.utils import UnsafeUrlError, check_navigable_url, sanitize_screenshot_name

logger = logging.getLogger(__name__)

BROWSER_INIT_ACTION = "browser-init"
NAVIGATION_TIMEOUT_MS = 30_000
STEP_TIMEOUT_MS = 10_000

StepHandler = Callable[[Any, Page], Awaitable[Optional[str]]]


class BrowserSession:
    """One browser plus one page, closed as far as it was opened."""

    def __init__(self, headless: bool = True, executable_path: Optional[str] = None) -> None:
        self.headless = headless
        self.executable_path = executable_path
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def open(self) -> Page:
        self._playwright = await async_playwright().start()
        launch_kwargs: Dict[str, Any] = {"headless": self.headless}
        if self.executable_path:
            launch_kwargs["executable_path"] = self.executable_path
        self._browser = await self._playwright.chromium.launch(**launch_kwargs)
        context = await self._browser.new_context()
        return await context.new_page()

    async def close(self) -> None:
        browser, playwright = self._browser, self._playwright
        self._browser = self._playwright = None
        try:
            if browser is not None:
                await browser.close()
        finally:
            if playwright is not None:
                await playwright.stop()


def default_session_factory() -> BrowserSession:
    return BrowserSession(headless=settings.headless, executable_path=settings.browser_executable_path)


def _text_pattern(text: str) -> "re.Pattern[str]":
    # substring match, case-sensitive (a plain string would ignore case)
    return re.compile(re.escape(text))


def _error_message(e: BaseException) -> str:
    return str(e) or e.__class__.__name__


class PlaywrightRunner:
    def __init__(
        self,
        session_factory: Callable[[], BrowserSession] = default_session_factory,
        screenshot_dir: Optional[str] = None,
    ) -> None:
        self.session_factory = session_factory
        self.screenshot_dir = Path(screenshot_dir or settings.screenshot_dir)
        self.handlers: Dict[str, StepHandler] = {
            "goto": self._goto,
            "clickText": self._click_text,
            "type": self._type,
            "waitForText": self._wait_for_text,
            "extractText": self._extract_text,
            "snapshotText": self._snapshot_text,
            "screenshot": self._screenshot,
            "closeBrowser": self._close_browser,
        }

    async def execute_plan(self, plan: ActionPlan) -> List[ExecutionResult]:
        results: List[ExecutionResult] = []
        session = self.session_factory()
        try:
            try:
                page = await session.open()
            except Exception as e:
                logger.error("Browser session failed to open: %s", e)
                results.append(
                    ExecutionResult(action=BROWSER_INIT_ACTION, success=False, error=_error_message(e))
                )
                return results

            logger.info("Executing plan with %d step(s)", len(plan.steps))
            for step in plan.steps:
                results.append(await self.execute_step(step, page))
                if step.action == "closeBrowser":
                    break
        finally:
            await self._teardown(session)
        return results

    async def _teardown(self, session: BrowserSession) -> None:
        try:
            await session.close()
        except Exception as e:
            logger.warning("Ignoring error while closing browser session: %s", e)

    async def execute_step(self, step: Any, page: Page) -> ExecutionResult:
        handler = self.handlers[step.action]
        try:
            data = await handler(step, page)
        except (PlaywrightError, UnsafeUrlError, OSError) as e:
            logger.warning("Step %s failed: %s", step.action, e)
            return ExecutionResult(action=step.action, success=False, error=_error_message(e))
        logger.info("Step %s succeeded", step.action)
        return ExecutionResult(action=step.action, success=True, data=data)

    # --------- per-action handlers ---------
    async def _goto(self, step: Any, page: Page) -> None:
        check_navigable_url(step.url)
        await page.goto(step.url, timeout=NAVIGATION_TIMEOUT_MS)

    async def _click_text(self, step: Any, page: Page) -> None:
        await page.get_by_text(_text_pattern(step.text)).first.click(timeout=STEP_TIMEOUT_MS)

    async def _type(self, step: Any, page: Page) -> None:
        await page.locator(step.selector).fill(step.value, timeout=STEP_TIMEOUT_MS)

    async def _wait_for_text(self, step: Any, page: Page) -> None:
        await page.get_by_text(_text_pattern(step.text)).first.wait_for(timeout=STEP_TIMEOUT_MS)

    async def _extract_text(self, step: Any, page: Page) -> str:
        return await page.locator(step.selector).first.inner_text(timeout=STEP_TIMEOUT_MS)

    async def _snapshot_text(self, step: Any, page: Page) -> str:
        return await page.locator("body").inner_text(timeout=STEP_TIMEOUT_MS)

    async def _screenshot(self, step: Any, page: Page) -> str:
        path = self.screenshot_dir / f"{sanitize_screenshot_name(step.name)}.png"
        await page.screenshot(path=str(path), timeout=STEP_TIMEOUT_MS)
        return str(path)

    async def _close_browser(self, step: Any, page: Page) -> None:
        return None
