"""
Remote Browser Sessions - Browser Cash sessions driven with Playwright over CDP.

Every page visit gets its own remote session. The session is stopped and the
CDP connection closed on exit, whether or not the visit succeeded.

Usage:
    config = BrowserSessionConfig.cron()
    renderer = PageRenderer(BrowserCashClient(api_key), config)
    html = await renderer.render("https://decrypt.co/", wait_for='a[href^="/3"]')
"""
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Protocol

import httpx
from loguru import logger
from playwright.async_api import (
    Page,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from config import settings
from constants import SessionType

# Node the scheduled runs are pinned to
CRON_NODE_ID = "stairs-brush-artefact"
DEFAULT_WINDOW_SIZE = "1920x1080"

NAVIGATION_TIMEOUT_MS = 30_000
WAIT_FOR_TIMEOUT_MS = 10_000


@dataclass(frozen=True)
class BrowserSessionConfig:
    """Options for every remote browser session opened during one run."""
    type: str = SessionType.HOSTED.value
    country: Optional[str] = None
    node_id: Optional[str] = None
    window_size: str = DEFAULT_WINDOW_SIZE
    proxy_url: Optional[str] = None
    profile_name: Optional[str] = None

    @classmethod
    def cron(cls) -> "BrowserSessionConfig":
        """Fixed configuration for unattended runs."""
        return cls(
            type=SessionType.HOSTED.value,
            country=None,
            node_id=CRON_NODE_ID,
            window_size=DEFAULT_WINDOW_SIZE,
        )

    @property
    def window(self) -> tuple[int, int]:
        width, height = self.window_size.lower().split("x")
        return int(width), int(height)

    def to_payload(self) -> dict:
        """Request body for session creation; unset options are omitted."""
        payload = {"type": self.type, "windowSize": self.window_size}
        if self.country:
            payload["country"] = self.country
        if self.node_id:
            payload["nodeId"] = self.node_id
        if self.proxy_url:
            payload["proxyUrl"] = self.proxy_url
        if self.profile_name:
            payload["profile"] = {"name": self.profile_name, "persist": True}
        return payload


@dataclass(frozen=True)
class RemoteSession:
    session_id: str
    cdp_url: str


class BrowserCashClient:
    """Thin REST client for creating and stopping remote browser sessions."""

    SESSION_PATH = "/v1/browser/session"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.base_url = (base_url or settings.BROWSER_API_BASE).rstrip("/")
        self.http_client = http_client
        self.timeout = timeout

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.api_key}"}

    async def _request(self, method: str, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{self.SESSION_PATH}"
        if self.http_client is not None:
            response = await self.http_client.request(method, url, headers=self.headers, timeout=self.timeout, **kwargs)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(method, url, headers=self.headers, **kwargs)
        response.raise_for_status()
        return response

    async def create_session(self, config: BrowserSessionConfig) -> RemoteSession:
        response = await self._request("POST", json=config.to_payload())
        data = response.json()
        session = RemoteSession(session_id=data["sessionId"], cdp_url=data["cdpUrl"])
        logger.debug(f"Browser session created: {session.session_id[:20]}...")
        return session

    async def stop_session(self, session_id: str) -> None:
        await self._request("DELETE", params={"sessionId": session_id})
        logger.debug(f"Browser session stopped: {session_id[:20]}...")


@asynccontextmanager
async def remote_page(client: BrowserCashClient, config: BrowserSessionConfig) -> AsyncIterator[Page]:
    """Open a fresh remote session and yield a page on it."""
    session = await client.create_session(config)
    try:
        async with async_playwright() as p:
            browser = await p.chromium.connect_over_cdp(session.cdp_url)
            try:
                if browser.contexts:
                    context = browser.contexts[0]
                else:
                    context = await browser.new_context(ignore_https_errors=True)
                page = await context.new_page()
                yield page
            finally:
                try:
                    await browser.close()
                except Exception as e:
                    logger.warning(f"Failed to close CDP browser: {e}")
    finally:
        try:
            await client.stop_session(session.session_id)
        except Exception as e:
            logger.warning(f"Failed to stop browser session {session.session_id}: {e}")


class Renderer(Protocol):
    """Anything that turns a URL into rendered HTML."""

    async def render(
        self,
        url: str,
        wait_for: Optional[str] = None,
        render_wait_ms: int = 0,
        settle_ms: int = 800,
        scroll_steps: int = 1,
        scroll_px: int = 300,
        scroll_pause_ms: int = 0,
    ) -> str:
        ...


class PageRenderer:
    """Render pages in remote browser sessions and return their HTML."""

    def __init__(self, client: BrowserCashClient, config: BrowserSessionConfig):
        self.client = client
        self.config = config

    async def render(
        self,
        url: str,
        wait_for: Optional[str] = None,
        render_wait_ms: int = 0,
        settle_ms: int = 800,
        scroll_steps: int = 1,
        scroll_px: int = 300,
        scroll_pause_ms: int = 0,
    ) -> str:
        """
        Navigate to url and return the page HTML after it settles.

        Args:
            url: Page to open
            wait_for: CSS selector to wait for (best-effort, 10s)
            render_wait_ms: Pause after navigation, before the first scroll
            settle_ms: Pause after scrolling before reading the DOM
            scroll_steps: Number of mouse-wheel scrolls
            scroll_px: Pixels per scroll
            scroll_pause_ms: Pause between scrolls
        """
        async with remote_page(self.client, self.config) as page:
            await page.goto(url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)

            if wait_for:
                try:
                    await page.wait_for_selector(wait_for, timeout=WAIT_FOR_TIMEOUT_MS)
                except PlaywrightTimeoutError:
                    logger.debug(f"Selector not found within timeout: {wait_for}")

            if render_wait_ms:
                await page.wait_for_timeout(render_wait_ms)

            for _ in range(scroll_steps):
                await page.mouse.wheel(0, scroll_px)
                if scroll_pause_ms:
                    await page.wait_for_timeout(scroll_pause_ms)

            await page.wait_for_timeout(settle_ms)
            return await page.content()
