"""
BrowserManager - Owns the shared Playwright Chromium instance.

The browser is launched lazily on the first request and reused by every
request after that. Each scrape gets its own context and page.
"""
import asyncio
from typing import Any, Optional

from ..config import settings
from ..logging_config import get_logger
from .models import BrowserConfig, BrowserStatus

logger = get_logger("pinscope.browser")


class BrowserManager:
    """Lazily launches one Chromium browser and hands out pages on it."""

    def __init__(self, config: Optional[BrowserConfig] = None):
        self.config = config or BrowserConfig()
        self.status = BrowserStatus.INACTIVE
        self._playwright = None
        self._browser = None
        self._launch_lock = asyncio.Lock()

    @property
    def is_active(self) -> bool:
        return self._browser is not None

    def _set_status(self, status: BrowserStatus):
        self.status = status
        logger.debug(f"Browser status: {status.value}")

    async def _ensure_playwright(self):
        """Lazy-init Playwright on first use."""
        if self._playwright is None:
            from playwright.async_api import async_playwright
            self._playwright = await async_playwright().start()
            logger.info("Playwright initialized")

    async def get_browser(self) -> Any:
        """Return the shared browser, launching it on first use."""
        if self._browser is not None:
            return self._browser

        async with self._launch_lock:
            if self._browser is not None:
                return self._browser

            self._set_status(BrowserStatus.STARTING)
            try:
                await self._ensure_playwright()
                self._browser = await self._playwright.chromium.launch(
                    headless=self.config.headless,
                    args=self.config.launch_args,
                )
            except Exception as e:
                self._set_status(BrowserStatus.ERROR)
                logger.error(f"Failed to launch browser: {e}")
                raise

            self._set_status(BrowserStatus.ACTIVE)
            logger.info(f"Launched Chromium (headless={self.config.headless})")
            return self._browser

    async def new_page(self) -> Any:
        """Open a page with the configured user agent and viewport."""
        browser = await self.get_browser()
        context = await browser.new_context(
            user_agent=self.config.user_agent,
            viewport={
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            },
        )
        try:
            return await context.new_page()
        except Exception:
            await context.close()
            raise

    async def close_page(self, page: Any):
        """Close a page and the context it was opened in."""
        try:
            await page.close()
        finally:
            await page.context.close()

    async def close(self):
        """Close the browser and stop Playwright. Called on server shutdown."""
        browser, self._browser = self._browser, None
        if browser is not None:
            try:
                await browser.close()
                logger.info("Browser closed")
            except Exception as e:
                logger.error(f"Error closing browser: {e}")
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
            logger.info("Playwright stopped")
        if browser is not None:
            self._set_status(BrowserStatus.CLOSED)


# Global singleton instance
browser_manager = BrowserManager(BrowserConfig.from_settings(settings))
