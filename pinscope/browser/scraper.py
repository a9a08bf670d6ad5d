"""
Pin search scraping.

Drives a page from the shared browser through the Pinterest search results,
scrolls to trigger lazy loading and reads the rendered <img> tags.
"""
import asyncio
import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ..aspect import build_dimensions, upgrade_image_url
from ..logging_config import get_logger
from .manager import BrowserManager, browser_manager
from .models import BrowserConfig, PinImage

logger = get_logger("pinscope.scraper")

DEFAULT_LIMIT = 50
MAX_LIMIT = 100

# Runs in the page; returns plain attributes so parsing happens in Python
EXTRACT_IMAGES_JS = """
([selector, limit]) => {
    const images = Array.from(document.querySelectorAll(selector)).slice(0, limit);
    return images.map((img) => ({
        src: img.src || img.getAttribute('data-src') || img.getAttribute('srcset') || '',
        alt: img.alt || '',
        title: img.title || '',
        width: img.naturalWidth || img.width || 0,
        height: img.naturalHeight || img.height || 0,
    }));
}
"""

SCROLL_STEP_JS = """
(distance) => {
    window.scrollBy(0, distance);
    return document.body.scrollHeight;
}
"""


def build_search_url(query: str, config: Optional[BrowserConfig] = None) -> str:
    config = config or BrowserConfig()
    return config.search_url.format(query=quote(query, safe="!~*'()"))


def parse_images(raw_images: List[Dict[str, Any]], limit: int) -> List[PinImage]:
    """Turn raw <img> attributes into PinImage records, skipping images without a source."""
    images = []
    for raw in raw_images[:limit]:
        src = raw.get("src") or ""
        if not src:
            continue
        images.append(PinImage(
            url=upgrade_image_url(src),
            alt=raw.get("alt") or "",
            title=raw.get("title") or "",
            dimensions=build_dimensions(raw.get("width") or 0, raw.get("height") or 0),
        ))
    return images


async def auto_scroll(page: Any, config: Optional[BrowserConfig] = None) -> int:
    """
    Scroll down in fixed steps until the end of the document or the pixel cap.

    Returns the total distance scrolled.
    """
    config = config or BrowserConfig()
    total = 0
    while True:
        scroll_height = await page.evaluate(SCROLL_STEP_JS, config.scroll_step_px)
        total += config.scroll_step_px
        if total >= scroll_height or total >= config.max_scroll_px:
            return total
        await asyncio.sleep(config.scroll_interval_ms / 1000)


async def scrape_pinterest(
    query: str,
    limit: int = DEFAULT_LIMIT,
    manager: Optional[BrowserManager] = None,
    config: Optional[BrowserConfig] = None,
) -> List[PinImage]:
    """
    Search Pinterest for `query` and return up to `limit` images.

    Navigation, selector and browser errors propagate unchanged; the page
    is closed either way.
    """
    manager = manager or browser_manager
    config = config or manager.config
    start = time.monotonic()

    page = await manager.new_page()
    try:
        url = build_search_url(query, config)
        logger.debug(f"Navigating to {url}")
        await page.goto(
            url,
            wait_until=config.wait_until,
            timeout=config.navigation_timeout_ms,
        )
        await page.wait_for_selector(config.pin_selector, timeout=config.selector_timeout_ms)

        scrolled = await auto_scroll(page, config)
        raw_images = await page.evaluate(EXTRACT_IMAGES_JS, [config.image_selector, limit])
        images = parse_images(raw_images, limit)

        logger.info_with(
            f"Scraped {len(images)} images for {query!r}",
            query=query,
            count=len(images),
            scrolled_px=scrolled,
            duration_ms=round((time.monotonic() - start) * 1000),
        )
        return images
    finally:
        await manager.close_page(page)
