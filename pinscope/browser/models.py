"""
Browser and scrape result data models.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ..config import Settings


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]


class BrowserStatus(Enum):
    INACTIVE = "inactive"
    STARTING = "starting"
    ACTIVE = "active"
    ERROR = "error"
    CLOSED = "closed"


@dataclass
class BrowserConfig:
    """Configuration for the shared browser and the pin search routine."""
    headless: bool = True
    launch_args: List[str] = field(default_factory=lambda: list(CHROMIUM_ARGS))
    user_agent: str = DEFAULT_USER_AGENT
    viewport_width: int = 1366
    viewport_height: int = 768
    search_url: str = "https://www.pinterest.com/search/pins/?q={query}"
    wait_until: str = "networkidle"
    navigation_timeout_ms: int = 30000
    pin_selector: str = '[data-test-id="pin"]'
    selector_timeout_ms: int = 10000
    scroll_step_px: int = 100
    scroll_interval_ms: int = 100
    max_scroll_px: int = 3000

    @property
    def image_selector(self) -> str:
        return f"{self.pin_selector} img"

    @classmethod
    def from_settings(cls, settings: Settings) -> "BrowserConfig":
        return cls(
            headless=settings.headless,
            navigation_timeout_ms=settings.navigation_timeout_ms,
            selector_timeout_ms=settings.selector_timeout_ms,
            max_scroll_px=settings.max_scroll_px,
        )


@dataclass
class ImageDimensions:
    """Pixel size of a pin image and its aspect bucket."""
    width: int = 0
    height: int = 0
    aspect_ratio: str = "unknown"
    category: str = "unknown"

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "aspectRatio": self.aspect_ratio,
            "category": self.category,
        }


@dataclass
class PinImage:
    """A single image pulled out of a pin search result."""
    url: str
    alt: str = ""
    title: str = ""
    dimensions: ImageDimensions = field(default_factory=ImageDimensions)

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "alt": self.alt,
            "title": self.title,
            "dimensions": self.dimensions.to_dict(),
        }
