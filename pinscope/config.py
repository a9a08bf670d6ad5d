"""
Runtime settings for pinscope.

Everything is read from environment variables so the service can be
configured from a container or a systemd unit without a config file.
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass
class Settings:
    """Service configuration."""
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    rate_limit: int = 100
    rate_window: int = 15 * 60
    trust_proxy: bool = False
    headless: bool = True
    navigation_timeout_ms: int = 30000
    selector_timeout_ms: int = 10000
    max_scroll_px: int = 3000
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the environment.

        PORT is honoured for hosting platforms that inject it;
        PINSCOPE_PORT takes precedence when both are set.
        """
        port = _env_int("PINSCOPE_PORT", _env_int("PORT", cls.port))

        origins = os.environ.get("PINSCOPE_CORS_ORIGINS", "").strip()
        cors_origins = [o.strip() for o in origins.split(",") if o.strip()] or ["*"]

        return cls(
            host=os.environ.get("PINSCOPE_HOST", cls.host),
            port=port,
            cors_origins=cors_origins,
            rate_limit=_env_int("PINSCOPE_RATE_LIMIT", cls.rate_limit),
            rate_window=_env_int("PINSCOPE_RATE_WINDOW", cls.rate_window),
            trust_proxy=_env_bool("PINSCOPE_TRUST_PROXY", cls.trust_proxy),
            headless=_env_bool("PINSCOPE_HEADLESS", cls.headless),
            navigation_timeout_ms=_env_int("PINSCOPE_NAV_TIMEOUT_MS", cls.navigation_timeout_ms),
            selector_timeout_ms=_env_int("PINSCOPE_SELECTOR_TIMEOUT_MS", cls.selector_timeout_ms),
            max_scroll_px=_env_int("PINSCOPE_MAX_SCROLL", cls.max_scroll_px),
            log_level=os.environ.get("PINSCOPE_LOG_LEVEL", cls.log_level),
            log_json=_env_bool("PINSCOPE_LOG_JSON", cls.log_json),
            log_file=os.environ.get("PINSCOPE_LOG_FILE") or None,
        )


settings = Settings.from_env()
