"""
Rate limiting and CORS configuration for pinscope.

Provides:
- Per-IP sliding window rate limiting on /api/ routes
- CORS origin configuration
"""
import json
import time
from collections import defaultdict
from typing import Dict, List

from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from .config import settings
from .logging_config import get_logger

logger = get_logger("pinscope.security")

RATE_LIMIT_MESSAGE = "Too many requests, please try again in 15 minutes"


# ==================== Rate Limiting ====================

class RateLimiter:
    """
    Simple in-memory rate limiter.

    Tracks request timestamps per client IP over a sliding window. The key
    is the socket peer address; X-Forwarded-For is only honoured when
    trust_proxy is set, i.e. when a reverse proxy overwrites that header.
    """

    def __init__(self, limit: int = 100, window: int = 15 * 60, trust_proxy: bool = False):
        self.limit = limit
        self.window = window
        self.trust_proxy = trust_proxy
        # IP -> list of request timestamps
        self._requests: Dict[str, list] = defaultdict(list)
        self._last_sweep = time.time()

    def get_client_ip(self, request: Request) -> str:
        """Get the client IP used as the rate limit key."""
        if self.trust_proxy:
            forwarded = request.headers.get("x-forwarded-for")
            if forwarded:
                # Take the first IP in the chain
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _cleanup_old_requests(self, ip: str, cutoff: float):
        """Remove requests older than the window."""
        recent = [t for t in self._requests.get(ip, []) if t > cutoff]
        if recent:
            self._requests[ip] = recent
        else:
            self._requests.pop(ip, None)

    def _sweep(self, now: float):
        """Drop expired timestamps for every IP, at most once per window."""
        if now - self._last_sweep < self.window:
            return
        cutoff = now - self.window
        for ip in list(self._requests):
            self._cleanup_old_requests(ip, cutoff)
        self._last_sweep = now

    def check_rate_limit(self, ip: str) -> bool:
        """
        Record a request from `ip` if it is within the limit.

        Returns:
            True if allowed, False if rate limited
        """
        now = time.time()
        self._sweep(now)
        self._cleanup_old_requests(ip, now - self.window)

        if len(self._requests.get(ip, [])) >= self.limit:
            logger.warning(f"Rate limit exceeded for {ip}")
            return False

        self._requests[ip].append(now)
        return True

    def get_remaining(self, ip: str) -> int:
        """Get remaining requests for an IP."""
        self._cleanup_old_requests(ip, time.time() - self.window)
        return max(0, self.limit - len(self._requests.get(ip, [])))

    @property
    def tracked_ips(self) -> int:
        return len(self._requests)

    def reset(self):
        self._requests.clear()
        self._last_sweep = time.time()


# Global rate limiter instance
rate_limiter = RateLimiter(
    limit=settings.rate_limit,
    window=settings.rate_window,
    trust_proxy=settings.trust_proxy,
)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Applies the shared rate limiter to every path under a prefix."""

    def __init__(self, app, limiter: RateLimiter = None, prefix: str = "/api/"):
        super().__init__(app)
        self.limiter = limiter or rate_limiter
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next) -> Response:
        if not request.url.path.startswith(self.prefix):
            return await call_next(request)

        ip = self.limiter.get_client_ip(request)
        if not self.limiter.check_rate_limit(ip):
            return Response(
                content=json.dumps({"success": False, "error": RATE_LIMIT_MESSAGE}),
                status_code=429,
                media_type="application/json",
                headers={"Retry-After": str(self.limiter.window)}
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(self.limiter.limit)
        response.headers["X-RateLimit-Remaining"] = str(self.limiter.get_remaining(ip))
        response.headers["X-RateLimit-Reset"] = str(self.limiter.window)

        return response


# ==================== CORS Configuration ====================

def get_cors_origins() -> List[str]:
    """
    Get allowed CORS origins.

    Set PINSCOPE_CORS_ORIGINS to a comma-separated list of allowed origins.
    Defaults to all origins.

    Examples:
        PINSCOPE_CORS_ORIGINS=https://myapp.example.com
        PINSCOPE_CORS_ORIGINS=https://app1.com,https://app2.com
    """
    return list(settings.cors_origins)
