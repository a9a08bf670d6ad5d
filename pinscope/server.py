from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api import SEARCH_EXAMPLE, error_response, router as api_router, utc_timestamp
from .browser.manager import browser_manager
from .config import settings
from .logging_config import get_logger, setup_logging
from .security import RateLimitMiddleware, get_cors_origins

setup_logging()
logger = get_logger("pinscope.server")

AVAILABLE_ENDPOINTS = [
    "GET /",
    "GET /api/health",
    "GET /api/search?q={query}&limit={number}",
]

app = FastAPI(title="pinscope", version=__version__)

app.add_middleware(RateLimitMiddleware)

cors_origins = get_cors_origins()
allow_all = "*" in cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else cors_origins,
    allow_credentials=not allow_all,  # Cannot use credentials with wildcard origin
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.on_event("shutdown")
async def shutdown_event():
    """Close the shared browser. Uvicorn runs this on SIGINT/SIGTERM."""
    logger.info("Shutting down gracefully...")
    await browser_manager.close()


@app.get("/")
async def root():
    return {
        "message": "Pinterest API Server - Multi Aspect Ratio",
        "version": __version__,
        "features": [
            "Support for every aspect ratio (Square, Portrait, Landscape, etc.)",
            "Rate limiting for stability",
            "High quality image URLs",
            "Detailed image dimension information",
            "Graceful error handling",
        ],
        "endpoints": {
            "search": "/api/search?q={query}&limit={number}",
            "health": "/api/health",
        },
        "example": SEARCH_EXAMPLE,
        "note": "Images of any aspect ratio are returned: Square, Portrait, Landscape, Widescreen, etc.",
    }


# ==================== Error Envelopes ====================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods both report as a missing endpoint
    if exc.status_code in (404, 405):
        return error_response(
            404,
            "Endpoint not found",
            availableEndpoints=AVAILABLE_ENDPOINTS,
        )
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(500, "Internal Server Error", timestamp=utc_timestamp())


def run_server(host: str = None, port: int = None):
    """
    Run the pinscope server.

    Args:
        host: Bind address. Defaults to PINSCOPE_HOST (0.0.0.0).
        port: Port to listen on. Defaults to PINSCOPE_PORT / PORT (3000).
    """
    import uvicorn

    host = host or settings.host
    port = port or settings.port

    logger.info(f"Pinterest API Server running on port {port}")
    logger.info(f"Example: http://localhost:{port}{SEARCH_EXAMPLE}")
    if not settings.headless:
        logger.info("Browser will run with a visible window")

    uvicorn.run(app, host=host, port=port)
