"""
Search and health API endpoints.
"""
import time
from datetime import datetime, timezone
from typing import Optional

import psutil
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from .aspect import aspect_ratio_stats
from .browser.manager import browser_manager
from .browser.scraper import DEFAULT_LIMIT, MAX_LIMIT, scrape_pinterest
from .logging_config import get_logger

logger = get_logger("pinscope.api")

router = APIRouter(prefix="/api", tags=["search"])

SEARCH_EXAMPLE = "/api/search?q=nature&limit=50"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def process_uptime() -> float:
    """Seconds since this process started."""
    return round(max(0.0, time.time() - psutil.Process().create_time()), 3)


def error_response(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, **extra},
    )


# ==================== Request Models ====================

class SearchQuery(BaseModel):
    q: str = Field(..., min_length=1)
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)


def _validation_message(exc: ValidationError) -> str:
    for err in exc.errors():
        if err["loc"] and err["loc"][0] == "limit":
            if err["type"] == "less_than_equal":
                return f"Maximum limit is {MAX_LIMIT} images per request"
            return 'Parameter "limit" must be a positive integer'
    return 'Query parameter "q" is required'


# ==================== Endpoints ====================

@router.get("/health")
async def health_check():
    return {
        "status": "OK",
        "timestamp": utc_timestamp(),
        "uptime": process_uptime(),
        "browserStatus": "Active" if browser_manager.is_active else "Inactive",
    }


@router.get("/search")
async def search(q: Optional[str] = None, limit: Optional[str] = None):
    """Search pins and return image URLs with dimension metadata."""
    start = time.monotonic()

    if not q:
        return error_response(
            400,
            'Query parameter "q" is required',
            example=SEARCH_EXAMPLE,
        )

    try:
        params = SearchQuery(q=q, limit=limit if limit is not None else DEFAULT_LIMIT)
    except ValidationError as e:
        return error_response(400, _validation_message(e))

    logger.info(f'Searching for "{params.q}" with limit: {params.limit}')

    try:
        images = await scrape_pinterest(params.q, params.limit)
    except Exception as e:
        logger.error(f"Search failed for {params.q!r}: {e}", exc_info=True)
        return error_response(
            500,
            "Failed to fetch data from Pinterest",
            message=str(e),
            timestamp=utc_timestamp(),
        )

    stats = aspect_ratio_stats(images)
    response_time = round((time.monotonic() - start) * 1000)

    logger.info(f'Found {len(images)} images for "{params.q}" in {response_time}ms')
    logger.info(f"Aspect ratio distribution: {stats}")

    return {
        "success": True,
        "query": params.q,
        "count": len(images),
        "limit": params.limit,
        "aspectRatioSupport": "Multi aspect ratio (Square, Portrait, Landscape, Widescreen, etc.)",
        "aspectRatioStats": stats,
        "responseTime": f"{response_time}ms",
        "timestamp": utc_timestamp(),
        "data": [image.to_dict() for image in images],
    }
