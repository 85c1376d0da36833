"""
Lightweight tracking endpoints.

Endpoints:
  POST /api/analytics       - client event, forwarded to GA4 in the background
  POST /api/track-download  - technical-document download, logged only
"""

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.exceptions import Throttled
from app.models.analytics import AnalyticsEvent, DownloadEvent
from app.services.analytics import forward_to_ga4, resolve_client_id
from app.services.rate_limiter import (
    FixedWindowRateLimiter,
    analytics_rate_limiter,
    get_client_ip,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_analytics_limiter() -> FixedWindowRateLimiter:
    return analytics_rate_limiter


@router.post("/analytics")
async def track_event(
    request: Request,
    background_tasks: BackgroundTasks,
    limiter: FixedWindowRateLimiter = Depends(get_analytics_limiter),
):
    client_ip = get_client_ip(request)
    try:
        if not limiter.hit(client_ip):
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests"},
                headers=Throttled(limiter.retry_after(client_ip)).headers(),
            )

        try:
            body = json.loads(await request.body() or b"")
        except (ValueError, UnicodeDecodeError):
            return JSONResponse(status_code=400, content={"error": "Invalid JSON body"})

        try:
            event = AnalyticsEvent.model_validate(body)
        except ValidationError as exc:
            return JSONResponse(
                status_code=422,
                content={
                    "error": "Validation failed",
                    "details": exc.errors(include_url=False, include_context=False, include_input=False),
                },
            )

        logger.debug(f"[Analytics API] {event.event} {event.params}")
        background_tasks.add_task(forward_to_ga4, event, resolve_client_id(event, client_ip))
        return {"success": True}
    except Exception:
        logger.exception("[Analytics API] Unhandled error")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


@router.post("/track-download")
async def track_download(request: Request):
    try:
        event = DownloadEvent.model_validate(await request.json())
    except Exception as exc:
        logger.warning(f"[Download Track] Unreadable body: {exc.__class__.__name__}")
        return JSONResponse(status_code=500, content={"error": "Failed to track download"})

    user_agent = (request.headers.get("user-agent") or "unknown")[:100]
    logger.info(
        "[Download Track] product=%s document=%s type=%s timestamp=%s ip=%s ua=%s",
        event.product,
        event.document,
        event.document_type,
        event.timestamp,
        get_client_ip(request),
        user_agent,
    )
    return {"success": True}
