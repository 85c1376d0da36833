"""
SEPACAM Forms API
FastAPI application for lead-form intake, email notification and analytics relay.
"""

import logging
from typing import List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import config
from app.routers import analytics, forms

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="SEPACAM Forms API",
    description="Lead submission, notification and analytics endpoints for the SEPACAM website",
    version="0.1.0",
)


def get_cors_origins() -> List[str]:
    """
    Origins allowed to POST the site forms.

    The local Next.js dev server and SITE_URL are always allowed; preview or
    www hosts are appended from CORS_ORIGINS (comma-separated), e.g.
        CORS_ORIGINS=https://www.sepacam.com,https://preview.sepacam.com

    Order is kept and repeats are dropped.
    """
    candidates = ["http://localhost:3000", config.get_site_url()]
    candidates.extend(config.get_extra_cors_origins())

    origins: List[str] = []
    for origin in candidates:
        if origin not in origins:
            origins.append(origin)

    return origins


# CORS configuration: origins are resolved at startup from environment
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=False,
    allow_methods=["POST", "GET"],
    allow_headers=["Content-Type"],
)

# Include routers
app.include_router(forms.router, prefix="/api", tags=["forms"])
app.include_router(analytics.router, prefix="/api", tags=["analytics"])


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log the fault, never leak it."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
async def root():
    return {"message": "SEPACAM Forms API", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "ok"}
