"""
GA4 Measurement Protocol forwarding for client analytics events.

Forwarding is fire-and-forget: it runs as a background task after the
response is sent, and failures are logged only.
"""

import logging
from typing import Optional

import httpx

from app import config
from app.models.analytics import AnalyticsEvent

logger = logging.getLogger(__name__)

GA4_COLLECT_URL = "https://www.google-analytics.com/mp/collect"


def resolve_client_id(event: AnalyticsEvent, client_ip: str) -> str:
    """Session id when the page provided one, otherwise the IP without dots."""
    return event.session_id or client_ip.replace(".", "")


def build_ga4_body(event: AnalyticsEvent, client_id: str) -> dict:
    params = dict(event.params or {})
    params.update(
        {
            "engagement_time_msec": "100",
            "session_id": event.session_id,
            "page_location": event.page,
            "language": event.locale,
        }
    )
    return {
        "client_id": client_id,
        "events": [{"name": event.event, "params": params}],
    }


async def forward_to_ga4(
    event: AnalyticsEvent,
    client_id: str,
    client: Optional[httpx.AsyncClient] = None,
) -> bool:
    """Return True when the event was handed to GA4."""
    credentials = config.get_ga4_credentials()
    if credentials is None:
        return False
    measurement_id, api_secret = credentials

    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=config.HTTP_TIMEOUT_SECONDS)
    try:
        response = await client.post(
            GA4_COLLECT_URL,
            params={"measurement_id": measurement_id, "api_secret": api_secret},
            json=build_ga4_body(event, client_id),
        )
        response.raise_for_status()
        return True
    except httpx.HTTPError as exc:
        logger.error(f"[Analytics] GA4 Measurement Protocol error: {exc.__class__.__name__}")
        return False
    finally:
        if owns_client:
            await client.aclose()
