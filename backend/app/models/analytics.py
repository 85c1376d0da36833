"""
Pydantic models for the analytics and download-tracking endpoints.
"""

from typing import Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AnalyticsEvent(BaseModel):
    """A client-side event relayed to the GA4 Measurement Protocol."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    event: str = Field(min_length=1, max_length=100)
    params: Optional[Dict[str, Union[bool, int, float, str]]] = None
    session_id: Optional[str] = Field(default=None, max_length=128)
    locale: Optional[Literal["fr", "en"]] = None
    page: Optional[str] = Field(default=None, max_length=500)


class DownloadEvent(BaseModel):
    """A technical-document download reported by a product page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product: Optional[str] = None
    document: Optional[str] = None
    document_type: Optional[str] = None
    timestamp: Optional[str] = None
