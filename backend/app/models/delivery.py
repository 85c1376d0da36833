"""
Outbound email models.

EmailMessage is what the dispatcher hands to a provider; SendResult is what
comes back for one channel after retries; DeliveryOutcome pairs the two
channels of a single submission.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class EmailTag(BaseModel):
    """Provider-side categorization tag (Resend ``tags`` entry)."""

    name: str
    value: str


class EmailMessage(BaseModel):
    """A fully composed email, ready for any provider."""

    sender: str
    to: List[str]
    subject: str
    html: str
    text: str
    reply_to: Optional[str] = None
    tags: List[EmailTag] = Field(default_factory=list)


class RenderedEmail(BaseModel):
    """Output of a template builder."""

    subject: str
    html: str
    text: str


class SendResult(BaseModel):
    """Outcome of one email channel after its retry budget."""

    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class DeliveryOutcome(BaseModel):
    """Both channels for one submission, each captured independently."""

    notification: SendResult
    confirmation: SendResult

    def summary(self) -> dict:
        """Booleans exposed to the caller in the success payload."""
        return {
            "notification": self.notification.success,
            "confirmation": self.confirmation.success,
        }
