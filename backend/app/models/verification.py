"""
Bot-verification models.
"""

from enum import Enum

from pydantic import BaseModel


class VerificationOutcome(BaseModel):
    """Normalized siteverify response."""

    success: bool
    score: float = 0.0
    action: str = ""


class Verdict(str, Enum):
    """Policy decision taken on a VerificationOutcome."""

    ALLOWED = "allowed"
    ALLOWED_WITH_WARNING = "allowed_with_warning"
    FAILED = "failed"
    SUSPICIOUS = "suspicious"

    @property
    def admitted(self) -> bool:
        return self in (Verdict.ALLOWED, Verdict.ALLOWED_WITH_WARNING)
