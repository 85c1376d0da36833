"""
Exceptions raised by the lead-submission pipeline.

Hierarchy:
    SubmissionError (base, carries status_code + response payload)
    ├── Throttled               429  client exceeded the submission rate
    ├── MalformedPayload        400  body is not a JSON object
    ├── UnknownFormType         400  formType absent or unrecognized
    ├── ValidationFailed        422  field -> message map
    └── VerificationError       403  bot verification not confirmed
        ├── VerificationMissing
        ├── VerificationFailed
        └── VerificationSuspicious

    EmailProviderError          raised by providers, absorbed into SendResult

Verification messages are deliberately generic: they never echo the score
or the thresholds.
"""

import math
from typing import Any, Dict, List, Optional


class SubmissionError(Exception):
    """Terminal, client-visible rejection of a submission."""

    status_code: int = 400
    error: str = "Bad request"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.error
        super().__init__(self.message)

    def payload(self) -> Dict[str, Any]:
        return {"error": self.message}

    def headers(self) -> Dict[str, str]:
        return {}


class Throttled(SubmissionError):
    status_code = 429
    error = "Too many requests"

    def __init__(self, retry_after: Optional[float] = None) -> None:
        super().__init__()
        self.retry_after = retry_after

    def headers(self) -> Dict[str, str]:
        if self.retry_after is None:
            return {}
        # Whole seconds, never 0 while the window is still closed
        return {"Retry-After": str(max(1, math.ceil(self.retry_after)))}

    def payload(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "message": "Please wait before submitting again.",
        }


class MalformedPayload(SubmissionError):
    status_code = 400
    error = "Invalid JSON body"


class UnknownFormType(SubmissionError):
    status_code = 400
    error = "Invalid form type"

    def __init__(self, valid_types: List[str]) -> None:
        super().__init__()
        self.valid_types = valid_types

    def payload(self) -> Dict[str, Any]:
        return {"error": self.message, "validTypes": self.valid_types}


class ValidationFailed(SubmissionError):
    status_code = 422
    error = "Validation failed"

    def __init__(self, fields: Dict[str, str]) -> None:
        super().__init__()
        self.fields = fields

    def payload(self) -> Dict[str, Any]:
        return {"error": self.message, "fields": self.fields}


class VerificationError(SubmissionError):
    status_code = 403
    error = "reCAPTCHA verification failed"


class VerificationMissing(VerificationError):
    error = "reCAPTCHA token missing"


class VerificationFailed(VerificationError):
    error = "reCAPTCHA verification failed"


class VerificationSuspicious(VerificationError):
    error = "Request flagged as suspicious"


class EmailProviderError(Exception):
    """A provider refused or could not accept a message."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.message = message
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)
