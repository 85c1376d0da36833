"""
Shared pytest fixtures.

Every test starts with bot verification, outbound email and analytics
forwarding disabled, regardless of what a local .env contains.  Tests that
need them set the variables explicitly with monkeypatch / patch.dict.
"""

from unittest.mock import AsyncMock

import pytest

from app.exceptions import EmailProviderError
from app.services.email_provider import EmailProvider
from app.services.retry import RetryPolicy

_ISOLATED_ENV = (
    "RECAPTCHA_SECRET_KEY",
    "RECAPTCHA_VERIFY_URL",
    "RESEND_API_KEY",
    "GA4_MEASUREMENT_ID",
    "GA4_API_SECRET",
    "NOTIFICATION_EMAIL",
    "EMAIL_FROM",
    "EMAIL_REPLY_TO",
    "EMAIL_PROVIDER",
    "SITE_URL",
    "CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)


class FakeProvider(EmailProvider):
    """
    In-memory provider.

    ``fail_recipients`` makes every send to those addresses raise
    EmailProviderError, so retries and per-channel isolation can be observed.
    """

    name = "fake"

    def __init__(self, fail_recipients=()):
        self.fail_recipients = set(fail_recipients)
        self.sent = []
        self.attempts = []

    async def send(self, message):
        self.attempts.append(message)
        if self.fail_recipients.intersection(message.to):
            raise EmailProviderError("Simulated provider outage", provider=self.name)
        self.sent.append(message)
        return f"msg-{len(self.sent)}"


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def no_wait_policy():
    """Email retry policy with the production budget but no real sleeping."""
    return RetryPolicy(
        retries=2,
        backoff=lambda attempt: 0.0,
        retry_on=(EmailProviderError,),
        sleep=AsyncMock(),
    )


def quote_payload(**overrides) -> dict:
    payload = {
        "formType": "quote",
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane@example.com",
        "company": "Acme Foods",
        "country": "FR",
        "product": "liqueur",
        "quantity": "2 containers",
    }
    payload.update(overrides)
    return payload
