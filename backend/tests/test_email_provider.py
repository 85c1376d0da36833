"""
Email provider tests (Resend SDK with ``resend.Emails.send`` stubbed) and
provider registry.
"""

import threading

import pytest
import resend
from resend.exceptions import ResendError

from app.exceptions import EmailProviderError
from app.models.delivery import EmailMessage, EmailTag
from app.services.email_provider import ResendProvider, get_email_provider


def _message(**overrides) -> EmailMessage:
    fields = dict(
        sender="SEPACAM <noreply@sepacam.com>",
        to=["commercial@sepacam.com"],
        subject="[SEPACAM] Demande de devis — Acme Foods",
        html="<p>hi</p>",
        text="hi",
        reply_to="jane@example.com",
        tags=[EmailTag(name="form_type", value="quote"), EmailTag(name="source", value="website")],
    )
    fields.update(overrides)
    return EmailMessage(**fields)


@pytest.fixture
def sdk(monkeypatch):
    """Records every call to resend.Emails.send; ``reply`` sets the outcome."""

    class FakeSdk:
        calls = []
        keys = []
        reply = {"id": "email_123"}

    def fake_send(params):
        FakeSdk.calls.append(params)
        FakeSdk.keys.append(resend.api_key)
        if isinstance(FakeSdk.reply, Exception):
            raise FakeSdk.reply
        return FakeSdk.reply

    monkeypatch.setattr(resend, "api_key", None)
    monkeypatch.setattr(resend.Emails, "send", fake_send)
    return FakeSdk


class TestResendProvider:
    @pytest.mark.asyncio
    async def test_sends_resend_params(self, sdk):
        message_id = await ResendProvider("re_test_key").send(_message())

        assert message_id == "email_123"
        assert sdk.keys == ["re_test_key"]
        assert sdk.calls == [
            {
                "from": "SEPACAM <noreply@sepacam.com>",
                "to": ["commercial@sepacam.com"],
                "subject": "[SEPACAM] Demande de devis — Acme Foods",
                "html": "<p>hi</p>",
                "text": "hi",
                "reply_to": "jane@example.com",
                "tags": [
                    {"name": "form_type", "value": "quote"},
                    {"name": "source", "value": "website"},
                ],
            }
        ]

    @pytest.mark.asyncio
    async def test_optional_fields_are_omitted(self, sdk):
        await ResendProvider("re_test_key").send(_message(reply_to=None, tags=[]))

        assert "reply_to" not in sdk.calls[0]
        assert "tags" not in sdk.calls[0]

    @pytest.mark.asyncio
    async def test_api_error_raises_with_status(self, sdk):
        sdk.reply = ResendError(
            code=422,
            error_type="validation_error",
            message="Invalid `to` field",
            suggested_action="",
        )

        with pytest.raises(EmailProviderError) as exc_info:
            await ResendProvider("re_test_key").send(_message())

        assert exc_info.value.status_code == 422
        assert exc_info.value.provider == "resend"
        assert exc_info.value.message == "Invalid `to` field"

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, sdk):
        sdk.reply = ConnectionError("connection reset")

        with pytest.raises(EmailProviderError, match="ConnectionError") as exc_info:
            await ResendProvider("re_test_key").send(_message())

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_slow_send_times_out(self, monkeypatch):
        release = threading.Event()

        def stuck_send(params):
            release.wait(5)
            return {"id": "late"}

        monkeypatch.setattr(resend, "api_key", None)
        monkeypatch.setattr(resend.Emails, "send", stuck_send)
        try:
            with pytest.raises(EmailProviderError, match="TimeoutError"):
                await ResendProvider("re_test_key", timeout=0.05).send(_message())
        finally:
            release.set()

    @pytest.mark.asyncio
    async def test_missing_id_is_unknown(self, sdk):
        sdk.reply = {}

        assert await ResendProvider("re_test_key").send(_message()) == "unknown"


class TestProviderRegistry:
    def test_no_api_key_means_no_provider(self):
        assert get_email_provider() is None

    def test_resend_with_api_key(self, monkeypatch):
        monkeypatch.setenv("RESEND_API_KEY", "re_live")

        provider = get_email_provider()

        assert isinstance(provider, ResendProvider)
        assert provider.api_key == "re_live"

    def test_explicit_name_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("RESEND_API_KEY", "re_live")

        assert isinstance(get_email_provider("Resend"), ResendProvider)

    def test_env_selects_provider(self, monkeypatch):
        monkeypatch.setenv("EMAIL_PROVIDER", "mailgun")

        with pytest.raises(ValueError, match="Unknown email provider 'mailgun'"):
            get_email_provider()
