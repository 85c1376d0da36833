"""
Outbound email provider abstraction.

The dispatcher only knows ``EmailProvider.send(message) -> message_id``.
Providers raise EmailProviderError on any refusal or transport failure so
that the retry policy can decide what happens next.

Supported providers:
  - resend   (default; official Resend SDK, run in a worker thread)

Adding a new provider:
  1. Subclass EmailProvider and implement ``send``.
  2. Register a factory in _PROVIDERS.
  3. Set EMAIL_PROVIDER=<provider> in the environment.

get_email_provider() returns None when no credentials are configured; the
dispatcher treats that as console-only delivery, never as an error.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

import resend
from resend.exceptions import ResendError

from app import config
from app.exceptions import EmailProviderError
from app.models.delivery import EmailMessage

logger = logging.getLogger(__name__)


class EmailProvider:
    name = "base"

    async def send(self, message: EmailMessage) -> str:
        """Deliver ``message`` and return the provider's message id."""
        raise NotImplementedError


def _status_code(code: Any) -> Optional[int]:
    try:
        return int(code)
    except (TypeError, ValueError):
        return None


class ResendProvider(EmailProvider):
    """
    Sends through the Resend SDK.

    The SDK is synchronous, so each call runs in a worker thread and is
    bounded by ``timeout`` seconds.  A timed-out call counts as a failed
    attempt; the thread itself is left to finish in the background.
    """

    name = "resend"

    def __init__(self, api_key: str, timeout: float = config.HTTP_TIMEOUT_SECONDS) -> None:
        self.api_key = api_key
        self.timeout = timeout

    def _params(self, message: EmailMessage) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "from": message.sender,
            "to": message.to,
            "subject": message.subject,
            "html": message.html,
            "text": message.text,
        }
        if message.reply_to:
            params["reply_to"] = message.reply_to
        if message.tags:
            params["tags"] = [tag.model_dump() for tag in message.tags]
        return params

    def _send_sync(self, params: Dict[str, Any]) -> Any:
        resend.api_key = self.api_key
        return resend.Emails.send(params)

    async def send(self, message: EmailMessage) -> str:
        params = self._params(message)
        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(self._send_sync, params), timeout=self.timeout
            )
        except ResendError as exc:
            raise EmailProviderError(
                exc.message or "Resend API error",
                provider=self.name,
                status_code=_status_code(exc.code),
            ) from exc
        except Exception as exc:
            raise EmailProviderError(
                f"Resend request failed: {exc.__class__.__name__}", provider=self.name
            ) from exc

        message_id = response.get("id") if isinstance(response, dict) else None
        logger.debug("Resend accepted email to %s (ID: %s)", message.to, message_id)
        return str(message_id or "unknown")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def _resend_factory() -> Optional[EmailProvider]:
    api_key = config.get_resend_api_key()
    if not api_key:
        return None
    return ResendProvider(api_key)


_PROVIDERS: Dict[str, Callable[[], Optional[EmailProvider]]] = {
    "resend": _resend_factory,
}


def get_email_provider(provider: Optional[str] = None) -> Optional[EmailProvider]:
    """
    Build the configured provider, or None when credentials are missing.

    Priority:
      1. provider argument
      2. EMAIL_PROVIDER env var
      3. Default: "resend"

    Raises ValueError for unknown provider names.
    """
    resolved = (provider or config.get_email_provider_name()).lower().strip()
    factory = _PROVIDERS.get(resolved)
    if factory is None:
        raise ValueError(
            f"Unknown email provider {resolved!r}. "
            f"Supported providers: {sorted(_PROVIDERS)}"
        )
    return factory()
