"""
Notification dispatcher: team notification + submitter confirmation.

Each channel is composed, sent through the configured provider with its own
retry budget (exponential backoff), and reduced to a SendResult.  Neither
function raises for delivery problems; send_form_emails runs both channels
concurrently and captures even unexpected exceptions as failed results, so
one channel can never abort or block the other.

When no provider is configured the submission is logged and reported as a
successful "console-only" delivery.
"""

import asyncio
import logging
from typing import Mapping, Optional

from app import config
from app.exceptions import EmailProviderError
from app.models.delivery import DeliveryOutcome, EmailMessage, EmailTag, SendResult
from app.models.submission import DEFAULT_LOCALE
from app.services.email_provider import EmailProvider, get_email_provider
from app.services.email_templates import build_confirmation_email, build_notification_email
from app.services.retry import RetryPolicy, exponential_backoff

logger = logging.getLogger(__name__)

CONSOLE_ONLY_ID = "console-only"

email_retry = RetryPolicy(
    retries=config.EMAIL_RETRIES,
    backoff=exponential_backoff(config.EMAIL_BACKOFF_SECONDS),
    retry_on=(EmailProviderError,),
)


async def _deliver(
    provider: EmailProvider,
    message: EmailMessage,
    policy: RetryPolicy,
    label: str,
) -> SendResult:
    try:
        message_id = await policy.run(lambda: provider.send(message), label=label)
    except EmailProviderError as exc:
        return SendResult(success=False, error=exc.message)
    return SendResult(success=True, message_id=message_id)


async def send_team_notification(
    form_type: str,
    data: Mapping[str, object],
    ip: str,
    provider: Optional[EmailProvider] = None,
    policy: Optional[RetryPolicy] = None,
) -> SendResult:
    logger.info(
        f"[Mail] Team notification: form={form_type} company={data.get('company')} ip={ip}"
    )

    provider = provider or get_email_provider()
    if provider is None:
        logger.warning("[Mail] RESEND_API_KEY not configured - skipping email delivery")
        return SendResult(success=True, message_id=CONSOLE_ONLY_ID)

    rendered = build_notification_email(form_type, data, ip)
    message = EmailMessage(
        sender=config.get_email_from(),
        to=config.get_notification_recipients(),
        reply_to=str(data.get("email") or config.get_email_reply_to()),
        subject=rendered.subject,
        html=rendered.html,
        text=rendered.text,
        tags=[
            EmailTag(name="form_type", value=form_type),
            EmailTag(name="source", value="website"),
        ],
    )

    result = await _deliver(provider, message, policy or email_retry, "Team notification")
    if result.success:
        logger.info(f"[Mail] Team notification sent: {result.message_id}")
    else:
        logger.error(f"[Mail] Team notification failed: {result.error}")
    return result


async def send_user_confirmation(
    form_type: str,
    data: Mapping[str, object],
    locale: str = DEFAULT_LOCALE,
    provider: Optional[EmailProvider] = None,
    policy: Optional[RetryPolicy] = None,
) -> SendResult:
    user_email = data.get("email")
    if not user_email:
        return SendResult(success=False, error="No user email provided")
    user_email = str(user_email)

    logger.info(f"[Mail] User confirmation: form={form_type} to={user_email}")

    provider = provider or get_email_provider()
    if provider is None:
        logger.warning("[Mail] RESEND_API_KEY not configured - skipping confirmation email")
        return SendResult(success=True, message_id=CONSOLE_ONLY_ID)

    rendered = build_confirmation_email(form_type, data, locale)
    message = EmailMessage(
        sender=config.get_email_from(),
        to=[user_email],
        reply_to=config.get_email_reply_to(),
        subject=rendered.subject,
        html=rendered.html,
        text=rendered.text,
        tags=[
            EmailTag(name="form_type", value=form_type),
            EmailTag(name="email_type", value="confirmation"),
        ],
    )

    result = await _deliver(provider, message, policy or email_retry, "User confirmation")
    if result.success:
        logger.info(f"[Mail] User confirmation sent to {user_email}: {result.message_id}")
    else:
        logger.error(f"[Mail] User confirmation failed for {user_email}: {result.error}")
    return result


def _as_result(outcome: object) -> SendResult:
    if isinstance(outcome, SendResult):
        return outcome
    logger.error("[Mail] Unexpected dispatch error", exc_info=outcome)
    return SendResult(success=False, error=str(outcome) or outcome.__class__.__name__)


async def send_form_emails(
    form_type: str,
    data: Mapping[str, object],
    ip: str,
    locale: str = DEFAULT_LOCALE,
    provider: Optional[EmailProvider] = None,
    policy: Optional[RetryPolicy] = None,
) -> DeliveryOutcome:
    """Send both emails concurrently and collect each outcome independently."""
    notification, confirmation = await asyncio.gather(
        send_team_notification(form_type, data, ip, provider=provider, policy=policy),
        send_user_confirmation(form_type, data, locale, provider=provider, policy=policy),
        return_exceptions=True,
    )
    return DeliveryOutcome(
        notification=_as_result(notification),
        confirmation=_as_result(confirmation),
    )
