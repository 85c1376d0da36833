"""
Submission orchestrator: the single entry point for lead forms.

Stages run in a fixed order and the first rejection ends the request:

  1. rate limit            -> Throttled (429)
  2. parse JSON object     -> MalformedPayload (400)
  3. resolve formType      -> UnknownFormType (400, validTypes)
  4. schema validation     -> ValidationFailed (422, fields)
  5. bot verification      -> Verification* (403), only when configured
  6. honeypot              -> silent success, nothing is sent
  7. dispatch both emails  (concurrently, best effort)

Email delivery never changes the outcome: once a submission clears stages
1–6 it is acknowledged, and the response only reports which of the two
emails actually went out.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Type

from app.exceptions import MalformedPayload, UnknownFormType, ValidationFailed
from app.models.delivery import DeliveryOutcome, SendResult
from app.models.submission import FormType, LeadForm, normalize_locale
from app.services.abuse_guard import AbuseGuard, is_honeypot_hit
from app.services.mailer import send_form_emails
from app.services.rate_limiter import form_rate_limiter
from app.services.validator import VALID_FORM_TYPES, resolve_form_type, validate_submission

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Form submitted successfully"

Dispatcher = Callable[..., Awaitable[DeliveryOutcome]]
PayloadTransform = Callable[[Mapping[str, Any]], Dict[str, Any]]


@dataclass
class SubmissionAccepted:
    form_type: FormType
    delivery: DeliveryOutcome

    def payload(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": SUCCESS_MESSAGE,
            "formType": self.form_type.value,
            "emails": self.delivery.summary(),
        }


def parse_body(raw_body: bytes) -> Dict[str, Any]:
    try:
        body = json.loads(raw_body or b"")
    except (ValueError, UnicodeDecodeError):
        raise MalformedPayload()
    if not isinstance(body, dict):
        raise MalformedPayload()
    return body


class SubmissionPipeline:
    def __init__(
        self,
        guard: AbuseGuard,
        dispatch: Dispatcher = send_form_emails,
    ) -> None:
        self.guard = guard
        self.dispatch = dispatch

    async def submit(
        self,
        raw_body: bytes,
        client_ip: str,
        transform: Optional[PayloadTransform] = None,
        schema: Optional[Type[LeadForm]] = None,
    ) -> SubmissionAccepted:
        """
        Run one submission through every stage.

        ``transform`` remaps a parsed body before type resolution and
        ``schema`` replaces the model registered for the resolved type; the
        legacy /api/lead route uses both for its older, looser payload.

        Raises:
            SubmissionError subclasses for every client-visible rejection.
        """
        self.guard.check_rate_limit(client_ip)

        body = parse_body(raw_body)
        if transform is not None:
            body = transform(body)

        form_type = resolve_form_type(body.get("formType"))
        if form_type is None:
            raise UnknownFormType(VALID_FORM_TYPES)

        locale = normalize_locale(body.get("locale"))
        result = validate_submission(form_type, body, locale, schema=schema)
        if not result.ok:
            logger.info(
                f"[Forms] Validation failed for {form_type.value} from {client_ip}: "
                f"{sorted(result.errors)}"
            )
            raise ValidationFailed(result.errors)

        await self.guard.check_verification(body.get("recaptchaToken"), client_ip)

        if is_honeypot_hit(body):
            logger.warning(f"[Honeypot] Bot detected from {client_ip}")
            # Same shape as a real success so the bot learns nothing
            fake = SendResult(success=True)
            return SubmissionAccepted(
                form_type=form_type,
                delivery=DeliveryOutcome(notification=fake, confirmation=fake),
            )

        data = result.data.field_values()
        delivery = await self.dispatch(form_type.value, data, client_ip, locale)

        if not (delivery.notification.success and delivery.confirmation.success):
            logger.warning(
                f"[Forms] Degraded delivery for {form_type.value} from {client_ip}: "
                f"notification={delivery.notification.success} "
                f"confirmation={delivery.confirmation.success}"
            )

        logger.info(
            f"[Forms] Lead accepted: form={form_type.value} company={data.get('company')} ip={client_ip}"
        )
        return SubmissionAccepted(form_type=form_type, delivery=delivery)


_pipeline = SubmissionPipeline(AbuseGuard(form_rate_limiter))


def get_pipeline() -> SubmissionPipeline:
    """FastAPI dependency; tests swap it through app.dependency_overrides."""
    return _pipeline
