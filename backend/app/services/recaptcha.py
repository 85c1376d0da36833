"""
reCAPTCHA v3 verification and score policy.

verify_token() never raises: transport errors, timeouts and non-2xx
responses are retried (linear backoff) and, once the budget is spent,
reported as an unsuccessful VerificationOutcome.

Score policy (assess):
  success false           -> FAILED
  score < 0.3             -> SUSPICIOUS   (rejected)
  0.3 <= score < 0.5      -> ALLOWED_WITH_WARNING
  score >= 0.5            -> ALLOWED
"""

import logging
from typing import Optional

import httpx

from app import config
from app.models.verification import Verdict, VerificationOutcome
from app.services.retry import RetryPolicy, linear_backoff

logger = logging.getLogger(__name__)

verification_retry = RetryPolicy(
    retries=config.RECAPTCHA_RETRIES,
    backoff=linear_backoff(config.RECAPTCHA_BACKOFF_SECONDS),
    retry_on=(httpx.HTTPError,),
)


async def _post_siteverify(client: httpx.AsyncClient, secret: str, token: str) -> VerificationOutcome:
    response = await client.post(
        config.get_recaptcha_verify_url(),
        data={"secret": secret, "response": token},
    )
    response.raise_for_status()
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected siteverify body: {type(data).__name__}")
    return VerificationOutcome(
        success=data.get("success") is True,
        score=data.get("score") or 0.0,
        action=data.get("action") or "",
    )


async def verify_token(
    token: str,
    secret: str,
    client: Optional[httpx.AsyncClient] = None,
    policy: Optional[RetryPolicy] = None,
) -> VerificationOutcome:
    """POST the token to siteverify and normalize the answer."""
    policy = policy or verification_retry
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=config.HTTP_TIMEOUT_SECONDS)

    try:
        return await policy.run(
            lambda: _post_siteverify(client, secret, token),
            label="reCAPTCHA siteverify",
        )
    except (httpx.HTTPError, ValueError) as exc:
        # ValueError covers an unparseable JSON body
        logger.error(f"[reCAPTCHA] Verification failed after retries: {exc}")
        return VerificationOutcome(success=False, score=0.0, action="")
    finally:
        if owns_client:
            await client.aclose()


def assess(outcome: VerificationOutcome) -> Verdict:
    if not outcome.success:
        return Verdict.FAILED
    if outcome.score < config.RECAPTCHA_BLOCK_BELOW:
        return Verdict.SUSPICIOUS
    if outcome.score < config.RECAPTCHA_WARN_BELOW:
        return Verdict.ALLOWED_WITH_WARNING
    return Verdict.ALLOWED
