"""
Abuse guard: the checks a submission must clear before any email goes out.

  check_rate_limit()   per-client fixed window (cheap, runs first)
  check_verification() reCAPTCHA token + score policy, only when a secret
                       is configured
  is_honeypot_hit()    hidden ``_hp`` field filled in -> silent accept

Rejections raise the matching SubmissionError subclass; the orchestrator
never has to inspect scores or counters itself.
"""

import logging
from typing import Any, Mapping, Optional

import httpx

from app import config
from app.exceptions import (
    Throttled,
    VerificationFailed,
    VerificationMissing,
    VerificationSuspicious,
)
from app.models.submission import HONEYPOT_FIELD
from app.models.verification import Verdict
from app.services import recaptcha
from app.services.rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)


class AbuseGuard:
    def __init__(
        self,
        rate_limiter: FixedWindowRateLimiter,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.http_client = http_client

    def check_rate_limit(self, client_ip: str) -> None:
        if not self.rate_limiter.hit(client_ip):
            logger.warning(f"[RateLimit] Rejected submission from {client_ip}")
            raise Throttled(self.rate_limiter.retry_after(client_ip))

    async def check_verification(
        self, token: Optional[str], client_ip: str
    ) -> Optional[Verdict]:
        """
        Enforce bot verification when RECAPTCHA_SECRET_KEY is set.

        Returns the admitted verdict, or None when verification is disabled.
        """
        secret = config.get_recaptcha_secret()
        if not secret:
            return None

        if not token:
            logger.warning(f"[reCAPTCHA] Missing token from {client_ip}")
            raise VerificationMissing()

        outcome = await recaptcha.verify_token(token, secret, client=self.http_client)
        verdict = recaptcha.assess(outcome)

        if verdict is Verdict.FAILED:
            logger.warning(f"[reCAPTCHA] Verification failed for {client_ip}")
            raise VerificationFailed()

        if verdict is Verdict.SUSPICIOUS:
            logger.warning(
                f"[reCAPTCHA] Low score ({outcome.score}) for {client_ip}, blocking"
            )
            raise VerificationSuspicious()

        if verdict is Verdict.ALLOWED_WITH_WARNING:
            logger.warning(
                f"[reCAPTCHA] Medium score ({outcome.score}) for {client_ip}, allowing with warning"
            )

        return verdict


def is_honeypot_hit(body: Mapping[str, Any]) -> bool:
    value = body.get(HONEYPOT_FIELD)
    return bool(value) and len(str(value)) > 0
