"""
Runtime configuration.

Values are read from the environment (a local .env is loaded once at import
time).  Secrets are exposed through getter functions rather than module
constants so that they are resolved at call time; tests toggle them with
``patch.dict(os.environ, ...)`` without reloading modules.
"""

import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Fixed limits
# ---------------------------------------------------------------------------

FORM_RATE_LIMIT_MAX = 5
FORM_RATE_LIMIT_WINDOW_SECONDS = 60.0

ANALYTICS_RATE_LIMIT_MAX = 30
ANALYTICS_RATE_LIMIT_WINDOW_SECONDS = 60.0

# Bot-verification score thresholds
RECAPTCHA_BLOCK_BELOW = 0.3
RECAPTCHA_WARN_BELOW = 0.5

# Retry budgets (additional attempts after the first)
RECAPTCHA_RETRIES = 2
RECAPTCHA_BACKOFF_SECONDS = 0.5
EMAIL_RETRIES = 2
EMAIL_BACKOFF_SECONDS = 0.5

# Timeout applied to every outbound HTTP call
HTTP_TIMEOUT_SECONDS = 10.0

DEFAULT_RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"
DEFAULT_EMAIL_FROM = "SEPACAM <noreply@sepacam.com>"
DEFAULT_NOTIFICATION_EMAIL = "commercial@sepacam.com"
DEFAULT_SITE_URL = "https://sepacam.com"


# ---------------------------------------------------------------------------
# Getters
# ---------------------------------------------------------------------------

def _env(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


def _split_csv(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def get_recaptcha_secret() -> Optional[str]:
    """Return the reCAPTCHA secret, or None when verification is disabled."""
    return _env("RECAPTCHA_SECRET_KEY")


def get_recaptcha_verify_url() -> str:
    return _env("RECAPTCHA_VERIFY_URL") or DEFAULT_RECAPTCHA_VERIFY_URL


def get_resend_api_key() -> Optional[str]:
    return _env("RESEND_API_KEY")


def get_email_provider_name() -> str:
    return (_env("EMAIL_PROVIDER") or "resend").lower()


def get_email_from() -> str:
    return _env("EMAIL_FROM") or DEFAULT_EMAIL_FROM


def get_notification_recipients() -> List[str]:
    """
    Team mailboxes that receive lead notifications.

    NOTIFICATION_EMAIL accepts a comma-separated list.
    """
    return _split_csv(_env("NOTIFICATION_EMAIL") or DEFAULT_NOTIFICATION_EMAIL)


def get_email_reply_to() -> str:
    return _env("EMAIL_REPLY_TO") or DEFAULT_NOTIFICATION_EMAIL


def get_site_url() -> str:
    return (_env("SITE_URL") or DEFAULT_SITE_URL).rstrip("/")


def get_extra_cors_origins() -> List[str]:
    return _split_csv(os.getenv("CORS_ORIGINS", ""))


def get_ga4_credentials() -> Optional[tuple]:
    """Return (measurement_id, api_secret) or None if either is missing."""
    measurement_id = _env("GA4_MEASUREMENT_ID")
    api_secret = _env("GA4_API_SECRET")
    if not measurement_id or not api_secret:
        return None
    return measurement_id, api_secret
