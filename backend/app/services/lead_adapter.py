"""
Legacy lead payload adapter.

The first version of the site posted a single "lead" form to /api/lead:

  email         str   - required
  productType   str   - required, product picked on the page
  description   str   - required, free-text request
  name          str   - optional full name, e.g. "John Smith"
  company/phone/recaptchaToken/locale/_hp  (optional, passed through)

normalize_legacy_lead() maps that shape onto a canonical ``contact``
submission so the legacy route can reuse the same pipeline.  The result is
validated against LegacyLeadForm, which only requires what those pages
sent, rather than the full contact form.
"""

from typing import Any, Dict, Mapping, Tuple

from app.models.submission import HONEYPOT_FIELD, FormType

_PASSTHROUGH_FIELDS = ("email", "company", "phone", "recaptchaToken", "locale", HONEYPOT_FIELD)


def split_full_name(name: Any) -> Tuple[str, str]:
    """
    Split a full name on the first run of whitespace.

    "John Smith"        -> ("John", "Smith")
    "Jean Paul Martin"  -> ("Jean", "Paul Martin")
    "Cher"              -> ("Cher", "")
    """
    if not isinstance(name, str):
        return "", ""
    parts = name.strip().split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1].strip()


def normalize_legacy_lead(payload: Mapping[str, Any]) -> Dict[str, Any]:
    first_name, last_name = split_full_name(payload.get("name"))

    canonical: Dict[str, Any] = {
        "formType": FormType.CONTACT.value,
        "firstName": first_name,
        "lastName": last_name,
    }
    if "productType" in payload:
        canonical["subject"] = payload["productType"]
    if "description" in payload:
        canonical["message"] = payload["description"]

    for key in _PASSTHROUGH_FIELDS:
        if key in payload:
            canonical[key] = payload[key]

    return canonical
