#!/usr/bin/env python3
"""
Dev helper: POST a sample lead-form submission to the local SEPACAM backend.

Builds a valid payload for the chosen form type and sends it to /api/forms
(or to the legacy /api/lead route with --legacy).

Usage
-----
# Basic: a French quote request against localhost:8000
python scripts/send_test_submission.py

# Another form type, English confirmation email
python scripts/send_test_submission.py --form-type sample --locale en

# Trip the honeypot (expect a normal-looking 200 and no email)
python scripts/send_test_submission.py --honeypot

# Legacy single-form payload
python scripts/send_test_submission.py --legacy

# Print the payload without sending it
python scripts/send_test_submission.py --dry-run

When RECAPTCHA_SECRET_KEY is set on the server, pass a real token with
--recaptcha-token or the request is rejected with 403.
"""

import argparse
import json
import os
import sys
import textwrap
from pathlib import Path

import httpx
from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------

_IDENTITY = {
    "firstName": "Jane",
    "lastName": "Doe",
    "phone": "+33 1 23 45 67 89",
    "company": "Acme Foods",
}

_FORM_FIELDS = {
    "quote": {
        "country": "FR",
        "product": "liqueur",
        "quantity": "2 containers",
        "incoterm": "FOB",
        "message": "Monthly deliveries to Le Havre from Q3.",
    },
    "sample": {
        "country": "FR",
        "product": "beurre",
        "purpose": "R&D trial batch",
        "shippingAddress": "12 rue de la Paix, 75002 Paris",
    },
    "specs": {
        "product": "poudre",
        "application": "Chocolate coating",
        "certifications": "Rainforest Alliance",
    },
    "partnership": {
        "partnershipType": "distributor",
        "annualVolume": "500 t",
    },
    "transit": {
        "commodity": "Cocoa beans",
        "origin": "Douala",
        "destination": "Antwerp",
        "volume": "3 containers",
    },
    "contact": {
        "subject": "Pricing",
        "message": "We would like to know more about your range.",
    },
    "qc": {
        "product": "beurre",
        "topic": "coa",
        "message": "Please send the CoA for lot 42.",
    },
}


def _build_payload(form_type: str, email: str, locale: str) -> dict:
    payload = {"formType": form_type, "locale": locale, "email": email}
    if form_type == "qc":
        payload["company"] = _IDENTITY["company"]
    else:
        payload.update(_IDENTITY)
    payload.update(_FORM_FIELDS[form_type])
    return payload


def _build_legacy_payload(email: str) -> dict:
    # Same shape the product pages post: no name, no company
    return {
        "email": email,
        "productType": "Cocoa Butter",
        "description": "Quote request: 20t – monthly deliveries to Rotterdam",
    }


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    try:
        print(json.dumps(response.json(), indent=2, ensure_ascii=False))
    except ValueError:
        print(response.text)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    load_dotenv(project_root / "backend" / ".env")

    parser = argparse.ArgumentParser(
        prog="send_test_submission.py",
        description=textwrap.dedent("""\
            Send a sample lead-form submission to the SEPACAM backend.
        """),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_test_submission.py
              python scripts/send_test_submission.py --form-type transit
              python scripts/send_test_submission.py --legacy
              python scripts/send_test_submission.py --url http://localhost:8000
        """),
    )
    parser.add_argument(
        "--url",
        default="http://localhost:8000",
        help="Backend base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--form-type",
        default="quote",
        choices=list(_FORM_FIELDS),
        help="Form to submit (default: quote)",
    )
    parser.add_argument(
        "--email",
        default=os.getenv("TEST_SUBMISSION_EMAIL", "jane.doe@example.com"),
        help="Submitter address; receives the confirmation email",
    )
    parser.add_argument(
        "--locale",
        default="fr",
        choices=["fr", "en"],
        help="Submission locale (default: fr)",
    )
    parser.add_argument(
        "--recaptcha-token",
        default=None,
        metavar="TOKEN",
        help="reCAPTCHA v3 token to include",
    )
    parser.add_argument(
        "--honeypot",
        action="store_true",
        help="Fill the hidden _hp field",
    )
    parser.add_argument(
        "--legacy",
        action="store_true",
        help="Send a legacy {email, productType, description} lead to /api/lead",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the payload JSON without sending it.",
    )

    args = parser.parse_args()

    if args.legacy:
        payload = _build_legacy_payload(args.email)
        endpoint = f"{args.url.rstrip('/')}/api/lead"
    else:
        payload = _build_payload(args.form_type, args.email, args.locale)
        endpoint = f"{args.url.rstrip('/')}/api/forms"

    if args.recaptcha_token:
        payload["recaptchaToken"] = args.recaptcha_token
    if args.honeypot:
        payload["_hp"] = "https://spam.example"

    print(f"Endpoint  : {endpoint}")
    print(f"Form type : {'contact (legacy)' if args.legacy else args.form_type}")
    print(f"Email     : {args.email}")

    if args.dry_run:
        print("\n[DRY RUN] Payload:")
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    try:
        response = httpx.post(endpoint, json=payload, timeout=30)
    except httpx.HTTPError as exc:
        print(f"\nERROR: Could not reach {endpoint}: {exc}", file=sys.stderr)
        return 1

    _print_response(response)
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
