"""
Schema validator tests.

Coverage:
  - One valid payload per form type
  - Removing any single required field reports exactly that field
  - Optional fields: empty strings accepted, bad formats rejected
  - Enumerations (product, incoterm, topic, partnershipType)
  - Localized messages and first-error-wins
  - formType resolution
"""

import pytest

from app.models.submission import FormType, QcForm, QuoteForm
from app.services.validator import (
    FORM_SCHEMAS,
    VALID_FORM_TYPES,
    resolve_form_type,
    validate_submission,
)


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------

_IDENTITY = {
    "firstName": "Jane",
    "lastName": "Doe",
    "email": "jane@example.com",
    "company": "Acme Foods",
}

VALID_PAYLOADS = {
    FormType.QUOTE: {
        **_IDENTITY,
        "country": "FR",
        "product": "liqueur",
        "quantity": "2 containers",
    },
    FormType.SAMPLE: {
        **_IDENTITY,
        "country": "FR",
        "product": "beurre",
        "purpose": "R&D trial batch",
        "shippingAddress": "12 rue de la Paix, 75002 Paris",
    },
    FormType.SPECS: {
        **_IDENTITY,
        "product": "poudre",
        "application": "Chocolate coating",
    },
    FormType.PARTNERSHIP: {
        **_IDENTITY,
        "partnershipType": "distributor",
        "annualVolume": "500 t",
    },
    FormType.TRANSIT: {
        **_IDENTITY,
        "commodity": "Cocoa beans",
        "origin": "Douala",
        "destination": "Antwerp",
        "volume": "3 containers",
    },
    FormType.CONTACT: {
        **_IDENTITY,
        "subject": "Pricing",
        "message": "We would like to know more about your range.",
    },
    FormType.QC: {
        "email": "jane@example.com",
        "company": "Acme Foods",
        "product": "beurre",
        "topic": "coa",
        "message": "Please send the CoA for lot 42.",
    },
}

REQUIRED_FIELDS = {
    FormType.QUOTE: ["firstName", "lastName", "email", "company", "country", "product", "quantity"],
    FormType.SAMPLE: [
        "firstName", "lastName", "email", "company", "country", "product",
        "purpose", "shippingAddress",
    ],
    FormType.SPECS: ["firstName", "lastName", "email", "company", "product", "application"],
    FormType.PARTNERSHIP: [
        "firstName", "lastName", "email", "company", "partnershipType", "annualVolume",
    ],
    FormType.TRANSIT: [
        "firstName", "lastName", "email", "company", "commodity", "origin",
        "destination", "volume",
    ],
    FormType.CONTACT: ["firstName", "lastName", "email", "company", "subject", "message"],
    FormType.QC: ["email", "company", "product", "topic", "message"],
}

_MISSING_CASES = [
    (form_type, field_name)
    for form_type, fields in REQUIRED_FIELDS.items()
    for field_name in fields
]


def _payload(form_type: FormType, **overrides) -> dict:
    payload = dict(VALID_PAYLOADS[form_type])
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

class TestValidPayloads:
    """Every form type accepts its minimal valid payload."""

    @pytest.mark.parametrize("form_type", list(FormType))
    def test_minimal_payload_is_valid(self, form_type):
        result = validate_submission(form_type, VALID_PAYLOADS[form_type])

        assert result.ok, result.errors
        assert isinstance(result.data, FORM_SCHEMAS[form_type])

    def test_control_fields_are_ignored(self):
        """formType, token, locale and the honeypot never reach the model."""
        payload = _payload(
            FormType.QUOTE,
            formType="quote",
            recaptchaToken="tok",
            locale="en",
            _hp="",
            submittedAt="2026-01-01T00:00:00Z",
        )
        result = validate_submission(FormType.QUOTE, payload)

        assert result.ok
        values = result.data.field_values()
        for control in ("formType", "recaptchaToken", "locale", "_hp", "submittedAt"):
            assert control not in values

    def test_field_values_keep_wire_names_and_order(self):
        result = validate_submission(FormType.QUOTE, _payload(FormType.QUOTE, incoterm="FOB"))

        values = result.data.field_values()
        assert list(values)[:4] == ["firstName", "lastName", "email", "company"]
        assert values["product"] == "liqueur"
        assert values["incoterm"] == "FOB"
        assert "phone" not in values  # absent optional fields are dropped

    def test_numbers_are_coerced_to_strings(self):
        """Free-text fields like quantity may arrive as JSON numbers."""
        result = validate_submission(FormType.QUOTE, _payload(FormType.QUOTE, quantity=20))

        assert result.ok
        assert result.data.quantity == "20"

    def test_whitespace_is_stripped(self):
        result = validate_submission(FormType.QUOTE, _payload(FormType.QUOTE, company="  Acme Foods  "))

        assert result.data.company == "Acme Foods"

    def test_qc_form_has_no_name_fields(self):
        result = validate_submission(FormType.QC, VALID_PAYLOADS[FormType.QC])

        assert isinstance(result.data, QcForm)
        assert "firstName" not in result.data.field_values()


# ---------------------------------------------------------------------------
# Required fields
# ---------------------------------------------------------------------------

class TestRequiredFields:
    """Dropping one required field reports that field and nothing else."""

    @pytest.mark.parametrize("form_type,field_name", _MISSING_CASES)
    def test_missing_required_field_reports_only_that_field(self, form_type, field_name):
        payload = _payload(form_type)
        del payload[field_name]

        result = validate_submission(form_type, payload)

        assert not result.ok
        assert set(result.errors) == {field_name}

    def test_missing_field_message_is_required(self):
        payload = _payload(FormType.QUOTE)
        del payload["company"]

        result = validate_submission(FormType.QUOTE, payload)

        assert result.errors == {"company": "Requis"}

    def test_null_required_field_is_reported_as_required(self):
        result = validate_submission(FormType.QUOTE, _payload(FormType.QUOTE, country=None))

        assert result.errors == {"country": "Requis"}

    def test_empty_quantity_is_required(self):
        result = validate_submission(FormType.QUOTE, _payload(FormType.QUOTE, quantity=""))

        assert result.errors == {"quantity": "Requis"}


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------

class TestFieldRules:
    """Length bounds, formats and enumerations."""

    def test_short_first_name(self):
        result = validate_submission(FormType.CONTACT, _payload(FormType.CONTACT, firstName="J"))

        assert result.errors == {"firstName": "Minimum 2 caractères"}

    def test_blank_last_name_is_too_short(self):
        result = validate_submission(FormType.CONTACT, _payload(FormType.CONTACT, lastName="   "))

        assert result.errors == {"lastName": "Minimum 2 caractères"}

    def test_company_too_long(self):
        result = validate_submission(FormType.SPECS, _payload(FormType.SPECS, company="x" * 101))

        assert result.errors == {"company": "Maximum 100 caractères"}

    def test_invalid_email(self):
        result = validate_submission(FormType.QC, _payload(FormType.QC, email="not-an-email"))

        assert result.errors == {"email": "Email invalide"}

    @pytest.mark.parametrize("phone", ["+33 1 23 45 67 89", "(237) 699-000-000", "0612345678"])
    def test_valid_phone_numbers(self, phone):
        result = validate_submission(FormType.CONTACT, _payload(FormType.CONTACT, phone=phone))

        assert result.ok, result.errors

    @pytest.mark.parametrize("phone", ["12345", "call me maybe", "+33 1 23 45 67 89 00 11 22 33"])
    def test_invalid_phone_numbers(self, phone):
        result = validate_submission(FormType.CONTACT, _payload(FormType.CONTACT, phone=phone))

        assert result.errors == {"phone": "Numéro invalide"}

    def test_empty_phone_is_accepted(self):
        result = validate_submission(FormType.CONTACT, _payload(FormType.CONTACT, phone=""))

        assert result.ok
        assert result.data.phone is None

    def test_unknown_product(self):
        result = validate_submission(FormType.QUOTE, _payload(FormType.QUOTE, product="coffee"))

        assert result.errors == {"product": "Sélectionnez un produit"}

    def test_unknown_incoterm(self):
        result = validate_submission(FormType.QUOTE, _payload(FormType.QUOTE, incoterm="DDP"))

        assert result.errors == {"incoterm": "Sélectionnez un incoterm"}

    def test_empty_incoterm_is_accepted(self):
        result = validate_submission(FormType.QUOTE, _payload(FormType.QUOTE, incoterm=""))

        assert result.ok
        assert result.data.incoterm is None

    def test_unknown_qc_topic(self):
        result = validate_submission(FormType.QC, _payload(FormType.QC, topic="pricing"))

        assert result.errors == {"topic": "Sélectionnez un sujet"}

    def test_unknown_partnership_type(self):
        result = validate_submission(
            FormType.PARTNERSHIP, _payload(FormType.PARTNERSHIP, partnershipType="franchise")
        )

        assert result.errors == {"partnershipType": "Sélectionnez un type de partenariat"}

    def test_optional_message_empty_is_accepted(self):
        result = validate_submission(FormType.TRANSIT, _payload(FormType.TRANSIT, message=""))

        assert result.ok

    def test_optional_message_too_short_is_rejected(self):
        result = validate_submission(FormType.QUOTE, _payload(FormType.QUOTE, message="short"))

        assert result.errors == {"message": "Minimum 10 caractères"}

    def test_required_message_too_long(self):
        result = validate_submission(FormType.CONTACT, _payload(FormType.CONTACT, message="m" * 1001))

        assert result.errors == {"message": "Maximum 1000 caractères"}

    def test_sample_shipping_address_bounds(self):
        result = validate_submission(FormType.SAMPLE, _payload(FormType.SAMPLE, shippingAddress="Paris"))

        assert result.errors == {"shippingAddress": "Minimum 10 caractères"}

    def test_contact_subject_minimum(self):
        result = validate_submission(FormType.CONTACT, _payload(FormType.CONTACT, subject="Hi"))

        assert result.errors == {"subject": "Minimum 3 caractères"}

    def test_multiple_invalid_fields_one_message_each(self):
        result = validate_submission(
            FormType.QUOTE,
            _payload(FormType.QUOTE, firstName="J", email="nope", product="coffee"),
        )

        assert result.errors == {
            "firstName": "Minimum 2 caractères",
            "email": "Email invalide",
            "product": "Sélectionnez un produit",
        }


class TestLocalizedMessages:
    """Messages follow the submission locale."""

    def test_english_messages(self):
        payload = _payload(FormType.QUOTE, firstName="J")
        del payload["company"]

        result = validate_submission(FormType.QUOTE, payload, locale="en")

        assert result.errors == {
            "firstName": "Minimum 2 characters",
            "company": "Required",
        }

    def test_unknown_locale_falls_back_to_french(self):
        result = validate_submission(
            FormType.QUOTE, _payload(FormType.QUOTE, product="coffee"), locale="de"
        )

        assert result.errors == {"product": "Sélectionnez un produit"}


class TestResolveFormType:
    @pytest.mark.parametrize("raw", VALID_FORM_TYPES)
    def test_known_types(self, raw):
        assert resolve_form_type(raw) is FormType(raw)

    @pytest.mark.parametrize("raw", [None, "", "newsletter", "QUOTE", 3, ["quote"]])
    def test_unknown_types(self, raw):
        assert resolve_form_type(raw) is None

    def test_valid_types_lists_all_seven(self):
        assert VALID_FORM_TYPES == [
            "quote", "sample", "specs", "partnership", "transit", "contact", "qc",
        ]

    def test_schema_map_matches_class_tags(self):
        for form_type, schema in FORM_SCHEMAS.items():
            assert schema.form_type is form_type
        assert FORM_SCHEMAS[FormType.QUOTE] is QuoteForm
