"""
Schema validator: dispatch on ``formType`` and turn pydantic errors into a
flat ``{"dotted.path": "message"}`` map.

Only the first violated rule per field is reported.  Messages follow the
submitter's locale (fr by default).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import ValidationError

from app.models.submission import (
    DEFAULT_LOCALE,
    ContactForm,
    FormType,
    LeadForm,
    PartnershipForm,
    QcForm,
    QuoteForm,
    SampleForm,
    SpecsForm,
    TransitForm,
)

FORM_SCHEMAS: Dict[FormType, Type[LeadForm]] = {
    FormType.QUOTE: QuoteForm,
    FormType.SAMPLE: SampleForm,
    FormType.SPECS: SpecsForm,
    FormType.PARTNERSHIP: PartnershipForm,
    FormType.TRANSIT: TransitForm,
    FormType.CONTACT: ContactForm,
    FormType.QC: QcForm,
}

VALID_FORM_TYPES: List[str] = [form_type.value for form_type in FORM_SCHEMAS]

MESSAGES: Dict[str, Dict[str, str]] = {
    "fr": {
        "required": "Requis",
        "min_length": "Minimum {n} caractères",
        "max_length": "Maximum {n} caractères",
        "invalid": "Valeur invalide",
        "email": "Email invalide",
        "phone": "Numéro invalide",
        "product": "Sélectionnez un produit",
        "incoterm": "Sélectionnez un incoterm",
        "topic": "Sélectionnez un sujet",
        "partnershipType": "Sélectionnez un type de partenariat",
    },
    "en": {
        "required": "Required",
        "min_length": "Minimum {n} characters",
        "max_length": "Maximum {n} characters",
        "invalid": "Invalid value",
        "email": "Invalid email",
        "phone": "Invalid phone number",
        "product": "Select a product",
        "incoterm": "Select an incoterm",
        "topic": "Select a topic",
        "partnershipType": "Select a partnership type",
    },
}

# Fields whose format/choice errors get a dedicated message
_FIELD_MESSAGE_KEYS = {"email", "phone", "product", "incoterm", "topic", "partnershipType"}


@dataclass
class ValidationResult:
    data: Optional[LeadForm] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.data is not None and not self.errors


def resolve_form_type(raw: Any) -> Optional[FormType]:
    """Map a raw ``formType`` value to FormType, or None if unrecognized."""
    if not isinstance(raw, str):
        return None
    try:
        return FormType(raw)
    except ValueError:
        return None


def _message_for(error: Mapping[str, Any], field_name: str, messages: Dict[str, str]) -> str:
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}

    if error_type == "missing" or (error_type == "string_type" and error.get("input") is None):
        return messages["required"]
    if error_type == "string_too_short":
        if ctx.get("min_length", 0) <= 1:
            return messages["required"]
        return messages["min_length"].format(n=ctx.get("min_length"))
    if error_type == "string_too_long":
        return messages["max_length"].format(n=ctx.get("max_length"))
    if field_name in _FIELD_MESSAGE_KEYS:
        return messages[field_name]
    return messages["invalid"]


def format_errors(exc: ValidationError, locale: str = DEFAULT_LOCALE) -> Dict[str, str]:
    """Flatten a pydantic ValidationError into {dotted_path: message}."""
    messages = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    fields: Dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        path = ".".join(loc) or "unknown"
        # First violated rule wins
        if path in fields:
            continue
        fields[path] = _message_for(error, loc[0] if loc else "", messages)
    return fields


def validate_submission(
    form_type: FormType,
    payload: Mapping[str, Any],
    locale: str = DEFAULT_LOCALE,
    schema: Optional[Type[LeadForm]] = None,
) -> ValidationResult:
    """Validate against ``schema``, or the registered model for ``form_type``."""
    schema = schema or FORM_SCHEMAS[form_type]
    try:
        return ValidationResult(data=schema.model_validate(dict(payload)))
    except ValidationError as exc:
        return ValidationResult(errors=format_errors(exc, locale))
