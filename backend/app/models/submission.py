"""
Pydantic models for lead-form submissions.

Each form type maps to exactly one model class.  The submission payload is
validated against the class selected by its ``formType`` tag (see
``app.services.validator``); there is no duck-typed probing of fields.

Control fields (formType, recaptchaToken, locale, the ``_hp`` honeypot,
submittedAt) are read by the orchestrator straight from the raw payload and
are not part of these models; ``extra="ignore"`` drops them here.
"""

from enum import Enum
from typing import Annotated, ClassVar, Dict, Literal, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
)
from pydantic.alias_generators import to_camel


class FormType(str, Enum):
    QUOTE = "quote"
    SAMPLE = "sample"
    SPECS = "specs"
    PARTNERSHIP = "partnership"
    TRANSIT = "transit"
    CONTACT = "contact"
    QC = "qc"


SUPPORTED_LOCALES = ("fr", "en")
DEFAULT_LOCALE = "fr"

# Name of the hidden field legitimate browsers leave empty
HONEYPOT_FIELD = "_hp"

# Payload keys that steer processing and are never rendered as lead data
CONTROL_FIELDS = frozenset(
    {"formType", "recaptchaToken", "submittedAt", "locale", HONEYPOT_FIELD}
)

# ---------------------------------------------------------------------------
# Closed option lists (codes are what the site's <select> elements post)
# ---------------------------------------------------------------------------

PRODUCT_OPTIONS = {
    "liqueur": {"fr": "Liqueur de cacao", "en": "Cocoa Liquor"},
    "beurre": {"fr": "Beurre de cacao", "en": "Cocoa Butter"},
    "poudre": {"fr": "Poudre de cacao", "en": "Cocoa Powder"},
    "tourteau": {"fr": "Tourteau de cacao", "en": "Cocoa Cake"},
    "nibs": {"fr": "Grué de cacao", "en": "Cocoa Nibs"},
    "masse": {"fr": "Masse de cacao", "en": "Cocoa Mass"},
    "other": {"fr": "Autre", "en": "Other"},
}

Product = Literal["liqueur", "beurre", "poudre", "tourteau", "nibs", "masse", "other"]
Incoterm = Literal["FOB", "CIF", "CFR", "EXW", "FCA", "other"]
PartnershipType = Literal["distributor", "agent", "importer", "private_label", "other"]
QcTopic = Literal["specs", "coa", "compliance", "custom", "other"]

PHONE_PATTERN = r"^\+?[\d\s()-]{7,20}$"


def normalize_locale(value: object) -> str:
    """Return a supported locale, falling back to the default."""
    if isinstance(value, str) and value.strip().lower() in SUPPORTED_LOCALES:
        return value.strip().lower()
    return DEFAULT_LOCALE


def _blank_to_none(value: object) -> object:
    # Browsers post "" for untouched optional inputs
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _optional(min_length: Optional[int] = None, max_length: Optional[int] = None):
    return Annotated[
        Optional[
            Annotated[str, StringConstraints(min_length=min_length, max_length=max_length)]
        ],
        BeforeValidator(_blank_to_none),
    ]


OptionalMessage = _optional(10, 1000)
OptionalPhone = Annotated[
    Optional[Annotated[str, StringConstraints(pattern=PHONE_PATTERN)]],
    BeforeValidator(_blank_to_none),
]
OptionalIncoterm = Annotated[Optional[Incoterm], BeforeValidator(_blank_to_none)]
OptionalText = _optional(max_length=500)


# ---------------------------------------------------------------------------
# Base classes
# ---------------------------------------------------------------------------

class LeadForm(BaseModel):
    """Common configuration shared by every form model."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    form_type: ClassVar[FormType]

    def field_values(self) -> Dict[str, str]:
        """
        Submitted business fields keyed by their wire (camelCase) name.

        Declaration order is preserved; absent and empty values are dropped.
        """
        dumped = self.model_dump(by_alias=True, exclude_none=True)
        return {key: str(value) for key, value in dumped.items() if value != ""}


class ContactDetails(LeadForm):
    """Identity block shared by every form except the QC inquiry."""

    first_name: str = Field(min_length=2, max_length=100)
    last_name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone: OptionalPhone = None
    company: str = Field(min_length=2, max_length=100)


# ---------------------------------------------------------------------------
# One model per form type
# ---------------------------------------------------------------------------

class QuoteForm(ContactDetails):
    form_type: ClassVar[FormType] = FormType.QUOTE

    country: str = Field(min_length=2, max_length=100)
    product: Product
    quantity: str = Field(min_length=1, max_length=50)  # free text: "2 containers", "10-20t"
    incoterm: OptionalIncoterm = None
    message: OptionalMessage = None


class SampleForm(ContactDetails):
    form_type: ClassVar[FormType] = FormType.SAMPLE

    country: str = Field(min_length=2, max_length=100)
    product: Product
    purpose: str = Field(min_length=5, max_length=200)
    shipping_address: str = Field(min_length=10, max_length=300)


class SpecsForm(ContactDetails):
    form_type: ClassVar[FormType] = FormType.SPECS

    product: Product
    application: str = Field(min_length=3, max_length=200)
    certifications: OptionalText = None
    message: OptionalMessage = None


class PartnershipForm(ContactDetails):
    form_type: ClassVar[FormType] = FormType.PARTNERSHIP

    partnership_type: PartnershipType
    annual_volume: str = Field(min_length=1, max_length=50)


class TransitForm(ContactDetails):
    form_type: ClassVar[FormType] = FormType.TRANSIT

    commodity: str = Field(min_length=2, max_length=100)
    origin: str = Field(min_length=2, max_length=100)
    destination: str = Field(min_length=2, max_length=100)
    volume: str = Field(min_length=1, max_length=50)
    message: OptionalMessage = None


class ContactForm(ContactDetails):
    form_type: ClassVar[FormType] = FormType.CONTACT

    subject: str = Field(min_length=3, max_length=200)
    message: str = Field(min_length=10, max_length=1000)


class QcForm(LeadForm):
    """Quality-control inquiry: anonymous apart from email and company."""

    form_type: ClassVar[FormType] = FormType.QC

    email: EmailStr
    phone: OptionalPhone = None
    company: str = Field(min_length=2, max_length=100)
    product: Product
    topic: QcTopic
    message: str = Field(min_length=10, max_length=1000)


# ---------------------------------------------------------------------------
# Legacy /api/lead payload
# ---------------------------------------------------------------------------

OptionalName = _optional(max_length=100)


class LegacyLeadForm(LeadForm):
    """
    The single lead form older pages post to /api/lead, after remapping.

    Those pages only ever sent email, product and a free-text request; name
    and company are kept when present but are not required.  Accepted
    submissions are handled as ``contact`` leads.
    """

    form_type: ClassVar[FormType] = FormType.CONTACT

    first_name: OptionalName = None
    last_name: OptionalName = None
    email: EmailStr
    phone: OptionalPhone = None
    company: OptionalName = None
    subject: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1, max_length=1000)
