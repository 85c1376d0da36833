"""
HTML + plain-text email templates for form submissions.

Emails use inline styles and table layout only, so they render the same in
Gmail, Outlook and Apple Mail.  Two builders:

  build_notification_email  -> team-facing, always in French
  build_confirmation_email  -> submitter-facing, in the submitter's locale

Every submitted value is HTML-escaped before it is interpolated.
"""

from datetime import datetime, timezone
from html import escape
from typing import Mapping, Optional
from urllib.parse import quote

from app import config
from app.models.delivery import RenderedEmail
from app.models.submission import CONTROL_FIELDS, DEFAULT_LOCALE, PRODUCT_OPTIONS

BRAND = {
    "primary": "#1B5E3B",
    "primary_light": "#e8f5e9",
    "accent": "#D4A843",
    "text": "#1a1a1a",
    "muted": "#666666",
    "border": "#e5e5e5",
    "bg": "#f8f8f8",
    "white": "#ffffff",
}

FORM_LABELS = {
    "quote": {"fr": "Demande de devis", "en": "Quote Request"},
    "sample": {"fr": "Demande d'échantillon", "en": "Sample Request"},
    "specs": {"fr": "Spécifications sur mesure", "en": "Custom Specifications"},
    "partnership": {"fr": "Partenariat commercial", "en": "Commercial Partnership"},
    "transit": {"fr": "Transit & Logistique", "en": "Transit & Logistics"},
    "contact": {"fr": "Contact général", "en": "General Contact"},
    "qc": {"fr": "Question qualité", "en": "Quality Inquiry"},
}

FIELD_LABELS = {
    "firstName": {"fr": "Prénom", "en": "First name"},
    "lastName": {"fr": "Nom", "en": "Last name"},
    "email": {"fr": "Email", "en": "Email"},
    "phone": {"fr": "Téléphone", "en": "Phone"},
    "company": {"fr": "Société", "en": "Company"},
    "country": {"fr": "Pays", "en": "Country"},
    "product": {"fr": "Produit", "en": "Product"},
    "quantity": {"fr": "Quantité", "en": "Quantity"},
    "incoterm": {"fr": "Incoterm", "en": "Incoterm"},
    "purpose": {"fr": "Usage prévu", "en": "Intended purpose"},
    "shippingAddress": {"fr": "Adresse de livraison", "en": "Shipping address"},
    "application": {"fr": "Application", "en": "Application"},
    "certifications": {"fr": "Certifications", "en": "Certifications"},
    "partnershipType": {"fr": "Type de partenariat", "en": "Partnership type"},
    "annualVolume": {"fr": "Volume annuel", "en": "Annual volume"},
    "commodity": {"fr": "Marchandise", "en": "Commodity"},
    "origin": {"fr": "Origine", "en": "Origin"},
    "destination": {"fr": "Destination", "en": "Destination"},
    "volume": {"fr": "Volume", "en": "Volume"},
    "subject": {"fr": "Sujet", "en": "Subject"},
    "topic": {"fr": "Sujet", "en": "Topic"},
    "message": {"fr": "Message", "en": "Message"},
}

# Localized product-catalogue path segment for the confirmation CTA
PRODUCTS_PATH = {"fr": "produits-cacao", "en": "cocoa-products"}

FRENCH_MONTHS = [
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
]


def form_label(form_type: str, lang: str) -> str:
    return FORM_LABELS.get(form_type, {}).get(lang) or form_type


def field_label(key: str, lang: str) -> str:
    label = FIELD_LABELS.get(key, {}).get(lang)
    return label or key[:1].upper() + key[1:]


def _display_fields(data: Mapping[str, object]) -> list:
    """(key, value) pairs worth showing: no control fields, no empty values."""
    return [
        (key, str(value))
        for key, value in data.items()
        if key not in CONTROL_FIELDS and value is not None and value != ""
    ]


def _french_timestamp(moment: datetime) -> str:
    return (
        f"{moment.day} {FRENCH_MONTHS[moment.month - 1]} {moment.year} "
        f"à {moment:%H:%M} UTC"
    )


def email_wrapper(content: str, lang: str = DEFAULT_LOCALE) -> str:
    """Shared branded layout around a content block."""
    site_url = config.get_site_url()
    contact = config.get_email_reply_to()
    return f"""
<!DOCTYPE html>
<html lang="{lang}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>SEPACAM</title>
</head>
<body style="margin:0; padding:0; background-color:{BRAND['bg']}; font-family:Arial, Helvetica, sans-serif;">
    <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="background-color:{BRAND['bg']};">
        <tr>
            <td align="center" style="padding:24px 16px;">
                <table role="presentation" width="600" cellpadding="0" cellspacing="0" style="background-color:{BRAND['white']}; border-radius:12px; overflow:hidden;">
                    <tr>
                        <td style="background-color:{BRAND['primary']}; padding:24px 32px; text-align:center;">
                            <h1 style="margin:0; color:{BRAND['white']}; font-size:22px; font-weight:700; letter-spacing:1px;">SEPACAM</h1>
                            <p style="margin:4px 0 0; color:{BRAND['accent']}; font-size:11px; letter-spacing:2px; text-transform:uppercase;">
                                Cacao Transformé du Cameroun
                            </p>
                        </td>
                    </tr>
                    <tr>
                        <td style="padding:32px;">
                            {content}
                        </td>
                    </tr>
                    <tr>
                        <td style="padding:20px 32px; border-top:1px solid {BRAND['border']}; text-align:center;">
                            <p style="margin:0; color:{BRAND['muted']}; font-size:11px; line-height:1.6;">
                                SEPACAM S.A. · Zone Industrielle de Bonabéri, Douala, Cameroun<br>
                                <a href="{escape(site_url)}" style="color:{BRAND['primary']}; text-decoration:none;">{escape(site_url)}</a>
                                &nbsp;•&nbsp;
                                <a href="mailto:{escape(contact)}" style="color:{BRAND['primary']}; text-decoration:none;">{escape(contact)}</a>
                            </p>
                        </td>
                    </tr>
                </table>
            </td>
        </tr>
    </table>
</body>
</html>"""


def build_data_rows(data: Mapping[str, object], lang: str = DEFAULT_LOCALE) -> str:
    """One <tr> per displayable field."""
    rows = []
    for key, value in _display_fields(data):
        rendered = escape(value).replace("\n", "<br>")
        rows.append(
            f"""
                <tr>
                    <td style="padding:8px 12px; border-bottom:1px solid {BRAND['border']}; color:{BRAND['muted']}; font-size:13px; width:140px; vertical-align:top; font-weight:600;">
                        {escape(field_label(key, lang))}
                    </td>
                    <td style="padding:8px 12px; border-bottom:1px solid {BRAND['border']}; color:{BRAND['text']}; font-size:13px; vertical-align:top;">
                        {rendered}
                    </td>
                </tr>"""
        )
    return "".join(rows)


def _text_lines(data: Mapping[str, object], lang: str) -> str:
    return "\n".join(
        f"{field_label(key, lang)}: {value}" for key, value in _display_fields(data)
    )


# ---------------------------------------------------------------------------
# Team notification
# ---------------------------------------------------------------------------

def build_notification_email(
    form_type: str,
    data: Mapping[str, object],
    ip: str,
    received_at: Optional[datetime] = None,
) -> RenderedEmail:
    received_at = received_at or datetime.now(timezone.utc)
    label = form_label(form_type, "fr")
    company = str(data.get("company") or "N/A")
    email = str(data.get("email") or "N/A")
    subject = f"[SEPACAM] {label} — {company}"

    product = data.get("product")
    product_line = ""
    if product in PRODUCT_OPTIONS:
        product_line = (
            f'<p style="margin:4px 0 0; color:{BRAND["muted"]}; font-size:13px;">'
            f'Produit : {escape(PRODUCT_OPTIONS[product]["fr"])}</p>'
        )

    reply_href = f"mailto:{quote(email, safe='@')}?subject={quote('Re: ' + subject)}"

    html = email_wrapper(
        f"""
        <div style="background:{BRAND['primary_light']}; border-radius:8px; padding:16px 20px; margin-bottom:24px;">
            <h2 style="margin:0 0 4px; color:{BRAND['primary']}; font-size:18px;">
                📩 Nouvelle demande : {escape(label)}
            </h2>
            <p style="margin:0; color:{BRAND['muted']}; font-size:13px;">
                Reçu le {_french_timestamp(received_at)} · IP : {escape(ip)}
            </p>
            {product_line}
        </div>

        <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="border:1px solid {BRAND['border']}; border-radius:8px; overflow:hidden;">
            {build_data_rows(data, 'fr')}
        </table>

        <div style="margin-top:24px; text-align:center;">
            <a href="{escape(reply_href)}"
               style="display:inline-block; background:{BRAND['primary']}; color:{BRAND['white']}; padding:12px 28px; border-radius:8px; text-decoration:none; font-size:14px; font-weight:600;">
                Répondre à {escape(email)}
            </a>
        </div>
        """,
        "fr",
    )

    text = (
        f"Nouvelle demande {label}\n\n"
        f"De: {company} ({email})\n"
        f"IP: {ip}\n"
        f"Date: {received_at.isoformat()}\n\n"
        f"{_text_lines(data, 'fr')}"
    )

    return RenderedEmail(subject=subject, html=html, text=text)


# ---------------------------------------------------------------------------
# Submitter confirmation
# ---------------------------------------------------------------------------

def build_confirmation_email(
    form_type: str,
    data: Mapping[str, object],
    locale: str = DEFAULT_LOCALE,
) -> RenderedEmail:
    lang = locale if locale in PRODUCTS_PATH else DEFAULT_LOCALE
    is_fr = lang == "fr"
    label = form_label(form_type, lang).lower()
    first_name = escape(str(data.get("firstName") or ""))
    products_url = f"{config.get_site_url()}/{lang}/{PRODUCTS_PATH[lang]}"

    if is_fr:
        subject = f"SEPACAM — Confirmation de votre {label}"
        greeting = f"Bonjour {first_name}," if first_name else "Bonjour,"
        intro = (
            f"Nous avons bien reçu votre <strong>{escape(label)}</strong>. "
            "Notre équipe commerciale l'examine actuellement et vous contactera "
            "dans un délai de <strong>24 heures ouvrables</strong>."
        )
        summary_title = "📋 Récapitulatif de votre demande"
        explore = "En attendant, n'hésitez pas à consulter nos produits :"
        cta = "Voir nos produits"
        disclaimer = "Si vous n'êtes pas à l'origine de cette demande, vous pouvez ignorer cet email."
    else:
        subject = f"SEPACAM — Your {label} confirmation"
        greeting = f"Hello {first_name}," if first_name else "Hello,"
        intro = (
            f"We have received your <strong>{escape(label)}</strong>. "
            "Our sales team is currently reviewing it and will contact you "
            "within <strong>24 business hours</strong>."
        )
        summary_title = "📋 Your request summary"
        explore = "In the meantime, feel free to explore our products:"
        cta = "View our products"
        disclaimer = "If you did not make this request, you can safely ignore this email."

    html = email_wrapper(
        f"""
        <h2 style="margin:0 0 16px; color:{BRAND['text']}; font-size:20px;">{greeting}</h2>

        <p style="margin:0 0 16px; color:{BRAND['text']}; font-size:14px; line-height:1.7;">{intro}</p>

        <div style="background:{BRAND['bg']}; border-radius:8px; padding:20px; margin:24px 0;">
            <h3 style="margin:0 0 12px; color:{BRAND['primary']}; font-size:15px;">{summary_title}</h3>
            <table role="presentation" width="100%" cellpadding="0" cellspacing="0">
                {build_data_rows(data, lang)}
            </table>
        </div>

        <p style="margin:0 0 12px; color:{BRAND['text']}; font-size:14px; line-height:1.7;">{explore}</p>

        <div style="text-align:center; margin:24px 0;">
            <a href="{escape(products_url)}"
               style="display:inline-block; background:{BRAND['primary']}; color:{BRAND['white']}; padding:12px 28px; border-radius:8px; text-decoration:none; font-size:14px; font-weight:600;">
                {cta}
            </a>
        </div>

        <hr style="border:none; border-top:1px solid {BRAND['border']}; margin:24px 0;">

        <p style="margin:0; color:{BRAND['muted']}; font-size:12px; line-height:1.6;">{disclaimer}</p>
        """,
        lang,
    )

    plain_name = str(data.get("firstName") or "")
    if is_fr:
        plain_greeting = f"Bonjour {plain_name}," if plain_name else "Bonjour,"
        text = (
            f"{plain_greeting}\n\n"
            f"Nous avons bien reçu votre {label}. "
            "Notre équipe vous contactera sous 24h ouvrables.\n\n"
            f"{_text_lines(data, 'fr')}\n\n"
            f"Nos produits : {products_url}\n\n"
            "Cordialement,\nL'équipe SEPACAM"
        )
    else:
        plain_greeting = f"Hello {plain_name}," if plain_name else "Hello,"
        text = (
            f"{plain_greeting}\n\n"
            f"We have received your {label}. "
            "Our team will contact you within 24 business hours.\n\n"
            f"{_text_lines(data, 'en')}\n\n"
            f"Our products: {products_url}\n\n"
            "Best regards,\nThe SEPACAM team"
        )

    return RenderedEmail(subject=subject, html=html, text=text)
