"""
Lead form submission endpoints.

Endpoints:
  POST /api/forms   - canonical submission (all form types)
  POST /api/lead    - legacy single-form payload, remapped to a contact form

Both delegate to the same SubmissionPipeline; only the legacy route passes
a payload transform and its own, looser, validation model.

Response contract:
  200  {success, message, formType, emails: {notification, confirmation}}
  400  malformed JSON / unknown formType (with validTypes)
  403  bot verification not confirmed
  422  {error, fields: {field: message}}
  429  too many submissions from this client
  500  {error: "Internal server error"} - details are logged, never returned
"""

import logging
from typing import Optional, Type

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.exceptions import SubmissionError
from app.models.submission import LeadForm, LegacyLeadForm
from app.services.lead_adapter import normalize_legacy_lead
from app.services.rate_limiter import get_client_ip
from app.services.submission import PayloadTransform, SubmissionPipeline, get_pipeline

logger = logging.getLogger(__name__)

router = APIRouter()


async def _handle(
    request: Request,
    pipeline: SubmissionPipeline,
    transform: Optional[PayloadTransform] = None,
    schema: Optional[Type[LeadForm]] = None,
) -> JSONResponse:
    client_ip = get_client_ip(request)
    try:
        raw_body = await request.body()
        accepted = await pipeline.submit(
            raw_body, client_ip, transform=transform, schema=schema
        )
    except SubmissionError as exc:
        return JSONResponse(
            status_code=exc.status_code, content=exc.payload(), headers=exc.headers()
        )
    except Exception:
        logger.exception(f"[Forms API] Unhandled error for {client_ip}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return JSONResponse(status_code=200, content=accepted.payload())


@router.post(
    "/forms",
    responses={
        200: {
            "description": "Submission accepted",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "Form submitted successfully",
                        "formType": "quote",
                        "emails": {"notification": True, "confirmation": False},
                    }
                }
            },
        },
        400: {"description": "Malformed JSON or unknown formType"},
        403: {"description": "Bot verification failed"},
        422: {"description": "Field validation failed"},
        429: {"description": "Too many submissions"},
    },
)
async def submit_form(
    request: Request,
    pipeline: SubmissionPipeline = Depends(get_pipeline),
):
    """
    Accept a lead form submission.

    The JSON body carries ``formType`` (quote, sample, specs, partnership,
    transit, contact, qc), the fields for that form, and optionally
    ``recaptchaToken``, ``locale`` and the ``_hp`` honeypot.
    """
    return await _handle(request, pipeline)


@router.post("/lead")
async def submit_legacy_lead(
    request: Request,
    pipeline: SubmissionPipeline = Depends(get_pipeline),
):
    """
    Legacy lead endpoint.

    Accepts ``{email, productType, description}`` (plus optional ``name``,
    ``company`` and ``phone``) and forwards it as a ``contact`` submission:
    name split into first/last name, productType as subject, description as
    message.  Only email, productType and description are required.
    """
    return await _handle(
        request, pipeline, transform=normalize_legacy_lead, schema=LegacyLeadForm
    )
